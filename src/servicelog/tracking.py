"""
Sentry error-tracking binding.

At most one binding exists per process. The first call to ``initialize`` wins;
later calls return the existing binding untouched.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Mapping, Sequence

import sentry_sdk
import structlog
from sentry_sdk.integrations.asgi import SentryAsgiMiddleware

from .exceptions import UninitializedError
from .sampling import SamplingRules, TracesSampler, make_traces_sampler

_logger = structlog.get_logger("servicelog.tracking")


@dataclass(frozen=True)
class ErrorTrackingHandlers:
    """Handles exposed to the host application once tracking is set up."""

    dsn: str
    environment: str
    traces_sampler: TracesSampler
    asgi_middleware: type[SentryAsgiMiddleware]
    capture_exception: Callable[..., Any]


# =============================================================================
# Global State
# =============================================================================

_binding: ErrorTrackingHandlers | None = None


def current() -> ErrorTrackingHandlers | None:
    return _binding


def get_handlers() -> ErrorTrackingHandlers:
    if _binding is None:
        raise UninitializedError()
    return _binding


def reset() -> None:
    """Forget the process binding. Intended for tests."""
    global _binding
    _binding = None


def _instrument(app: Any) -> None:
    add_middleware = getattr(app, "add_middleware", None)
    if callable(add_middleware):
        add_middleware(SentryAsgiMiddleware)


def initialize(
    app: Any,
    dsn: str,
    *,
    environment: str,
    ignore_errors: Sequence[Any] = (),
    rules: SamplingRules | None = None,
) -> ErrorTrackingHandlers:
    """
    Initialize Sentry once for this process.

    Args:
        app: ASGI application (FastAPI/Starlette) to instrument, or None
        dsn: Sentry DSN
        environment: Reported environment name
        ignore_errors: Exception classes or names Sentry should drop
        rules: URL sampling rules for performance tracing
    """
    global _binding
    if _binding is not None:
        return _binding

    traces_sampler = make_traces_sampler(rules or SamplingRules())
    sentry_sdk.init(
        dsn=dsn,
        environment=environment,
        ignore_errors=list(ignore_errors),
        traces_sampler=traces_sampler,
    )
    if app is not None:
        _instrument(app)

    _binding = ErrorTrackingHandlers(
        dsn=dsn,
        environment=environment,
        traces_sampler=traces_sampler,
        asgi_middleware=SentryAsgiMiddleware,
        capture_exception=sentry_sdk.capture_exception,
    )
    return _binding


def capture(err: Any, extras: Mapping[str, Any] | None = None) -> None:
    """Report ``err`` with ``extras`` attached; no-op when tracking is off."""
    if _binding is None:
        return
    try:
        if isinstance(err, str):
            sentry_sdk.capture_message(err, level="error", extras=dict(extras or {}))
        else:
            sentry_sdk.capture_exception(err, extras=dict(extras or {}))
    except Exception as exc:
        _logger.warning("error tracker capture failed", error=str(exc), error_type=type(exc).__name__)
