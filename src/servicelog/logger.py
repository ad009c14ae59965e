"""
Logger facade.

A ``Logger`` starts uninitialized. ``initialize_transports`` builds its sinks
and the structlog pipeline that feeds them; until then every logging call
raises ``UninitializedError``.

Errors logged through ``Logger.error`` additionally fan out, independently, to
a chat webhook (fire-and-forget) and to Sentry when either is configured.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Mapping, Sequence

import structlog
from structlog.typing import EventDict, WrappedLogger

from . import alerts, tracking
from .config import EnvironmentSettings, ErrorTrackingOptions, TransportOptions
from .exceptions import UninitializedError
from .formatters import custom_format, format_error
from .levels import normalize_level
from .records import LogRecord
from .sampling import DEFAULT_TRACES_SAMPLE_RATE
from .sinks import BaseSink
from .tracking import ErrorTrackingHandlers
from .transports import select_transports, validate_level

_diagnostics = structlog.get_logger("servicelog.logger")


class _NopFile:
    def write(self, s: str) -> None:
        pass

    def flush(self) -> None:
        pass


_NOP_FILE = _NopFile()


# =============================================================================
# Structlog Processors
# =============================================================================


def add_level(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Add our level name (``warning`` becomes ``warn``)."""
    event_dict["level"] = normalize_level(method_name)
    return event_dict


def add_timestamp(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Add ISO 8601 timestamp to log event."""
    event_dict["timestamp"] = datetime.now(timezone.utc).isoformat()
    return event_dict


class Logger:
    """Unified logging facade for a running service."""

    def __init__(self) -> None:
        self.level: str = "debug"
        self.tag: str | None = None
        self.environment: str | None = None
        self._sinks: list[BaseSink] = []
        self._webhook = alerts.WebhookConfig()
        self._logger: Any = None
        self._initialized = False

    @property
    def initialized(self) -> bool:
        return self._initialized

    @property
    def sinks(self) -> tuple[BaseSink, ...]:
        return tuple(self._sinks)

    @property
    def webhook(self) -> alerts.WebhookConfig:
        return self._webhook

    def _ensure_initialized(self) -> None:
        if not self._initialized or self._logger is None:
            raise UninitializedError()

    # =========================================================================
    # Initialization
    # =========================================================================

    def initialize_transports(
        self,
        default_level: str,
        tag: str,
        options: TransportOptions | None = None,
    ) -> None:
        """
        Configure sinks for the current environment.

        Re-initializing closes and replaces the previous sinks.

        Args:
            default_level: Minimum level (error, warn, info, debug)
            tag: Namespacing label for sink names
            options: Console forcing, webhook, region and Loggly settings

        Raises:
            ConfigurationError: ``default_level`` or ``tag`` is missing or invalid
        """
        options = options or TransportOptions()
        environment = EnvironmentSettings().env
        sinks = select_transports(environment, default_level, tag, options)

        self.close()
        self._sinks = sinks
        self.level = default_level
        self.tag = tag
        self.environment = environment
        self._webhook = alerts.WebhookConfig(url=options.webhook_url, color=options.webhook_color)
        self._logger = structlog.wrap_logger(
            structlog.PrintLogger(file=_NOP_FILE),
            processors=[add_level, add_timestamp, self._dispatch],
            wrapper_class=structlog.make_filtering_bound_logger(logging.DEBUG),
            context_class=dict,
            cache_logger_on_first_use=False,
        )
        self._initialized = True

    def initialize_error_tracking(
        self,
        app: Any,
        dsn: str,
        ignore_errors: Sequence[Any] = (),
        traces_sample_rate: float = DEFAULT_TRACES_SAMPLE_RATE,
        sampling: ErrorTrackingOptions | None = None,
    ) -> ErrorTrackingHandlers:
        """
        Initialize Sentry. Only the first call in a process takes effect.

        ``/health`` and ``OPTIONS`` requests are never traced, whatever
        ``sampling`` says.
        """
        existing = tracking.current()
        if existing is not None:
            return existing
        rules = (sampling or ErrorTrackingOptions()).to_rules(traces_sample_rate)
        return tracking.initialize(
            app,
            dsn,
            environment=EnvironmentSettings().env,
            ignore_errors=ignore_errors,
            rules=rules,
        )

    def get_error_tracking_handlers(self) -> ErrorTrackingHandlers:
        return tracking.get_handlers()

    def close(self) -> None:
        """Close every sink. Logging afterwards requires re-initialization."""
        for sink in self._sinks:
            try:
                sink.close()
            except Exception as exc:
                _diagnostics.warning("sink close failed", sink=repr(sink), error=str(exc))
        self._sinks = []
        self._logger = None
        self._initialized = False

    # =========================================================================
    # Levels
    # =========================================================================

    def get_level(self) -> str:
        return self.level

    def set_level(self, level: str) -> None:
        """Set the minimum level on every sink."""
        self._ensure_initialized()
        level = validate_level(level, field="level")
        self.level = level
        for sink in self._sinks:
            sink.level = level

    # =========================================================================
    # Dispatch
    # =========================================================================

    def _dispatch(self, logger: WrappedLogger, method_name: str, event_dict: EventDict) -> str:
        """Render to all sinks. Returns empty to suppress default output."""
        record = LogRecord(
            level=event_dict["level"],
            timestamp=event_dict["timestamp"],
            message=event_dict.get("event", ""),
            event_type=event_dict.get("event_type"),
            payload=event_dict.get("payload") or {},
        )
        for sink in self._sinks:
            try:
                sink.handle(record)
            except Exception as exc:
                _diagnostics.warning("sink emit failed", sink=repr(sink), error=str(exc))
        return ""

    def _log(self, method: str, message: str, event_type: str | None, payload: Mapping[str, Any] | None) -> None:
        getattr(self._logger, method)(message, event_type=event_type, payload=dict(payload or {}))

    # =========================================================================
    # Logging API
    # =========================================================================

    def debug(self, message: str | None, event_type: str | None = None, payload: Mapping[str, Any] | None = None) -> None:
        self._ensure_initialized()
        self._log("debug", custom_format(message, event_type), event_type, payload)

    def info(self, message: str | None, event_type: str | None = None, payload: Mapping[str, Any] | None = None) -> None:
        self._ensure_initialized()
        self._log("info", custom_format(message, event_type), event_type, payload)

    def warn(self, message: str | None, event_type: str | None = None, payload: Mapping[str, Any] | None = None) -> None:
        self._ensure_initialized()
        self._log("warning", custom_format(message, event_type), event_type, payload)

    def error(
        self,
        err: Any,
        message: str | None = None,
        event_type: str | None = None,
        payload: Mapping[str, Any] | None = None,
    ) -> None:
        """
        Log ``err`` and fan it out.

        The sink write, the webhook alert and the Sentry capture are
        independent: none of them can stop the others or raise to the caller.
        """
        self._ensure_initialized()
        payload = dict(payload or {})

        try:
            self._log("error", format_error(err, custom_format(message, event_type)), event_type, payload)
        except Exception as exc:
            _diagnostics.warning("error log write failed", error_type=type(exc).__name__)

        if self._webhook.url:
            try:
                alerts.dispatch(self.post_webhook_alert(err, message, event_type, payload))
            except Exception as exc:
                _diagnostics.warning("webhook alert dispatch failed", error=str(exc))

        tracking.capture(err, payload)

    async def post_webhook_alert(
        self,
        err: Any,
        message: str | None = None,
        event_type: str | None = None,
        payload: Mapping[str, Any] | None = None,
        override_url: str | None = None,
    ) -> None:
        """Post an error alert to the webhook. Never raises."""
        url = override_url or self._webhook.url
        if not url:
            return
        try:
            body = alerts.build_alert_payload(
                err,
                message,
                event_type,
                payload,
                environment=self.environment or EnvironmentSettings().env,
                color=self._webhook.color,
            )
        except Exception as exc:
            _diagnostics.debug("webhook alert payload failed", error=str(exc))
            return
        await alerts.send_alert(url, body)
