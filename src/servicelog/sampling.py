"""
Trace sampling policy for the error tracker.

Rules are checked in order and the first match wins:

1. ``OPTIONS`` preflights and ignored URLs are never traced.
2. URLs matching a custom pattern use the custom rate.
3. Everything else uses the default rate.

Patterns match by substring containment.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Sequence

DEFAULT_IGNORED_URLS: tuple[str, ...] = ("/health",)
DEFAULT_TRACES_SAMPLE_RATE = 0.5
DEFAULT_CUSTOM_URLS_SAMPLE_RATE = 0.1

TracesSampler = Callable[[Mapping[str, Any]], float]


@dataclass(frozen=True)
class SamplingRules:
    """Configured URL rule sets and rates."""

    ignore_urls: Sequence[str] = field(default_factory=tuple)
    custom_urls: Sequence[str] = field(default_factory=tuple)
    traces_sample_rate: float = DEFAULT_TRACES_SAMPLE_RATE
    custom_urls_sample_rate: float = DEFAULT_CUSTOM_URLS_SAMPLE_RATE

    @property
    def effective_ignore_urls(self) -> tuple[str, ...]:
        """Configured ignore patterns plus the built-in health check."""
        return tuple(DEFAULT_IGNORED_URLS) + tuple(u for u in self.ignore_urls if u not in DEFAULT_IGNORED_URLS)


def _contains_any(url: str, patterns: Sequence[str]) -> bool:
    return any(pattern and pattern in url for pattern in patterns)


def resolve_sample_rate(url: str | None, method: str | None, rules: SamplingRules) -> float:
    """Return the probability in [0, 1] that a request is traced."""
    url = url or ""
    if (method or "").upper() == "OPTIONS" or _contains_any(url, rules.effective_ignore_urls):
        return 0.0
    if _contains_any(url, rules.custom_urls):
        return rules.custom_urls_sample_rate
    return rules.traces_sample_rate


# =============================================================================
# Sentry Adapter
# =============================================================================


def _request_from_context(sampling_context: Mapping[str, Any]) -> tuple[str | None, str | None]:
    scope = sampling_context.get("asgi_scope")
    if scope:
        path = scope.get("path") or ""
        query = scope.get("query_string") or b""
        if isinstance(query, bytes):
            query = query.decode("latin-1")
        url = f"{path}?{query}" if query else path
        return url, scope.get("method")

    environ = sampling_context.get("wsgi_environ")
    if environ:
        path = environ.get("PATH_INFO") or ""
        query = environ.get("QUERY_STRING") or ""
        url = f"{path}?{query}" if query else path
        return url, environ.get("REQUEST_METHOD")

    return None, None


def make_traces_sampler(rules: SamplingRules) -> TracesSampler:
    """Build a ``traces_sampler`` callback for ``sentry_sdk.init``."""

    def traces_sampler(sampling_context: Mapping[str, Any]) -> float:
        url, method = _request_from_context(sampling_context)
        if url is None and method is None:
            return rules.traces_sample_rate
        return resolve_sample_rate(url, method, rules)

    return traces_sampler
