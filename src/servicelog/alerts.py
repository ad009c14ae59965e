"""
Chat-webhook error alerts.

Alerts are best-effort: every failure (serialization, network, HTTP status) is
caught here and reported on the internal diagnostics logger, never raised.
"""

from __future__ import annotations

import asyncio
import threading
from dataclasses import dataclass
from typing import Any, Coroutine, Mapping

import httpx
import orjson
import structlog

from .config import DEFAULT_WEBHOOK_COLOR
from .formatters import custom_format, error_stack, error_to_string, pretty_json

_logger = structlog.get_logger("servicelog.alerts")

# Strong references to in-flight alert tasks; the event loop only keeps weak ones.
_pending: set[asyncio.Task[Any]] = set()


@dataclass(frozen=True)
class WebhookConfig:
    url: str | None = None
    color: str = DEFAULT_WEBHOOK_COLOR


def _error_message(err: Any) -> str:
    return err if isinstance(err, str) else str(err)


def build_alert_payload(
    err: Any,
    message: str | None,
    event_type: str | None,
    payload: Mapping[str, Any] | None,
    *,
    environment: str,
    color: str = DEFAULT_WEBHOOK_COLOR,
) -> dict[str, Any]:
    """Build the ``attachments`` body for a Slack-compatible incoming webhook."""
    title = " ".join(part for part in (custom_format(message, event_type), error_to_string(err)) if part)

    fields = [
        {
            "title": "Details",
            "short": False,
            "value": f"Environment: {environment}\nError: {_error_message(err)}",
        },
        {
            "title": "Payload",
            "short": False,
            "value": f"```{pretty_json(payload or {})}```",
        },
    ]
    stack = "" if isinstance(err, str) else error_stack(err)
    if stack:
        fields.append({"title": "Stack Trace", "short": False, "value": f"```{stack}```"})

    return {
        "attachments": [
            {
                "fallback": title,
                "pretext": title,
                "color": color,
                "fields": fields,
            }
        ]
    }


async def send_alert(url: str, body: Mapping[str, Any], *, timeout: float = 10.0) -> None:
    """POST ``body`` to ``url``; failures are logged and discarded."""
    try:
        content = orjson.dumps(body, default=str)
        async with httpx.AsyncClient(timeout=timeout) as client:
            response = await client.post(
                url,
                content=content,
                headers={"Content-Type": "application/json"},
            )
            response.raise_for_status()
    except Exception as exc:
        _logger.debug("webhook alert failed", error=str(exc), error_type=type(exc).__name__)


def _discard(task: asyncio.Task[Any]) -> None:
    _pending.discard(task)
    if not task.cancelled() and task.exception() is not None:
        _logger.debug("webhook alert task failed", error=str(task.exception()))


def dispatch(coro: Coroutine[Any, Any, None]) -> None:
    """
    Run ``coro`` without waiting for it.

    Inside a running event loop this schedules a task; otherwise the coroutine
    runs on a daemon thread with its own loop.
    """
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        thread = threading.Thread(target=asyncio.run, args=(coro,), name="servicelog-alert", daemon=True)
        thread.start()
        return

    task = loop.create_task(coro)
    _pending.add(task)
    task.add_done_callback(_discard)
