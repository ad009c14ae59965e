"""
Message and error formatters.

These are pure functions: they normalize strings, exceptions and arbitrary
metadata into a single display line shared by every sink.
"""

from __future__ import annotations

import traceback
from typing import Any, Mapping

import orjson

from .levels import LEVEL_COLORS

# =============================================================================
# ANSI Color Codes (for console output)
# =============================================================================

COLORS = {
    "reset": "\033[0m",
    "red": "\033[31m",
    "green": "\033[32m",
    "yellow": "\033[33m",
    "blue": "\033[34m",
}

RESERVED_KEYS = frozenset({"timestamp", "message", "level"})

_JSON_OPTIONS = orjson.OPT_INDENT_2 | orjson.OPT_NON_STR_KEYS | orjson.OPT_UTC_Z | orjson.OPT_NAIVE_UTC


def colorize(text: str, color: str) -> str:
    """Apply ANSI color to text."""
    return f"{COLORS.get(color, '')}{text}{COLORS['reset']}"


def colorize_level(level: str) -> str:
    return colorize(level, LEVEL_COLORS.get(level, ""))


# =============================================================================
# JSON Serialization
# =============================================================================


def _serializable(payload: Mapping[Any, Any]) -> dict[Any, Any]:
    """Drop the values orjson cannot encode, keeping the rest of the payload."""
    kept = {}
    for key, value in payload.items():
        try:
            orjson.dumps({key: value}, option=_JSON_OPTIONS)
        except TypeError:
            continue
        kept[key] = value
    return kept


def pretty_json(payload: Mapping[Any, Any]) -> str:
    """Render ``payload`` as 2-space indented JSON, dropping unencodable values."""
    try:
        return orjson.dumps(payload, option=_JSON_OPTIONS).decode()
    except TypeError:
        return orjson.dumps(_serializable(payload), option=_JSON_OPTIONS).decode()


def _remaining_payload(payload: Mapping[Any, Any] | None) -> dict[Any, Any]:
    if not payload:
        return {}
    meta = {k: v for k, v in payload.items() if k not in RESERVED_KEYS}
    try:
        orjson.dumps(meta, option=_JSON_OPTIONS)
    except TypeError:
        meta = _serializable(meta)
    return meta


# =============================================================================
# Formatters
# =============================================================================


def format_message(level: str, timestamp: str, message: str, payload: Mapping[Any, Any] | None = None) -> str:
    """
    Render a log line.

    The payload, minus the ``timestamp``/``message``/``level`` keys, is appended
    as an indented JSON block on a new line when anything remains of it.
    """
    line = f"{timestamp} {level}: {message}"
    meta = _remaining_payload(payload)
    if not meta:
        return line
    return f"{line}\n{orjson.dumps(meta, option=_JSON_OPTIONS).decode()}"


def error_to_string(error: Any) -> str:
    """``Type: message`` for exceptions, ``str()`` for anything else."""
    if isinstance(error, BaseException):
        text = str(error)
        return f"{type(error).__name__}: {text}" if text else type(error).__name__
    return str(error)


def error_stack(error: Any) -> str:
    """Best-effort stack trace; empty when none is available."""
    if isinstance(error, BaseException):
        if error.__traceback__ is None:
            return ""
        return "".join(traceback.format_exception(type(error), error, error.__traceback__)).rstrip()
    stack = getattr(error, "stack", None)
    return str(stack) if stack else ""


def format_error(error: Any, message: str | None) -> str:
    if isinstance(error, str):
        return f"{error}."
    return f"[ERROR] {message or ''} {error_to_string(error)}. Stack:\n{error_stack(error)}"


def custom_format(message: str | None, event_type: str | None) -> str:
    """Prefix ``message`` with the event type that produced it."""
    if message and event_type:
        return f"{event_type}: {message}"
    if message:
        return message
    if event_type:
        return event_type
    return ""
