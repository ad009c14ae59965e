"""
Log sink abstractions and concrete implementations.

- ConsoleSink: colorized human-readable lines on a stream
- CloudWatchSink: AWS CloudWatch Logs, one stream per UTC day
- LogglySink: Loggly HTTP/S event endpoint

Each sink owns its minimum level. Delivery, buffering and retries belong to the
underlying client libraries.
"""

from __future__ import annotations

import sys
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Callable, Sequence

import boto3
import httpx
import orjson
from botocore.exceptions import ClientError

from .formatters import colorize_level, format_message
from .levels import is_enabled
from .records import LogRecord

LOGGLY_ENDPOINT = "https://logs-01.loggly.com/inputs"

Clock = Callable[[], datetime]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def orjson_dumps(v: Any, *, default: Any = str) -> str:
    """Fast JSON serialization using orjson."""
    return orjson.dumps(
        v,
        default=default,
        option=orjson.OPT_UTC_Z | orjson.OPT_NAIVE_UTC | orjson.OPT_NON_STR_KEYS,
    ).decode()


# =============================================================================
# Sink Abstraction (Strategy Pattern)
# =============================================================================


class BaseSink(ABC):
    """Abstract base class for log sinks."""

    def __init__(self, level: str = "debug"):
        self.level = level

    def accepts(self, record: LogRecord) -> bool:
        return is_enabled(record.level, self.level)

    def handle(self, record: LogRecord) -> None:
        """Emit ``record`` if it passes this sink's level."""
        if self.accepts(record):
            self.emit(record)

    @abstractmethod
    def emit(self, record: LogRecord) -> None:
        """Emit a log record to the sink."""
        ...

    def close(self) -> None:
        """Close the sink and release resources."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}(level={self.level!r})"


class ConsoleSink(BaseSink):
    """Standard I/O sink.

    Args:
        level: Minimum level written
        stream: Output stream (default: stdout)
        use_color: Colorize the level; ``None`` colorizes only on a TTY
    """

    def __init__(self, level: str = "debug", stream: Any = None, use_color: bool | None = None):
        super().__init__(level)
        self._stream = stream or sys.stdout
        if use_color is None:
            use_color = bool(getattr(self._stream, "isatty", lambda: False)())
        self._use_color = use_color

    def emit(self, record: LogRecord) -> None:
        level = colorize_level(record.level) if self._use_color else record.level
        output = format_message(level, record.timestamp, record.message, record.payload)
        self._stream.write(output + "\n")
        self._stream.flush()


class CloudWatchSink(BaseSink):
    """AWS CloudWatch Logs sink.

    Stream names carry the current UTC date so that no single stream grows
    without bound while the process stays up. The name is recomputed on every
    emit.
    """

    def __init__(
        self,
        log_group: str,
        stream_prefix: str,
        *,
        region: str,
        level: str = "debug",
        client: Any = None,
        clock: Clock = _utc_now,
    ):
        super().__init__(level)
        self.log_group = log_group
        self.stream_prefix = stream_prefix
        self.region = region
        self._client = client or boto3.client("logs", region_name=region)
        self._clock = clock
        self._group_ready = False
        self._streams: set[str] = set()

    def stream_name(self, at: datetime | None = None) -> str:
        at = at or self._clock()
        if at.tzinfo is not None:
            at = at.astimezone(timezone.utc)
        return f"{self.stream_prefix}-{at.date().isoformat()}"

    def _create(self, operation: Callable[..., Any], **kwargs: Any) -> None:
        try:
            operation(**kwargs)
        except ClientError as exc:
            if exc.response.get("Error", {}).get("Code") != "ResourceAlreadyExistsException":
                raise

    def _ensure_stream(self, stream: str) -> None:
        if not self._group_ready:
            self._create(self._client.create_log_group, logGroupName=self.log_group)
            self._group_ready = True
        if stream not in self._streams:
            self._create(self._client.create_log_stream, logGroupName=self.log_group, logStreamName=stream)
            self._streams.add(stream)

    def emit(self, record: LogRecord) -> None:
        now = self._clock()
        stream = self.stream_name(now)
        self._ensure_stream(stream)
        self._client.put_log_events(
            logGroupName=self.log_group,
            logStreamName=stream,
            logEvents=[
                {
                    "timestamp": int(now.timestamp() * 1000),
                    "message": orjson_dumps(record.to_dict()),
                }
            ],
        )

    def __repr__(self) -> str:
        return f"CloudWatchSink(log_group={self.log_group!r}, region={self.region!r}, level={self.level!r})"


class LogglySink(BaseSink):
    """Loggly sink posting one JSON event per record."""

    def __init__(
        self,
        token: str,
        tags: Sequence[str],
        *,
        level: str = "debug",
        client: httpx.Client | None = None,
        timeout: float = 5.0,
    ):
        super().__init__(level)
        self.tags = tuple(tags)
        self._url = f"{LOGGLY_ENDPOINT}/{token}/tag/{','.join(self.tags)}/"
        self._client = client or httpx.Client(timeout=timeout)

    def emit(self, record: LogRecord) -> None:
        response = self._client.post(
            self._url,
            content=orjson_dumps(record.to_dict()),
            headers={"Content-Type": "application/json"},
        )
        response.raise_for_status()

    def close(self) -> None:
        self._client.close()

    def __repr__(self) -> str:
        return f"LogglySink(tags={self.tags!r}, level={self.level!r})"
