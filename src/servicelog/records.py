"""
Log record model.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping


@dataclass(frozen=True)
class LogRecord:
    """A single formatted log event, as handed to each sink."""

    level: str
    timestamp: str
    message: str
    event_type: str | None = None
    payload: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "payload", MappingProxyType(dict(self.payload)))

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = dict(self.payload)
        data.update(level=self.level, timestamp=self.timestamp, message=self.message)
        if self.event_type:
            data["event_type"] = self.event_type
        return data
