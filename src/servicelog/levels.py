"""
Severity levels.

Lower numeric value means higher severity.
"""

from __future__ import annotations

LEVELS: dict[str, int] = {
    "error": 0,
    "warn": 1,
    "info": 2,
    "debug": 3,
}

LEVEL_COLORS: dict[str, str] = {
    "error": "red",
    "warn": "yellow",
    "info": "green",
    "debug": "blue",
}

# structlog method names that differ from ours
_STRUCTLOG_ALIASES = {"warning": "warn"}


def is_valid_level(level: object) -> bool:
    return isinstance(level, str) and level in LEVELS


def normalize_level(method_name: str) -> str:
    """Map a structlog method name onto one of our level names."""
    return _STRUCTLOG_ALIASES.get(method_name, method_name)


def is_enabled(record_level: str, threshold: str) -> bool:
    """Whether a record at ``record_level`` passes a sink set to ``threshold``."""
    return LEVELS[record_level] <= LEVELS[threshold]
