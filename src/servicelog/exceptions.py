"""
Servicelog exception hierarchy.

Configuration and uninitialized-use errors are raised to the caller immediately.
Delivery failures on best-effort side channels (webhook alerts, error tracker)
never surface as exceptions.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

UNINITIALIZED_ERROR = "Logger is not initialized"


class ServicelogError(Exception):
    """Root of all servicelog errors."""

    def __init__(
        self,
        message: str,
        *,
        code: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.details = details or {}


class ConfigurationError(ServicelogError, ValueError):
    """A required initialization argument is missing or invalid."""

    def __init__(self, message: str, *, field: str, value: Any = None) -> None:
        super().__init__(
            message,
            code="CONFIGURATION_ERROR",
            details={"field": field, "value": value},
        )
        self.field = field


class UninitializedError(ServicelogError, RuntimeError):
    """A logging or level operation was attempted before setup."""

    def __init__(self, message: str = UNINITIALIZED_ERROR) -> None:
        super().__init__(message, code="UNINITIALIZED")
