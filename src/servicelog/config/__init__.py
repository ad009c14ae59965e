"""
Servicelog Configuration Module.

Each sub-module is an independent concern with its own environment variable
prefix. Explicit constructor arguments always override the environment.

Usage:
    from servicelog.config import EnvironmentSettings, TransportOptions

    EnvironmentSettings().env  # "localhost"
    TransportOptions(force_console=True)
"""

from .environment import LOCAL_ENVIRONMENTS, EnvironmentSettings
from .tracking import ErrorTrackingOptions
from .transports import DEFAULT_REGION, DEFAULT_WEBHOOK_COLOR, TransportOptions

__all__ = [
    "DEFAULT_REGION",
    "DEFAULT_WEBHOOK_COLOR",
    "LOCAL_ENVIRONMENTS",
    "EnvironmentSettings",
    "ErrorTrackingOptions",
    "TransportOptions",
]
