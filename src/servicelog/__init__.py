"""
Servicelog: unified logging facade for backend services.

Routes log records to the sinks that fit the deployment environment:
- console: colorized human-readable output (localhost/test, or forced)
- cloudwatch: AWS CloudWatch Logs, one stream per UTC day
- loggly: Loggly, when a token is configured

Errors can additionally be forwarded to Sentry and to a chat webhook.

Usage:
    from servicelog import log

    log.initialize_transports("info", "trivia")
    log.info("started", "main", {"port": 8080})
"""

from .exceptions import ConfigurationError, ServicelogError, UninitializedError
from .logger import Logger

# Process-wide instance for application code
log = Logger()

__all__ = [
    "ConfigurationError",
    "Logger",
    "ServicelogError",
    "UninitializedError",
    "log",
]
