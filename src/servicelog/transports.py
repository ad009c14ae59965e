"""
Transport selection.

Local environments (and ``force_console``) get a single colorized console
sink. Everything else ships to CloudWatch Logs, plus Loggly when a token is
configured, namespaced as ``{tag}-{environment}``.
"""

from __future__ import annotations

from .config import LOCAL_ENVIRONMENTS, TransportOptions
from .exceptions import ConfigurationError
from .levels import LEVELS, is_valid_level
from .sinks import BaseSink, CloudWatchSink, ConsoleSink, LogglySink


def namespace(tag: str, environment: str) -> str:
    return f"{tag}-{environment}"


def validate_level(level: object, field: str = "default_level") -> str:
    if not level:
        raise ConfigurationError(f"{field} is required", field=field, value=level)
    if not is_valid_level(level):
        raise ConfigurationError(
            f"{field} must be one of {', '.join(LEVELS)}; got {level!r}",
            field=field,
            value=level,
        )
    return level  # type: ignore[return-value]


def validate_tag(tag: object) -> str:
    if not isinstance(tag, str) or not tag.strip():
        raise ConfigurationError("tag is required", field="tag", value=tag)
    return tag.strip()


def uses_console_only(environment: str, options: TransportOptions) -> bool:
    return options.force_console or environment in LOCAL_ENVIRONMENTS


def select_transports(
    environment: str,
    default_level: str,
    tag: str,
    options: TransportOptions | None = None,
) -> list[BaseSink]:
    """
    Build the sinks for ``environment``.

    Args:
        environment: Deployment environment name
        default_level: Minimum level for every sink
        tag: Namespacing label for log groups, streams and Loggly tags
        options: Optional transport settings

    Raises:
        ConfigurationError: ``default_level`` or ``tag`` is missing or invalid
    """
    level = validate_level(default_level)
    tag = validate_tag(tag)
    options = options or TransportOptions()

    if uses_console_only(environment, options):
        return [ConsoleSink(level=level, use_color=True)]

    group = namespace(tag, environment)
    sinks: list[BaseSink] = [
        CloudWatchSink(group, tag, region=options.region, level=level),
    ]
    token = options.loggly_token.get_secret_value() if options.loggly_token else ""
    if token:
        sinks.append(
            LogglySink(
                token,
                tags=[tag, environment, group],
                level=level,
            )
        )
    return sinks
