"""
Error Tracking Configuration.

URL sampling rules for Sentry performance tracing.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..sampling import DEFAULT_CUSTOM_URLS_SAMPLE_RATE, SamplingRules


class ErrorTrackingOptions(BaseSettings):
    """
    Sampling options for ``Logger.initialize_error_tracking``.
    Prefix: SERVICELOG_TRACKING_
    """

    model_config = SettingsConfigDict(
        env_prefix="SERVICELOG_TRACKING_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    ignore_urls: list[str] = Field(default_factory=list, description="URL patterns never traced")
    custom_urls: list[str] = Field(default_factory=list, description="URL patterns traced at the custom rate")
    custom_urls_sample_rate: float = Field(
        default=DEFAULT_CUSTOM_URLS_SAMPLE_RATE,
        ge=0.0,
        le=1.0,
        description="Sample rate for custom URL matches",
    )

    def to_rules(self, traces_sample_rate: float) -> SamplingRules:
        return SamplingRules(
            ignore_urls=tuple(self.ignore_urls),
            custom_urls=tuple(self.custom_urls),
            traces_sample_rate=traces_sample_rate,
            custom_urls_sample_rate=self.custom_urls_sample_rate,
        )
