"""
Transport Configuration.
"""

from typing import Optional

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_WEBHOOK_COLOR = "#b52626"
DEFAULT_REGION = "us-east-1"


class TransportOptions(BaseSettings):
    """
    Optional transport settings for ``Logger.initialize_transports``.
    Prefix: SERVICELOG_TRANSPORT_
    """

    model_config = SettingsConfigDict(
        env_prefix="SERVICELOG_TRANSPORT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    force_console: bool = Field(default=False, description="Log to console regardless of environment")
    webhook_url: Optional[str] = Field(default=None, description="Chat webhook URL for error alerts")
    webhook_color: str = Field(
        default=DEFAULT_WEBHOOK_COLOR,
        pattern=r"^#[0-9a-fA-F]{6}$",
        description="Attachment color for error alerts",
    )
    region: str = Field(default=DEFAULT_REGION, description="CloudWatch Logs region")
    loggly_token: Optional[SecretStr] = Field(default=None, description="Loggly customer token")
