"""
Environment Configuration.

The deployment environment is read from ``SERVICELOG_ENV``. It selects between
console-only output and the production sinks, and is embedded in sink names.
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LOCAL_ENVIRONMENTS = frozenset({"localhost", "test"})


class EnvironmentSettings(BaseSettings):
    """Environment detection."""

    model_config = SettingsConfigDict(
        env_prefix="SERVICELOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    env: str = Field(default="localhost", description="Deployment environment name")

    @field_validator("env")
    @classmethod
    def _normalize_env(cls, v: str) -> str:
        return (v or "localhost").strip()

    @property
    def is_local(self) -> bool:
        return self.env in LOCAL_ENVIRONMENTS

    @property
    def is_production(self) -> bool:
        return self.env == "production"
