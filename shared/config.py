"""
Shared configuration management for the Nhost Python client.
"""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class NhostSettings(BaseSettings):
    """Client configuration read from ``NHOST_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="NHOST_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore"
    )

    # Environment
    env: str = Field(default="local")
    log_level: str = Field(default="info")

    # Subdomain addressing
    subdomain: Optional[str] = Field(default=None)
    region: str = Field(default="")

    # Explicit service URLs (self-hosted)
    auth_url: Optional[str] = Field(default=None)
    storage_url: Optional[str] = Field(default=None)
    functions_url: Optional[str] = Field(default=None)
    graphql_url: Optional[str] = Field(default=None)

    # Transport and session
    http_timeout: float = Field(default=10.0)
    token_refresh_interval_seconds: Optional[float] = Field(default=None)

    @property
    def has_service_urls(self) -> bool:
        """True when any explicit service URL was configured."""
        return any((self.auth_url, self.storage_url, self.functions_url, self.graphql_url))


def get_config(**overrides) -> NhostSettings:
    """Get client configuration, with keyword overrides taking precedence."""
    return NhostSettings(**overrides)
