"""Configuration management for the ascii2d client using Pydantic settings.

Settings are loaded from environment variables and .env files with defaults
that point at the public ascii2d host and a local FlareSolverr instance.
"""

from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_HOST = "https://ascii2d.net"


def normalize_host(host: str | None) -> str:
    """Normalize an ascii2d host override.

    An empty value selects the canonical host. Anything else gets an
    ``https://`` prefix unless it already starts with ``http``, and loses
    its trailing slashes.

    Args:
        host: Host override, possibly bare (``"ascii2d.obfs.dev"``)

    Returns:
        str: Scheme-prefixed host without a trailing slash
    """
    if not host:
        return DEFAULT_HOST
    if not host.startswith("http"):
        host = "https://" + host
    return host.rstrip("/")


class Settings(BaseSettings):
    """Main configuration settings for the ascii2d client.

    Environment variables take precedence over .env file values.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ascii2d
    ascii2d_host: str = Field(
        default=DEFAULT_HOST,
        description="ascii2d host (bare hostnames get an https:// prefix)",
    )
    ascii2d_num_results: int = Field(
        default=1,
        description="Preferred number of results per page (currently unused, the first match is returned)",
        ge=1,
    )

    # FlareSolverr
    flaresolverr_url: str = Field(
        default="http://localhost:8191",
        description="FlareSolverr server URL",
    )
    flaresolverr_max_timeout: int = Field(
        default=60000,
        description="Challenge solving timeout passed to FlareSolverr, in milliseconds",
        ge=1000,
        le=600000,
    )

    # Application Settings
    ascii2d_log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level for the application",
    )
    ascii2d_log_file: Path | None = Field(
        default=None,
        description="Optional file path to write logs (defaults to console only)",
    )

    @field_validator("ascii2d_host", mode="after")
    @classmethod
    def normalize_ascii2d_host(cls, v: str) -> str:
        """Apply host normalization."""
        return normalize_host(v)

    @field_validator("ascii2d_log_file", mode="before")
    @classmethod
    def expand_paths(cls, v: str | Path | None) -> Path | None:
        """Expand relative paths to absolute paths."""
        if v is None:
            return None
        path = Path(v)
        return path.expanduser().resolve()

    @property
    def flaresolverr_base_url(self) -> str:
        """Get the FlareSolverr base URL (without the /v1 suffix)."""
        return self.flaresolverr_url.rstrip("/")

    def model_dump_safe(self) -> dict[str, str]:
        """Dump settings as a dictionary with string representations.

        Useful for logging or displaying the active configuration.
        """
        return {
            "ascii2d_host": self.ascii2d_host,
            "num_results": str(self.ascii2d_num_results),
            "flaresolverr_url": self.flaresolverr_base_url,
            "flaresolverr_max_timeout": str(self.flaresolverr_max_timeout),
            "log_level": self.ascii2d_log_level,
            "log_file": str(self.ascii2d_log_file) if self.ascii2d_log_file else "",
        }


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get the global settings instance.

    Creates and caches the settings on first call.

    Returns:
        Settings: The global settings instance
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reload_settings() -> Settings:
    """Reload settings from environment/files.

    Returns:
        Settings: The newly loaded settings instance
    """
    global _settings
    _settings = Settings()
    return _settings
