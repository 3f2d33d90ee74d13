"""Configuration for the KeyEnv client."""

from typing import Any, Optional

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_BASE_URL = "https://api.keyenv.dev"
DEFAULT_TIMEOUT = 30


def normalize_api_url(url: str) -> str:
    """Strip whitespace and trailing slashes; reject URLs without an http(s) scheme."""
    url = url.strip()
    if not url.startswith(("http://", "https://")):
        raise ValueError("api_url must start with http:// or https://")
    return url.rstrip("/")


class Settings(BaseSettings):
    """Client settings loaded from ``KEYENV_*`` environment variables and ``.env``."""

    api_url: str = Field(DEFAULT_BASE_URL, description="KeyEnv API base URL")
    timeout: float = Field(DEFAULT_TIMEOUT, description="HTTP request timeout in seconds")
    cache_ttl: int = Field(0, description="Export cache TTL in seconds (0 disables caching)")
    token: Optional[SecretStr] = Field(None, description="Service token used by KeyEnv.from_env()")
    log_level: str = Field("INFO", description="Default level for setup_json_logging")

    @field_validator("cache_ttl", mode="before")
    @classmethod
    def coerce_cache_ttl(cls, v: Any) -> int:
        """
        Coerce the cache TTL to a non-negative integer.

        Args:
            v: Raw value from the environment or constructor

        Returns:
            int: TTL in seconds; malformed or negative input disables caching
        """
        if v is None or v == "":
            return 0
        try:
            ttl = int(str(v).strip())
        except ValueError:
            return 0
        return max(ttl, 0)

    @field_validator("api_url")
    @classmethod
    def validate_api_url(cls, v: str) -> str:
        """
        Validate the API base URL.

        Args:
            v: Base URL

        Returns:
            str: The URL without trailing slashes

        Raises:
            ValueError: If the URL has no http(s) scheme
        """
        return normalize_api_url(v)

    @field_validator("timeout")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("timeout must be positive")
        return v

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_prefix="KEYENV_",
        extra="ignore"
    )
