"""
Configuration management for c8client.

ClientConfig reads explicit arguments first and falls back to environment
variables. ClientSettings is the Pydantic-based alternative that validates
the same values on construction.
"""

import os

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import (DEFAULT_C8_VERSION, DEFAULT_FABRIC, DEFAULT_TIMEOUT_MS,
                        DEFAULT_URL, MIN_TIMEOUT_MS, VERSION_MAJOR_DIVISOR)
from .exceptions import ConfigurationError


def _split_urls(value: str | list[str] | tuple[str, ...] | None) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        value = value.split(",")
    return [url.strip().rstrip("/") for url in value if url and url.strip()]


class ClientConfig:
    """
    Client configuration.

    Example:
        # Using environment variables
        config = ClientConfig()

        # Or using direct parameters
        config = ClientConfig(
            urls=["https://dc1.example.com", "https://dc2.example.com"],
            fabric="sales",
            c8_version=30400,
        )
    """

    def __init__(
        self,
        urls: str | list[str] | None = None,
        fabric: str | None = None,
        c8_version: int | None = None,
        timeout_ms: int | None = None,
        token: str | None = None,
        api_key: str | None = None,
        headers: dict[str, str] | None = None,
    ):
        """
        Initialize configuration.

        Args:
            urls: One host URL, a comma separated list, or a list of URLs
                  (defaults to C8_URL env var)
            fabric: Fabric the requests are scoped to (defaults to C8_FABRIC
                    or "_system")
            c8_version: Server version as an integer such as 30400
                        (defaults to C8_VERSION or 30000)
            timeout_ms: Per-request timeout in ms (defaults to C8_TIMEOUT_MS
                        or 30000)
            token: Bearer token attached to every request (defaults to C8_TOKEN)
            api_key: API key attached to every request (defaults to C8_API_KEY)
            headers: Extra headers sent with every request
        """
        self.urls = _split_urls(urls) or _split_urls(os.getenv("C8_URL", DEFAULT_URL))
        self.fabric = fabric or os.getenv("C8_FABRIC", DEFAULT_FABRIC)
        self.c8_version = c8_version or int(os.getenv("C8_VERSION", str(DEFAULT_C8_VERSION)))
        self.timeout_ms = timeout_ms or int(os.getenv("C8_TIMEOUT_MS", str(DEFAULT_TIMEOUT_MS)))
        self.token = token or os.getenv("C8_TOKEN") or None
        self.api_key = api_key or os.getenv("C8_API_KEY") or None
        self.headers = dict(headers or {})

    @property
    def c8_major(self) -> int:
        """Major server version derived from ``c8_version``."""
        return self.c8_version // VERSION_MAJOR_DIVISOR

    def auth_headers(self) -> dict[str, str]:
        """Headers carrying the configured credentials, if any."""
        if self.token:
            return {"Authorization": f"bearer {self.token}"}
        if self.api_key:
            return {"Authorization": f"apikey {self.api_key}"}
        return {}

    def validate(self) -> None:
        """
        Validate configuration values.

        Raises:
            ConfigurationError: If required configuration is missing or invalid
        """
        if not self.urls:
            raise ConfigurationError(
                "At least one url is required (set C8_URL or pass urls directly)",
                config_key="urls",
            )

        for url in self.urls:
            if not url.startswith(("http://", "https://")):
                raise ConfigurationError(
                    f"url must start with http:// or https://, got {url!r}",
                    config_key="urls",
                    config_value=url,
                )

        if not self.fabric:
            raise ConfigurationError("fabric must not be empty", config_key="fabric")

        if self.c8_version < VERSION_MAJOR_DIVISOR:
            raise ConfigurationError(
                f"c8_version must look like 30400, got {self.c8_version}",
                config_key="c8_version",
                config_value=self.c8_version,
            )

        if self.timeout_ms < MIN_TIMEOUT_MS:
            raise ConfigurationError(
                f"timeout_ms must be >= {MIN_TIMEOUT_MS}, got {self.timeout_ms}",
                config_key="timeout_ms",
                config_value=self.timeout_ms,
            )

        if self.token and self.api_key:
            raise ConfigurationError("Configure either token or api_key, not both")


class ClientSettings(BaseSettings):
    """
    Pydantic-based configuration with automatic validation.

    Usage:
        settings = ClientSettings()
        client = C8Client(settings.to_config())
    """

    model_config = SettingsConfigDict(env_prefix="C8_", env_file=".env", case_sensitive=False)

    url: str = Field(DEFAULT_URL, description="Comma separated host URLs")
    fabric: str = Field(DEFAULT_FABRIC, min_length=1, description="Fabric name")
    version: int = Field(
        DEFAULT_C8_VERSION, ge=VERSION_MAJOR_DIVISOR, description="Server version, e.g. 30400"
    )
    timeout_ms: int = Field(
        DEFAULT_TIMEOUT_MS, ge=MIN_TIMEOUT_MS, description="Request timeout in milliseconds"
    )
    token: str | None = Field(None, description="Bearer token")
    api_key: str | None = Field(None, description="API key")

    @field_validator("url")
    @classmethod
    def _check_urls(cls, value: str) -> str:
        urls = _split_urls(value)
        if not urls:
            raise ValueError("at least one url is required")
        for url in urls:
            if not url.startswith(("http://", "https://")):
                raise ValueError(f"url must start with http:// or https://, got {url!r}")
        return value

    def to_config(self) -> ClientConfig:
        """Build a ClientConfig from the validated settings."""
        return ClientConfig(
            urls=self.url,
            fabric=self.fabric,
            c8_version=self.version,
            timeout_ms=self.timeout_ms,
            token=self.token,
            api_key=self.api_key,
        )
