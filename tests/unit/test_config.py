"""
Unit tests for configuration.

Tests ClientConfig env fallbacks and validation, and ClientSettings.
"""

import pytest
from pydantic import ValidationError

from c8client.config import ClientConfig, ClientSettings
from c8client.exceptions import ConfigurationError

C8_ENV_VARS = ["C8_URL", "C8_FABRIC", "C8_VERSION", "C8_TIMEOUT_MS", "C8_TOKEN", "C8_API_KEY"]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in C8_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestClientConfig:
    """Test ClientConfig construction."""

    def test_defaults(self):
        config = ClientConfig()
        assert config.urls == ["http://localhost:8529"]
        assert config.fabric == "_system"
        assert config.c8_version == 30000
        assert config.c8_major == 3
        assert config.timeout_ms == 30000
        assert config.auth_headers() == {}

    def test_url_forms(self):
        """Test single, comma separated and list urls."""
        assert ClientConfig(urls="http://a:1/").urls == ["http://a:1"]
        assert ClientConfig(urls="http://a, http://b").urls == ["http://a", "http://b"]
        assert ClientConfig(urls=["http://a", "", "http://b"]).urls == ["http://a", "http://b"]

    def test_env_fallbacks(self, monkeypatch):
        monkeypatch.setenv("C8_URL", "https://dc1.example.com,https://dc2.example.com")
        monkeypatch.setenv("C8_FABRIC", "sales")
        monkeypatch.setenv("C8_VERSION", "20800")
        monkeypatch.setenv("C8_TOKEN", "secret")

        config = ClientConfig()

        assert config.urls == ["https://dc1.example.com", "https://dc2.example.com"]
        assert config.fabric == "sales"
        assert config.c8_major == 2
        assert config.auth_headers() == {"Authorization": "bearer secret"}

    def test_explicit_overrides_env(self, monkeypatch):
        monkeypatch.setenv("C8_FABRIC", "sales")
        assert ClientConfig(fabric="ops").fabric == "ops"

    def test_api_key_header(self):
        assert ClientConfig(api_key="k").auth_headers() == {"Authorization": "apikey k"}


class TestClientConfigValidation:
    """Test ClientConfig.validate()."""

    def test_valid(self):
        ClientConfig(urls=["https://a", "http://b"]).validate()

    def test_bad_scheme(self):
        with pytest.raises(ConfigurationError) as exc_info:
            ClientConfig(urls="ftp://a").validate()
        assert exc_info.value.config_key == "urls"
        assert exc_info.value.config_value == "ftp://a"

    def test_bad_version(self):
        with pytest.raises(ConfigurationError) as exc_info:
            ClientConfig(c8_version=3).validate()
        assert exc_info.value.config_key == "c8_version"

    def test_timeout_too_small(self):
        with pytest.raises(ConfigurationError) as exc_info:
            ClientConfig(timeout_ms=10).validate()
        assert exc_info.value.config_key == "timeout_ms"

    def test_token_and_api_key(self):
        with pytest.raises(ConfigurationError):
            ClientConfig(token="t", api_key="k").validate()


class TestClientSettings:
    """Test the Pydantic settings model."""

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("C8_URL", "https://dc1.example.com")
        monkeypatch.setenv("C8_VERSION", "30400")

        config = ClientSettings(_env_file=None).to_config()

        assert config.urls == ["https://dc1.example.com"]
        assert config.c8_version == 30400

    def test_invalid_url(self):
        with pytest.raises(ValidationError):
            ClientSettings(_env_file=None, url="ftp://nope")

    def test_invalid_version(self):
        with pytest.raises(ValidationError):
            ClientSettings(_env_file=None, version=3)
