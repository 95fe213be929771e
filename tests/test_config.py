"""Tests for configuration management."""

import pytest
from pydantic import ValidationError

from ascii2d.config import DEFAULT_HOST, Settings, get_settings, normalize_host, reload_settings


class TestNormalizeHost:
    """Test host normalization."""

    @pytest.mark.parametrize("host", ["", None])
    def test_empty_uses_default(self, host):
        """Empty overrides fall back to the canonical host."""
        assert normalize_host(host) == DEFAULT_HOST

    def test_bare_host_gets_https(self):
        assert normalize_host("ascii2d.obfs.dev") == "https://ascii2d.obfs.dev"

    def test_trailing_slashes_stripped(self):
        assert normalize_host("https://ascii2d.obfs.dev//") == "https://ascii2d.obfs.dev"

    def test_http_scheme_kept(self):
        """An explicit http scheme is not upgraded."""
        assert normalize_host("http://localhost:3000/") == "http://localhost:3000"


class TestSettings:
    """Test the Settings class."""

    def test_default_settings(self, test_settings):
        """Test that default settings are created correctly."""
        assert test_settings.ascii2d_host == "https://ascii2d.net"
        assert test_settings.flaresolverr_url == "http://localhost:8191"
        assert test_settings.flaresolverr_max_timeout == 60000
        assert test_settings.ascii2d_num_results == 1
        assert test_settings.ascii2d_log_level == "INFO"
        assert test_settings.ascii2d_log_file is None

    def test_custom_settings(self):
        """Test custom settings override defaults."""
        settings = Settings(
            _env_file=None,
            ascii2d_host="ascii2d.obfs.dev/",
            flaresolverr_url="http://solver:8191/",
            flaresolverr_max_timeout=120000,
            ascii2d_log_level="DEBUG",
        )

        assert settings.ascii2d_host == "https://ascii2d.obfs.dev"
        assert settings.flaresolverr_base_url == "http://solver:8191"
        assert settings.flaresolverr_max_timeout == 120000
        assert settings.ascii2d_log_level == "DEBUG"

    def test_environment_variables(self, monkeypatch):
        """Environment variables are picked up case-insensitively."""
        monkeypatch.setenv("ASCII2D_HOST", "mirror.example")
        monkeypatch.setenv("FLARESOLVERR_URL", "http://10.0.0.2:8191")

        settings = Settings(_env_file=None)

        assert settings.ascii2d_host == "https://mirror.example"
        assert settings.flaresolverr_base_url == "http://10.0.0.2:8191"

    def test_log_file_expanded(self, tmp_path):
        """Test that the log file path is made absolute."""
        settings = Settings(_env_file=None, ascii2d_log_file=tmp_path / "logs" / ".." / "a.log")

        assert settings.ascii2d_log_file.is_absolute()
        assert settings.ascii2d_log_file == (tmp_path / "a.log").resolve()

    def test_validation_errors(self):
        """Test that invalid settings raise validation errors."""
        with pytest.raises(ValidationError):
            Settings(_env_file=None, ascii2d_log_level="INVALID")

        with pytest.raises(ValidationError):
            Settings(_env_file=None, flaresolverr_max_timeout=10)

        with pytest.raises(ValidationError):
            Settings(_env_file=None, ascii2d_num_results=0)

    def test_model_dump_safe(self, test_settings):
        dumped = test_settings.model_dump_safe()

        assert dumped["ascii2d_host"] == "https://ascii2d.net"
        assert dumped["flaresolverr_url"] == "http://localhost:8191"
        assert dumped["log_file"] == ""
        assert all(isinstance(value, str) for value in dumped.values())


class TestGlobalSettings:
    """Test the cached settings accessors."""

    def test_get_settings_is_cached(self):
        assert get_settings() is get_settings()

    def test_reload_settings_replaces_instance(self, monkeypatch):
        first = get_settings()
        monkeypatch.setenv("FLARESOLVERR_MAX_TIMEOUT", "30000")

        reloaded = reload_settings()

        assert reloaded is not first
        assert reloaded.flaresolverr_max_timeout == 30000
        assert get_settings() is reloaded

        monkeypatch.delenv("FLARESOLVERR_MAX_TIMEOUT")
        reload_settings()
