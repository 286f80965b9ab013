"""Tests for configuration schema models."""

import pytest
from pydantic import ValidationError

from dircast.config.schema import ChannelConfig, DropboxConfig, GlobalConfig


class TestDropboxConfig:
    """Tests for DropboxConfig."""

    @pytest.mark.parametrize("token", [None, "", "-", "  -  "])
    def test_unset_refresh_token(self, token: str | None) -> None:
        """Test absent, empty and "-" tokens count as not configured."""
        assert DropboxConfig(refresh_token=token).has_refresh_token is False

    def test_refresh_token_present(self) -> None:
        """Test a real token is recognized."""
        assert DropboxConfig(refresh_token="abc").has_refresh_token is True


class TestGlobalConfig:
    """Tests for GlobalConfig."""

    def test_defaults(self) -> None:
        """Test default values."""
        config = GlobalConfig()

        assert config.version == "1"
        assert config.log_level == "INFO"
        assert config.workers == 1
        assert config.http_timeout_seconds == 60.0
        assert config.extensions_case_sensitive is True
        assert config.channel == ChannelConfig()
        assert config.channel.author == "Reilly Watson"

    @pytest.mark.parametrize("workers", [0, 33])
    def test_workers_bounds(self, workers: int) -> None:
        """Test worker count is bounded."""
        with pytest.raises(ValidationError):
            GlobalConfig(workers=workers)

    def test_timeout_positive(self) -> None:
        """Test timeout must be positive."""
        with pytest.raises(ValidationError):
            GlobalConfig(http_timeout_seconds=0)

    def test_invalid_log_level(self) -> None:
        """Test unknown log levels are rejected."""
        with pytest.raises(ValidationError):
            GlobalConfig(log_level="TRACE")  # type: ignore[arg-type]
