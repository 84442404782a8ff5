"""Tests for centralized settings."""

from unittest.mock import patch

import pytest

from src.settings import Settings, settings


class TestSettingsDefaults:
    """Test values loaded in the test environment."""

    def test_test_environment(self, test_settings) -> None:
        """Test that conftest environment variables were picked up."""
        assert test_settings.IS_TEST_ENV is True
        assert test_settings.IS_LAMBDA_ENV is False
        assert test_settings.AWS_REGION == "us-east-1"
        assert test_settings.DEBUG is True

    def test_router_defaults(self, test_settings) -> None:
        """Test the parameter name and endpoint defaults."""
        assert test_settings.OPENAI_API_KEY_PARAMETER == "openai-api-key"
        assert test_settings.SSM_REGION == "us-east-1"
        assert test_settings.OPENAI_API_URL == "https://api.openai.com/v1/chat/completions"

    def test_environment_detection(self, test_settings) -> None:
        """Test production/development flags in tests."""
        assert test_settings.is_production is False
        assert test_settings.is_development is False


class TestSettingsValidation:
    """Test configuration validation."""

    def test_valid_settings(self, test_settings) -> None:
        """Test that default settings validate."""
        test_settings.validate()

    def test_empty_parameter_name(self) -> None:
        """Test that an empty parameter name is rejected."""
        s = Settings()
        with patch.object(s, "OPENAI_API_KEY_PARAMETER", ""):
            with pytest.raises(ValueError, match="OPENAI_API_KEY_PARAMETER"):
                s.validate()

    def test_invalid_log_level(self) -> None:
        """Test that an unknown log level is rejected."""
        s = Settings()
        with patch.object(s, "LOG_LEVEL", "CHATTY"):
            with pytest.raises(ValueError, match="LOG_LEVEL"):
                s.validate()

    def test_http_url_rejected_in_production(self) -> None:
        """Test that production requires an https endpoint."""
        s = Settings()
        with patch.object(s, "OPENAI_API_URL", "http://api.openai.com/v1/chat/completions"), patch.object(
            Settings, "is_production", new=True
        ):
            with pytest.raises(ValueError, match="https"):
                s.validate()

    def test_http_url_allowed_outside_production(self) -> None:
        """Test that local endpoints over http are fine in development."""
        s = Settings()
        with patch.object(s, "OPENAI_API_URL", "http://localhost:8080/v1/chat/completions"):
            s.validate()


class TestSettingsRepr:
    """Test safe representation."""

    def test_repr_lists_safe_attributes(self) -> None:
        """Test that repr shows the configured values."""
        text = repr(settings)

        assert text.startswith("Settings(")
        assert "openai-api-key" in text
        assert "us-east-1" in text

    def test_logging_config(self) -> None:
        """Test logging configuration dictionary."""
        config = settings.get_logging_config()

        assert config["level"] == "DEBUG"
        assert config["json_logs"] is False
        assert config["aws_region"] == "us-east-1"
