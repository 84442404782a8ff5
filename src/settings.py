"""
Centralized configuration management for the OpenAI router.

This module provides a single point of configuration using python-decouple
to manage environment variables with proper defaults and type casting.
"""

from decouple import config  # type: ignore


class Settings:
    """Centralized application settings."""

    # AWS Configuration
    AWS_REGION: str = config("AWS_REGION", default="us-east-1")
    # Region of the parameter holding the API key; independent of the
    # region the function runs in (Lambda sets AWS_REGION itself)
    SSM_REGION: str = config("SSM_REGION", default="us-east-1")

    # Parameter Store name holding the OpenAI API key
    OPENAI_API_KEY_PARAMETER: str = config(
        "OPENAI_API_KEY_PARAMETER", default="openai-api-key"
    )

    # OpenAI endpoint
    OPENAI_API_URL: str = config(
        "OPENAI_API_URL", default="https://api.openai.com/v1/chat/completions"
    )

    # Logging Configuration
    LOG_LEVEL: str = config("LOG_LEVEL", default="INFO")

    # Environment Detection
    IS_TEST_ENV: bool = config("IS_TEST_ENV", default=False, cast=bool)
    IS_LAMBDA_ENV: bool = bool(config("AWS_LAMBDA_FUNCTION_NAME", default=""))

    # Lambda-specific Configuration
    AWS_LAMBDA_FUNCTION_NAME: str = config("AWS_LAMBDA_FUNCTION_NAME", default="")
    AWS_LAMBDA_FUNCTION_VERSION: str = config(
        "AWS_LAMBDA_FUNCTION_VERSION", default="unknown"
    )

    # Debug and Development
    DEBUG: bool = config("DEBUG", default=False, cast=bool)

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.IS_LAMBDA_ENV and not self.IS_TEST_ENV and not self.DEBUG

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return not self.IS_LAMBDA_ENV and not self.IS_TEST_ENV

    def validate(self) -> None:
        """Validate configuration settings and raise errors for invalid values."""
        errors = []

        if not self.SSM_REGION:
            errors.append("SSM_REGION must not be empty")

        if not self.OPENAI_API_KEY_PARAMETER:
            errors.append("OPENAI_API_KEY_PARAMETER must not be empty")

        if self.is_production and not self.OPENAI_API_URL.startswith("https://"):
            errors.append("OPENAI_API_URL must use https in production environment")

        if self.LOG_LEVEL.upper() not in (
            "DEBUG",
            "INFO",
            "WARNING",
            "ERROR",
            "CRITICAL",
        ):
            errors.append(f"LOG_LEVEL is not a valid level: {self.LOG_LEVEL}")

        if errors:
            raise ValueError(f"Configuration validation failed: {'; '.join(errors)}")

    def get_logging_config(self) -> dict[str, object]:
        """Get logging-specific configuration."""
        return {
            "level": self.LOG_LEVEL,
            "json_logs": self.IS_LAMBDA_ENV,
            "include_stdlib": True,
            "aws_lambda_function": self.AWS_LAMBDA_FUNCTION_NAME,
            "aws_lambda_version": self.AWS_LAMBDA_FUNCTION_VERSION,
            "aws_region": self.AWS_REGION,
        }

    def __repr__(self) -> str:
        """String representation of settings (safe - no secrets)."""
        safe_attrs = [
            "AWS_REGION",
            "SSM_REGION",
            "OPENAI_API_KEY_PARAMETER",
            "OPENAI_API_URL",
            "LOG_LEVEL",
            "IS_TEST_ENV",
            "IS_LAMBDA_ENV",
            "DEBUG",
        ]
        attrs = {attr: getattr(self, attr) for attr in safe_attrs}
        return f"Settings({attrs})"


# Global settings instance
settings = Settings()


# Validate settings on import (in production only)
if settings.is_production:
    try:
        settings.validate()
    except ValueError as e:
        # In production, configuration errors should be fatal
        raise RuntimeError(f"Configuration validation failed: {e}") from e
