"""
Pytest configuration and shared fixtures for the OpenAI router tests.

Environment variables are set before any ``src`` import so the settings
module picks up test values, and dummy AWS credentials keep boto3 from ever
reaching a real account.
"""

import json
import os
from collections.abc import Callable

import httpx
import pytest

TEST_ENV_VARS = {
    "AWS_REGION": "us-east-1",
    "AWS_DEFAULT_REGION": "us-east-1",
    "AWS_ACCESS_KEY_ID": "testing",
    "AWS_SECRET_ACCESS_KEY": "testing",
    "AWS_SESSION_TOKEN": "testing",
    "IS_TEST_ENV": "true",
    "LOG_LEVEL": "DEBUG",
    "DEBUG": "true",
    "AWS_LAMBDA_FUNCTION_NAME": "",  # Not in Lambda during tests
}

# Set environment variables immediately
for key, value in TEST_ENV_VARS.items():
    os.environ[key] = value

from tests.fakes import (  # noqa: E402
    OPENAI_SUCCESS_BODY,
    FakeCredentialProvider,
    RecordingTransport,
)


@pytest.fixture(scope="session")
def test_settings():
    """Provide a fresh settings instance built from the test environment."""
    from src.settings import Settings

    return Settings()


@pytest.fixture
def credential_provider() -> FakeCredentialProvider:
    return FakeCredentialProvider()


@pytest.fixture
def openai_transport() -> RecordingTransport:
    """Transport that answers every request with a canned completion."""
    return RecordingTransport(
        lambda request: httpx.Response(200, content=OPENAI_SUCCESS_BODY)
    )


@pytest.fixture
def api_event() -> Callable[..., dict]:
    """Factory for API Gateway proxy events."""

    def make(body: str | None = None, message: str | None = "Hello", **extra) -> dict:
        if body is None and message is not None:
            body = json.dumps({"gpt_message": message})
        event = {
            "resource": "/",
            "path": "/",
            "httpMethod": "POST",
            "headers": {"Content-Type": "application/json"},
            "body": body,
            "isBase64Encoded": False,
        }
        event.update(extra)
        return event

    return make


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "aws: mark test as exercising AWS client stubs")
