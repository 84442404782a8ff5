"""
Error taxonomy for the OpenAI router and its mapping to API Gateway responses.

Every failure of a request is terminal: it is raised as a ``RouterError``
subclass at the point of occurrence, logged with structured context and
converted to a proxy response by the handler. Nothing is retried.
"""

import base64
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any

import whenever

from .logging_config import get_logger

logger = get_logger(__name__)

# Public error bodies. Existing callers match on these strings.
INVALID_INPUT_MESSAGE = "Error in parsing JSON"
SERIALIZATION_MESSAGE = "Unable to marshal the JSON body"
REQUEST_BUILD_MESSAGE = "Unable to create the HTTP request"
TRANSPORT_MESSAGE = "Unable to send the HTTP request"
RESPONSE_READ_MESSAGE = "Unable to read the response body"
INTERNAL_ERROR_MESSAGE = "Internal server error"


class ErrorType(Enum):
    """Enumeration of error types for structured logging and handling."""

    INVALID_INPUT = "invalid_input"
    CREDENTIAL_ERROR = "credential_error"
    SERIALIZATION_ERROR = "serialization_error"
    REQUEST_BUILD_ERROR = "request_build_error"
    TRANSPORT_ERROR = "transport_error"
    RESPONSE_READ_ERROR = "response_read_error"
    UNKNOWN_ERROR = "unknown_error"


@dataclass
class ErrorContext:
    """Structured error context for logging and debugging."""

    error_type: ErrorType
    request_id: str | None = None
    timestamp: str | None = None
    additional_data: dict[str, Any] | None = None

    def __post_init__(self) -> None:
        if not self.timestamp:
            self.timestamp = str(whenever.Instant.now())


class RouterError(Exception):
    """Base exception for request failures that map to an HTTP response."""

    status_code = 500

    def __init__(
        self,
        message: str,
        error_type: ErrorType = ErrorType.UNKNOWN_ERROR,
        context: ErrorContext | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_type = error_type
        self.context = context or ErrorContext(error_type=error_type)


class InvalidInputError(RouterError):
    """The inbound body is not JSON of the expected shape."""

    status_code = 400

    def __init__(self, detail: str | None = None) -> None:
        context = ErrorContext(
            error_type=ErrorType.INVALID_INPUT,
            additional_data={"detail": detail} if detail else None,
        )
        super().__init__(INVALID_INPUT_MESSAGE, ErrorType.INVALID_INPUT, context)


class CredentialError(RouterError):
    """The API key could not be fetched. The message is the underlying error."""

    def __init__(self, message: str, parameter_name: str | None = None) -> None:
        context = ErrorContext(
            error_type=ErrorType.CREDENTIAL_ERROR,
            additional_data=(
                {"parameter_name": parameter_name} if parameter_name else None
            ),
        )
        super().__init__(message, ErrorType.CREDENTIAL_ERROR, context)


class SerializationError(RouterError):
    def __init__(self) -> None:
        super().__init__(SERIALIZATION_MESSAGE, ErrorType.SERIALIZATION_ERROR)


class RequestBuildError(RouterError):
    def __init__(self) -> None:
        super().__init__(REQUEST_BUILD_MESSAGE, ErrorType.REQUEST_BUILD_ERROR)


class TransportError(RouterError):
    def __init__(self) -> None:
        super().__init__(TRANSPORT_MESSAGE, ErrorType.TRANSPORT_ERROR)


class ResponseReadError(RouterError):
    def __init__(self) -> None:
        super().__init__(RESPONSE_READ_MESSAGE, ErrorType.RESPONSE_READ_ERROR)


def log_error(
    error: Exception, context: ErrorContext | None = None, level: str = "ERROR"
) -> str:
    """
    Log an error with structured context information.

    Args:
        error: The exception to log
        context: Optional error context (defaults to the error's own context)
        level: Log level (ERROR, WARNING, CRITICAL)

    Returns:
        Error ID for tracking
    """
    error_id = f"err_{whenever.Instant.now().timestamp()}"

    log_data: dict[str, Any] = {
        "error_id": error_id,
        "error_message": str(error),
        "error_type": getattr(error, "error_type", ErrorType.UNKNOWN_ERROR).value,
        "error_class": error.__class__.__name__,
    }

    if error.__cause__ is not None:
        log_data["cause_class"] = error.__cause__.__class__.__name__

    if context is None:
        context = getattr(error, "context", None)
    if context:
        context_data = asdict(context)
        context_data["error_type"] = context.error_type.value
        # The log pipeline stamps its own "timestamp"
        context_data["error_timestamp"] = context_data.pop("timestamp")
        log_data.update(context_data)

    if level == "CRITICAL":
        logger.critical(f"Critical error: {error.__class__.__name__}", **log_data)
    elif level == "WARNING":
        logger.warning(f"Warning: {error.__class__.__name__}", **log_data)
    else:
        logger.error(f"Error: {error.__class__.__name__}", **log_data)

    return error_id


def build_response(status_code: int, body: str | bytes) -> dict[str, Any]:
    """
    Build an API Gateway proxy response.

    Byte bodies are decoded as UTF-8; bytes that are not valid UTF-8 are
    base64 encoded and flagged so API Gateway hands back the exact bytes.
    """
    is_base64 = False
    if isinstance(body, bytes):
        try:
            body = body.decode("utf-8")
        except UnicodeDecodeError:
            body = base64.b64encode(body).decode("ascii")
            is_base64 = True

    return {
        "statusCode": status_code,
        "body": body,
        "isBase64Encoded": is_base64,
    }


def error_response(error: RouterError) -> dict[str, Any]:
    """Map a request failure to its proxy response."""
    return build_response(error.status_code, error.message)


def internal_error_response() -> dict[str, Any]:
    """Response for failures outside the known taxonomy."""
    return build_response(500, INTERNAL_ERROR_MESSAGE)
