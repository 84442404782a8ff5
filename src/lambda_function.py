"""
AWS Lambda handler for the OpenAI router.

Receives a user message through API Gateway, fetches the OpenAI API key from
SSM Parameter Store, forwards a chat-completion request and relays the
upstream body back to the caller unchanged.
"""

import base64
import binascii
import json
from typing import Any

from pydantic import ValidationError

from .credentials import CredentialProvider, SSMParameterCredentialProvider
from .error_handler import (
    ErrorType,
    InvalidInputError,
    RouterError,
    build_response,
    error_response,
    internal_error_response,
    log_error,
)
from .logging_config import get_logger
from .models import UserRequest
from .openai_client import HttpTransport, HttpxTransport, OpenAIChatClient
from .settings import settings

logger = get_logger(__name__)

# Reused across warm invocations for connection pooling only
credential_provider: CredentialProvider = SSMParameterCredentialProvider()
http_transport: HttpTransport = HttpxTransport()


def lambda_handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    """
    Main Lambda handler for API Gateway proxy events.

    Args:
        event: API Gateway proxy event; ``body`` holds ``{"gpt_message": ...}``
        context: Lambda execution context

    Returns:
        Proxy response with statusCode, body and isBase64Encoded
    """
    request_id = str(getattr(context, "aws_request_id", None) or "unknown")
    log = logger.bind(request_id=request_id)

    try:
        user_request = parse_user_request(event)
        log.info("Received chat request", message_length=len(user_request.gpt_message))

        api_key = credential_provider.get_credential(settings.OPENAI_API_KEY_PARAMETER)

        chat_client = OpenAIChatClient(http_transport, settings.OPENAI_API_URL)
        content = chat_client.complete(user_request.gpt_message, api_key)

        log.info("Request completed", response_bytes=len(content))
        return build_response(200, content)

    except RouterError as e:
        e.context.request_id = request_id
        log_error(e, level="WARNING" if e.status_code < 500 else "ERROR")
        return error_response(e)

    except Exception as e:
        log.error(
            "Unhandled error processing request",
            error_type=ErrorType.UNKNOWN_ERROR.value,
            error_message=str(e),
            exc_info=True,
        )
        return internal_error_response()


def parse_user_request(event: dict[str, Any]) -> UserRequest:
    """
    Extract and validate the caller's body from a proxy event.

    Raises:
        InvalidInputError: body missing, not decodable, not JSON, or not of
            the ``{"gpt_message": string}`` shape
    """
    if not isinstance(event, dict):
        raise InvalidInputError("event is not an object")

    body = event.get("body")
    if body is None:
        raise InvalidInputError("missing body")

    if event.get("isBase64Encoded"):
        try:
            body = base64.b64decode(body, validate=True)
        except (binascii.Error, ValueError) as e:
            raise InvalidInputError("body is not valid base64") from e

    try:
        data = json.loads(body, parse_constant=_reject_constant)
    except (ValueError, TypeError) as e:
        raise InvalidInputError("body is not valid JSON") from e

    try:
        return UserRequest.model_validate(data)
    except ValidationError as e:
        raise InvalidInputError(f"{e.error_count()} validation error(s)") from e


def _reject_constant(name: str) -> None:
    raise ValueError(f"{name} is not valid JSON")
