"""
Outbound chat-completion call to the OpenAI API.

The HTTP layer sits behind ``HttpTransport`` so tests can hand in a fake.
Each step raises its own ``RouterError`` so the handler can report exactly
which stage failed. No retries, no timeout beyond the transport's own.
"""

from typing import Protocol

import httpx

from .error_handler import (
    RequestBuildError,
    ResponseReadError,
    SerializationError,
    TransportError,
)
from .logging_config import get_logger
from .models import ChatCompletionRequest
from .settings import settings

logger = get_logger(__name__)


class HttpTransport(Protocol):
    """Sends a request and returns a response whose body is not read yet."""

    def send(self, request: httpx.Request) -> httpx.Response: ...


class HttpxTransport:
    """``HttpTransport`` backed by a long-lived ``httpx.Client``."""

    def __init__(self, client: httpx.Client | None = None) -> None:
        # timeout=None: wait as long as the upstream takes
        self.client = client or httpx.Client(timeout=None, follow_redirects=True)

    def send(self, request: httpx.Request) -> httpx.Response:
        return self.client.send(request, stream=True)

    def close(self) -> None:
        self.client.close()


class OpenAIChatClient:
    """Builds, sends and reads one chat-completion request."""

    def __init__(self, transport: HttpTransport, api_url: str | None = None) -> None:
        self.transport = transport
        self.api_url = api_url or settings.OPENAI_API_URL

    def build_payload(self, user_message: str) -> ChatCompletionRequest:
        return ChatCompletionRequest.for_user_message(user_message)

    def serialize(self, payload: ChatCompletionRequest) -> bytes:
        try:
            return payload.model_dump_json().encode("utf-8")
        except (ValueError, TypeError) as e:
            logger.error(
                "Failed to serialize chat payload", error_class=e.__class__.__name__
            )
            raise SerializationError() from e

    def build_request(self, body: bytes, api_key: str) -> httpx.Request:
        """Create the POST with JSON content type and bearer authorization."""
        try:
            url = httpx.URL(self.api_url)
            if url.scheme not in ("http", "https") or not url.host:
                raise ValueError(f"not an absolute http(s) URL: {self.api_url!r}")

            return httpx.Request(
                "POST",
                url,
                content=body,
                headers={
                    "Content-Type": "application/json",
                    "Authorization": f"Bearer {api_key}",
                },
            )
        except (httpx.InvalidURL, ValueError, TypeError) as e:
            # The error text may echo the header value; log only the class
            logger.error(
                "Failed to build chat request",
                api_url=self.api_url,
                error_class=e.__class__.__name__,
            )
            raise RequestBuildError() from e

    def send(self, request: httpx.Request) -> httpx.Response:
        try:
            return self.transport.send(request)
        except (httpx.HTTPError, OSError) as e:
            logger.error(
                "Chat request could not be sent",
                api_url=str(request.url),
                error_class=e.__class__.__name__,
            )
            raise TransportError() from e

    def read_body(self, response: httpx.Response) -> bytes:
        """Read the whole body, closing the response whatever happens."""
        try:
            return response.read()
        except (httpx.HTTPError, httpx.StreamError, OSError) as e:
            logger.error(
                "Failed to read chat response body",
                status_code=response.status_code,
                error_class=e.__class__.__name__,
            )
            raise ResponseReadError() from e
        finally:
            response.close()

    def complete(self, user_message: str, api_key: str) -> bytes:
        """
        Forward one user message and return the raw upstream body.

        The body is not parsed or checked for an API error envelope; an
        upstream 4xx/5xx body is returned like any other.

        Args:
            user_message: Text to send as the user turn
            api_key: OpenAI API key sent as a bearer token

        Returns:
            Upstream response body bytes
        """
        payload = self.build_payload(user_message)
        body = self.serialize(payload)
        request = self.build_request(body, api_key)
        response = self.send(request)
        content = self.read_body(response)

        logger.info(
            "Chat completion relayed",
            upstream_status=response.status_code,
            response_bytes=len(content),
        )
        return content
