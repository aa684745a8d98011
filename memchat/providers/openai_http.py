"""OpenAI-compatible chat completions transport over plain HTTPS."""
import json
import logging
import uuid
from typing import Optional, Sequence

import httpx
from pydantic import ValidationError

from memchat.errors import (
    ChatAPIError,
    ChatTransportError,
    RequestBuildError,
    ResponseDecodeError,
)
from memchat.models import ChatCompletionRequest, ChatCompletionResponse, ChatMessage
from memchat.providers.base import ChatTransport

logger = logging.getLogger(__name__)

# Longest slice of a non-JSON error body echoed back in ChatAPIError
MAX_ERROR_BODY_CHARS = 500


class OpenAIChatTransport(ChatTransport):
    """Synchronous transport for a chat completions endpoint.

    One POST per call with bearer authorization. The first choice is
    returned; there is no streaming and no retry.
    """

    def __init__(
        self,
        api_key: str,
        endpoint: str,
        model: str,
        timeout: Optional[float] = None,
        http_client: Optional[httpx.Client] = None,
    ):
        self.api_key = api_key
        self.endpoint = endpoint
        self.model = model
        self._owns_client = http_client is None
        self._client = http_client or httpx.Client(timeout=timeout)

    def close(self) -> None:
        """Close the underlying HTTP client if this transport created it."""
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "OpenAIChatTransport":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _headers(self) -> dict:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    def _build_body(self, messages: Sequence[ChatMessage]) -> bytes:
        try:
            request = ChatCompletionRequest(model=self.model, messages=list(messages))
            return request.model_dump_json().encode("utf-8")
        except (ValidationError, TypeError, ValueError) as e:
            raise RequestBuildError(f"Failed to build completion request: {e}") from e

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        """Extract the OpenAI-style error message, falling back to the raw body."""
        try:
            payload = response.json()
        except ValueError:
            payload = None
        if isinstance(payload, dict):
            error = payload.get("error")
            if isinstance(error, dict) and error.get("message"):
                return str(error["message"])
            if isinstance(error, str) and error:
                return error
        text = response.text.strip()
        return text[:MAX_ERROR_BODY_CHARS] or response.reason_phrase

    def send(self, messages: Sequence[ChatMessage]) -> str:
        """POST ``messages`` and return the first completion's text."""
        request_id = str(uuid.uuid4())[:8]
        body = self._build_body(messages)
        logger.debug(
            "[%s] POST %s model=%s messages=%d",
            request_id, self.endpoint, self.model, len(messages),
        )

        try:
            response = self._client.post(self.endpoint, content=body, headers=self._headers())
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.debug("[%s] Transport failure: %s", request_id, e)
            raise ChatTransportError(f"Request to {self.endpoint} failed: {e}") from e

        if response.status_code >= 400:
            message = self._error_message(response)
            logger.debug("[%s] HTTP %d: %s", request_id, response.status_code, message)
            raise ChatAPIError(response.status_code, message)

        try:
            parsed = ChatCompletionResponse.model_validate_json(response.content)
        except (ValidationError, json.JSONDecodeError) as e:
            raise ResponseDecodeError(f"Could not decode completion response: {e}") from e

        content = parsed.first_content()
        logger.debug(
            "[%s] Completion %s: %d chars", request_id, parsed.id or "(no id)", len(content),
        )
        return content
