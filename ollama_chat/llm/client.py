"""
Synchronous streaming client for the Ollama chat API.
"""

from __future__ import annotations

import sys
from collections.abc import Callable, Sequence
from typing import Any

import httpx

from ..logging_utils import ChatErrorHandler, ContextualLogger, log_operation
from .exceptions import (
    LLMConnectionError,
    LLMStatusError,
    RequestEncodingError,
    StreamingError,
)
from .models import ChatMessage, ChatRequest
from .streaming.parser import ChunkAccumulator, NDJSONStreamParser

DEFAULT_CHAT_URL = "http://localhost:11434/api/chat"
HTTP_OK = 200


def print_token(text: str) -> None:
    """Write a streamed token to stdout as soon as it arrives."""
    sys.stdout.write(text)
    sys.stdout.flush()


class OllamaChatClient:
    """
    HTTP client for the Ollama ``/api/chat`` endpoint.

    One ``stream_chat`` call is one attempt: there are no retries, and by
    default no timeout, so a silent server blocks the caller indefinitely.
    """

    def __init__(
        self,
        chat_url: str = DEFAULT_CHAT_URL,
        timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.chat_url = chat_url
        self.parser = NDJSONStreamParser()
        self.log = ContextualLogger({"chat_url": chat_url})
        self.client: httpx.Client = httpx.Client(timeout=timeout, transport=transport)

    def _encode_request(self, model: str, messages: Sequence[ChatMessage]) -> bytes:
        try:
            request = ChatRequest(model=model, messages=list(messages), stream=True)
            return request.model_dump_json().encode("utf-8")
        except (ValueError, TypeError) as e:
            raise RequestEncodingError(
                f"error marshalling JSON: {e}", model=model
            ) from e

    @log_operation("ollama_chat_stream")
    def stream_chat(
        self,
        model: str,
        messages: Sequence[ChatMessage],
        on_token: Callable[[str], Any] | None = print_token,
    ) -> str:
        """
        Send the transcript and stream the reply.

        Args:
            model: Model identifier sent with the request
            messages: Full transcript, oldest first; not modified
            on_token: Called with each fragment's text as it arrives

        Returns:
            The concatenated reply text

        Raises:
            RequestEncodingError: The request could not be serialized
            LLMConnectionError: The server could not be reached
            LLMStatusError: The server answered with a non-200 status
            StreamingError: Reading the response body failed
        """
        body = self._encode_request(model, messages)
        request = self.client.build_request(
            "POST",
            self.chat_url,
            content=body,
            headers={"Content-Type": "application/json"},
        )

        try:
            response = self.client.send(request, stream=True)
        except httpx.HTTPError as e:
            raise LLMConnectionError(
                f"error sending request to Ollama: {e}", model=model
            ) from e

        try:
            if response.status_code != HTTP_OK:
                raise self._status_error(response, model)

            accumulator = ChunkAccumulator()
            self.parser.reset_stats()
            try:
                lines = self.parser.split_lines(response.iter_text())
                for chunk in self.parser.parse_lines(lines):
                    content = accumulator.add(chunk)
                    if on_token is not None:
                        on_token(content)
            except httpx.HTTPError as e:
                raise StreamingError(
                    f"error reading response stream: {e}", model=model
                ) from e

            self.log.bind(model=model).debug(
                "Stream finished",
                parser=self.parser.get_stats(),
                stats=accumulator.get_streaming_stats(),
            )
            return accumulator.content
        finally:
            response.close()

    def _status_error(self, response: httpx.Response, model: str) -> LLMStatusError:
        try:
            response.read()
            error_text = response.text
        except httpx.HTTPError as e:
            self.log.bind(model=model).debug(
                "Could not read error body", **ChatErrorHandler.describe(e)
            )
            error_text = ""

        status = f"{response.status_code} {response.reason_phrase}".strip()
        return LLMStatusError(
            f"received non-OK HTTP status: {status}, body: {error_text}",
            model=model,
            status_code=response.status_code,
            response_body=error_text,
        )

    def close(self) -> None:
        """Close the HTTP client."""
        self.client.close()

    def __enter__(self) -> OllamaChatClient:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
