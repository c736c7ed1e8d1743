"""
Error handling for Ollama chat operations.

Every failure surfaced by the streaming client is an ``LLMError`` subclass
carrying a ``kind`` tag:
- encode-error: the request could not be serialized
- transport-error: the HTTP exchange could not be started or completed
- http-error: the server answered with a non-200 status
- stream-read-error: reading the response body failed part way
"""

from __future__ import annotations


class LLMError(Exception):
    """Base LLM error with request context."""

    kind = "llm-error"

    def __init__(
        self,
        message: str,
        model: str,
        provider: str = "ollama",
        status_code: int | None = None,
        response_body: str | None = None,
    ):
        super().__init__(message)
        self.model = model
        self.provider = provider
        self.status_code = status_code
        self.response_body = response_body


class RequestEncodingError(LLMError):
    """The request envelope could not be built or serialized."""

    kind = "encode-error"


class LLMConnectionError(LLMError):
    """Connection refused, DNS failure, timeout or another transport fault."""

    kind = "transport-error"


class LLMStatusError(LLMError):
    """Server answered with a status other than 200."""

    kind = "http-error"

    def __init__(
        self,
        message: str,
        model: str,
        status_code: int,
        response_body: str,
        **kwargs,
    ):
        super().__init__(
            message,
            model,
            status_code=status_code,
            response_body=response_body,
            **kwargs,
        )


class StreamingError(LLMError):
    """The response body could not be read to the end."""

    kind = "stream-read-error"


class ChunkParseError(ValueError):
    """A single streamed line is not a valid response fragment.

    Logged and skipped by the parser, never raised to callers.
    """

    kind = "parse-error"

    def __init__(self, line: str, reason: str):
        super().__init__(f"Could not parse line {line!r}: {reason}")
        self.line = line
        self.reason = reason
