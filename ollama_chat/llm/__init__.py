"""
Ollama chat API integration.

This package provides:
- pydantic wire models for the request envelope and streamed fragments
- A synchronous streaming client over httpx
- The error taxonomy for failed turns
"""

from __future__ import annotations

from .client import DEFAULT_CHAT_URL, OllamaChatClient
from .exceptions import (
    ChunkParseError,
    LLMConnectionError,
    LLMError,
    LLMStatusError,
    RequestEncodingError,
    StreamingError,
)
from .models import (
    ChatMessage,
    ChatRequest,
    ChatResponseChunk,
    FragmentMessage,
    MessageRole,
)

__all__ = [
    "DEFAULT_CHAT_URL",
    # Models
    "ChatMessage",
    "ChatRequest",
    "ChatResponseChunk",
    "FragmentMessage",
    "MessageRole",
    # Exceptions
    "ChunkParseError",
    "LLMConnectionError",
    "LLMError",
    "LLMStatusError",
    "RequestEncodingError",
    "StreamingError",
    # Client
    "OllamaChatClient",
]
