"""
Wire models for the Ollama ``/api/chat`` endpoint.

This module provides the pydantic models for:
- Chat messages (the transcript entries)
- The request envelope sent every turn
- The response fragments streamed back one per line
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

Role = Literal["user", "assistant"]


class MessageRole(Enum):
    """Roles a transcript entry can have."""
    USER = "user"
    ASSISTANT = "assistant"


class ChatMessage(BaseModel):
    """One transcript entry. Immutable once created."""
    model_config = ConfigDict(frozen=True)

    role: Role
    content: str


class ChatRequest(BaseModel):
    """Request envelope for a single chat turn."""
    model: str
    messages: list[ChatMessage]
    stream: bool = True


def _drop_nulls(data: Any) -> Any:
    """JSON nulls leave a field at its zero value instead of failing."""
    if isinstance(data, dict):
        return {key: value for key, value in data.items() if value is not None}
    return data


class FragmentMessage(BaseModel):
    """Partial assistant message carried by a response fragment."""
    role: str = MessageRole.ASSISTANT.value
    content: str = ""

    @model_validator(mode="before")
    @classmethod
    def null_fields_to_defaults(cls, data: Any) -> Any:
        return _drop_nulls(data)


class ChatResponseChunk(BaseModel):
    """
    One line of a streamed ``/api/chat`` response.

    Every field may be missing or null on the wire; such fields keep their
    zero value. ``done`` must be a real JSON boolean. The final fragment
    (``done=True``) also carries generation statistics, of which only a few
    are kept.
    """
    model: str = ""
    created_at: str = ""
    message: FragmentMessage = Field(default_factory=FragmentMessage)
    done: bool = Field(default=False, strict=True)

    done_reason: str | None = None
    eval_count: int | None = None
    total_duration: int | None = None

    @model_validator(mode="before")
    @classmethod
    def null_fields_to_defaults(cls, data: Any) -> Any:
        return _drop_nulls(data)
