# ollama_chat/history/transcript.py
from __future__ import annotations

from collections.abc import Iterator

from ollama_chat.llm.models import ChatMessage, MessageRole


class Transcript:
    """
    Ordered user/assistant messages for one session.

    Entries are only appended, except that a turn which fails removes the
    user message it added.
    """

    def __init__(self) -> None:
        self._messages: list[ChatMessage] = []

    def add_user_message(self, content: str) -> ChatMessage:
        message = ChatMessage(role=MessageRole.USER.value, content=content)
        self._messages.append(message)
        return message

    def add_assistant_message(self, content: str) -> ChatMessage:
        message = ChatMessage(role=MessageRole.ASSISTANT.value, content=content)
        self._messages.append(message)
        return message

    def rollback_user_message(self) -> ChatMessage | None:
        """
        Remove the trailing user message, if there is one.

        Returns the removed message, or None when the transcript is empty or
        ends with an assistant reply.
        """
        if not self._messages or self._messages[-1].role != MessageRole.USER.value:
            return None
        return self._messages.pop()

    @property
    def messages(self) -> tuple[ChatMessage, ...]:
        """Read-only snapshot handed to the streaming client."""
        return tuple(self._messages)

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[ChatMessage]:
        return iter(self.messages)
