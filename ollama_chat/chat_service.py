"""
Chat Service for the Ollama chat client.

Runs one conversation turn at a time:
- records the user's message in the transcript
- streams the assistant reply through the LLM client
- records the reply, or rolls the user's message back if the turn failed
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, TextIO

from ollama_chat.history.transcript import Transcript
from ollama_chat.logging_utils import ChatErrorHandler

if TYPE_CHECKING:                                        # pragma: no cover
    from ollama_chat.llm.client import OllamaChatClient


logger = logging.getLogger(__name__)

BOT_PREFIX = "Bot: "
ERROR_MESSAGE = "\nSorry, I encountered an error. Please check the console."


class ChatService:
    """
    Conversation orchestrator.

    Owns the transcript. The LLM client only ever sees a read-only snapshot
    of it, and turns never overlap.
    """

    def __init__(
        self,
        llm_client: OllamaChatClient,
        model: str,
        transcript: Transcript | None = None,
        output: TextIO | None = None,
    ) -> None:
        self.llm_client = llm_client
        self.model = model
        self.transcript = transcript if transcript is not None else Transcript()
        self.output = output if output is not None else sys.stdout

    def _write(self, text: str) -> None:
        self.output.write(text)
        self.output.flush()

    def send(self, user_input: str) -> str | None:
        """
        Run one turn for ``user_input``.

        Returns the assistant reply, or None if the turn failed. Failures are
        logged and reported to the user but never raised.
        """
        self.transcript.add_user_message(user_input)

        self._write(BOT_PREFIX)
        try:
            reply = self.llm_client.stream_chat(
                self.model, self.transcript.messages, on_token=self._write
            )
        except Exception as e:
            error_kind = ChatErrorHandler.classify_error(e)
            logger.error(f"Error getting response from Ollama ({error_kind}): {e}")
            print(ERROR_MESSAGE, file=self.output, flush=True)
            self.transcript.rollback_user_message()
            return None

        self.transcript.add_assistant_message(reply)
        print(file=self.output, flush=True)
        return reply
