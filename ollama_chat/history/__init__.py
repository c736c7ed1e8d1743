"""In-memory conversation history."""

from .transcript import Transcript

__all__ = ["Transcript"]
