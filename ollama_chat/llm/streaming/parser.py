"""
Newline-delimited JSON parser for Ollama chat streams, plus reply accumulation.
"""

from __future__ import annotations

import time
from collections.abc import Iterable, Iterator

import structlog
from pydantic import ValidationError

from ..exceptions import ChunkParseError
from ..models import ChatResponseChunk
from .models import AccumulatorState, StreamingStats

logger = structlog.get_logger(__name__)


class NDJSONStreamParser:
    """Turns response lines into fragments, skipping blank and malformed lines."""

    def __init__(self):
        self.stats = {
            'total_lines': 0,
            'empty_lines': 0,
            'parse_errors': 0,
            'fragments': 0,
        }

    def parse_lines(self, lines: Iterable[str]) -> Iterator[ChatResponseChunk]:
        """
        Lazily parse a line iterator into response fragments.

        The sequence ends after the first fragment with ``done`` set, or when
        ``lines`` is exhausted. Lines left unread after ``done`` are never
        pulled from the iterator. Errors raised by ``lines`` itself propagate.
        """
        for line in lines:
            self.stats['total_lines'] += 1

            if not line:
                self.stats['empty_lines'] += 1
                continue

            try:
                chunk = self.parse_line(line)
            except ChunkParseError as e:
                self.stats['parse_errors'] += 1
                logger.warning(
                    "Could not parse stream line", line=e.line, error=e.reason
                )
                continue

            self.stats['fragments'] += 1
            yield chunk

            if chunk.done:
                return

    @staticmethod
    def split_lines(text_chunks: Iterable[str]) -> Iterator[str]:
        """
        Split decoded body text into lines on ``\\n`` only.

        Other Unicode line breaks (U+0085, U+2028, ...) may appear unescaped
        inside JSON strings and are left alone. One trailing ``\\r`` is
        dropped from each line. A final line without ``\\n`` is still yielded.
        """
        buffer = ""
        for text in text_chunks:
            buffer += text

            while "\n" in buffer:
                line, buffer = buffer.split("\n", 1)
                yield line.removesuffix("\r")

        if buffer:
            yield buffer.removesuffix("\r")

    @staticmethod
    def parse_line(line: str) -> ChatResponseChunk:
        """Parse a single line, raising ChunkParseError if it is not a fragment."""
        try:
            return ChatResponseChunk.model_validate_json(line)
        except ValidationError as e:
            reason = "; ".join(err["msg"] for err in e.errors()) or str(e)
            raise ChunkParseError(line, reason) from e

    def get_stats(self) -> dict[str, int]:
        """Get parsing statistics for monitoring."""
        return self.stats.copy()

    def reset_stats(self) -> None:
        """Reset statistics counters."""
        self.stats = {
            'total_lines': 0,
            'empty_lines': 0,
            'parse_errors': 0,
            'fragments': 0,
        }


class ChunkAccumulator:
    """Collects fragment content into the full reply for one turn."""

    def __init__(self):
        self.state = AccumulatorState()
        self._last_chunk: ChatResponseChunk | None = None

    def add(self, chunk: ChatResponseChunk) -> str:
        """Append a fragment's content and return that content."""
        self.state.update_timing(time.time())
        content = chunk.message.content
        self.state.buffer.write(content)
        if chunk.done:
            self.state.done = True
        self._last_chunk = chunk
        return content

    @property
    def content(self) -> str:
        """Reply text accumulated so far."""
        return self.state.buffer.getvalue()

    @property
    def done(self) -> bool:
        return self.state.done

    def get_streaming_stats(self) -> StreamingStats:
        """Summarize the turn, including server-side figures from the final fragment."""
        last = self._last_chunk
        server_duration_ms = None
        if last is not None and last.total_duration is not None:
            # Ollama reports durations in nanoseconds
            server_duration_ms = round(last.total_duration / 1_000_000, 2)

        return StreamingStats(
            total_chunks=self.state.chunk_count,
            content_chars=len(self.content),
            total_duration=self.state.streaming_duration,
            completed=self.state.done,
            done_reason=last.done_reason if last is not None else None,
            eval_count=last.eval_count if last is not None else None,
            server_duration_ms=server_duration_ms,
        )
