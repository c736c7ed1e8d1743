"""
Streaming-specific dataclasses for reply accumulation.
"""

from __future__ import annotations

import io
import time
from dataclasses import dataclass, field


@dataclass
class AccumulatorState:
    """Mutable state for one turn's reply."""
    buffer: io.StringIO = field(default_factory=io.StringIO)
    chunk_count: int = 0
    first_chunk_time: float | None = None
    last_chunk_time: float | None = None
    done: bool = False

    def update_timing(self, timestamp: float | None = None) -> None:
        """Update timing information for latency tracking."""
        timestamp = time.time() if timestamp is None else timestamp
        if self.first_chunk_time is None:
            self.first_chunk_time = timestamp
        self.last_chunk_time = timestamp
        self.chunk_count += 1

    @property
    def streaming_duration(self) -> float:
        """Time between the first and the last fragment."""
        if self.first_chunk_time is None or self.last_chunk_time is None:
            return 0.0
        return self.last_chunk_time - self.first_chunk_time


@dataclass(frozen=True)
class StreamingStats:
    """Per-turn statistics, logged at debug level."""
    total_chunks: int
    content_chars: int
    total_duration: float
    completed: bool
    done_reason: str | None = None
    eval_count: int | None = None
    server_duration_ms: float | None = None
