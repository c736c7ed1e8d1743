"""
Streaming support for the chat client.

This module contains:
- Newline-delimited JSON fragment parsing
- Reply accumulation and per-turn statistics
"""

from .parser import ChunkAccumulator, NDJSONStreamParser

__all__ = ["ChunkAccumulator", "NDJSONStreamParser"]
