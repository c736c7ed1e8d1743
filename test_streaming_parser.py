#!/usr/bin/env python3
"""
Tests for newline-delimited JSON fragment parsing and reply accumulation.
"""

import pytest

from ollama_chat.llm.exceptions import ChunkParseError
from ollama_chat.llm.streaming.parser import ChunkAccumulator, NDJSONStreamParser

HELLO_LINES = [
    '{"message":{"content":"Hel"},"done":false}',
    '{"message":{"content":"lo"},"done":false}',
    '{"message":{"content":""},"done":true}',
]


def collect(lines):
    parser = NDJSONStreamParser()
    accumulator = ChunkAccumulator()
    for chunk in parser.parse_lines(lines):
        accumulator.add(chunk)
    return parser, accumulator


class TestNDJSONStreamParser:
    """Test fragment parsing over a line sequence."""

    def test_hello_sequence(self):
        """Three fragments ending in done produce exactly 'Hello'."""
        parser, accumulator = collect(HELLO_LINES)
        assert accumulator.content == "Hello"
        assert accumulator.done is True
        assert parser.get_stats()["fragments"] == 3

    def test_stops_after_done(self):
        """Lines after the done fragment are never read."""
        pulled = []

        def lines():
            for line in HELLO_LINES + ['{"message":{"content":" world"},"done":false}']:
                pulled.append(line)
                yield line

        _, accumulator = collect(lines())
        assert accumulator.content == "Hello"
        assert len(pulled) == 3

    def test_empty_lines_skipped(self):
        """Zero-length lines do not change the reply."""
        lines = ["", HELLO_LINES[0], "", "", HELLO_LINES[1], HELLO_LINES[2]]
        parser, accumulator = collect(lines)
        assert accumulator.content == "Hello"
        assert parser.get_stats()["empty_lines"] == 3
        assert parser.get_stats()["parse_errors"] == 0

    def test_malformed_line_skipped(self):
        """A bad line is counted and later valid lines still accumulate."""
        lines = [HELLO_LINES[0], '{"message": {"content": ', HELLO_LINES[1], HELLO_LINES[2]]
        parser, accumulator = collect(lines)
        assert accumulator.content == "Hello"
        assert parser.get_stats()["parse_errors"] == 1

    def test_wrong_shape_is_parse_error(self):
        """Valid JSON that is not a fragment object is skipped too."""
        lines = ["[1, 2, 3]", '{"done": "maybe"}', HELLO_LINES[0], HELLO_LINES[2]]
        parser, accumulator = collect(lines)
        assert accumulator.content == "Hel"
        assert parser.get_stats()["parse_errors"] == 2

    def test_end_of_stream_without_done(self):
        """The sequence also ends when the lines run out."""
        _, accumulator = collect(HELLO_LINES[:2])
        assert accumulator.content == "Hello"
        assert accumulator.done is False

    def test_missing_fields_take_zero_values(self):
        """A fragment without message or metadata parses with defaults."""
        chunk = NDJSONStreamParser.parse_line('{"done": true}')
        assert chunk.done is True
        assert chunk.message.content == ""
        assert chunk.message.role == "assistant"
        assert chunk.model == ""

    def test_full_ollama_fragment(self):
        """Extra server fields are accepted and final statistics kept."""
        chunk = NDJSONStreamParser.parse_line(
            '{"model":"llama3.2:3b","created_at":"2024-10-01T12:00:00Z",'
            '"message":{"role":"assistant","content":""},"done":true,'
            '"done_reason":"stop","total_duration":2500000000,"eval_count":42,'
            '"prompt_eval_count":10}'
        )
        assert chunk.model == "llama3.2:3b"
        assert chunk.done_reason == "stop"
        assert chunk.eval_count == 42

    def test_non_boolean_done_is_parse_error(self):
        """done must be a JSON boolean; strings and numbers are rejected."""
        lines = [
            '{"message":{"content":"x"},"done":"true"}',
            '{"message":{"content":"y"},"done":1}',
            HELLO_LINES[0],
            HELLO_LINES[2],
        ]
        parser, accumulator = collect(lines)
        assert accumulator.content == "Hel"
        assert parser.get_stats()["parse_errors"] == 2

    def test_null_message_is_empty(self):
        """A null message reads as empty content."""
        chunk = NDJSONStreamParser.parse_line('{"message":null,"done":true}')
        assert chunk.done is True
        assert chunk.message.content == ""

    def test_null_fields_take_zero_values(self):
        chunk = NDJSONStreamParser.parse_line(
            '{"model":null,"message":{"role":null,"content":"hi"},"done":false}'
        )
        assert chunk.model == ""
        assert chunk.message.role == "assistant"
        assert chunk.message.content == "hi"

    def test_parse_line_raises_chunk_parse_error(self):
        """parse_line reports the offending line."""
        with pytest.raises(ChunkParseError) as exc_info:
            NDJSONStreamParser.parse_line("not json")
        assert exc_info.value.line == "not json"
        assert exc_info.value.kind == "parse-error"

    def test_reset_stats(self):
        parser, _ = collect(HELLO_LINES)
        parser.reset_stats()
        assert parser.get_stats() == {
            "total_lines": 0,
            "empty_lines": 0,
            "parse_errors": 0,
            "fragments": 0,
        }


class TestChunkAccumulator:
    """Test reply accumulation and statistics."""

    def test_streaming_stats(self):
        """Stats report fragment count and server-side figures."""
        lines = HELLO_LINES[:2] + [
            '{"message":{"content":""},"done":true,"done_reason":"stop",'
            '"eval_count":7,"total_duration":1500000}'
        ]
        _, accumulator = collect(lines)
        stats = accumulator.get_streaming_stats()
        assert stats.total_chunks == 3
        assert stats.content_chars == 5
        assert stats.completed is True
        assert stats.done_reason == "stop"
        assert stats.eval_count == 7
        assert stats.server_duration_ms == 1.5


class TestSplitLines:
    """Test framing of decoded body text into lines."""

    def test_splits_on_newline(self):
        lines = NDJSONStreamParser.split_lines(["a\nb\n", "c\n"])
        assert list(lines) == ["a", "b", "c"]

    def test_line_carried_across_chunks(self):
        """A line split between reads is yielded once, whole."""
        lines = NDJSONStreamParser.split_lines(['{"mess', 'age":{}}\n{"do', 'ne":true}\n'])
        assert list(lines) == ['{"message":{}}', '{"done":true}']

    def test_strips_carriage_return(self):
        lines = NDJSONStreamParser.split_lines(["a\r\nb\r", "\n"])
        assert list(lines) == ["a", "b"]

    def test_final_line_without_newline(self):
        lines = NDJSONStreamParser.split_lines(["a\nlast"])
        assert list(lines) == ["a", "last"]

    def test_keeps_blank_lines(self):
        """Empty lines are passed on so the parser can count them."""
        lines = NDJSONStreamParser.split_lines(["\na\n\n"])
        assert list(lines) == ["", "a", ""]

    def test_other_line_breaks_kept(self):
        """U+0085 and U+2028 inside a line do not end it."""
        lines = NDJSONStreamParser.split_lines(["a\u0085b\u2028c\n"])
        assert list(lines) == ["a\u0085b\u2028c"]
