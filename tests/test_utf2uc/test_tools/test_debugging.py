"""Tests for the conversion trace."""

import io

import pytest

from utf2uc.shared.errors import TraceOpenError
from utf2uc.tools.debugging import DebugTrace, open_trace


class TestDebugTrace:
    """Test trace line formats and counters."""

    def test_byte_line(self):
        trace = DebugTrace(io.StringIO())

        trace.byte(3, 17, 0xC3, "SCANNING")

        assert trace.lines() == ["Line: 3, UTF char counter: 17, UTF-8 char: c3, State: SCANNING"]
        assert trace.counters.bytes == 1

    def test_codepoint_and_unit_lines(self):
        """Test codepoint and unit records."""
        trace = DebugTrace(io.StringIO())

        trace.codepoint(0x1F600)
        trace.unit(b"\xd8\x3d")
        trace.unit(b"\xde\x00")

        assert trace.lines() == [
            "  --> Unicode char: 1f600",
            "--> d8 3d",
            "--> de 00",
        ]
        assert trace.counters.codepoints == 1
        assert trace.counters.units == 2

    def test_lines_requires_in_memory_stream(self, tmp_path):
        with (tmp_path / "trace.dbg").open("w") as stream:
            trace = DebugTrace(stream)

            with pytest.raises(TypeError, match="does not keep its contents"):
                trace.lines()


class TestOpenTrace:
    """Test trace file lifecycle."""

    def test_writes_and_closes(self, tmp_path):
        """Test that the trace file is written and closed on exit."""
        path = tmp_path / "utf2uc.dbg"

        with open_trace(path) as trace:
            trace.byte(1, 1, 0x41, "START")
            stream = trace.stream

        assert stream.closed
        assert path.read_text() == "Line: 1, UTF char counter: 1, UTF-8 char: 41, State: START\n"

    def test_closes_on_error(self, tmp_path):
        path = tmp_path / "utf2uc.dbg"

        with pytest.raises(RuntimeError):
            with open_trace(str(path)) as trace:
                stream = trace.stream
                raise RuntimeError("boom")

        assert stream.closed

    def test_cannot_create(self, tmp_path):
        """Test that an uncreatable trace file is reported as a setup error."""
        path = tmp_path / "missing" / "utf2uc.dbg"

        with pytest.raises(TraceOpenError) as exc_info:
            with open_trace(path):
                pass

        assert exc_info.value.path == str(path)
        assert "Cannot create full debug output file" in str(exc_info.value)
