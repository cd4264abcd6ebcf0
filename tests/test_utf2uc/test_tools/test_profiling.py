"""Tests for conversion profiling."""

import io

import pytest

from utf2uc.api.converter import convert_stream
from utf2uc.tools.profiling import (
    ConversionProfiler,
    PerformanceReport,
    ProfilingSession,
)


class TestProfilingSession:
    """Test session figures."""

    def test_derived_values(self):
        session = ProfilingSession(
            session_id="s1",
            start_time=10.0,
            end_time=10.5,
            input_size=1024 * 1024,
            memory_start=100,
            memory_end=150,
        )

        assert session.total_duration_ms == 500.0
        assert session.memory_delta == 50
        assert session.throughput_mb_per_s == 2.0
        assert session.to_dict()["session_id"] == "s1"

    def test_zero_duration_throughput(self):
        session = ProfilingSession(session_id="s1", start_time=1.0, end_time=1.0, input_size=10)

        assert session.throughput_mb_per_s == 0.0


class TestConversionProfiler:
    """Test the profiler context manager."""

    def test_profile_conversion(self):
        """Test that a profiled conversion is recorded."""
        profiler = ConversionProfiler()

        with profiler.profile("run-1", input_size=3) as session:
            convert_stream(b"abc", io.BytesIO())

        assert profiler.sessions == [session]
        assert session.end_time >= session.start_time
        assert session.memory_start > 0

    def test_session_recorded_when_block_raises(self):
        profiler = ConversionProfiler()

        with pytest.raises(ValueError):
            with profiler.profile("failing"):
                raise ValueError("boom")

        assert [s.session_id for s in profiler.sessions] == ["failing"]

    def test_generated_session_id(self):
        profiler = ConversionProfiler()

        with profiler.profile() as session:
            pass

        assert len(session.session_id) == 8

    def test_without_memory_tracking(self):
        """Test that memory figures stay zero when tracking is off."""
        profiler = ConversionProfiler(enable_memory_tracking=False)

        with profiler.profile("run-1") as session:
            pass

        assert session.memory_start == 0
        assert session.memory_delta == 0

    def test_clear(self):
        profiler = ConversionProfiler()
        with profiler.profile("run-1"):
            pass

        profiler.clear()

        assert profiler.generate_report().session_count == 0


class TestPerformanceReport:
    """Test aggregate report figures."""

    def test_empty_report(self):
        report = PerformanceReport(sessions=[], generation_time=0.0)

        assert report.average_duration_ms == 0.0
        assert report.average_throughput_mb_per_s == 0.0
        assert report.peak_memory_delta == 0
        assert report.format_text() == "Profiled 0 conversion(s)"

    def test_aggregates(self):
        """Test averages and peak memory across sessions."""
        sessions = [
            ProfilingSession("a", 0.0, 0.1, memory_start=0, memory_end=10),
            ProfilingSession("b", 0.0, 0.3, memory_start=0, memory_end=40),
        ]
        report = PerformanceReport(sessions=sessions, generation_time=0.0)

        assert report.average_duration_ms == pytest.approx(200.0)
        assert report.peak_memory_delta == 40

    def test_format_text(self):
        session = ProfilingSession("a", 0.0, 0.25, input_size=12, memory_start=0, memory_end=8)
        report = PerformanceReport(sessions=[session], generation_time=0.0)

        lines = report.format_text().splitlines()

        assert lines[0] == "Profiled 1 conversion(s)"
        assert lines[1].startswith("  a: 250.0ms, 12 bytes, ")
        assert lines[1].endswith("memory delta 8 bytes")
