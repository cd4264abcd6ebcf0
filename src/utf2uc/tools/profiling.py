"""Performance profiling tools for utf2uc conversions.

Provides wall-clock timing and resident memory tracking around conversion
runs, with per-session throughput figures and an aggregate report.
"""

import time
import uuid
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional

import psutil

from utf2uc.shared.logging import get_logger


@dataclass
class ProfilingSession:
    """Container for one profiled conversion run."""

    session_id: str
    start_time: float
    end_time: float = 0.0
    input_size: int = 0  # bytes
    memory_start: int = 0  # bytes
    memory_end: int = 0  # bytes
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def total_duration_ms(self) -> float:
        """Total session duration in milliseconds."""
        return (self.end_time - self.start_time) * 1000

    @property
    def memory_delta(self) -> int:
        """Resident memory change in bytes."""
        return self.memory_end - self.memory_start

    @property
    def throughput_mb_per_s(self) -> float:
        """Processing throughput in MB/s."""
        duration_s = self.end_time - self.start_time
        if duration_s <= 0:
            return 0.0
        return (self.input_size / (1024 * 1024)) / duration_s

    def to_dict(self) -> Dict[str, Any]:
        return {
            "session_id": self.session_id,
            "duration_ms": self.total_duration_ms,
            "input_size": self.input_size,
            "memory_delta": self.memory_delta,
            "throughput_mb_per_s": self.throughput_mb_per_s,
            "metadata": self.metadata,
        }


@dataclass
class PerformanceReport:
    """Aggregate over profiled sessions."""

    sessions: List[ProfilingSession]
    generation_time: float

    @property
    def session_count(self) -> int:
        return len(self.sessions)

    @property
    def average_duration_ms(self) -> float:
        """Average processing duration across sessions."""
        if not self.sessions:
            return 0.0
        return sum(s.total_duration_ms for s in self.sessions) / len(self.sessions)

    @property
    def average_throughput_mb_per_s(self) -> float:
        """Average throughput across sessions."""
        if not self.sessions:
            return 0.0
        return sum(s.throughput_mb_per_s for s in self.sessions) / len(self.sessions)

    @property
    def peak_memory_delta(self) -> int:
        if not self.sessions:
            return 0
        return max(s.memory_delta for s in self.sessions)

    def format_text(self) -> str:
        """Render the report for the diagnostic stream."""
        lines = [f"Profiled {self.session_count} conversion(s)"]
        for session in self.sessions:
            lines.append(
                f"  {session.session_id}: {session.total_duration_ms:.1f}ms, "
                f"{session.input_size} bytes, "
                f"{session.throughput_mb_per_s:.2f} MB/s, "
                f"memory delta {session.memory_delta} bytes"
            )
        return "\n".join(lines)


class ConversionProfiler:
    """Profiler for conversion runs.

    Examples:
        >>> import io
        >>> from utf2uc.api import convert_stream
        >>> profiler = ConversionProfiler()
        >>> with profiler.profile("run-1", input_size=2) as session:
        ...     result = convert_stream(b"ok", io.BytesIO())
        >>> profiler.generate_report().session_count
        1
    """

    def __init__(self, enable_memory_tracking: bool = True) -> None:
        """Initialize profiler.

        Args:
            enable_memory_tracking: Whether to sample resident memory
        """
        self.enable_memory_tracking = enable_memory_tracking
        self.sessions: List[ProfilingSession] = []
        self.logger = get_logger(__name__, None, "conversion_profiler")
        self._process = psutil.Process() if enable_memory_tracking else None

    def _memory_rss(self) -> int:
        if self._process is None:
            return 0
        return self._process.memory_info().rss

    @contextmanager
    def profile(
        self, session_id: Optional[str] = None, input_size: int = 0
    ) -> Iterator[ProfilingSession]:
        """Profile the enclosed block as one session.

        The session is recorded even when the block raises.
        """
        session = ProfilingSession(
            session_id=session_id or uuid.uuid4().hex[:8],
            start_time=time.perf_counter(),
            input_size=input_size,
            memory_start=self._memory_rss(),
        )
        try:
            yield session
        finally:
            session.end_time = time.perf_counter()
            session.memory_end = self._memory_rss()
            self.sessions.append(session)
            self.logger.debug(
                "Profiling session finished",
                extra=session.to_dict(),
            )

    def generate_report(self) -> PerformanceReport:
        return PerformanceReport(sessions=list(self.sessions), generation_time=time.time())

    def clear(self) -> None:
        self.sessions.clear()
