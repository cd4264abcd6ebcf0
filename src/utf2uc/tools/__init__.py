"""Developer tools for utf2uc.

This module provides the full-verbosity conversion trace and conversion
profiling.
"""

from .debugging import DebugTrace, TraceCounters, open_trace
from .profiling import ConversionProfiler, PerformanceReport, ProfilingSession

__all__ = [
    "DebugTrace",
    "TraceCounters",
    "open_trace",
    "ConversionProfiler",
    "PerformanceReport",
    "ProfilingSession",
]
