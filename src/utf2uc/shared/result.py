"""Result objects and diagnostic types for UTF-8 to UTF-16 conversion.

This module defines the result object returned by every conversion run,
carrying the structural diagnostics reported along the way and the run's
performance metrics.
"""

import time
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, List, Optional

from .config import ConversionConfig


class DiagnosticSeverity(Enum):
    """Severity levels for diagnostic entries."""

    DEBUG = auto()      # Debug-level information
    INFO = auto()       # Informational messages
    WARNING = auto()    # Warnings about potential issues
    ERROR = auto()      # Structural errors that were skipped over
    CRITICAL = auto()   # Fatal errors that ended the run


@dataclass
class DiagnosticEntry:
    """Single diagnostic entry with context information."""

    severity: DiagnosticSeverity
    message: str
    component: str
    position: Optional[Dict[str, int]] = None
    details: Optional[Dict[str, Any]] = None
    timestamp: float = field(default_factory=time.time)
    correlation_id: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate diagnostic entry."""
        if not self.message:
            raise ValueError("Diagnostic message cannot be empty")
        if not self.component:
            raise ValueError("Diagnostic component cannot be empty")


@dataclass
class ConversionMetrics:
    """Counters and timings for a conversion run."""

    processing_time_ms: float = 0.0
    memory_used_bytes: int = 0
    bytes_read: int = 0
    codepoints_decoded: int = 0
    units_written: int = 0
    structural_errors: int = 0
    lines: int = 0

    @property
    def bytes_per_second(self) -> float:
        """Calculate input bytes processed per second."""
        if self.processing_time_ms <= 0:
            return 0.0
        return (self.bytes_read * 1000.0) / self.processing_time_ms

    @property
    def error_rate(self) -> float:
        """Structural errors per input byte."""
        if self.bytes_read == 0:
            return 0.0
        return self.structural_errors / self.bytes_read

    @property
    def output_bytes(self) -> int:
        """Bytes written to the sink, two per unit."""
        return self.units_written * 2


@dataclass
class ConversionResult:
    """Outcome of a conversion run.

    A run that raised never produces a result; ``success`` is False only when
    structural errors were skipped over while converting.
    """

    config: ConversionConfig
    metrics: ConversionMetrics = field(default_factory=ConversionMetrics)
    diagnostics: List[DiagnosticEntry] = field(default_factory=list)
    correlation_id: Optional[str] = None

    @property
    def success(self) -> bool:
        return not self.errors

    @property
    def errors(self) -> List[DiagnosticEntry]:
        """Diagnostics at ERROR severity or above."""
        return [
            diag for diag in self.diagnostics
            if diag.severity in (DiagnosticSeverity.ERROR, DiagnosticSeverity.CRITICAL)
        ]

    def add_diagnostic(
        self,
        severity: DiagnosticSeverity,
        message: str,
        component: str,
        position: Optional[Dict[str, int]] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> DiagnosticEntry:
        """Append a diagnostic tagged with this run's correlation ID."""
        entry = DiagnosticEntry(
            severity=severity,
            message=message,
            component=component,
            position=position,
            details=details,
            correlation_id=self.correlation_id,
        )
        self.diagnostics.append(entry)
        return entry

    def summary(self) -> str:
        """One-line human readable summary of the run."""
        metrics = self.metrics
        text = (
            f"{metrics.bytes_read} bytes read, "
            f"{metrics.codepoints_decoded} codepoints, "
            f"{metrics.units_written} units written "
            f"({self.config.byte_order.value}-endian), "
            f"{metrics.structural_errors} errors, "
            f"{metrics.processing_time_ms:.1f}ms"
        )
        if metrics.memory_used_bytes:
            text += f", memory delta {metrics.memory_used_bytes} bytes"
        return text
