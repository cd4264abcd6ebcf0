"""Shared utilities for utf2uc.

This module provides shared data structures, configuration objects, result
types, the exception taxonomy and logging used across all processing layers.
"""

from .config import (
    ByteOrder,
    ConfigError,
    ConfigValidationError,
    ConversionConfig,
    DebugLevel,
)
from .errors import (
    CodepointTooLarge,
    ConversionError,
    EmissionError,
    EmptyInputError,
    InputOpenError,
    InputReadError,
    InvalidCodepoint,
    OutputOpenError,
    OutputWriteError,
    SetupError,
    SurrogateRangeRejected,
    TraceOpenError,
)
from .logging import (
    CorrelationLogger,
    configure_logging,
    reset_logging,
    get_logger,
)
from .result import (
    ConversionMetrics,
    ConversionResult,
    DiagnosticEntry,
    DiagnosticSeverity,
)

__all__ = [
    "ByteOrder",
    "ConfigError",
    "ConfigValidationError",
    "ConversionConfig",
    "DebugLevel",
    "CodepointTooLarge",
    "ConversionError",
    "EmissionError",
    "EmptyInputError",
    "InputOpenError",
    "InputReadError",
    "InvalidCodepoint",
    "OutputOpenError",
    "OutputWriteError",
    "SetupError",
    "SurrogateRangeRejected",
    "TraceOpenError",
    "CorrelationLogger",
    "configure_logging",
    "reset_logging",
    "get_logger",
    "ConversionMetrics",
    "ConversionResult",
    "DiagnosticEntry",
    "DiagnosticSeverity",
]
