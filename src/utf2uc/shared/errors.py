"""Exception taxonomy for UTF-8 to UTF-16 conversion.

Structural decode problems are not exceptions: they are reported as
``DecodeError`` events and scanning continues. Everything here is fatal to
the current run.
"""

from typing import Optional


class ConversionError(Exception):
    """Base exception for fatal conversion failures."""


class SetupError(ConversionError):
    """Raised before any processing when a resource cannot be opened."""

    def __init__(self, message: str, path: Optional[str] = None) -> None:
        super().__init__(message)
        self.path = path


class InputOpenError(SetupError):
    """The input byte source cannot be opened."""


class OutputOpenError(SetupError):
    """The output sink cannot be created."""


class TraceOpenError(SetupError):
    """The full-verbosity trace file cannot be created."""


class EmptyInputError(ConversionError):
    """The input stream held no bytes; nothing was written."""


class EmissionError(ConversionError):
    """A codepoint could not be written as UTF-16 units."""

    def __init__(self, message: str, codepoint: Optional[int] = None) -> None:
        super().__init__(message)
        self.codepoint = codepoint


class SurrogateRangeRejected(EmissionError):
    """Codepoint lies in 0xD800..0xDFFF and cannot be written directly."""


class CodepointTooLarge(EmissionError):
    """Codepoint exceeds 0x10FFFF."""


class InvalidCodepoint(EmissionError):
    """Codepoint is negative."""


class OutputWriteError(EmissionError):
    """The output sink refused or truncated a write."""


class InputReadError(ConversionError):
    """Reading the input byte source failed part-way through a run."""
