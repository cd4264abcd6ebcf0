"""Conversion pipeline driver.

This module normalizes byte sources into a lazy stream of byte values and
drives them through the decoder and the emitter, collecting diagnostics and
metrics into a ``ConversionResult``.
"""

import time
from typing import Any, BinaryIO, Dict, Iterable, Iterator, Optional, Union

from utf2uc.shared.config import ConversionConfig, DEFAULT_BUFFER_SIZE
from utf2uc.shared.errors import EmptyInputError, InputReadError
from utf2uc.shared.logging import get_logger
from utf2uc.shared.result import ConversionResult, DiagnosticSeverity
from utf2uc.tools.debugging import DebugTrace

from .decoder import Codepoint, DecodeError, Utf8Decoder
from .emitter import Utf16Emitter

# Type definitions for input data
InputType = Union[bytes, bytearray, memoryview, BinaryIO, Iterable[int]]

MS_PER_SECOND = 1000


def iter_input_bytes(
    source: InputType, buffer_size: int = DEFAULT_BUFFER_SIZE
) -> Iterator[int]:
    """Yield the byte values of ``source`` one at a time.

    Args:
        source: Bytes-like object, binary file-like object or iterable of ints
        buffer_size: Chunk size used when reading file-like objects

    Raises:
        TypeError: If the source is text rather than bytes
        InputReadError: If reading a file-like source fails
    """
    if isinstance(source, str):
        raise TypeError("Input must be bytes, not str")

    if isinstance(source, (bytes, bytearray, memoryview)):
        yield from bytes(source)
        return

    if hasattr(source, "read"):
        while True:
            try:
                chunk = source.read(buffer_size)
            except OSError as e:
                raise InputReadError(f"Input file read error: {e}") from e
            if not chunk:
                return
            if isinstance(chunk, str):
                raise TypeError("Input file must be opened in binary mode")
            yield from chunk
        return

    yield from source


class ConversionStreamProcessor:
    """Drives one byte source through decoder and emitter into a sink.

    The processor is single-use per run but may be reused for successive
    runs; each call to ``process`` builds a fresh decoder and emitter.
    """

    def __init__(
        self,
        config: Optional[ConversionConfig] = None,
        trace: Optional[DebugTrace] = None,
        correlation_id: Optional[str] = None,
    ) -> None:
        """Initialize the processor.

        Args:
            config: Conversion configuration
            trace: Optional full-verbosity trace sink shared by decoder and emitter
            correlation_id: Optional run identifier for logs and diagnostics
        """
        self.config = config or ConversionConfig()
        self.trace = trace
        self.correlation_id = correlation_id or self.config.correlation_id
        self.logger = get_logger(__name__, self.correlation_id, "stream_processor")

    def process(self, source: InputType, sink: BinaryIO) -> ConversionResult:
        """Convert every byte of ``source`` and write UTF-16 to ``sink``.

        Returns:
            ConversionResult with structural diagnostics and metrics

        Raises:
            EmptyInputError: If the source holds no bytes (nothing is written)
            EmissionError: If a codepoint cannot be written or the sink fails
        """
        start_time = time.perf_counter()
        result = ConversionResult(config=self.config, correlation_id=self.correlation_id)
        metrics = result.metrics

        byte_stream = iter_input_bytes(source, self.config.buffer_size)
        first = next(byte_stream, None)
        if first is None:
            self.logger.error("Empty input file")
            raise EmptyInputError("Empty input file")

        decoder = Utf8Decoder(self.config, trace=self.trace)
        emitter = Utf16Emitter(sink, self.config.byte_order, trace=self.trace)
        emitter.write_bom()

        self.logger.info(
            "Starting conversion",
            extra={
                "byte_order": self.config.byte_order.value,
                "newline_convert": self.config.newline_convert,
            }
        )

        try:
            for event in decoder.decode(_prepend(first, byte_stream)):
                if isinstance(event, Codepoint):
                    emitter.emit(event.value)
                    metrics.codepoints_decoded += 1
                else:
                    self._report(result, event)
        finally:
            metrics.bytes_read = decoder.position
            metrics.lines = decoder.line
            metrics.units_written = emitter.units_written
            metrics.processing_time_ms = (
                time.perf_counter() - start_time
            ) * MS_PER_SECOND

        self.logger.info(
            "Conversion finished",
            extra={
                "bytes_read": metrics.bytes_read,
                "units_written": metrics.units_written,
                "structural_errors": metrics.structural_errors,
                "processing_time_ms": metrics.processing_time_ms,
            }
        )
        return result

    def _report(self, result: ConversionResult, error: DecodeError) -> None:
        result.metrics.structural_errors += 1
        self.logger.warning(
            error.format(),
            extra={
                "position": error.position,
                "byte": error.byte,
                "state": error.state.name,
                "line": error.line,
            }
        )
        details: Dict[str, Any] = {"state": error.state.name}
        if error.byte is not None:
            details["byte"] = error.byte
        result.add_diagnostic(
            DiagnosticSeverity.ERROR,
            error.message,
            "decoder",
            position={"byte": error.position, "line": error.line},
            details=details,
        )


def _prepend(first: int, rest: Iterator[int]) -> Iterator[int]:
    yield first
    yield from rest
