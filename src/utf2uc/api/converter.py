"""Conversion API with progressive disclosure.

Module-level functions cover the common cases: ``convert`` for in-memory
bytes, ``convert_stream`` for caller-owned streams and ``convert_file`` for
paths. ``Utf8ToUtf16Converter`` adds a reusable, reconfigurable instance with
run statistics.
"""

import io
import sys
from contextlib import ExitStack
from pathlib import Path
from typing import Any, BinaryIO, Callable, Dict, Optional, Union

from utf2uc.character.stream import ConversionStreamProcessor, InputType
from utf2uc.shared.config import ConversionConfig
from utf2uc.shared.errors import (
    ConversionError,
    InputOpenError,
    OutputOpenError,
    OutputWriteError,
)
from utf2uc.shared.logging import get_logger
from utf2uc.shared.result import ConversionResult
from utf2uc.tools.debugging import DebugTrace, open_trace

PathType = Union[str, Path]


def convert(data: InputType, config: Optional[ConversionConfig] = None) -> bytes:
    """Convert UTF-8 input to UTF-16 bytes in memory.

    Args:
        data: UTF-8 bytes, a binary file-like object or an iterable of ints
        config: Conversion configuration (little-endian, no newline conversion
            by default)

    Returns:
        UTF-16 bytes, starting with the byte order mark

    Raises:
        EmptyInputError: If ``data`` is empty
        EmissionError: If a codepoint cannot be written

    Examples:
        >>> convert(b"\\xc2\\xa9")
        b'\\xff\\xfe\\xa9\\x00'
    """
    sink = io.BytesIO()
    convert_stream(data, sink, config)
    return sink.getvalue()


def convert_stream(
    source: InputType,
    sink: BinaryIO,
    config: Optional[ConversionConfig] = None,
    trace: Optional[DebugTrace] = None,
) -> ConversionResult:
    """Convert a byte source into a caller-owned binary sink.

    The caller keeps ownership of ``source``, ``sink`` and ``trace``; none of
    them is closed here.
    """
    processor = ConversionStreamProcessor(config, trace=trace)
    return processor.process(source, sink)


def convert_file(
    input_path: PathType,
    output_path: Optional[PathType] = None,
    config: Optional[ConversionConfig] = None,
) -> ConversionResult:
    """Convert a UTF-8 file to UTF-16.

    Args:
        input_path: UTF-8 input file
        output_path: UTF-16 output file, standard output when None
        config: Conversion configuration; at debug level 2 a trace is written
            to ``config.trace_path``

    Returns:
        ConversionResult for the run

    Raises:
        InputOpenError: If the input cannot be opened
        OutputOpenError: If the output cannot be created
        TraceOpenError: If the trace file cannot be created
        EmptyInputError: If the input file is empty
        InputReadError: If reading the input fails part-way
        EmissionError: If a codepoint cannot be written, or the output
            cannot be written, flushed or closed
    """
    config = config or ConversionConfig()
    logger = get_logger(__name__, config.correlation_id, "convert_file")
    in_path = Path(input_path)

    with ExitStack() as stack:
        try:
            source = stack.enter_context(in_path.open("rb"))
        except OSError as e:
            raise InputOpenError(
                f"Cannot open input UTF-8 file: {in_path}", str(in_path)
            ) from e

        if output_path is None:
            logger.info("Output to stdout")
            sink = sys.stdout.buffer
        else:
            out_path = Path(output_path)
            try:
                sink = out_path.open("wb")
            except OSError as e:
                raise OutputOpenError(
                    f"Cannot create output file: {out_path}", str(out_path)
                ) from e
            stack.callback(_close_output, sink, out_path)

        trace = None
        if config.trace_enabled:
            trace = stack.enter_context(open_trace(config.trace_path))

        result = convert_stream(source, sink, config, trace=trace)

        # buffered sinks only report a full disk on flush
        try:
            sink.flush()
        except OSError as e:
            raise OutputWriteError(f"Could not write output: {e}") from e

    return result


def _close_output(sink: BinaryIO, path: Path) -> None:
    try:
        sink.close()
    except OSError as e:
        raise OutputWriteError(f"Could not close output file {path}: {e}") from e


class Utf8ToUtf16Converter:
    """Reusable converter with configuration and run statistics.

    Examples:
        >>> converter = Utf8ToUtf16Converter(ConversionConfig(byte_order="big"))
        >>> converter.convert(b"A")
        b'\\xfe\\xff\\x00A'
        >>> converter.statistics()["runs"]
        1
    """

    def __init__(
        self,
        config: Optional[ConversionConfig] = None,
        correlation_id: Optional[str] = None,
    ) -> None:
        self.config = config or ConversionConfig()
        if correlation_id is not None:
            self.config = self.config.override(correlation_id=correlation_id)
        self.logger = get_logger(__name__, self.config.correlation_id, "converter")
        self.reset_statistics()

    def convert(self, data: InputType) -> bytes:
        """Convert in memory; see :func:`convert`."""
        sink = io.BytesIO()
        self.convert_stream(data, sink)
        return sink.getvalue()

    def convert_stream(
        self,
        source: InputType,
        sink: BinaryIO,
        trace: Optional[DebugTrace] = None,
    ) -> ConversionResult:
        """Convert into a caller-owned sink; see :func:`convert_stream`."""
        return self._run(lambda: convert_stream(source, sink, self.config, trace))

    def convert_file(
        self, input_path: PathType, output_path: Optional[PathType] = None
    ) -> ConversionResult:
        """Convert a file; see :func:`convert_file`."""
        return self._run(lambda: convert_file(input_path, output_path, self.config))

    def reconfigure(self, **overrides: Any) -> ConversionConfig:
        """Replace the configuration with an overridden copy and return it."""
        self.config = self.config.override(**overrides)
        self.logger = get_logger(__name__, self.config.correlation_id, "converter")
        self.logger.info("Converter reconfigured", extra={"overrides": sorted(overrides)})
        return self.config

    def statistics(self) -> Dict[str, Any]:
        """Counters accumulated over every run since the last reset."""
        return dict(self._stats)

    def reset_statistics(self) -> None:
        self._stats: Dict[str, Any] = {
            "runs": 0,
            "successful_runs": 0,
            "failed_runs": 0,
            "structural_errors": 0,
            "bytes_read": 0,
            "units_written": 0,
            "total_time_ms": 0.0,
        }

    def _run(self, operation: Callable[[], ConversionResult]) -> ConversionResult:
        self._stats["runs"] += 1
        try:
            result = operation()
        except ConversionError:
            self._stats["failed_runs"] += 1
            raise

        metrics = result.metrics
        if result.success:
            self._stats["successful_runs"] += 1
        self._stats["structural_errors"] += metrics.structural_errors
        self._stats["bytes_read"] += metrics.bytes_read
        self._stats["units_written"] += metrics.units_written
        self._stats["total_time_ms"] += metrics.processing_time_ms
        return result
