"""Full-verbosity conversion trace.

At debug level 2 every input byte, every decoded codepoint and every written
unit is recorded in a trace file. The trace is injected into the decoder and
the emitter for the duration of a run and closed when the run ends.
"""

from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, List, TextIO, Union

from utf2uc.shared.errors import TraceOpenError
from utf2uc.shared.logging import get_logger


@dataclass
class TraceCounters:
    """Number of records written to a trace."""

    bytes: int = 0
    codepoints: int = 0
    units: int = 0


class DebugTrace:
    """Line-oriented trace writer.

    Examples:
        >>> import io
        >>> trace = DebugTrace(io.StringIO())
        >>> trace.byte(1, 1, 0x41, "SCANNING")
        >>> trace.stream.getvalue()
        'Line: 1, UTF char counter: 1, UTF-8 char: 41, State: SCANNING\\n'
    """

    def __init__(self, stream: TextIO) -> None:
        self.stream = stream
        self.counters = TraceCounters()

    def byte(self, line: int, position: int, value: int, state: str) -> None:
        """Record one input byte and the decoder state it arrived in."""
        self.counters.bytes += 1
        self.stream.write(
            f"Line: {line}, UTF char counter: {position}, "
            f"UTF-8 char: {value:x}, State: {state}\n"
        )

    def codepoint(self, value: int) -> None:
        """Record a codepoint handed to the emitter."""
        self.counters.codepoints += 1
        self.stream.write(f"  --> Unicode char: {value:x}\n")

    def unit(self, data: bytes) -> None:
        """Record the two bytes of a unit in the order they were written."""
        self.counters.units += 1
        self.stream.write("--> " + " ".join(f"{b:02x}" for b in data) + "\n")

    def lines(self) -> List[str]:
        """Trace contents, for in-memory streams only."""
        getvalue = getattr(self.stream, "getvalue", None)
        if getvalue is None:
            raise TypeError("Trace stream does not keep its contents")
        return getvalue().splitlines()


@contextmanager
def open_trace(path: Union[str, Path]) -> Iterator[DebugTrace]:
    """Open a trace file for the duration of a conversion run.

    Raises:
        TraceOpenError: If the trace file cannot be created
    """
    logger = get_logger(__name__, None, "debug_trace")
    trace_path = Path(path)
    try:
        stream = trace_path.open("w", encoding="ascii", newline="\n")
    except OSError as e:
        raise TraceOpenError(
            f"Cannot create full debug output file: {trace_path}", str(trace_path)
        ) from e

    logger.info("Writing conversion trace", extra={"trace_path": str(trace_path)})
    try:
        yield DebugTrace(stream)
    finally:
        stream.close()
