"""UTF-16 unit emitter.

Turns validated codepoints into one or two 16-bit units and writes each unit
to a binary sink as two bytes in the configured byte order. A byte order mark
is written once, before the first unit of a stream.
"""

from typing import BinaryIO, Optional, Tuple

from utf2uc.shared.config import ByteOrder
from utf2uc.shared.errors import (
    CodepointTooLarge,
    InvalidCodepoint,
    OutputWriteError,
    SurrogateRangeRejected,
)
from utf2uc.tools.debugging import DebugTrace

UTF16_BOM = 0xFEFF
BMP_LIMIT = 0x10000
MAX_CODEPOINT = 0x10FFFF
SURROGATE_MIN = 0xD800
SURROGATE_MAX = 0xDFFF
HIGH_SURROGATE_BASE = 0xD800
LOW_SURROGATE_BASE = 0xDC00
SURROGATE_PAYLOAD_MASK = 0x3FF


def encode_units(codepoint: int) -> Tuple[int, ...]:
    """Split a codepoint into UTF-16 units.

    Args:
        codepoint: Codepoint 0..0x10FFFF, outside the surrogate range

    Returns:
        One unit, or a high/low surrogate pair for codepoints above 0xFFFF

    Raises:
        SurrogateRangeRejected: Codepoint lies in 0xD800..0xDFFF
        CodepointTooLarge: Codepoint exceeds 0x10FFFF
        InvalidCodepoint: Codepoint is negative

    Examples:
        >>> [hex(unit) for unit in encode_units(0x1F600)]
        ['0xd83d', '0xde00']
    """
    if codepoint < 0:
        raise InvalidCodepoint(f"Negative codepoint: {codepoint}", codepoint)

    if codepoint < BMP_LIMIT:
        if SURROGATE_MIN <= codepoint <= SURROGATE_MAX:
            raise SurrogateRangeRejected(
                f"Invalid UTF-8 value: {codepoint:04X} (code in surrogate pair range)",
                codepoint,
            )
        return (codepoint,)

    if codepoint > MAX_CODEPOINT:
        raise CodepointTooLarge(
            f"Too high Unicode character value: {codepoint:X}", codepoint
        )

    offset = codepoint - BMP_LIMIT
    return (
        HIGH_SURROGATE_BASE + (offset >> 10),
        LOW_SURROGATE_BASE + (offset & SURROGATE_PAYLOAD_MASK),
    )


def unit_to_bytes(unit: int, byte_order: ByteOrder) -> bytes:
    """Serialize one 16-bit unit in the given byte order."""
    return unit.to_bytes(2, byte_order.value)


class Utf16Emitter:
    """Writes codepoints to a binary sink as UTF-16 units.

    Examples:
        >>> import io
        >>> sink = io.BytesIO()
        >>> emitter = Utf16Emitter(sink, ByteOrder.BIG)
        >>> emitter.emit(0x41)
        1
        >>> sink.getvalue()
        b'\\xfe\\xff\\x00A'
    """

    def __init__(
        self,
        sink: BinaryIO,
        byte_order: ByteOrder = ByteOrder.LITTLE,
        trace: Optional[DebugTrace] = None,
    ) -> None:
        """Initialize the emitter.

        Args:
            sink: Binary writable object
            byte_order: Byte order for every unit, BOM and surrogates included
            trace: Optional full-verbosity trace sink
        """
        self.sink = sink
        self.byte_order = ByteOrder.parse(byte_order)
        self.trace = trace
        self.units_written = 0
        self.bom_written = False

    def write_bom(self) -> None:
        """Write the byte order mark unless it has already been written."""
        if self.bom_written:
            return
        self._write_unit(UTF16_BOM)
        self.bom_written = True

    def emit(self, codepoint: int) -> int:
        """Write a codepoint, preceded by the BOM on first use.

        Returns:
            Number of units written for the codepoint (1 or 2)
        """
        units = encode_units(codepoint)
        self.write_bom()
        if self.trace is not None:
            self.trace.codepoint(codepoint)
        for unit in units:
            self._write_unit(unit)
        return len(units)

    def _write_unit(self, unit: int) -> None:
        data = unit_to_bytes(unit, self.byte_order)
        try:
            written = self.sink.write(data)
        except OSError as e:
            raise OutputWriteError(f"Output write failed: {e}", unit) from e
        # raw sinks may report a short write
        if written is not None and written != len(data):
            raise OutputWriteError(
                f"Short write to output: {written} of {len(data)} bytes", unit
            )
        if self.trace is not None:
            self.trace.unit(data)
        self.units_written += 1
