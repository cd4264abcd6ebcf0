"""Streaming UTF-8 decoder state machine.

The decoder consumes one byte at a time and produces decode events: a
``Codepoint`` for every validated character and a ``DecodeError`` for every
malformed sequence. Errors never stop the decoder; the broken sequence is
dropped and scanning resumes, re-reading the offending byte as a fresh lead
byte when it was not part of the sequence.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator, List, Optional, Union

from utf2uc.shared.config import ConversionConfig
from utf2uc.tools.debugging import DebugTrace

# UTF-8 BOM bytes
BOM_BYTE_0 = 0xEF
BOM_BYTE_1 = 0xBB
BOM_BYTE_2 = 0xBF

ASCII_MAX = 0x80
LINE_FEED = 0x0A
CARRIAGE_RETURN = 0x0D

# Lead byte masks and markers
LEAD_2BYTE_MASK = 0xE0
LEAD_2BYTE_MARK = 0xC0
LEAD_3BYTE_MASK = 0xF0
LEAD_3BYTE_MARK = 0xE0
LEAD_4BYTE_MASK = 0xF8
LEAD_4BYTE_MARK = 0xF0
CONTINUATION_MASK = 0xC0
CONTINUATION_MARK = 0x80
PAYLOAD_MASK = 0x3F

SURROGATE_MIN = 0xD800
SURROGATE_MAX = 0xDFFF

# Legal codepoint range per sequence length
SEQUENCE_RANGES = {
    2: (0x80, 0x7FF),
    3: (0x800, 0xFFFF),
    4: (0x10000, 0x10FFFF),
}


class DecoderState(Enum):
    """Decoder states, one per position inside a sequence."""

    START = "start"
    BOM_BYTE_1 = "bom_byte_1"
    BOM_BYTE_2 = "bom_byte_2"
    SCANNING = "scanning"
    CONT2_1 = "cont2_1"
    CONT3_1 = "cont3_1"
    CONT3_2 = "cont3_2"
    CONT4_1 = "cont4_1"
    CONT4_2 = "cont4_2"
    CONT4_3 = "cont4_3"


# state -> (sequence length, state after a valid continuation byte or None if final)
CONTINUATION_STATES = {
    DecoderState.CONT2_1: (2, None),
    DecoderState.CONT3_1: (3, DecoderState.CONT3_2),
    DecoderState.CONT3_2: (3, None),
    DecoderState.CONT4_1: (4, DecoderState.CONT4_2),
    DecoderState.CONT4_2: (4, DecoderState.CONT4_3),
    DecoderState.CONT4_3: (4, None),
}


@dataclass(frozen=True)
class Codepoint:
    """A validated codepoint and the byte position that completed it."""

    value: int
    position: int


@dataclass(frozen=True)
class DecodeError:
    """A structural error: malformed BOM, broken or out-of-range sequence.

    Attributes:
        position: 1-based position of the offending byte (0 at end of input)
        byte: Offending byte value, or None at end of input
        state: Decoder state the byte arrived in
        message: Human readable description
        line: Line number the error occurred on
    """

    position: int
    byte: Optional[int]
    state: DecoderState
    message: str
    line: int

    def format(self) -> str:
        """Render the error the way the command line reports it."""
        if self.byte is None:
            return (
                f"*** Error at end of input after byte {self.position}, "
                f"processor state: {self.state.name}: {self.message}"
            )
        return (
            f"*** Error in input file at byte {self.position} "
            f"(value {self.byte:02X}H), line {self.line}, "
            f"processor state: {self.state.name}: {self.message}"
        )


DecodeEvent = Union[Codepoint, DecodeError]


class Utf8Decoder:
    """UTF-8 decoder that validates structure and numeric range byte by byte.

    Examples:
        >>> decoder = Utf8Decoder()
        >>> [event.value for event in decoder.decode(b"\\xc2\\xa9")]
        [169]
    """

    def __init__(
        self,
        config: Optional[ConversionConfig] = None,
        trace: Optional[DebugTrace] = None,
    ) -> None:
        """Initialize the decoder.

        Args:
            config: Conversion configuration (newline conversion is read from it)
            trace: Optional full-verbosity trace sink
        """
        self.config = config or ConversionConfig()
        self.trace = trace
        self.reset()

    def reset(self) -> None:
        """Return to the initial state for a fresh input stream."""
        self._state = DecoderState.START
        self._accumulator = 0
        self._position = 0
        self._line = 1

    @property
    def state(self) -> DecoderState:
        return self._state

    @property
    def position(self) -> int:
        """Number of bytes consumed so far."""
        return self._position

    @property
    def line(self) -> int:
        return self._line

    def feed(self, byte: int) -> List[DecodeEvent]:
        """Process one input byte.

        Args:
            byte: Byte value 0..255

        Returns:
            Events produced by this byte, in order
        """
        if not 0 <= byte <= 0xFF:
            raise ValueError(f"Byte value out of range: {byte}")

        self._position += 1
        if self.trace is not None:
            self.trace.byte(self._line, self._position, byte, self._state.name)

        events: List[DecodeEvent] = []
        reprocess = True
        while reprocess:
            reprocess = self._step(byte, events)
        return events

    def finish(self) -> List[DecodeEvent]:
        """Signal end of input; report a trailing incomplete sequence."""
        state = self._state
        if state in CONTINUATION_STATES:
            length = CONTINUATION_STATES[state][0]
            message = f"incomplete {length}-byte sequence at end of input"
        elif state in (DecoderState.BOM_BYTE_1, DecoderState.BOM_BYTE_2):
            message = "incomplete BOM at end of input"
        else:
            return []

        self._accumulator = 0
        self._state = DecoderState.SCANNING
        return [DecodeError(self._position, None, state, message, self._line)]

    def decode(self, source: Iterable[int]) -> Iterator[DecodeEvent]:
        """Lazily decode a byte sequence, finishing when it is exhausted."""
        for byte in source:
            yield from self.feed(byte)
        yield from self.finish()

    def _step(self, byte: int, events: List[DecodeEvent]) -> bool:
        """Apply one transition. Returns True if the byte must be reprocessed."""
        state = self._state

        if state is DecoderState.START:
            if byte == BOM_BYTE_0:
                self._state = DecoderState.BOM_BYTE_1
                return False
            self._state = DecoderState.SCANNING
            return True

        if state is DecoderState.BOM_BYTE_1:
            if byte == BOM_BYTE_1:
                self._state = DecoderState.BOM_BYTE_2
                return False
            self._error(events, byte, "invalid BOM, 0xBB expected")
            return True

        if state is DecoderState.BOM_BYTE_2:
            if byte == BOM_BYTE_2:
                self._state = DecoderState.SCANNING
                return False
            self._error(events, byte, "invalid BOM, 0xBF expected")
            return True

        if state is DecoderState.SCANNING:
            self._scan(byte, events)
            return False

        return self._continue(byte, events)

    def _scan(self, byte: int, events: List[DecodeEvent]) -> None:
        if byte == LINE_FEED:
            self._line += 1
            if self.config.newline_convert:
                events.append(Codepoint(CARRIAGE_RETURN, self._position))
                events.append(Codepoint(LINE_FEED, self._position))
                return

        if byte < ASCII_MAX:
            events.append(Codepoint(byte, self._position))
        elif byte & LEAD_2BYTE_MASK == LEAD_2BYTE_MARK:
            self._accumulator = byte & 0x1F
            self._state = DecoderState.CONT2_1
        elif byte & LEAD_3BYTE_MASK == LEAD_3BYTE_MARK:
            self._accumulator = byte & 0x0F
            self._state = DecoderState.CONT3_1
        elif byte & LEAD_4BYTE_MASK == LEAD_4BYTE_MARK:
            self._accumulator = byte & 0x07
            self._state = DecoderState.CONT4_1
        # stray continuation bytes and 0xF8..0xFF are skipped

    def _continue(self, byte: int, events: List[DecodeEvent]) -> bool:
        length, next_state = CONTINUATION_STATES[self._state]

        if byte & CONTINUATION_MASK != CONTINUATION_MARK:
            self._error(events, byte, "invalid continuation byte")
            return True

        self._accumulator = (self._accumulator << 6) | (byte & PAYLOAD_MASK)
        if next_state is not None:
            self._state = next_state
            return False

        value = self._accumulator
        low, high = SEQUENCE_RANGES[length]
        if not low <= value <= high:
            self._error(events, byte, f"out of range for {length}-byte sequence")
        elif SURROGATE_MIN <= value <= SURROGATE_MAX:
            self._error(events, byte, "surrogate value in 3-byte sequence")
        else:
            events.append(Codepoint(value, self._position))
            self._accumulator = 0
            self._state = DecoderState.SCANNING
        return False

    def _error(self, events: List[DecodeEvent], byte: int, message: str) -> None:
        """Report a structural error and drop back to scanning."""
        events.append(
            DecodeError(self._position, byte, self._state, message, self._line)
        )
        self._accumulator = 0
        self._state = DecoderState.SCANNING
