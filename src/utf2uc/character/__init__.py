"""Character processing layer for utf2uc.

This module provides the UTF-8 decoder state machine, the UTF-16 unit emitter
and the pipeline driver that connects them.
"""

from .decoder import (
    Codepoint,
    DecodeError,
    DecodeEvent,
    DecoderState,
    Utf8Decoder,
)
from .emitter import (
    UTF16_BOM,
    Utf16Emitter,
    encode_units,
    unit_to_bytes,
)
from .stream import (
    ConversionStreamProcessor,
    InputType,
    iter_input_bytes,
)

__all__ = [
    # Modules
    "decoder",
    "emitter",
    "stream",
    # Decoder
    "Codepoint",
    "DecodeError",
    "DecodeEvent",
    "DecoderState",
    "Utf8Decoder",
    # Emitter
    "UTF16_BOM",
    "Utf16Emitter",
    "encode_units",
    "unit_to_bytes",
    # Pipeline
    "ConversionStreamProcessor",
    "InputType",
    "iter_input_bytes",
]
