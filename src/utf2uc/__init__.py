"""utf2uc: UTF-8 to UTF-16 converter.

A streaming converter that validates UTF-8 input byte by byte and writes
UTF-16 units in either byte order, with optional LF to CR LF conversion.

Progressive API Disclosure:
- Level 1: Simple functions - convert(), convert_stream(), convert_file()
- Level 2: Configured converter - Utf8ToUtf16Converter class
- Level 3: Pipeline components - Utf8Decoder, Utf16Emitter
"""

__version__ = "1.0.0"
__author__ = "utf2uc Team"

from .api import Utf8ToUtf16Converter, convert, convert_file, convert_stream
from .character import Utf16Emitter, Utf8Decoder
from .shared.config import ByteOrder, ConversionConfig, DebugLevel
from .shared.errors import ConversionError
from .shared.result import ConversionResult

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Level 1: Simple conversion functions
    "convert",
    "convert_stream",
    "convert_file",

    # Level 2: Configured converter
    "Utf8ToUtf16Converter",

    # Level 3: Pipeline components
    "Utf8Decoder",
    "Utf16Emitter",

    # Configuration, results and errors
    "ByteOrder",
    "ConversionConfig",
    "DebugLevel",
    "ConversionResult",
    "ConversionError",
]
