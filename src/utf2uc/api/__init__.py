"""Public conversion API for utf2uc."""

from .converter import (
    Utf8ToUtf16Converter,
    convert,
    convert_file,
    convert_stream,
)

__all__ = [
    "Utf8ToUtf16Converter",
    "convert",
    "convert_file",
    "convert_stream",
]
