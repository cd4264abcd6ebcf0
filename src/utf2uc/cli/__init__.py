"""Command-line interface module for utf2uc.

This module provides the ``utf2uc`` command, converting one UTF-8 file to
UTF-16 with configurable byte order and newline conversion.
"""

from .main import main

__all__ = ["main"]
