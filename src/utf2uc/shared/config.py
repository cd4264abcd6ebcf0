"""Configuration classes for UTF-8 to UTF-16 conversion.

This module provides the immutable configuration object that is built once
before a conversion run starts and shared, read-only, by the decoder, the
emitter and the pipeline driver.
"""

import json
from dataclasses import asdict, dataclass, fields, replace
from enum import Enum, IntEnum
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

DEFAULT_BUFFER_SIZE = 8192
DEFAULT_TRACE_PATH = "utf2uc.dbg"


class ByteOrder(Enum):
    """Byte order of the 16-bit output units."""

    LITTLE = "little"
    BIG = "big"

    @classmethod
    def parse(cls, value: Union[str, "ByteOrder"]) -> "ByteOrder":
        """Parse a byte order from its name or a common abbreviation."""
        if isinstance(value, cls):
            return value
        aliases = {
            "little": cls.LITTLE,
            "le": cls.LITTLE,
            "little-endian": cls.LITTLE,
            "big": cls.BIG,
            "be": cls.BIG,
            "big-endian": cls.BIG,
        }
        try:
            return aliases[str(value).strip().lower()]
        except KeyError:
            raise ConfigValidationError(
                f"Unknown byte order: {value!r}",
                field_name="byte_order",
                suggestions=["little", "big"],
            ) from None

    @classmethod
    def from_flags(cls, little: bool, big: bool) -> Tuple["ByteOrder", bool]:
        """Resolve command-line endianness flags.

        Returns:
            Tuple of (byte order, conflict). Both flags set is a conflict and
            resolves to little-endian.
        """
        if little and big:
            return cls.LITTLE, True
        if big:
            return cls.BIG, False
        return cls.LITTLE, False


class DebugLevel(IntEnum):
    """Diagnostic verbosity. Never affects the converted output."""

    NONE = 0      # Structural errors only
    LIMITED = 1   # Plus progress and fatal error details
    FULL = 2      # Plus a per-byte trace file

    @classmethod
    def parse(cls, value: Union[int, str, "DebugLevel"]) -> "DebugLevel":
        """Parse a debug level from an int, a digit string or a member name."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str) and not value.strip().lstrip("-").isdigit():
            try:
                return cls[value.strip().upper()]
            except KeyError:
                raise ConfigValidationError(
                    f"Unknown debug level: {value!r}",
                    field_name="debug_level",
                    suggestions=["0", "1", "2"],
                ) from None
        try:
            return cls(int(value))
        except (TypeError, ValueError):
            raise ConfigValidationError(
                f"Valid debug levels are 0, 1, 2, got {value!r}",
                field_name="debug_level",
                suggestions=["0", "1", "2"],
            ) from None


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigValidationError(ConfigError):
    """Exception raised when configuration validation fails."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.field_name = field_name
        self.suggestions = suggestions or []


@dataclass(frozen=True)
class ConversionConfig:
    """Immutable configuration for a conversion run.

    Attributes:
        newline_convert: Expand every LF (0x0A) to a CR LF pair
        byte_order: Byte order of every written unit, BOM included
        debug_level: Diagnostic verbosity (0, 1 or 2)
        buffer_size: Read chunk size for file-like byte sources
        trace_path: Trace file written at debug level 2 when no trace sink
            is injected
        correlation_id: Optional identifier attached to log records
    """

    newline_convert: bool = False
    byte_order: ByteOrder = ByteOrder.LITTLE
    debug_level: DebugLevel = DebugLevel.NONE
    buffer_size: int = DEFAULT_BUFFER_SIZE
    trace_path: str = DEFAULT_TRACE_PATH
    correlation_id: Optional[str] = None

    def __post_init__(self) -> None:
        """Normalize enum fields and validate the configuration."""
        # frozen dataclass: normalize through object.__setattr__
        object.__setattr__(self, "byte_order", ByteOrder.parse(self.byte_order))
        object.__setattr__(self, "debug_level", DebugLevel.parse(self.debug_level))

        if not isinstance(self.newline_convert, bool):
            raise ConfigValidationError(
                "newline_convert must be a bool", field_name="newline_convert"
            )
        if (
            not isinstance(self.buffer_size, int)
            or isinstance(self.buffer_size, bool)
            or self.buffer_size <= 0
        ):
            raise ConfigValidationError(
                "buffer_size must be > 0",
                field_name="buffer_size",
                suggestions=[f"Use the default of {DEFAULT_BUFFER_SIZE}"],
            )
        if not isinstance(self.trace_path, str):
            raise ConfigValidationError(
                "trace_path must be a string", field_name="trace_path"
            )
        if not self.trace_path:
            raise ConfigValidationError(
                "trace_path cannot be empty", field_name="trace_path"
            )
        if self.correlation_id is not None and not isinstance(self.correlation_id, str):
            raise ConfigValidationError(
                "correlation_id must be a string", field_name="correlation_id"
            )

    @property
    def big_endian(self) -> bool:
        """Whether units are written most-significant byte first."""
        return self.byte_order is ByteOrder.BIG

    @property
    def trace_enabled(self) -> bool:
        """Whether the full-verbosity per-byte trace is requested."""
        return self.debug_level >= DebugLevel.FULL

    def override(self, **kwargs: Any) -> "ConversionConfig":
        """Create a new configuration with specific overrides.

        Example:
            >>> config = ConversionConfig()
            >>> config.override(byte_order="big").big_endian
            True
        """
        known = {f.name for f in fields(self)}
        unknown = sorted(set(kwargs) - known)
        if unknown:
            raise ConfigValidationError(
                f"Unknown configuration fields: {', '.join(unknown)}",
                field_name=unknown[0],
                suggestions=sorted(known),
            )
        return replace(self, **kwargs)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to a JSON-compatible dictionary."""
        data = asdict(self)
        data["byte_order"] = self.byte_order.value
        data["debug_level"] = int(self.debug_level)
        return data

    def to_json(self, indent: int = 2) -> str:
        """Convert configuration to a JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ConversionConfig":
        """Create configuration from a dictionary, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        return cls(**{key: value for key, value in data.items() if key in known})

    @classmethod
    def from_json(cls, json_str: str) -> "ConversionConfig":
        """Create configuration from a JSON string."""
        try:
            data = json.loads(json_str)
        except json.JSONDecodeError as e:
            raise ConfigValidationError(f"Invalid configuration JSON: {e}") from e
        if not isinstance(data, dict):
            raise ConfigValidationError("Configuration JSON must be an object")
        return cls.from_dict(data)

    @classmethod
    def from_file(cls, config_path: Union[str, Path]) -> "ConversionConfig":
        """Load configuration from a JSON file."""
        path = Path(config_path)
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise ConfigError(f"Could not read config file {path}: {e}") from e
        return cls.from_json(text)
