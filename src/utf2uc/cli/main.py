"""Main CLI entry point for the utf2uc command-line tool.

Converts one UTF-8 input file to UTF-16, writing to an output file or to
standard output. Usage and diagnostics go to standard error.
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from utf2uc import __version__
from utf2uc.api.converter import convert_file
from utf2uc.shared.config import (
    ByteOrder,
    ConfigError,
    ConversionConfig,
    DebugLevel,
)
from utf2uc.shared.errors import (
    ConversionError,
    EmissionError,
    EmptyInputError,
    SetupError,
)
from utf2uc.shared.logging import configure_logging, get_logger, reset_logging
from utf2uc.shared.result import ConversionResult
from utf2uc.tools.profiling import ConversionProfiler

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130  # Standard exit code for SIGINT

USAGE_EPILOG = "(default output file is stdout)"


class UsageArgumentParser(argparse.ArgumentParser):
    """Argument parser that reports usage errors with exit code 1."""

    def print_help(self, file=None) -> None:
        super().print_help(file or sys.stderr)

    def error(self, message: str) -> None:  # type: ignore[override]
        self.print_usage(sys.stderr)
        self.exit(EXIT_FAILURE, f"Error: {message}\n")


def create_argument_parser() -> argparse.ArgumentParser:
    """Create the main argument parser."""
    parser = UsageArgumentParser(
        prog="utf2uc",
        description="Reads a UTF-8 encoded text file and converts it to UTF-16",
        epilog=USAGE_EPILOG,
    )

    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    parser.add_argument(
        "input",
        type=Path,
        help="UTF-8 input file"
    )
    parser.add_argument(
        "output",
        nargs="?",
        type=Path,
        help="UTF-16 output file (default: stdout)"
    )
    parser.add_argument(
        "--newline", "-n",
        action="store_true",
        default=None,
        help="Convert unix newline (0x0a) to Windows CR-LF (0x0d, 0x0a)"
    )
    parser.add_argument(
        "--little-endian", "-l",
        action="store_true",
        help="Little endian UTF-16 encoding (default)"
    )
    parser.add_argument(
        "--big-endian", "-b",
        action="store_true",
        help="Big endian UTF-16 encoding"
    )
    parser.add_argument(
        "--debug", "-d",
        metavar="LEVEL",
        help="Debug level 0 (no), 1 (limited), 2 (full, debug file)"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        help="JSON configuration file; command-line options override it"
    )
    parser.add_argument(
        "--profile",
        action="store_true",
        help="Print timing and memory figures for the run"
    )

    return parser


def parse_debug_level(value: Optional[str]) -> Optional[DebugLevel]:
    """Parse the ``-d`` value, clamping out-of-range integers into 0..2."""
    if value is None:
        return None
    try:
        level = int(value)
    except ValueError:
        print(f"Error: invalid debug level {value!r}, using 0", file=sys.stderr)
        return DebugLevel.NONE
    if not DebugLevel.NONE <= level <= DebugLevel.FULL:
        print("Error: Valid debug levels are 0, 1, 2", file=sys.stderr)
        level = max(DebugLevel.NONE, min(level, DebugLevel.FULL))
    return DebugLevel(level)


def build_config(args: argparse.Namespace) -> ConversionConfig:
    """Merge the optional config file with command-line options."""
    config = ConversionConfig()
    if args.config:
        config = ConversionConfig.from_file(args.config)

    overrides = {}
    if args.newline is not None:
        overrides["newline_convert"] = args.newline

    if args.little_endian or args.big_endian:
        byte_order, conflict = ByteOrder.from_flags(args.little_endian, args.big_endian)
        if conflict:
            print(
                "Little and Big Endian settings are mutually exclusive, defaulting to LE",
                file=sys.stderr,
            )
        overrides["byte_order"] = byte_order

    debug_level = parse_debug_level(args.debug)
    if debug_level is not None:
        overrides["debug_level"] = debug_level

    return config.override(**overrides) if overrides else config


def run_conversion(args: argparse.Namespace, config: ConversionConfig) -> ConversionResult:
    """Convert the input file, profiling the run when requested."""
    if not args.profile:
        return convert_file(args.input, args.output, config)

    profiler = ConversionProfiler()
    input_size = args.input.stat().st_size if args.input.is_file() else 0
    try:
        with profiler.profile(args.input.name, input_size=input_size) as session:
            result = convert_file(args.input, args.output, config)
    finally:
        print(profiler.generate_report().format_text(), file=sys.stderr)

    result.metrics.memory_used_bytes = session.memory_delta
    return result


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    try:
        config = build_config(args)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_FAILURE

    configure_logging(config.debug_level)
    try:
        return _run_main(args, config)
    finally:
        reset_logging()


def _run_main(args: argparse.Namespace, config: ConversionConfig) -> int:
    logger = get_logger(__name__, config.correlation_id, "cli")

    if config.debug_level >= DebugLevel.LIMITED:
        print(f"utf2uc {__version__} - UTF-8 to UTF-16 converter\n", file=sys.stderr)

    try:
        result = run_conversion(args, config)
    except (SetupError, EmptyInputError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_FAILURE
    except EmissionError as e:
        logger.error("Conversion aborted", extra={"codepoint": e.codepoint})
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_FAILURE
    except ConversionError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_FAILURE
    except KeyboardInterrupt:
        print("\nOperation interrupted by user", file=sys.stderr)
        return EXIT_INTERRUPTED

    if config.debug_level >= DebugLevel.LIMITED:
        print(result.summary(), file=sys.stderr)
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
