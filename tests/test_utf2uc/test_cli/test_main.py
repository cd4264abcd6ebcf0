"""Tests for the CLI main module."""

import json
import os
from pathlib import Path
from unittest.mock import patch

import pytest

from utf2uc.cli.main import (
    EXIT_FAILURE,
    EXIT_INTERRUPTED,
    EXIT_OK,
    build_config,
    create_argument_parser,
    main,
    parse_debug_level,
)
from utf2uc.shared.config import ByteOrder, ConfigValidationError, DebugLevel
from utf2uc.shared.errors import (
    InputReadError,
    OutputWriteError,
    SurrogateRangeRejected,
)
from utf2uc.tools.profiling import ConversionProfiler


@pytest.fixture
def input_file(tmp_path):
    path = tmp_path / "in.txt"
    path.write_bytes("a\nb".encode("utf-8"))
    return path


class TestArgumentParser:
    """Test argument parser creation and usage errors."""

    def test_parser_creation(self):
        parser = create_argument_parser()

        assert parser.prog == "utf2uc"

    def test_defaults(self):
        """Test that unset options stay distinguishable from explicit ones."""
        args = create_argument_parser().parse_args(["in.txt"])

        assert args.input == Path("in.txt")
        assert args.output is None
        assert args.newline is None
        assert args.little_endian is False
        assert args.big_endian is False
        assert args.debug is None
        assert args.profile is False

    def test_short_flags(self):
        args = create_argument_parser().parse_args(["-n", "-b", "-d2", "in.txt", "out.txt"])

        assert args.newline is True
        assert args.big_endian is True
        assert args.debug == "2"
        assert args.output == Path("out.txt")

    def test_missing_input(self, capsys):
        """Test that a missing input argument prints usage and exits 1."""
        with pytest.raises(SystemExit) as exc_info:
            main([])

        assert exc_info.value.code == EXIT_FAILURE
        assert "usage: utf2uc" in capsys.readouterr().err

    def test_unknown_option(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["-x", "in.txt"])

        assert exc_info.value.code == EXIT_FAILURE
        assert "Error: unrecognized arguments" in capsys.readouterr().err

    def test_help_goes_to_stderr(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["-h"])

        captured = capsys.readouterr()
        assert exc_info.value.code == 0
        assert "UTF-16" in captured.err
        assert captured.out == ""

    def test_version(self, capsys):
        with pytest.raises(SystemExit):
            main(["--version"])

        assert "utf2uc 1.0.0" in capsys.readouterr().out


class TestParseDebugLevel:
    """Test debug level parsing and clamping."""

    @pytest.mark.parametrize("value,expected", [
        (None, None),
        ("0", DebugLevel.NONE),
        ("1", DebugLevel.LIMITED),
        ("2", DebugLevel.FULL),
    ])
    def test_valid(self, value, expected):
        assert parse_debug_level(value) is expected

    @pytest.mark.parametrize("value,expected", [
        ("7", DebugLevel.FULL),
        ("-3", DebugLevel.NONE),
    ])
    def test_out_of_range_is_clamped(self, value, expected, capsys):
        """Test that out-of-range levels are reported and clamped."""
        assert parse_debug_level(value) is expected
        assert "Error: Valid debug levels are 0, 1, 2" in capsys.readouterr().err

    def test_not_a_number(self, capsys):
        assert parse_debug_level("loud") is DebugLevel.NONE
        assert "invalid debug level" in capsys.readouterr().err


class TestBuildConfig:
    """Test merging of config file and command-line options."""

    def _build(self, argv):
        return build_config(create_argument_parser().parse_args(argv))

    def test_defaults(self):
        config = self._build(["in.txt"])

        assert config.byte_order is ByteOrder.LITTLE
        assert config.newline_convert is False
        assert config.debug_level is DebugLevel.NONE

    def test_command_line_overrides_config_file(self, tmp_path):
        """Test that flags win over values read from the config file."""
        config_path = tmp_path / "utf2uc.json"
        config_path.write_text(json.dumps({
            "byte_order": "big",
            "newline_convert": True,
            "trace_path": "custom.dbg",
        }))

        config = self._build(["-c", str(config_path), "-l", "in.txt"])

        assert config.byte_order is ByteOrder.LITTLE
        assert config.newline_convert is True
        assert config.trace_path == "custom.dbg"

    def test_conflicting_endianness(self, capsys):
        config = self._build(["-l", "-b", "in.txt"])

        assert config.byte_order is ByteOrder.LITTLE
        assert "mutually exclusive, defaulting to LE" in capsys.readouterr().err

    def test_invalid_config_file(self, tmp_path):
        config_path = tmp_path / "utf2uc.json"
        config_path.write_text(json.dumps({"byte_order": "middle"}))

        with pytest.raises(ConfigValidationError):
            self._build(["-c", str(config_path), "in.txt"])


class TestMain:
    """Test the main entry point."""

    def test_convert_to_file(self, input_file, tmp_path):
        output_path = tmp_path / "out.txt"

        exit_code = main(["-n", "-b", str(input_file), str(output_path)])

        assert exit_code == EXIT_OK
        assert output_path.read_bytes() == b"\xfe\xff" + "a\r\nb".encode("utf-16-be")

    def test_structural_errors_still_succeed(self, tmp_path, capsys):
        """Test that malformed input is reported but does not fail the run."""
        input_path = tmp_path / "in.txt"
        input_path.write_bytes(b"\xc2\x41z")
        output_path = tmp_path / "out.txt"

        exit_code = main([str(input_path), str(output_path)])

        assert exit_code == EXIT_OK
        assert "*** Error in input file at byte 2 (value 41H)" in capsys.readouterr().err
        assert output_path.read_bytes() == b"\xff\xfeA\x00z\x00"

    def test_missing_input_file(self, tmp_path, capsys):
        exit_code = main([str(tmp_path / "missing.txt")])

        assert exit_code == EXIT_FAILURE
        assert "Error: Cannot open input UTF-8 file" in capsys.readouterr().err

    def test_empty_input_file(self, tmp_path, capsys):
        """Test that an empty input is fatal."""
        input_path = tmp_path / "empty.txt"
        input_path.write_bytes(b"")

        exit_code = main([str(input_path), str(tmp_path / "out.txt")])

        assert exit_code == EXIT_FAILURE
        assert "Error: Empty input file" in capsys.readouterr().err

    def test_missing_config_file(self, input_file, tmp_path, capsys):
        exit_code = main(["-c", str(tmp_path / "none.json"), str(input_file)])

        assert exit_code == EXIT_FAILURE
        assert "Could not read config file" in capsys.readouterr().err

    def test_emission_error(self, input_file, tmp_path, capsys):
        """Test that an unwritable codepoint aborts with exit code 1."""
        with patch(
            "utf2uc.character.emitter.encode_units",
            side_effect=SurrogateRangeRejected("Unicode surrogate value", 0xD800),
        ):
            exit_code = main([str(input_file), str(tmp_path / "out.txt")])

        assert exit_code == EXIT_FAILURE
        assert "Error: Unicode surrogate value" in capsys.readouterr().err

    @pytest.mark.skipif(not os.path.exists("/dev/full"), reason="needs /dev/full")
    def test_full_output_device(self, input_file, capsys):
        """Test that a full disk is reported instead of raising."""
        exit_code = main([str(input_file), "/dev/full"])

        assert exit_code == EXIT_FAILURE
        assert "Error: Could not" in capsys.readouterr().err

    def test_output_close_failure(self, input_file, tmp_path, capsys):
        def close_then_fail(sink, path):
            sink.close()
            raise OutputWriteError(f"Could not close output file {path}")

        with patch("utf2uc.api.converter._close_output", side_effect=close_then_fail):
            exit_code = main([str(input_file), str(tmp_path / "out.txt")])

        assert exit_code == EXIT_FAILURE
        assert "Error: Could not close output file" in capsys.readouterr().err

    def test_input_read_failure(self, input_file, tmp_path, capsys):
        with patch("utf2uc.cli.main.convert_file",
                   side_effect=InputReadError("Input file read error: [Errno 5]")):
            exit_code = main([str(input_file), str(tmp_path / "out.txt")])

        assert exit_code == EXIT_FAILURE
        assert "Error: Input file read error" in capsys.readouterr().err

    def test_config_file_with_null_debug_level(self, input_file, tmp_path, capsys):
        """Test that a wrongly typed config value exits 1 with a message."""
        config_path = tmp_path / "utf2uc.json"
        config_path.write_text(json.dumps({"debug_level": None}))

        exit_code = main(["-c", str(config_path), str(input_file), str(tmp_path / "out.txt")])

        assert exit_code == EXIT_FAILURE
        assert "Error: Valid debug levels are 0, 1, 2" in capsys.readouterr().err

    def test_keyboard_interrupt(self, input_file, tmp_path):
        with patch("utf2uc.cli.main.convert_file", side_effect=KeyboardInterrupt):
            exit_code = main([str(input_file), str(tmp_path / "out.txt")])

        assert exit_code == EXIT_INTERRUPTED

    def test_limited_debug_banner_and_summary(self, input_file, tmp_path, capsys):
        exit_code = main(["-d", "1", str(input_file), str(tmp_path / "out.txt")])

        err = capsys.readouterr().err
        assert exit_code == EXIT_OK
        assert "utf2uc 1.0.0 - UTF-8 to UTF-16 converter" in err
        assert "3 bytes read" in err

    def test_clamped_debug_level_writes_trace(self, input_file, tmp_path, monkeypatch, capsys):
        """Test that an over-range level is clamped to full debug."""
        monkeypatch.chdir(tmp_path)

        exit_code = main(["-d", "9", str(input_file), str(tmp_path / "out.txt")])

        assert exit_code == EXIT_OK
        assert "Valid debug levels are 0, 1, 2" in capsys.readouterr().err
        assert (tmp_path / "utf2uc.dbg").read_text().startswith("--> ")

    def test_profile_report(self, input_file, tmp_path, capsys):
        exit_code = main(["--profile", str(input_file), str(tmp_path / "out.txt")])

        assert exit_code == EXIT_OK
        assert "Profiled 1 conversion(s)" in capsys.readouterr().err

    def test_profile_fills_memory_metric(self, input_file, tmp_path, capsys):
        """Test that the profiled memory delta reaches the run summary."""
        with patch.object(ConversionProfiler, "_memory_rss", side_effect=[1000, 5096]):
            exit_code = main(["--profile", "-d", "1", str(input_file), str(tmp_path / "out.txt")])

        summary = [line for line in capsys.readouterr().err.splitlines() if "bytes read" in line]
        assert exit_code == EXIT_OK
        assert summary[0].endswith(", memory delta 4096 bytes")
