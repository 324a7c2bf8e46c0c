"""Tests for the command-line entry point."""

import json

import pytest

from chuk_mcp_juggling.server import build_parser, check_pattern


class TestArguments:
    """Tests for argument parsing."""

    def test_defaults(self) -> None:
        args = build_parser().parse_args([])
        assert args.transport == "stdio"
        assert args.port == 8000
        assert args.check is None
        assert args.project_dir is None

    def test_http(self) -> None:
        args = build_parser().parse_args(["--transport", "http", "--port", "9000"])
        assert args.transport == "http"
        assert args.port == 9000

    def test_bad_transport(self) -> None:
        with pytest.raises(SystemExit):
            build_parser().parse_args(["--transport", "carrier-pigeon"])


class TestCheckPattern:
    """Tests for --check."""

    def test_valid(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Valid patterns print their summary."""
        assert check_pattern("pattern=3;hss=3") == 0
        summary = json.loads(capsys.readouterr().out)
        assert summary["jugglers"] == 2
        assert summary["objects"] == 3

    def test_invalid(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Errors go to stderr with their column."""
        assert check_pattern("3$3") == 1
        assert "column 2" in capsys.readouterr().err
