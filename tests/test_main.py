"""Tests for CLI argument handling in main.py."""
import logging
from collections.abc import Generator
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from click.testing import CliRunner

from selclip.errors import UnavailableError
from selclip.formats import Format
from selclip.main import describe, main


@pytest.fixture(autouse=True)
def reset_selclip_logger() -> Generator[None, None, None]:
    """Undo the CLI logging configuration after each test."""
    logger = logging.getLogger("selclip")
    yield
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def runner() -> CliRunner:
    """Create a CLI runner."""
    return CliRunner()


class TestCLIArguments:
    """Tests for command-line argument validation."""

    def test_no_mode_specified_exits_with_code_2(self, runner: CliRunner) -> None:
        """Test that a missing mode flag gives a usage error."""
        result = runner.invoke(main, [])
        assert result.exit_code == 2
        assert "must be specified" in result.output

    def test_two_modes_exit_with_code_2(self, runner: CliRunner) -> None:
        """Test that combining mode flags gives a usage error."""
        result = runner.invoke(main, ["--paste", "--copy"])
        assert result.exit_code == 2
        assert "mutually exclusive" in result.output

    def test_help_exits_with_code_0(self, runner: CliRunner) -> None:
        """Test that --help lists all modes."""
        result = runner.invoke(main, ["--help"])
        assert result.exit_code == 0
        for mode in ("--paste", "--copy", "--watch", "--image"):
            assert mode in result.output


class TestModes:
    """Tests for dispatching to the clipboard operations."""

    def test_paste_writes_clipboard_to_stdout(self, runner: CliRunner) -> None:
        """--paste prints the raw clipboard bytes."""
        with patch("selclip.main.init"), patch("selclip.main.read") as mock_read:
            mock_read.return_value = b"pasted"
            result = runner.invoke(main, ["--paste"])
        assert result.exit_code == 0
        assert result.stdout_bytes == b"pasted"
        mock_read.assert_called_once_with(Format.TEXT)

    def test_image_flag_selects_png(self, runner: CliRunner) -> None:
        """--image switches the format."""
        with patch("selclip.main.init"), patch("selclip.main.read") as mock_read:
            mock_read.return_value = b"\x89PNG"
            runner.invoke(main, ["--paste", "--image"])
        mock_read.assert_called_once_with(Format.IMAGE)

    def test_copy_serves_stdin_until_ownership_lost(self, runner: CliRunner) -> None:
        """--copy writes stdin and waits for the session to end."""
        session = MagicMock()
        with patch("selclip.main.init"), patch("selclip.main.write") as mock_write:
            mock_write.return_value = session
            result = runner.invoke(main, ["--copy"], input=b"copied")
        assert result.exit_code == 0
        mock_write.assert_called_once_with(Format.TEXT, b"copied")
        session.wait.assert_called_once_with()

    def test_watch_runs_printer(self, runner: CliRunner) -> None:
        """--watch runs the change printer for the chosen format."""
        with patch("selclip.main.init"), patch(
            "selclip.main._print_changes", new_callable=AsyncMock
        ) as mock_print:
            result = runner.invoke(main, ["--watch"])
        assert result.exit_code == 0
        mock_print.assert_awaited_once_with(Format.TEXT)

    def test_clipboard_error_exits_with_code_1(self, runner: CliRunner) -> None:
        """Clipboard failures are reported on stderr with exit code 1."""
        with patch("selclip.main.init"), patch("selclip.main.read") as mock_read:
            mock_read.side_effect = UnavailableError("no display")
            result = runner.invoke(main, ["--paste"])
        assert result.exit_code == 1
        assert "Error: no display" in result.output

    def test_failed_probe_exits_with_code_1(self, runner: CliRunner) -> None:
        """A failed availability check stops before any operation."""
        with patch("selclip.main.init") as mock_init, patch("selclip.main.read") as mock_read:
            mock_init.side_effect = UnavailableError("install Xvfb")
            result = runner.invoke(main, ["--paste"])
        assert result.exit_code == 1
        mock_read.assert_not_called()


def test_describe_text() -> None:
    """Text content is printed as decoded text."""
    assert describe(Format.TEXT, "héllo".encode()) == "héllo"


def test_describe_image() -> None:
    """Image content is summarized by size."""
    assert describe(Format.IMAGE, b"1234") == "image: 4 bytes"


def test_configure_logging_levels() -> None:
    """Verbose enables DEBUG on the selclip logger only."""
    from selclip.main_logging import configure_logging

    configure_logging(True)
    assert logging.getLogger("selclip").level == logging.DEBUG
    configure_logging(False)
    assert logging.getLogger("selclip").level == logging.WARNING
    assert len(logging.getLogger("selclip").handlers) == 1
