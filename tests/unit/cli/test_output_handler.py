"""Unit tests for cli.output module."""

import io

import pytest
from rich.console import Console

from src.cli.output import OutputHandler


@pytest.fixture
def make_handler():
    """Build an OutputHandler whose console records into a buffer."""
    def _make(verbosity=0):
        handler = OutputHandler(verbosity=verbosity, no_color=True)
        handler.console = Console(file=io.StringIO(), record=True, no_color=True, highlight=False)
        return handler
    return _make


def text_of(handler):
    return handler.console.export_text()


class TestOutputHandler:
    """Test cases for OutputHandler message methods."""

    def test_status_messages(self, make_handler):
        """success, error and warning are always shown."""
        handler = make_handler()

        handler.success("done")
        handler.error("broken")
        handler.warning("careful")

        text = text_of(handler)
        assert "✓ done" in text
        assert "✗ broken" in text
        assert "⚠ careful" in text

    def test_info_needs_verbosity_1(self, make_handler):
        """info is hidden at verbosity 0."""
        quiet = make_handler(0)
        quiet.info("details")
        verbose = make_handler(1)
        verbose.info("details")

        assert "details" not in text_of(quiet)
        assert "details" in text_of(verbose)

    def test_debug_needs_verbosity_2(self, make_handler):
        """debug is hidden below verbosity 2."""
        handler = make_handler(1)
        handler.debug("trace")
        debug_handler = make_handler(2)
        debug_handler.debug("trace")

        assert "trace" not in text_of(handler)
        assert "trace" in text_of(debug_handler)

    def test_no_color_console(self):
        """--no-color is passed through to the console."""
        assert OutputHandler(no_color=True).console.no_color is True


class TestPrintSummary:
    """Test cases for OutputHandler.print_summary."""

    def test_success_summary(self, make_handler):
        """A clean run reports counts and success."""
        handler = make_handler()

        handler.print_summary(3, 0)

        text = text_of(handler)
        assert "Synced: 3, Failed: 0" in text
        assert "Completed successfully" in text

    def test_failure_summary(self, make_handler):
        """Failures are flagged."""
        handler = make_handler()

        handler.print_summary(1, 2, action="Downloaded")

        text = text_of(handler)
        assert "Downloaded: 1, Failed: 2" in text
        assert "Completed with errors" in text

    def test_empty_summary(self, make_handler):
        """A run with nothing to do says so."""
        handler = make_handler()

        handler.print_summary()

        assert "Nothing to sync" in text_of(handler)

    def test_spinner_context(self, make_handler):
        """The spinner wraps a block and returns control."""
        handler = make_handler()
        ran = []

        with handler.spinner("Working..."):
            ran.append(True)

        assert ran == [True]
