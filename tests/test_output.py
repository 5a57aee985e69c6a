"""Tests for output formatting and logging setup."""

import io
import json
import logging
from datetime import UTC, datetime

from rich.console import Console
from rich.logging import RichHandler

from vrux.core import compare
from vrux.logging import configure_logging
from vrux.models import Author, ComponentVersion
from vrux.output import OutputContext, get_output_context, set_output_context


def _buffered(json_mode: bool = False) -> tuple[OutputContext, io.StringIO]:
    output = io.StringIO()
    return OutputContext(Console(file=output, force_terminal=False), json_mode), output


class TestOutputContext:
    """Tests for OutputContext."""

    def test_print_in_normal_mode(self) -> None:
        ctx, output = _buffered()
        ctx.print("Hello world")
        assert "Hello world" in output.getvalue()

    def test_print_suppressed_in_json_mode(self) -> None:
        ctx, output = _buffered(json_mode=True)
        ctx.print("Hello world")
        assert output.getvalue() == ""

    def test_result_prints_json_in_json_mode(self, capsys) -> None:
        ctx, output = _buffered(json_mode=True)
        ctx.result([{"version": "1.0.0"}], "ignored")
        assert json.loads(output.getvalue()) == [{"version": "1.0.0"}]
        assert capsys.readouterr().out == ""

    def test_json_goes_through_configured_console(self) -> None:
        ctx, output = _buffered(json_mode=True)
        ctx.print_json({"when": datetime(2024, 1, 2, tzinfo=UTC), "name": "Bütton"})
        assert json.loads(output.getvalue()) == {
            "when": "2024-01-02 00:00:00+00:00",
            "name": "Bütton",
        }

    def test_result_prints_message_in_normal_mode(self, capsys) -> None:
        ctx, output = _buffered()
        ctx.result({"version": "1.0.0"}, "Created v1.0.0")
        assert "Created v1.0.0" in output.getvalue()
        assert capsys.readouterr().out == ""

    def test_error_with_data_in_json_mode(self) -> None:
        ctx, output = _buffered(json_mode=True)
        ctx.error("Version not found", {"ref": "9.9.9"})
        assert json.loads(output.getvalue()) == {
            "error": "Version not found",
            "ref": "9.9.9",
        }

    def test_warning_goes_to_stderr_in_json_mode(self, capsys) -> None:
        ctx, _ = _buffered(json_mode=True)
        ctx.warning("storage failure")
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "storage failure" in captured.err

    def test_global_context(self) -> None:
        ctx, _ = _buffered()
        set_output_context(ctx)
        assert get_output_context() is ctx


class TestComponentRendering:
    """Tests for version and diff rendering."""

    def test_raw_code_keeps_markup_literal(self) -> None:
        ctx, output = _buffered()
        ctx.code('<div className="[bold]x[/bold]" />', numbered=False)
        assert '<div className="[bold]x[/bold]" />' in output.getvalue()

    def test_version_details(self) -> None:
        ctx, output = _buffered()
        version = ComponentVersion(
            version="1.0.3",
            code="<Button />",
            prompt="make it [red]",
            author=Author(id="a", name="Alice"),
        )
        ctx.version_details(version)
        text = output.getvalue()
        assert "v1.0.3" in text
        assert "Prompt: make it [red]" in text
        assert "Author: Alice" in text
        assert "<Button />" in text

    def test_line_changes_lists_removed_then_added(self) -> None:
        ctx, output = _buffered()
        ctx.line_changes(compare("a\nb", "a\nc"))
        lines = output.getvalue().splitlines()
        assert lines == ["-1: b", "+1: c"]

    def test_rendering_silent_in_json_mode(self) -> None:
        ctx, output = _buffered(json_mode=True)
        ctx.code("<div />")
        ctx.line_changes(compare("a", "b"))
        assert output.getvalue() == ""


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_default_level_is_info(self) -> None:
        configure_logging()
        root = logging.getLogger()
        assert root.level == logging.INFO
        assert isinstance(root.handlers[0], RichHandler)

    def test_verbose_enables_debug(self) -> None:
        configure_logging(verbosity=1)
        assert logging.getLogger().level == logging.DEBUG

    def test_quiet_wins(self) -> None:
        configure_logging(verbosity=2, quiet=True)
        assert logging.getLogger().level == logging.WARNING
