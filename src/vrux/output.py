"""Output formatting for the vrux CLI.

Human output goes through rich; with --json every command emits a single
JSON document on stdout and warnings move to stderr so the document stays
parseable.
"""

from dataclasses import dataclass, field
from typing import Any

from rich.console import Console
from rich.syntax import Syntax
from rich.text import Text

from .models import ComponentVersion, VersionDiff

CODE_LEXER = "jsx"


def _stderr_console() -> Console:
    return Console(stderr=True, highlight=False)


@dataclass
class OutputContext:
    """Where and how a command reports its results."""

    console: Console
    json_mode: bool = False
    err_console: Console = field(default_factory=_stderr_console)

    def print(self, message: str, style: str | None = None) -> None:
        """Print a rich-markup message; silent in JSON mode."""
        if not self.json_mode:
            self.console.print(message, style=style)

    def print_json(self, data: Any) -> None:
        """Emit data as one JSON document (JSON mode only)."""
        if self.json_mode:
            self.console.print_json(data=data, indent=2, default=str, highlight=False)

    def result(self, data: Any, message: str = "") -> None:
        """Report a command result: data in JSON mode, message otherwise."""
        if self.json_mode:
            self.print_json(data)
        elif message:
            self.console.print(message)

    def warning(self, message: str) -> None:
        if self.json_mode:
            self.err_console.print(f"Warning: {message}", markup=False)
        else:
            self.console.print(f"Warning: {message}", style="yellow", markup=False)

    def error(self, message: str, data: dict[str, Any] | None = None) -> None:
        if self.json_mode:
            self.print_json({"error": message, **(data or {})})
        else:
            self.console.print(f"Error: {message}", style="red", markup=False)

    def success(self, message: str, data: dict[str, Any] | None = None) -> None:
        if self.json_mode:
            self.print_json({"success": message, **(data or {})})
        else:
            self.console.print(message, style="green", markup=False)

    def code(self, source: str, numbered: bool = True) -> None:
        """Print component code, highlighted unless raw output is wanted."""
        if self.json_mode:
            return
        if numbered:
            self.console.print(Syntax(source, CODE_LEXER, line_numbers=True))
        else:
            self.console.print(source, markup=False, highlight=False, soft_wrap=True)

    def version_details(self, version: ComponentVersion) -> None:
        """Print a version's header fields followed by its code."""
        if self.json_mode:
            return
        rows = [
            ("Message", version.message),
            ("Prompt", version.prompt),
            ("Author", version.author.name),
            ("Created", version.timestamp.strftime("%Y-%m-%d %H:%M")),
            ("Tags", ", ".join(t.value for t in version.tags)),
            ("Model", version.metadata.model or ""),
            ("Tokens", f"~{version.metadata.token_count}"),
        ]
        self.console.print(f"[bold]v{version.version}[/bold] {version.id}")
        for label, value in rows:
            if value:
                self.console.print(Text.assemble((f"{label}: ", "bold"), value), soft_wrap=True)
        self.code(version.code)

    def line_changes(self, diff: VersionDiff) -> None:
        """Print removed lines in red, then added lines in green."""
        if self.json_mode:
            return
        for change in diff.removed:
            self.console.print(str(change), style="red", markup=False, soft_wrap=True)
        for change in diff.added:
            self.console.print(str(change), style="green", markup=False, soft_wrap=True)


# Global output context (set by cli.py main callback)
_ctx: OutputContext | None = None


def get_output_context() -> OutputContext:
    """Get the current output context, or a plain one outside the CLI."""
    if _ctx is None:
        return OutputContext(Console())
    return _ctx


def set_output_context(ctx: OutputContext) -> None:
    global _ctx
    _ctx = ctx
