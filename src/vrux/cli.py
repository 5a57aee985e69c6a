"""Vrux CLI: version history for generated UI components."""

import typer

from vrux import __version__

from .commands import (
    create,
    delete,
    diff,
    download,
    export,
    import_,
    init,
    list_versions,
    restore,
    show,
    star,
    tags,
)
from .logging import configure_logging
from .output import OutputContext, set_output_context


def _version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"vrux {__version__}")
        raise typer.Exit()


app = typer.Typer(
    name="vrux",
    help="Version history and diffs for AI-generated UI components",
    no_args_is_help=True,
)


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
    verbose: int = typer.Option(
        0,
        "--verbose",
        "-v",
        count=True,
        help="Increase verbosity (-v, -vv)",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Suppress non-error output",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output in JSON format for automation",
    ),
    no_color: bool = typer.Option(
        False,
        "--no-color",
        help="Disable colored output",
    ),
) -> None:
    """Vrux - version control for generated components."""
    console = configure_logging(
        verbosity=verbose,
        quiet=quiet,
        no_color=no_color,
    )
    set_output_context(OutputContext(console=console, json_mode=json_output))


app.command()(init)
app.command()(create)
app.command("list")(list_versions)
app.command()(show)
app.command()(diff)
app.command()(restore)
app.command()(delete)
app.command()(star)
app.command()(download)
app.command()(tags)
app.command()(export)
app.command("import")(import_)


if __name__ == "__main__":
    app()
