"""Export and import of whole histories."""

from pathlib import Path

import typer

from ..output import get_output_context
from .common import ROOT_OPTION, open_project


def export(
    artifact: str = typer.Argument(..., help="Component identifier"),
    output: Path | None = typer.Option(None, "--output", "-o", help="Write to file"),
    root: Path = ROOT_OPTION,
) -> None:
    """Export a component's history as JSON."""
    ctx = get_output_context()
    data = open_project(root).export_versions(artifact)
    if output is None:
        typer.echo(data)
        return
    output.write_text(data, encoding="utf-8")
    ctx.success(f"Exported {artifact} to {output}", {"path": str(output)})


def import_(
    artifact: str = typer.Argument(..., help="Component identifier"),
    file: Path = typer.Option(..., "--file", "-f", help="JSON file to import"),
    root: Path = ROOT_OPTION,
) -> None:
    """Replace a component's history with an exported one."""
    ctx = get_output_context()
    if not file.exists():
        ctx.error(f"File not found: {file}")
        raise typer.Exit(2)
    service = open_project(root)
    if not service.import_versions(artifact, file.read_text(encoding="utf-8")):
        ctx.error(f"Invalid version history in {file}")
        raise typer.Exit(2)
    count = len(service.get_versions(artifact))
    ctx.success(f"Imported {count} versions into {artifact}", {"count": count})
