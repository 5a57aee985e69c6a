"""Commands that read a component's history."""

from pathlib import Path

import typer
from rich.syntax import Syntax
from rich.table import Table

from ..core import render_unified
from ..models import Tag
from ..output import get_output_context
from .common import ROOT_OPTION, open_project, resolve_version, version_summary


def list_versions(
    artifact: str | None = typer.Argument(None, help="Component identifier (omit to list all)"),
    tag: Tag | None = typer.Option(None, "--tag", "-t", help="Only versions with this tag"),
    starred: bool = typer.Option(False, "--starred", help="Only starred versions"),
    root: Path = ROOT_OPTION,
) -> None:
    """List versions of a component, newest first."""
    ctx = get_output_context()
    service = open_project(root)

    if artifact is None:
        artifacts = service.artifact_ids()
        ctx.result({"artifacts": artifacts}, "\n".join(artifacts) or "No components tracked")
        return

    versions = service.filter_by_tag(artifact, tag) if tag else service.get_versions(artifact)
    if starred:
        versions = [v for v in versions if v.is_starred]

    if ctx.json_mode:
        ctx.print_json([version_summary(v) for v in versions])
        return
    if not versions:
        ctx.print("[yellow]No versions found[/yellow]")
        return

    table = Table(title=f"{artifact} ({len(versions)} versions)")
    table.add_column("Version")
    table.add_column("Id")
    table.add_column("Message")
    table.add_column("Tags")
    table.add_column("Author")
    table.add_column("Stats")
    for v in versions:
        marker = " *" if v.is_current else ""
        star = " ★" if v.is_starred else ""
        table.add_row(
            f"v{v.version}{marker}{star}",
            v.id[:8],
            v.message,
            ", ".join(t.value for t in v.tags),
            v.author.name,
            f"{v.stats.view_count}v {v.stats.copy_count}c {v.stats.star_count}s",
        )
    ctx.console.print(table)


def show(
    artifact: str = typer.Argument(..., help="Component identifier"),
    ref: str | None = typer.Argument(None, help="Version reference (defaults to current)"),
    code_only: bool = typer.Option(False, "--code", help="Print only the code"),
    root: Path = ROOT_OPTION,
) -> None:
    """Show a version and count the view."""
    ctx = get_output_context()
    service = open_project(root)

    if ref is None:
        current = service.get_current(artifact)
        if current is None:
            ctx.error(f"No versions for {artifact}")
            raise typer.Exit(1)
        ref = current.id
    target = resolve_version(service, artifact, ref)
    version = service.view_version(artifact, target.id)
    if version is None:
        ctx.error(f"Version not found: {ref}")
        raise typer.Exit(1)

    if ctx.json_mode:
        ctx.print_json(version.to_json_dict())
        return
    if code_only:
        ctx.code(version.code, numbered=False)
    else:
        ctx.version_details(version)


def diff(
    artifact: str = typer.Argument(..., help="Component identifier"),
    ref_a: str = typer.Argument(..., help="Old version reference"),
    ref_b: str = typer.Argument(..., help="New version reference"),
    unified: bool = typer.Option(False, "--unified", "-u", help="Show a unified diff"),
    root: Path = ROOT_OPTION,
) -> None:
    """Compare two versions."""
    ctx = get_output_context()
    service = open_project(root)
    version_a = resolve_version(service, artifact, ref_a)
    version_b = resolve_version(service, artifact, ref_b)
    result = service.compare_versions(version_a, version_b)

    if ctx.json_mode:
        ctx.print_json(
            {
                "added": [str(c) for c in result.added],
                "removed": [str(c) for c in result.removed],
                "modified": [str(c) for c in result.modified],
                "similarity": result.similarity,
            }
        )
        return

    ctx.console.print(f"v{version_a.version} → v{version_b.version}: {result.summary()}")
    if unified:
        text = render_unified(
            version_a.code, version_b.code, f"v{version_a.version}", f"v{version_b.version}"
        )
        ctx.console.print(Syntax(text, "diff"))
    else:
        ctx.line_changes(result)


def tags(
    artifact: str = typer.Argument(..., help="Component identifier"),
    root: Path = ROOT_OPTION,
) -> None:
    """Show how many versions carry each tag."""
    ctx = get_output_context()
    counts = open_project(root).tag_counts(artifact)
    ctx.result(
        {tag.value: count for tag, count in counts.items()},
        "\n".join(f"{tag.value}: {count}" for tag, count in counts.items()) or "No tags",
    )


def download(
    artifact: str = typer.Argument(..., help="Component identifier"),
    ref: str = typer.Argument(..., help="Version reference"),
    output_dir: Path = typer.Option(Path("."), "--output-dir", "-o", help="Target directory"),
    root: Path = ROOT_OPTION,
) -> None:
    """Write a version's code to component-v<version>.jsx."""
    ctx = get_output_context()
    service = open_project(root)
    target = resolve_version(service, artifact, ref)
    path = service.write_version_file(artifact, target.id, output_dir)
    if path is None:
        ctx.error(f"Version not found: {ref}")
        raise typer.Exit(1)
    ctx.success(f"Wrote {path}", {"path": str(path)})
