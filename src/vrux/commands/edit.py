"""Commands that change a component's history."""

from pathlib import Path

import typer

from ..output import get_output_context
from .common import ROOT_OPTION, cli_author, open_project, resolve_version, version_summary


def create(
    artifact: str = typer.Argument(..., help="Component identifier"),
    file: Path = typer.Option(..., "--file", "-f", help="File holding the component code"),
    prompt: str = typer.Option(..., "--prompt", "-p", help="Prompt that produced the code"),
    message: str | None = typer.Option(None, "--message", "-m", help="Override commit message"),
    author: str | None = typer.Option(None, "--author", help="Author display name"),
    author_id: str | None = typer.Option(None, "--author-id", help="Author identifier"),
    model: str | None = typer.Option(None, "--model", help="Generating model name"),
    provider: str | None = typer.Option(None, "--provider", help="Generating provider"),
    temperature: float | None = typer.Option(None, "--temperature", help="Sampling temperature"),
    root: Path = ROOT_OPTION,
) -> None:
    """Record a new version of a component."""
    ctx = get_output_context()
    if not file.exists():
        ctx.error(f"File not found: {file}")
        raise typer.Exit(2)

    service = open_project(root)
    version = service.create_version(
        artifact,
        file.read_text(encoding="utf-8"),
        prompt,
        cli_author(author, author_id),
        {"model": model, "provider": provider, "temperature": temperature},
        message,
    )
    tags = ", ".join(t.value for t in version.tags) or "-"
    ctx.result(
        version_summary(version),
        f"[green]Created v{version.version}[/green] {version.id[:8]} {version.message} [{tags}]",
    )
    evicted = service.store.last_evicted(artifact)
    if evicted:
        ctx.print(f"[dim]Evicted {evicted} old version(s)[/dim]")


def restore(
    artifact: str = typer.Argument(..., help="Component identifier"),
    ref: str = typer.Argument(..., help="Version id, id prefix or number"),
    author: str | None = typer.Option(None, "--author", help="Author display name"),
    author_id: str | None = typer.Option(None, "--author-id", help="Author identifier"),
    root: Path = ROOT_OPTION,
) -> None:
    """Restore an earlier version as a new head version."""
    ctx = get_output_context()
    service = open_project(root)
    target = resolve_version(service, artifact, ref)
    restored = service.restore_version(artifact, target.id, cli_author(author, author_id))
    if restored is None:
        ctx.error(f"Version not found: {ref}")
        raise typer.Exit(1)
    ctx.result(
        version_summary(restored),
        f"[green]Restored v{target.version} as v{restored.version}[/green]",
    )


def delete(
    artifact: str = typer.Argument(..., help="Component identifier"),
    ref: str = typer.Argument(..., help="Version id, id prefix or number"),
    root: Path = ROOT_OPTION,
) -> None:
    """Delete a version (the current version cannot be deleted)."""
    ctx = get_output_context()
    service = open_project(root)
    target = resolve_version(service, artifact, ref)
    if not service.delete_version(artifact, target.id):
        ctx.error("Cannot delete current version", {"id": target.id})
        raise typer.Exit(1)
    ctx.success(f"Deleted v{target.version}", {"id": target.id})


def star(
    artifact: str = typer.Argument(..., help="Component identifier"),
    ref: str = typer.Argument(..., help="Version id, id prefix or number"),
    root: Path = ROOT_OPTION,
) -> None:
    """Star or unstar a version."""
    ctx = get_output_context()
    service = open_project(root)
    target = resolve_version(service, artifact, ref)
    starred = service.toggle_star(artifact, target.id)
    if starred is None:
        ctx.error(f"Version not found: {ref}")
        raise typer.Exit(1)
    label = "Starred" if starred else "Unstarred"
    ctx.result(
        {"id": target.id, "isStarred": starred, "stars": target.stats.star_count},
        f"{label} v{target.version}",
    )
