"""Helpers shared by vrux commands."""

import getpass
from pathlib import Path

import typer

from ..core import VersionControlService, get_vrux_dir, open_service
from ..errors import VruxError
from ..models import Author, ComponentVersion
from ..output import get_output_context

ROOT_OPTION = typer.Option(Path("."), "--root", help="Project root containing .vrux/")


def open_project(root: Path) -> VersionControlService:
    """Open the service for a project, exiting if vrux is not initialized."""
    ctx = get_output_context()
    if not get_vrux_dir(root).is_dir():
        ctx.error("vrux not initialized. Run 'vrux init' first.")
        raise typer.Exit(1)

    def warn(artifact_id: str, error: VruxError) -> None:
        ctx.warning(f"storage failure for {artifact_id}: {error}")

    return open_service(root, on_persistence_error=warn)


def resolve_version(
    service: VersionControlService, artifact_id: str, ref: str
) -> ComponentVersion:
    """Resolve a version reference or exit with code 1."""
    version = service.find_version(artifact_id, ref)
    if version is None:
        get_output_context().error(
            f"Version not found: {ref}", {"artifact": artifact_id, "ref": ref}
        )
        raise typer.Exit(1)
    return version


def cli_author(name: str | None, author_id: str | None) -> Author:
    """Build the author for a CLI invocation, defaulting to the OS user."""
    user = getpass.getuser()
    return Author(id=author_id or user, name=name or user)


def version_summary(version: ComponentVersion) -> dict:
    """Compact JSON view of a version (no code)."""
    return {
        "id": version.id,
        "version": version.version,
        "message": version.message,
        "tags": [t.value for t in version.tags],
        "author": version.author.name,
        "timestamp": version.timestamp.isoformat(),
        "isCurrent": version.is_current,
        "isStarred": version.is_starred,
    }
