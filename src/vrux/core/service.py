"""Service facade combining the version store, classifier and storage.

This is the single entry point for callers (CLI, API handlers, UI
adapters). It adds convenience operations on top of VersionStore such as
viewing and downloading a version, which also bump usage counters.
"""

import logging
from pathlib import Path

from ..config import BackendKind, VruxConfig, load_config
from ..constants import VRUX_DIR_NAME
from ..errors import VruxError
from ..models import Author, ComponentVersion, GenerationMetadata, StatField, Tag, VersionDiff
from ..services.storage import FileBackend, MemoryBackend, StorageBackend
from .version_store import PersistenceErrorHandler, VersionStore

logger = logging.getLogger(__name__)


def build_backend(config: VruxConfig, vrux_dir: Path | None = None) -> StorageBackend:
    """Create the storage backend named in config.

    A file backend without a .vrux directory falls back to memory.
    """
    if config.storage.backend == BackendKind.FILE and vrux_dir is not None:
        return FileBackend(
            config.storage.resolve_directory(vrux_dir), key_prefix=config.storage.key_prefix
        )
    return MemoryBackend()


class VersionControlService:
    """Version control for generated components.

    Args:
        config: Settings (defaults if omitted)
        backend: Storage backend (in-memory if omitted)
        on_persistence_error: Called with (artifact_id, error) on storage failures
    """

    def __init__(
        self,
        config: VruxConfig | None = None,
        backend: StorageBackend | None = None,
        on_persistence_error: PersistenceErrorHandler | None = None,
    ) -> None:
        self.config = config or VruxConfig()
        self.store = VersionStore(
            backend=backend,
            max_versions=self.config.history.max_versions,
            auto_tag=self.config.history.auto_tag,
            on_persistence_error=on_persistence_error,
        )

    @property
    def last_persistence_error(self) -> VruxError | None:
        """Most recent unresolved storage failure, for retry or user warnings."""
        return self.store.last_persistence_error

    def create_version(
        self,
        artifact_id: str,
        code: str,
        prompt: str,
        author: Author | dict,
        metadata: GenerationMetadata | dict | None = None,
        message: str | None = None,
    ) -> ComponentVersion:
        return self.store.create_version(artifact_id, code, prompt, author, metadata, message)

    def get_versions(self, artifact_id: str) -> list[ComponentVersion]:
        return self.store.get_versions(artifact_id)

    def get_version(self, artifact_id: str, version_id: str) -> ComponentVersion | None:
        return self.store.get_version(artifact_id, version_id)

    def get_current(self, artifact_id: str) -> ComponentVersion | None:
        return self.store.get_current(artifact_id)

    def find_version(self, artifact_id: str, ref: str) -> ComponentVersion | None:
        """Look up a version by id, version string ('1.0.2' or 'v1.0.2') or id prefix."""
        versions = self.store.get_versions(artifact_id)
        for version in versions:
            if version.id == ref:
                return version
        number = ref[1:] if ref.startswith("v") else ref
        for version in versions:
            if version.version == number:
                return version
        matches = [v for v in versions if v.id.startswith(ref)]
        return matches[0] if len(matches) == 1 else None

    def restore_version(
        self, artifact_id: str, version_id: str, author: Author | dict
    ) -> ComponentVersion | None:
        return self.store.restore_version(artifact_id, version_id, author)

    def compare_versions(
        self, version_a: ComponentVersion, version_b: ComponentVersion
    ) -> VersionDiff:
        return self.store.compare_versions(version_a, version_b)

    def delete_version(self, artifact_id: str, version_id: str) -> bool:
        return self.store.delete_version(artifact_id, version_id)

    def toggle_star(self, artifact_id: str, version_id: str) -> bool | None:
        return self.store.toggle_star(artifact_id, version_id)

    def update_stats(
        self, artifact_id: str, version_id: str, field: StatField, delta: int = 1
    ) -> None:
        self.store.update_stats(artifact_id, version_id, field, delta)

    def view_version(self, artifact_id: str, version_id: str) -> ComponentVersion | None:
        """Get a version and count the view."""
        version = self.store.get_version(artifact_id, version_id)
        if version is not None:
            self.store.update_stats(artifact_id, version_id, "views")
        return version

    def write_version_file(
        self, artifact_id: str, version_id: str, directory: Path
    ) -> Path | None:
        """Write a version's code to component-v<version>.jsx and count the copy.

        Returns:
            Path written, or None if the version does not exist
        """
        version = self.store.get_version(artifact_id, version_id)
        if version is None:
            return None
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / f"component-v{version.version}.jsx"
        path.write_text(version.code, encoding="utf-8")
        self.store.update_stats(artifact_id, version_id, "copies")
        return path

    def filter_by_tag(self, artifact_id: str, tag: Tag | str) -> list[ComponentVersion]:
        return self.store.filter_by_tag(artifact_id, tag)

    def tag_counts(self, artifact_id: str) -> dict[Tag, int]:
        return dict(self.store.tag_counts(artifact_id).most_common())

    def artifact_ids(self) -> list[str]:
        return self.store.artifact_ids()

    def load_versions(self, artifact_id: str) -> bool:
        return self.store.load(artifact_id)

    def export_versions(self, artifact_id: str) -> str:
        return self.store.export_history(artifact_id)

    def import_versions(self, artifact_id: str, data: str | bytes) -> bool:
        return self.store.import_history(artifact_id, data)


def get_vrux_dir(root: Path) -> Path:
    """Get the .vrux directory for a project root."""
    return root / VRUX_DIR_NAME


def open_service(
    root: Path, on_persistence_error: PersistenceErrorHandler | None = None
) -> VersionControlService:
    """Build a service from <root>/.vrux/config.toml.

    Args:
        root: Project root containing the .vrux directory
        on_persistence_error: Storage failure callback

    Returns:
        Service wired to the configured backend
    """
    vrux_dir = get_vrux_dir(root)
    config = load_config(vrux_dir)
    backend = build_backend(config, vrux_dir)
    logger.debug("Opened vrux at %s with %s backend", vrux_dir, config.storage.backend.value)
    return VersionControlService(config, backend, on_persistence_error)
