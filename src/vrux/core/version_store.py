"""Version store for component histories.

Owns the newest-first history of every artifact and enforces its
invariants:
- exactly one version (the head) has is_current set
- version numbers strictly increase in creation order
- history length never exceeds max_versions; oldest entries go first

Every read-modify-write runs under a per-artifact re-entrant lock.
Persistence failures are logged and recorded, never raised: in-memory
state stays authoritative for the session.
"""

import logging
import math
import threading
from collections import Counter
from collections.abc import Callable, Iterable
from datetime import UTC, datetime

from ..constants import CHARS_PER_TOKEN, DEFAULT_MAX_VERSIONS, INITIAL_VERSION, VERSION_ROLLOVER
from ..errors import HistoryDecodeError, PersistenceError, VruxError
from ..models import Author, ComponentVersion, GenerationMetadata, StatField, Tag, VersionDiff
from ..services.storage import MemoryBackend, StorageBackend, decode_history, encode_history
from .classifier import classify
from .diff_engine import compare

logger = logging.getLogger(__name__)

_STAT_ATTRS: dict[str, str] = {"views": "view_count", "copies": "copy_count"}

PersistenceErrorHandler = Callable[[str, VruxError], None]


def next_version_number(previous: str | None) -> str:
    """Compute the version string following previous.

    Patch increments; at 100 it resets and minor increments; at 100 minor
    resets and major increments. A missing or unparseable previous version
    starts over at 1.0.0.
    """
    if not previous:
        return INITIAL_VERSION

    try:
        major, minor, patch = (int(p) for p in previous.split("."))
    except ValueError:
        logger.warning("Unparseable version %r, restarting at %s", previous, INITIAL_VERSION)
        return INITIAL_VERSION

    patch += 1
    if patch >= VERSION_ROLLOVER:
        patch = 0
        minor += 1
    if minor >= VERSION_ROLLOVER:
        minor = 0
        major += 1
    return f"{major}.{minor}.{patch}"


def estimate_token_count(code: str) -> int:
    """Rough token estimate: one token per four characters, rounded up."""
    return math.ceil(len(code) / CHARS_PER_TOKEN)


class VersionStore:
    """Per-artifact version histories backed by a storage backend.

    Args:
        backend: Where histories are persisted (in-memory if omitted)
        max_versions: History cap per artifact
        auto_tag: Attach derived tags to new versions
        on_persistence_error: Called with (artifact_id, error) when a save
            or load fails
    """

    def __init__(
        self,
        backend: StorageBackend | None = None,
        max_versions: int = DEFAULT_MAX_VERSIONS,
        auto_tag: bool = True,
        on_persistence_error: PersistenceErrorHandler | None = None,
    ) -> None:
        if max_versions < 1:
            raise ValueError(f"max_versions must be at least 1, got {max_versions}")
        self.backend: StorageBackend = backend if backend is not None else MemoryBackend()
        self.max_versions = max_versions
        self.auto_tag = auto_tag
        self.on_persistence_error = on_persistence_error
        self.last_persistence_error: VruxError | None = None
        self._evicted: dict[str, int] = {}
        self._unloaded: set[str] = set()
        self._histories: dict[str, list[ComponentVersion]] = {}
        self._locks: dict[str, threading.RLock] = {}
        self._locks_guard = threading.Lock()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _lock(self, artifact_id: str) -> threading.RLock:
        with self._locks_guard:
            lock = self._locks.get(artifact_id)
            if lock is None:
                lock = self._locks[artifact_id] = threading.RLock()
            return lock

    def _report(self, artifact_id: str, error: VruxError) -> None:
        self.last_persistence_error = error
        if self.on_persistence_error is not None:
            self.on_persistence_error(artifact_id, error)

    def _history(self, artifact_id: str) -> list[ComponentVersion]:
        """Get the live history list, loading it from the backend on first use.

        A failed load is not final: the artifact is marked unloaded, writes
        will not overwrite its stored history, and the load is retried on
        later accesses while nothing new exists in memory.
        """
        history = self._histories.get(artifact_id)
        if history is not None and not (artifact_id in self._unloaded and not history):
            return history
        try:
            stored = self.backend.load(artifact_id)
        except (PersistenceError, HistoryDecodeError) as e:
            logger.warning("Could not load history for %s: %s", artifact_id, e)
            self._report(artifact_id, e)
            self._unloaded.add(artifact_id)
            if history is None:
                history = self._histories[artifact_id] = []
            return history
        self._unloaded.discard(artifact_id)
        history = self._histories[artifact_id] = stored or []
        return history

    def _persist(self, artifact_id: str) -> bool:
        if artifact_id in self._unloaded:
            error = PersistenceError(
                f"Stored history for {artifact_id} could not be loaded; not overwriting it"
            )
            logger.warning("%s", error)
            self._report(artifact_id, error)
            return False
        try:
            self.backend.save(artifact_id, self._histories.get(artifact_id, []))
        except PersistenceError as e:
            logger.warning("Failed to persist history for %s: %s", artifact_id, e)
            self._report(artifact_id, e)
            return False
        self.last_persistence_error = None
        return True

    def _find(self, artifact_id: str, version_id: str) -> ComponentVersion | None:
        return next((v for v in self._history(artifact_id) if v.id == version_id), None)

    def _evict(self, artifact_id: str, history: list[ComponentVersion]) -> int:
        if len(history) <= self.max_versions:
            return 0
        evicted = len(history) - self.max_versions
        del history[self.max_versions :]
        logger.info("Removed %d old versions for component %s", evicted, artifact_id)
        return evicted

    def _create(
        self,
        artifact_id: str,
        code: str,
        prompt: str,
        author: Author | dict,
        metadata: GenerationMetadata | dict | None,
        message: str | None,
        extra_tags: Iterable[Tag] = (),
    ) -> ComponentVersion:
        history = self._history(artifact_id)
        head = history[0] if history else None

        tags, derived_message = classify(code, head.code if head else None)
        if not self.auto_tag:
            tags = []
        tags.extend(extra_tags)

        if not isinstance(metadata, GenerationMetadata):
            metadata = GenerationMetadata.model_validate(metadata or {})
        metadata = metadata.model_copy(update={"token_count": estimate_token_count(code)})

        timestamp = datetime.now(UTC)
        if head is not None and head.timestamp > timestamp:
            timestamp = head.timestamp

        version = ComponentVersion(
            version=next_version_number(head.version if head else None),
            code=code,
            prompt=prompt,
            parent_version=head.id if head else None,
            author=author if isinstance(author, Author) else Author.model_validate(author),
            timestamp=timestamp,
            message=message or derived_message,
            tags=tags,
            metadata=metadata,
            is_current=True,
        )

        for existing in history:
            existing.is_current = False
        history.insert(0, version)
        self._evicted[artifact_id] = self._evict(artifact_id, history)

        self._persist(artifact_id)
        logger.debug("Created %s v%s (%s)", artifact_id, version.version, version.id)
        return version

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def create_version(
        self,
        artifact_id: str,
        code: str,
        prompt: str,
        author: Author | dict,
        metadata: GenerationMetadata | dict | None = None,
        message: str | None = None,
    ) -> ComponentVersion:
        """Append a new head version to an artifact's history.

        Args:
            artifact_id: Artifact whose history grows
            code: Full code of the new snapshot
            prompt: Instruction that produced it
            author: Author model or {id, name, avatar?} dict
            metadata: Optional generation provenance; tokenCount is always
                recomputed from code
            message: Overrides the derived commit message

        Returns:
            The new current version
        """
        with self._lock(artifact_id):
            return self._create(artifact_id, code, prompt, author, metadata, message)

    def restore_version(
        self, artifact_id: str, version_id: str, author: Author | dict
    ) -> ComponentVersion | None:
        """Create a new head carrying an earlier version's code and prompt.

        The restored-from version is left untouched.

        Returns:
            The new head tagged 'restored', or None if version_id is unknown
        """
        with self._lock(artifact_id):
            target = self._find(artifact_id, version_id)
            if target is None:
                return None
            return self._create(
                artifact_id,
                target.code,
                target.prompt,
                author,
                target.metadata,
                f"Restored from v{target.version}",
                extra_tags=[Tag.RESTORED],
            )

    def delete_version(self, artifact_id: str, version_id: str) -> bool:
        """Delete a non-current version.

        Returns:
            False if the version does not exist or is the current head
        """
        with self._lock(artifact_id):
            history = self._history(artifact_id)
            index = next((i for i, v in enumerate(history) if v.id == version_id), None)
            if index is None or history[index].is_current:
                return False
            del history[index]
            self._persist(artifact_id)
            return True

    def toggle_star(self, artifact_id: str, version_id: str) -> bool | None:
        """Flip a version's starred flag, keeping the star counter in step.

        Returns:
            The new is_starred value, or None if the version does not exist
        """
        with self._lock(artifact_id):
            version = self._find(artifact_id, version_id)
            if version is None:
                return None
            version.is_starred = not version.is_starred
            delta = 1 if version.is_starred else -1
            version.stats.star_count = max(0, version.stats.star_count + delta)
            self._persist(artifact_id)
            return version.is_starred

    def update_stats(
        self, artifact_id: str, version_id: str, field: StatField, delta: int = 1
    ) -> None:
        """Increment the views or copies counter. No-op for unknown versions."""
        attr = _STAT_ATTRS.get(field)
        if attr is None:
            logger.warning("Unknown stat field: %s", field)
            return
        with self._lock(artifact_id):
            version = self._find(artifact_id, version_id)
            if version is None:
                return
            setattr(version.stats, attr, max(0, getattr(version.stats, attr) + delta))
            self._persist(artifact_id)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_versions(self, artifact_id: str) -> list[ComponentVersion]:
        """Get an artifact's history, newest first. Unknown ids give []."""
        with self._lock(artifact_id):
            return list(self._history(artifact_id))

    def get_version(self, artifact_id: str, version_id: str) -> ComponentVersion | None:
        with self._lock(artifact_id):
            return self._find(artifact_id, version_id)

    def get_current(self, artifact_id: str) -> ComponentVersion | None:
        """Get the head version, if any."""
        with self._lock(artifact_id):
            history = self._history(artifact_id)
            return history[0] if history else None

    def compare_versions(
        self, version_a: ComponentVersion, version_b: ComponentVersion
    ) -> VersionDiff:
        """Diff two versions' code, treating version_a as the old side."""
        return compare(version_a.code, version_b.code)

    def filter_by_tag(self, artifact_id: str, tag: Tag | str) -> list[ComponentVersion]:
        """Versions carrying tag, newest first."""
        tag = Tag(tag)
        return [v for v in self.get_versions(artifact_id) if tag in v.tags]

    def starred(self, artifact_id: str) -> list[ComponentVersion]:
        return [v for v in self.get_versions(artifact_id) if v.is_starred]

    def tag_counts(self, artifact_id: str) -> Counter[Tag]:
        """Count how many versions carry each tag."""
        return Counter(tag for v in self.get_versions(artifact_id) for tag in v.tags)

    def last_evicted(self, artifact_id: str) -> int:
        """Number of versions evicted by the latest create for an artifact."""
        return self._evicted.get(artifact_id, 0)

    def artifact_ids(self) -> list[str]:
        """Artifacts known in memory or to the backend."""
        try:
            stored = set(self.backend.keys())
        except PersistenceError as e:
            logger.warning("Could not list stored artifacts: %s", e)
            stored = set()
        return sorted(stored | {k for k, v in self._histories.items() if v})

    # ------------------------------------------------------------------
    # Load / export / import
    # ------------------------------------------------------------------

    def load(self, artifact_id: str) -> bool:
        """Reload an artifact's history from the backend.

        Returns:
            True if a stored history was loaded; on failure or when nothing
            is stored, in-memory state is left as it was
        """
        with self._lock(artifact_id):
            try:
                stored = self.backend.load(artifact_id)
            except (PersistenceError, HistoryDecodeError) as e:
                logger.error("Failed to load versions for %s: %s", artifact_id, e)
                self._report(artifact_id, e)
                return False
            if stored is None:
                return False
            self._unloaded.discard(artifact_id)
            self._histories[artifact_id] = stored
            return True

    def export_history(self, artifact_id: str) -> str:
        """Serialize an artifact's history as pretty-printed JSON."""
        with self._lock(artifact_id):
            return encode_history(self._history(artifact_id))

    def import_history(self, artifact_id: str, data: str | bytes) -> bool:
        """Replace an artifact's history with serialized data.

        The head of the imported list becomes the only current version and
        the list is cut to max_versions.

        Returns:
            False if data is malformed; existing state is left untouched
        """
        try:
            history = decode_history(data)
        except HistoryDecodeError as e:
            logger.error("Failed to import versions for %s: %s", artifact_id, e)
            return False

        with self._lock(artifact_id):
            for i, version in enumerate(history):
                version.is_current = i == 0
            self._evict(artifact_id, history)
            self._histories[artifact_id] = history
            self._unloaded.discard(artifact_id)
            self._persist(artifact_id)
        return True
