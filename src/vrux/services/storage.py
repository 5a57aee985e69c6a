"""Storage backends for version histories.

A backend persists one history (newest-first list of ComponentVersion)
per artifact id. Histories are encoded as a pretty-printed JSON array
with ISO-8601 timestamps, in the camelCase wire format.
"""

import logging
import os
import tempfile
from pathlib import Path
from typing import Protocol
from urllib.parse import quote, unquote

from pydantic import TypeAdapter, ValidationError

from ..constants import DEFAULT_KEY_PREFIX
from ..errors import HistoryDecodeError, PersistenceError
from ..models import ComponentVersion

logger = logging.getLogger(__name__)

_history_adapter = TypeAdapter(list[ComponentVersion])
_SUFFIX = ".json"


def encode_history(history: list[ComponentVersion]) -> str:
    """Serialize a history to pretty-printed JSON."""
    return _history_adapter.dump_json(history, indent=2, by_alias=True).decode()


def decode_history(data: str | bytes) -> list[ComponentVersion]:
    """Parse serialized history.

    Raises:
        HistoryDecodeError: If data is not valid UTF-8 JSON or not a list of versions
    """
    try:
        return _history_adapter.validate_json(data)
    except ValidationError as e:
        raise HistoryDecodeError(f"Invalid version history: {e.error_count()} error(s)") from e
    except UnicodeDecodeError as e:
        raise HistoryDecodeError(f"Invalid version history: not UTF-8 ({e.reason})") from e


class StorageBackend(Protocol):
    """Minimal key-value contract the version store depends on."""

    def save(self, artifact_id: str, history: list[ComponentVersion]) -> None: ...

    def load(self, artifact_id: str) -> list[ComponentVersion] | None: ...

    def delete(self, artifact_id: str) -> None: ...

    def keys(self) -> list[str]: ...


class MemoryBackend:
    """In-process backend holding encoded JSON per artifact."""

    def __init__(self) -> None:
        self._data: dict[str, str] = {}

    def save(self, artifact_id: str, history: list[ComponentVersion]) -> None:
        self._data[artifact_id] = encode_history(history)

    def load(self, artifact_id: str) -> list[ComponentVersion] | None:
        stored = self._data.get(artifact_id)
        if stored is None:
            return None
        return decode_history(stored)

    def delete(self, artifact_id: str) -> None:
        self._data.pop(artifact_id, None)

    def keys(self) -> list[str]:
        return sorted(self._data)


class FileBackend:
    """Backend storing one JSON file per artifact in a directory.

    Files are named <key_prefix><artifact_id>.json with the id percent-encoded,
    so distinct ids always map to distinct files and keys() can recover them. Writes go through a temporary file
    and an atomic rename so a crash never leaves a half-written history.
    """

    def __init__(self, directory: Path, key_prefix: str = DEFAULT_KEY_PREFIX) -> None:
        self.directory = Path(directory)
        self.key_prefix = key_prefix

    def path_for(self, artifact_id: str) -> Path:
        """Get the file path for an artifact's history."""
        return self.directory / f"{self.key_prefix}{quote(artifact_id, safe='')}{_SUFFIX}"

    def save(self, artifact_id: str, history: list[ComponentVersion]) -> None:
        path = self.path_for(artifact_id)
        content = encode_history(history)
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.directory, suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(content)
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise PersistenceError(f"Failed to save history for {artifact_id}: {e}") from e
        logger.debug("Saved %d versions to %s", len(history), path)

    def load(self, artifact_id: str) -> list[ComponentVersion] | None:
        path = self.path_for(artifact_id)
        if not path.exists():
            return None
        try:
            content = path.read_bytes()
        except OSError as e:
            raise PersistenceError(f"Failed to load history for {artifact_id}: {e}") from e
        return decode_history(content)

    def delete(self, artifact_id: str) -> None:
        try:
            self.path_for(artifact_id).unlink(missing_ok=True)
        except OSError as e:
            raise PersistenceError(f"Failed to delete history for {artifact_id}: {e}") from e

    def keys(self) -> list[str]:
        if not self.directory.exists():
            return []
        return sorted(
            unquote(p.name[len(self.key_prefix) : -len(_SUFFIX)])
            for p in self.directory.glob(f"{self.key_prefix}*{_SUFFIX}")
        )
