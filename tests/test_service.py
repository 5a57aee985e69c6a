"""Tests for the service facade."""

from pathlib import Path

import pytest

from vrux.config import BackendKind, StorageConfig, VruxConfig
from vrux.core import VersionControlService, build_backend, open_service
from vrux.errors import PersistenceError
from vrux.models import Author, Tag
from vrux.services.storage import FileBackend, MemoryBackend


@pytest.fixture
def service() -> VersionControlService:
    return VersionControlService()


@pytest.mark.unit
class TestVersionControlService:
    """Tests for VersionControlService."""

    def test_uses_config(self, alice: Author) -> None:
        config = VruxConfig.model_validate({"history": {"max_versions": 2, "auto_tag": False}})
        service = VersionControlService(config)
        for i in range(3):
            service.create_version("A", f"code {i}", "p", alice)
        versions = service.get_versions("A")
        assert len(versions) == 2
        assert versions[0].tags == []

    def test_build_a_button_scenario(self, service: VersionControlService, alice: Author) -> None:
        first = service.create_version("A", "code-v1", "build a button", alice)
        assert (first.version, first.tags, first.is_current) == ("1.0.0", [Tag.INITIAL], True)

        second = service.create_version("A", "code-v1 + useState", "add state", alice)
        assert second.version == "1.0.1"
        assert Tag.ADDED_STATE in second.tags
        assert service.get_version("A", first.id).is_current is False
        assert service.get_current("A") == second

    def test_find_version(self, service: VersionControlService, alice: Author) -> None:
        first = service.create_version("A", "a", "p", alice)
        second = service.create_version("A", "b", "p", alice)
        assert service.find_version("A", first.id) == first
        assert service.find_version("A", "1.0.1") == second
        assert service.find_version("A", "v1.0.0") == first
        assert service.find_version("A", second.id[:10]) == second
        assert service.find_version("A", "9.9.9") is None

    def test_view_version_counts(self, service: VersionControlService, alice: Author) -> None:
        v = service.create_version("A", "a", "p", alice)
        assert service.view_version("A", v.id) == v
        service.view_version("A", v.id)
        assert v.stats.view_count == 2
        assert service.view_version("A", "missing") is None

    def test_write_version_file(
        self, service: VersionControlService, alice: Author, tmp_path: Path
    ) -> None:
        v = service.create_version("A", "<Button/>", "p", alice)
        path = service.write_version_file("A", v.id, tmp_path / "out")
        assert path == tmp_path / "out" / "component-v1.0.0.jsx"
        assert path.read_text() == "<Button/>"
        assert v.stats.copy_count == 1
        assert service.write_version_file("A", "missing", tmp_path) is None

    def test_tag_counts_most_common_first(
        self, service: VersionControlService, alice: Author
    ) -> None:
        for _ in range(3):
            service.create_version("A", "same", "p", alice)
        assert list(service.tag_counts("A").items()) == [
            (Tag.MINOR_CHANGE, 2),
            (Tag.INITIAL, 1),
        ]

    def test_export_import(self, service: VersionControlService, alice: Author) -> None:
        service.create_version("A", "a", "p", alice)
        other = VersionControlService()
        assert other.import_versions("B", service.export_versions("A"))
        assert [v.id for v in other.get_versions("B")] == [
            v.id for v in service.get_versions("A")
        ]
        assert other.import_versions("B", "nope") is False

    def test_persistence_error_reported(self, alice: Author) -> None:
        class Broken(MemoryBackend):
            def save(self, artifact_id, history):
                raise PersistenceError("offline")

        seen = []
        service = VersionControlService(
            backend=Broken(), on_persistence_error=lambda aid, err: seen.append((aid, str(err)))
        )
        service.create_version("A", "a", "p", alice)
        assert seen == [("A", "offline")]
        assert isinstance(service.last_persistence_error, PersistenceError)


@pytest.mark.unit
class TestOpenService:
    """Tests for building services from a project directory."""

    def test_build_backend(self, tmp_path: Path) -> None:
        file_backend = build_backend(VruxConfig(), tmp_path)
        assert isinstance(file_backend, FileBackend)
        assert file_backend.directory == tmp_path / "versions"

        memory = VruxConfig(storage=StorageConfig(backend=BackendKind.MEMORY))
        assert isinstance(build_backend(memory, tmp_path), MemoryBackend)
        assert isinstance(build_backend(VruxConfig()), MemoryBackend)

    def test_history_survives_reopen(self, project_root: Path, alice: Author) -> None:
        v = open_service(project_root).create_version("A", "a", "p", alice)

        reopened = open_service(project_root)
        assert [x.id for x in reopened.get_versions("A")] == [v.id]
        assert reopened.create_version("A", "b", "p", alice).version == "1.0.1"
        assert reopened.artifact_ids() == ["A"]

    def test_load_versions(self, project_root: Path, alice: Author) -> None:
        first = open_service(project_root)
        first.create_version("A", "a", "p", alice)
        second = open_service(project_root)
        second.create_version("A", "b", "p", alice)

        assert first.load_versions("A") is True
        assert len(first.get_versions("A")) == 2
