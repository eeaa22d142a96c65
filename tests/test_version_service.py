"""Unit tests for VersionService against a real in-memory database.

Covers compare, revert (append-only) and project-wide cleanup with
per-file failure isolation.
"""

from sqlalchemy.orm import sessionmaker

from memory_bank.exceptions import StorageError
from memory_bank.repositories import VersionRepository
from memory_bank.services.file_service import FileService
from memory_bank.services.retention import RetentionConfig
from memory_bank.services.version_service import VersionService


def _services(db, version_store=None, retention=None):
    store = version_store or VersionRepository(db)
    files = FileService(db, store)
    return files, VersionService(store, files, default_retention=retention)


def _write_versions(files: FileService, name: str, count: int, project: str = "proj") -> None:
    files.write_file(project, name, "v1")
    for n in range(2, count + 1):
        files.update_file(project, name, f"v{n}")


class _FailingVersionRepository(VersionRepository):
    """Version store whose cleanup fails for one file."""

    def __init__(self, db, failing_file: str):
        super().__init__(db)
        self.failing_file = failing_file

    def cleanup_old_versions(self, project_name, file_name, config, now=None):
        if file_name == self.failing_file:
            raise StorageError(f"Failed to cleanup old versions for file {file_name}")
        return super().cleanup_old_versions(project_name, file_name, config, now=now)


class _DeletesAfterListing:
    """File store that loses one file from another session right after listing."""

    def __init__(self, files: FileService, engine, doomed_file: str):
        self.files = files
        self.engine = engine
        self.doomed_file = doomed_file

    def list_files(self, project_name):
        listed = self.files.list_files(project_name)
        other = sessionmaker(bind=self.engine)()
        try:
            FileService(other, VersionRepository(other)).delete_file(project_name, self.doomed_file)
        finally:
            other.close()
        return listed

    def update_file(self, project_name, file_name, content, change_description=None):
        return self.files.update_file(project_name, file_name, content, change_description)


class TestGetVersions:

    def test_history_matches_write_count(self, db):
        files, svc = _services(db)
        for n in range(1, 5):
            if n == 1:
                files.write_file("proj", "a.md", "v1")
            else:
                files.update_file("proj", "a.md", f"v{n}")
            assert svc.get_latest_version_number("proj", "a.md") == n

        assert [v.version for v in svc.get_file_versions("proj", "a.md")] == [4, 3, 2, 1]

    def test_get_file_version(self, db):
        files, svc = _services(db)
        _write_versions(files, "a.md", 3)

        assert svc.get_file_version("proj", "a.md", 2).content == "v2"
        assert svc.get_file_version("proj", "a.md", 9) is None


class TestCompare:

    def test_compare_two_versions(self, db):
        files, svc = _services(db)
        files.write_file("proj", "a.md", "Line 1\nLine 2\nLine 3")
        files.update_file("proj", "a.md", "Line 1\nModified Line 2\nLine 3\nNew Line 4")

        result = svc.compare_file_versions("proj", "a.md", 1, 2)

        assert result is not None
        assert result.version1_content == "Line 1\nLine 2\nLine 3"
        assert [d.type for d in result.differences] == ["modification", "addition"]

    def test_compare_missing_version_returns_none(self, db):
        files, svc = _services(db)
        files.write_file("proj", "a.md", "content")

        assert svc.compare_file_versions("proj", "a.md", 1, 999) is None
        assert svc.compare_file_versions("proj", "a.md", 999, 1) is None

    def test_compare_uses_injected_differ(self, db):
        files, _ = _services(db)
        files.write_file("proj", "a.md", "x")
        calls = []

        def differ(a, b):
            calls.append((a, b))
            return []

        svc = VersionService(VersionRepository(db), files, differ=differ)
        svc.compare_file_versions("proj", "a.md", 1, 1)

        assert calls == [("x", "x")]


class TestRevert:

    def test_revert_appends_new_version(self, db):
        files, svc = _services(db)
        _write_versions(files, "a.md", 7)

        assert svc.revert_file_to_version("proj", "a.md", 3) is True

        assert svc.get_latest_version_number("proj", "a.md") == 8
        new = svc.get_file_version("proj", "a.md", 8)
        old = svc.get_file_version("proj", "a.md", 3)
        assert new.content == "v3"
        assert new.version_metadata["change_description"] == "Reverted to version 3"
        assert old.content == "v3"
        assert files.read_file("proj", "a.md").content == "v3"

    def test_revert_missing_version(self, db):
        files, svc = _services(db)
        _write_versions(files, "a.md", 2)

        assert svc.revert_file_to_version("proj", "a.md", 999) is False
        assert svc.get_latest_version_number("proj", "a.md") == 2

    def test_revert_when_file_was_removed(self, db):
        store = VersionRepository(db)
        files, svc = _services(db, version_store=store)
        _write_versions(files, "a.md", 2)
        # Drop the file row but keep its history.
        files.file_repo.delete("proj", "a.md")
        db.commit()

        assert svc.revert_file_to_version("proj", "a.md", 1) is False
        assert svc.get_latest_version_number("proj", "a.md") == 2


class TestCleanup:

    def test_cleanup_applies_to_every_file(self, db):
        files, svc = _services(db, retention=RetentionConfig(max_versions_per_file=2))
        _write_versions(files, "a.md", 5)
        _write_versions(files, "b.md", 3)
        _write_versions(files, "c.md", 1)

        assert svc.cleanup_old_versions("proj") == 4
        assert [v.version for v in svc.get_file_versions("proj", "a.md")] == [5, 4]
        assert [v.version for v in svc.get_file_versions("proj", "b.md")] == [3, 2]
        assert len(svc.get_file_versions("proj", "c.md")) == 1

    def test_override_max_versions(self, db):
        files, svc = _services(db, retention=RetentionConfig(max_versions_per_file=10))
        _write_versions(files, "a.md", 4)

        assert svc.cleanup_old_versions("proj", max_versions_per_file=1) == 3
        assert [v.version for v in svc.get_file_versions("proj", "a.md")] == [4]

    def test_failure_on_one_file_does_not_stop_the_others(self, db):
        store = _FailingVersionRepository(db, failing_file="b.md")
        files, svc = _services(db, version_store=store, retention=RetentionConfig(max_versions_per_file=1))
        _write_versions(files, "a.md", 3)
        _write_versions(files, "b.md", 3)
        _write_versions(files, "c.md", 3)

        deleted = svc.cleanup_old_versions("proj")

        assert deleted == 4
        assert len(svc.get_file_versions("proj", "a.md")) == 1
        assert len(svc.get_file_versions("proj", "b.md")) == 3
        assert len(svc.get_file_versions("proj", "c.md")) == 1

    def test_unknown_project_deletes_nothing(self, db):
        _, svc = _services(db)
        assert svc.cleanup_old_versions("missing") == 0

    def test_file_removed_after_listing_does_not_abort_cleanup(self, db, engine):
        store = VersionRepository(db)
        files, _ = _services(db, version_store=store)
        _write_versions(files, "a.md", 3)
        _write_versions(files, "b.md", 3)
        _write_versions(files, "c.md", 3)
        svc = VersionService(
            store,
            _DeletesAfterListing(files, engine, doomed_file="b.md"),
            default_retention=RetentionConfig(max_versions_per_file=1),
        )

        deleted = svc.cleanup_old_versions("proj")

        assert deleted == 4
        assert [v.version for v in svc.get_file_versions("proj", "a.md")] == [3]
        assert [v.version for v in svc.get_file_versions("proj", "c.md")] == [3]
        assert svc.get_file_versions("proj", "b.md") == []
