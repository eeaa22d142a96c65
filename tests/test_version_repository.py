"""Tests for the SQLAlchemy version store."""

from datetime import timedelta

import pytest

from memory_bank.core.timeutils import utcnow
from memory_bank.exceptions import StorageError
from memory_bank.repositories import VersionRepository, VersionStore
from memory_bank.schemas.version import VersionCreate
from memory_bank.services.retention import RetentionConfig
from tests.conftest import add_version


class TestCreateAndRead:

    def test_is_a_version_store(self, db):
        assert isinstance(VersionRepository(db), VersionStore)

    def test_versions_returned_newest_first(self, db):
        for n in range(1, 6):
            add_version(db, n)

        versions = VersionRepository(db).get_versions("proj", "notes.md")

        assert [v.version for v in versions] == [5, 4, 3, 2, 1]

    def test_get_version_returns_content(self, db):
        add_version(db, 1, content="first")
        add_version(db, 2, content="second")

        v = VersionRepository(db).get_version("proj", "notes.md", 1)

        assert v is not None
        assert v.content == "first"
        assert v.version_metadata["encoding"] == "utf-8"

    def test_get_version_missing_returns_none(self, db):
        add_version(db, 1)
        assert VersionRepository(db).get_version("proj", "notes.md", 999) is None

    def test_versions_scoped_to_file(self, db):
        add_version(db, 1, file_name="a.md")
        add_version(db, 1, file_name="b.md")
        add_version(db, 2, file_name="b.md")

        repo = VersionRepository(db)
        assert len(repo.get_versions("proj", "a.md")) == 1
        assert len(repo.get_versions("proj", "b.md")) == 2
        assert repo.get_versions("proj", "missing.md") == []

    def test_latest_version_number_zero_without_history(self, db):
        assert VersionRepository(db).get_latest_version_number("proj", "notes.md") == 0

    def test_latest_version_number(self, db):
        add_version(db, 1)
        add_version(db, 2)
        assert VersionRepository(db).get_latest_version_number("proj", "notes.md") == 2


class TestUniqueness:

    def test_duplicate_version_number_raises_storage_error(self, db):
        add_version(db, 1)
        repo = VersionRepository(db)

        with pytest.raises(StorageError):
            repo.create_version(
                VersionCreate(
                    file_id="file-1",
                    project_name="proj",
                    file_name="notes.md",
                    version=1,
                    content="dup",
                    size=3,
                    checksum="x",
                )
            )
        db.rollback()

        assert len(repo.get_versions("proj", "notes.md")) == 1

    def test_same_number_allowed_for_different_files(self, db):
        add_version(db, 1, file_name="a.md")
        add_version(db, 1, file_name="b.md")
        add_version(db, 1, project_name="other", file_name="a.md")


class TestCleanup:

    def test_count_rule_keeps_highest_versions(self, db):
        for n in range(1, 16):
            add_version(db, n)
        repo = VersionRepository(db)

        deleted = repo.cleanup_old_versions(
            "proj", "notes.md", RetentionConfig(max_versions_per_file=10, auto_cleanup_old_versions=False)
        )

        assert deleted == 5
        assert [v.version for v in repo.get_versions("proj", "notes.md")] == list(range(15, 5, -1))

    def test_age_rule_removes_old_versions(self, db):
        old = utcnow() - timedelta(days=40)
        add_version(db, 1, created_at=old)
        add_version(db, 2, created_at=old)
        add_version(db, 3)
        repo = VersionRepository(db)

        deleted = repo.cleanup_old_versions("proj", "notes.md", RetentionConfig(max_versions_per_file=10))

        assert deleted == 2
        assert [v.version for v in repo.get_versions("proj", "notes.md")] == [3]

    def test_age_rule_disabled_keeps_old_versions(self, db):
        add_version(db, 1, created_at=utcnow() - timedelta(days=40))
        repo = VersionRepository(db)

        deleted = repo.cleanup_old_versions(
            "proj", "notes.md", RetentionConfig(max_versions_per_file=10, auto_cleanup_old_versions=False)
        )

        assert deleted == 0
        assert repo.get_latest_version_number("proj", "notes.md") == 1

    def test_versions_matching_both_rules_counted_once(self, db):
        old = utcnow() - timedelta(days=60)
        for n in range(1, 13):
            add_version(db, n, created_at=old)
        repo = VersionRepository(db)

        deleted = repo.cleanup_old_versions("proj", "notes.md", RetentionConfig(max_versions_per_file=10))

        assert deleted == 12
        assert repo.get_versions("proj", "notes.md") == []
        assert repo.get_latest_version_number("proj", "notes.md") == 0

    def test_nothing_to_delete(self, db):
        add_version(db, 1)
        assert VersionRepository(db).cleanup_old_versions("proj", "notes.md", RetentionConfig()) == 0


class TestBulkDelete:

    def test_delete_all_versions(self, db):
        add_version(db, 1)
        add_version(db, 2)
        add_version(db, 1, file_name="other.md")
        repo = VersionRepository(db)

        assert repo.delete_all_versions("proj", "notes.md") is True
        assert repo.get_versions("proj", "notes.md") == []
        assert len(repo.get_versions("proj", "other.md")) == 1

    def test_delete_all_versions_none_present(self, db):
        assert VersionRepository(db).delete_all_versions("proj", "notes.md") is False

    def test_delete_project_versions(self, db):
        add_version(db, 1, file_name="a.md")
        add_version(db, 1, file_name="b.md")
        add_version(db, 1, project_name="keep", file_name="a.md")
        repo = VersionRepository(db)

        assert repo.delete_project_versions("proj") is True
        assert repo.get_versions("proj", "a.md") == []
        assert len(repo.get_versions("keep", "a.md")) == 1
        assert repo.delete_project_versions("proj") is False
