"""
Tests unitarios para SyncLogRepository (tabla sync_logs append-only).
"""
from unittest.mock import Mock

from tablebridge.domain.entities.sync_log import SyncLogEntry, SyncRunType
from tablebridge.infrastructure.repositories.sync_log_repository import SyncLogRepository


def test_record_and_list_newest_first(engine):
    repo = SyncLogRepository(engine)
    for i in range(3):
        assert repo.record(SyncLogEntry.build(SyncRunType.DATA, dry_run=False, tables=["t"], added=i))

    entries = repo.list_recent(2)

    assert [e.added for e in entries] == [2, 1]
    assert entries[0].id > entries[1].id
    assert entries[0].created_at is not None


def test_errors_are_concatenated():
    entry = SyncLogEntry.build(SyncRunType.SCHEMA, dry_run=False, errors=["a: boom", "b: bang"])
    assert entry.errors == "a: boom\nb: bang"
    assert entry.failed


def test_record_failure_does_not_raise():
    repo = SyncLogRepository(Mock())
    repo._session_factory = Mock(side_effect=RuntimeError("db down"))

    assert repo.record(SyncLogEntry.build(SyncRunType.FULL, dry_run=True)) is False
