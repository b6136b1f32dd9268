"""
Tests unitarios para el diff de esquema y la compuerta de aplicación.
"""
from unittest.mock import Mock

import pytest
from sqlalchemy import inspect

from tablebridge.application.services.schema_diff import (
    GateState,
    ReflectionSchemaDiffer,
    SchemaDiff,
    SchemaDiffGate,
    count_changes,
    is_destructive,
)
from tablebridge.domain.entities.sync_log import SyncRunType
from tablebridge.infrastructure.database.session import build_engine
from tablebridge.infrastructure.repositories.sql_repository import SqlRepository
from tablebridge.infrastructure.repositories.sync_log_repository import SyncLogRepository


@pytest.fixture
def mirror_engine():
    eng = build_engine("sqlite:///:memory:")
    yield eng
    eng.dispose()


def _ddl(engine, *statements):
    repo = SqlRepository(engine)
    with engine.begin() as conn:
        for s in statements:
            repo.execute_ddl(conn, s)


def _static_differ(*statements):
    differ = Mock()
    differ.compute.return_value = SchemaDiff(statements=tuple(statements), tables=("customers",))
    return differ


# =========================================================================
# Detección de sentencias destructivas
# =========================================================================

@pytest.mark.parametrize(
    "script",
    [
        "DROP TABLE customers;",
        "alter table customers drop column email;",
        "ALTER TABLE customers\n  DROP   COLUMN email;",
        "ALTER TABLE t DROP INDEX idx_email;",
    ],
)
def test_destructive_scripts_are_detected(script):
    assert is_destructive(script)


@pytest.mark.parametrize(
    "script",
    [
        "",
        "CREATE TABLE t (id INT);",
        "ALTER TABLE t ADD COLUMN email VARCHAR(255);",
    ],
)
def test_additive_scripts_are_not_destructive(script):
    assert not is_destructive(script)


def test_count_changes_is_keyword_based():
    script = "CREATE TABLE a (id INT);\nCREATE TABLE b (id INT);\nALTER TABLE a ADD COLUMN x INT;\n"
    assert count_changes(script) == (2, 1)


# =========================================================================
# Compuerta
# =========================================================================

class TestSchemaDiffGate:

    def test_drop_table_is_blocked_and_nothing_executes(self):
        mirror_repo = Mock()
        logs = Mock()
        gate = SchemaDiffGate(
            _static_differ("CREATE TABLE a (id INT)", "DROP TABLE legacy"),
            mirror_repo,
            log_repository=logs,
            allow_destructive=False,
        )

        result = gate.run(dry_run=False)

        assert result.state is GateState.BLOCKED
        assert not result.ok
        assert "DROP TABLE legacy;" in result.preview
        mirror_repo.execute_ddl.assert_not_called()
        mirror_repo.engine.begin.assert_not_called()
        logs.record.assert_not_called()
        assert gate.state is GateState.IDLE

    def test_blocked_even_in_dry_run(self):
        gate = SchemaDiffGate(_static_differ("DROP TABLE legacy"), Mock(), allow_destructive=False)
        assert gate.run(dry_run=True).state is GateState.BLOCKED

    def test_dry_run_returns_preview_without_executing(self):
        mirror_repo = Mock()
        logs = Mock()
        gate = SchemaDiffGate(
            _static_differ("CREATE TABLE a (id INT)", "ALTER TABLE b ADD COLUMN c INT"),
            mirror_repo,
            log_repository=logs,
        )

        result = gate.run(dry_run=True)

        assert result.state is GateState.DRY_RUN_PREVIEW
        assert (result.added, result.updated) == (1, 1)
        assert result.preview == "CREATE TABLE a (id INT);\nALTER TABLE b ADD COLUMN c INT;\n"
        mirror_repo.execute_ddl.assert_not_called()
        entry = logs.record.call_args[0][0]
        assert entry.dry_run is True
        assert entry.run_type is SyncRunType.SCHEMA

    def test_override_allows_destructive_apply(self, mirror_engine):
        _ddl(mirror_engine, "CREATE TABLE legacy (id INTEGER)")
        gate = SchemaDiffGate(
            _static_differ("DROP TABLE legacy"),
            SqlRepository(mirror_engine),
            allow_destructive=True,
        )

        result = gate.run()

        assert result.ok
        assert "legacy" not in inspect(mirror_engine).get_table_names()

    def test_apply_failure_is_recorded_and_surfaced(self, engine, mirror_engine):
        logs = SyncLogRepository(engine)
        gate = SchemaDiffGate(
            _static_differ("CREATE TABLE ok_table (id INTEGER)", "ALTER TABLE missing ADD COLUMN x INTEGER"),
            SqlRepository(mirror_engine),
            log_repository=logs,
        )

        result = gate.run()

        assert not result.ok
        assert result.error
        entries = logs.list_recent(5)
        assert len(entries) == 1
        assert entries[0].failed
        assert entries[0].run_type is SyncRunType.SCHEMA

    def test_record_log_can_be_disabled(self):
        logs = Mock()
        gate = SchemaDiffGate(_static_differ("CREATE TABLE a (id INT)"), Mock(), log_repository=logs)
        gate.run(dry_run=True, record_log=False)
        logs.record.assert_not_called()


# =========================================================================
# Diff por reflexión (SQLite destino / SQLite mirror)
# =========================================================================

class TestReflectionSchemaDiffer:

    def test_missing_table_is_created_in_mirror(self, engine, mirror_engine):
        _ddl(engine, "CREATE TABLE customers (id INTEGER PRIMARY KEY, name VARCHAR(50))")
        differ = ReflectionSchemaDiffer(engine, mirror_engine)

        diff = differ.compute()

        assert len(diff.statements) == 1
        assert diff.statements[0].upper().startswith("CREATE TABLE")
        assert diff.tables == ("customers",)
        # sync_logs nunca entra al diff
        assert "sync_logs" not in diff.script

        gate = SchemaDiffGate(differ, SqlRepository(mirror_engine), log_repository=SyncLogRepository(engine))
        result = gate.run()

        assert result.ok
        assert (result.added, result.updated) == (1, 0)
        columns = {c["name"] for c in inspect(mirror_engine).get_columns("customers")}
        assert columns == {"id", "name"}

    def test_missing_column_is_added(self, engine, mirror_engine):
        _ddl(engine, "CREATE TABLE customers (id INTEGER PRIMARY KEY, name VARCHAR(50))")
        _ddl(mirror_engine, "CREATE TABLE customers (id INTEGER PRIMARY KEY)")

        diff = ReflectionSchemaDiffer(engine, mirror_engine).compute()

        assert diff.statements == ('ALTER TABLE "customers" ADD COLUMN "name" VARCHAR(50)',)
        assert not is_destructive(diff.script)

    def test_mirror_only_column_and_table_are_destructive(self, engine, mirror_engine):
        _ddl(engine, "CREATE TABLE customers (id INTEGER PRIMARY KEY)")
        _ddl(
            mirror_engine,
            "CREATE TABLE customers (id INTEGER PRIMARY KEY, legacy_flag INTEGER)",
            "CREATE TABLE old_stuff (id INTEGER)",
        )

        diff = ReflectionSchemaDiffer(engine, mirror_engine).compute()

        assert 'ALTER TABLE "customers" DROP COLUMN "legacy_flag"' in diff.statements
        assert 'DROP TABLE "old_stuff"' in diff.statements
        assert is_destructive(diff.script)

    def test_scope_limits_tables(self, engine, mirror_engine):
        _ddl(engine, "CREATE TABLE a (id INTEGER)", "CREATE TABLE b (id INTEGER)")

        diff = ReflectionSchemaDiffer(engine, mirror_engine, tables=["b"]).compute()

        assert diff.tables == ("b",)
