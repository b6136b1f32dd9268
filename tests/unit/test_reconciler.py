"""
Tests unitarios para Reconciler.
"""
from unittest.mock import Mock

from tablebridge.application.services.reconciler import Reconciler
from tablebridge.application.services.run_reporter import RunReporter


def _target_with(repo, n):
    with repo.connect() as conn:
        repo.execute_ddl(conn, "CREATE TABLE t (id INTEGER PRIMARY KEY)")
        for i in range(n):
            repo.execute(conn, "INSERT INTO t (id) VALUES (:id)", {"id": i})
        conn.commit()


def test_matching_counts_pass_without_warning(source, repo):
    source.tables = {"t": [{"id": i} for i in range(3)]}
    _target_with(repo, 3)
    reporter = RunReporter()

    with repo.connect() as conn:
        result = Reconciler(source, repo).reconcile(conn, "t", reporter)

    assert result.matched
    assert (result.source_count, result.target_count) == (3, 3)
    assert reporter.stats.warnings == []
    assert reporter.stats.errors == []


def test_mismatch_is_a_warning_not_an_error(source, repo):
    source.tables = {"t": [{"id": i} for i in range(5)]}
    _target_with(repo, 3)
    reporter = RunReporter()

    with repo.connect() as conn:
        result = Reconciler(source, repo).reconcile(conn, "t", reporter)

    assert not result.matched
    assert reporter.stats.errors == []
    assert len(reporter.stats.warnings) == 1
    assert "origen=5" in reporter.stats.warnings[0]
    assert "destino=3" in reporter.stats.warnings[0]


def test_count_failure_is_recorded(repo):
    client = Mock()
    client.fetch_count.side_effect = ConnectionError("down")
    reporter = RunReporter()

    with repo.connect() as conn:
        result = Reconciler(client, repo).reconcile(conn, "t", reporter)

    assert result.source_count is None
    assert not result.matched
    assert reporter.stats.errors[0].context == "reconcile:t"
