"""
Tests unitarios para RunReporter y los artefactos de la corrida.
"""
import pytest

from tablebridge.application.services.run_reporter import RunReporter
from tablebridge.application.services.sql_script_writer import (
    ArtifactWriter,
    SqlScriptWriter,
    sql_literal,
    write_once,
)
from tablebridge.domain.entities.run_stats import TableStatus


def test_status_is_success_only_without_errors():
    reporter = RunReporter()
    reporter.record_warning("conteos no coinciden")
    assert reporter.stats.status == "SUCCESS"

    reporter.record_error("load:t", "fila 3: duplicate key")
    assert reporter.stats.status == "PARTIAL SUCCESS"


def test_stats_are_read_only_after_finish():
    reporter = RunReporter()
    reporter.finish()
    with pytest.raises(RuntimeError):
        reporter.record_error("x", "late")


def test_table_counters():
    reporter = RunReporter()
    ok = reporter.start_table("a")
    reporter.record_rows(ok, succeeded=9, failed=1)
    reporter.finish_table(ok, TableStatus.MIGRATED_WITH_ERRORS)
    failed = reporter.start_table("b")
    reporter.finish_table(failed, TableStatus.FAILED)
    skipped = reporter.start_table("c")
    reporter.finish_table(skipped, TableStatus.SKIPPED)

    stats = reporter.finish()

    assert (stats.tables_attempted, stats.tables_succeeded, stats.tables_failed) == (3, 1, 1)
    assert (stats.rows_attempted, stats.rows_succeeded, stats.rows_failed) == (10, 9, 1)


def test_markdown_report_sections():
    reporter = RunReporter()
    outcome = reporter.start_table("customers")
    reporter.record_rows(outcome, succeeded=3, failed=0)
    outcome.source_count = outcome.target_count = 3
    reporter.finish_table(outcome, TableStatus.MIGRATED)
    reporter.record_retry()
    reporter.finish()

    report = reporter.render_markdown()

    assert "**Status:** SUCCESS" in report
    assert "| Rows | 3 | 3 | 0 | 100.0% |" in report
    assert "| customers | migrated | 0 | 0 | 3 | 0 | 3 | 3 | yes |" in report
    assert "Retries: 1" in report
    assert "No errors." in report


# =========================================================================
# Scripts y escritura write-once
# =========================================================================

@pytest.mark.parametrize(
    "value, expected",
    [
        (None, "NULL"),
        (True, "1"),
        (False, "0"),
        (42, "42"),
        ("O'Brien", "'O''Brien'"),
        ({"a": [1]}, "'{\"a\": [1]}'"),
    ],
)
def test_sql_literal(value, expected):
    assert sql_literal(value) == expected


def test_mysql_schema_script_disables_foreign_keys():
    scripts = SqlScriptWriter("mysql")
    scripts.add_table("CREATE TABLE IF NOT EXISTS `a` (`id` INT)")
    script = scripts.schema_script()
    assert script.index("SET FOREIGN_KEY_CHECKS = 0;") < script.index("CREATE TABLE") < script.index(
        "SET FOREIGN_KEY_CHECKS = 1;"
    )


def test_data_script_renders_literal_inserts():
    scripts = SqlScriptWriter("mysql")
    scripts.add_row("customers", ["id", "email"], {"id": "a", "email": None})
    assert "INSERT INTO `customers` (`id`, `email`) VALUES ('a', NULL);" in scripts.data_script()


def test_write_once_refuses_to_overwrite(tmp_path):
    path = write_once(tmp_path / "report.md", "first")
    with pytest.raises(FileExistsError):
        write_once(path, "second")
    assert path.read_text(encoding="utf-8") == "first"


def test_artifact_writer_names(tmp_path):
    paths = ArtifactWriter(str(tmp_path), timestamp="20240301_101500").write(SqlScriptWriter(), "# r")
    assert paths["schema"].name == "schema_20240301_101500.sql"
    assert paths["data"].name == "data_20240301_101500.sql"
    assert paths["report"].name == "migration_report_20240301_101500.md"
