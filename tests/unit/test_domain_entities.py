"""
Tests unitarios para las entidades del dominio.
"""
from datetime import timedelta

from tablebridge.domain.entities.run_stats import RunStats, TableOutcome
from tablebridge.domain.entities.schema import ColumnSpec, SourceType, TableSpec


SPEC = TableSpec(
    name="customers",
    columns=(
        ColumnSpec("id", SourceType.UUID, nullable=False, primary_key=True),
        ColumnSpec("email", SourceType.SHORT_TEXT),
    ),
)


def test_conform_row_fills_missing_and_drops_extra():
    row, adjusted = SPEC.conform_row({"email": "a@b.c", "id": "x", "legacy": 1})
    assert row == {"id": "x", "email": "a@b.c"}
    assert list(row) == ["id", "email"]
    assert adjusted is True

    row, adjusted = SPEC.conform_row({"id": "y"})
    assert row == {"id": "y", "email": None}
    assert adjusted is True


def test_conform_row_exact_match_is_not_adjusted():
    _, adjusted = SPEC.conform_row({"id": "x", "email": None})
    assert adjusted is False


def test_table_spec_helpers():
    assert SPEC.primary_key == ["id"]
    assert SPEC.column("email").source_type is SourceType.SHORT_TEXT
    assert SPEC.column("nope") is None
    assert TableSpec(name="empty").is_empty


def test_outcome_reconciled():
    assert TableOutcome("t").reconciled is None
    assert TableOutcome("t", source_count=3, target_count=3).reconciled is True
    assert TableOutcome("t", source_count=3, target_count=2).reconciled is False


def test_run_stats_duration_and_dict():
    stats = RunStats()
    stats.finished_at = stats.started_at + timedelta(seconds=4)

    data = stats.to_dict()

    assert stats.duration_seconds == 4.0
    assert data["status"] == "SUCCESS"
    assert data["finished_at"] is not None
