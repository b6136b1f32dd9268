"""
Acumulador de contadores y errores de una corrida + reporte markdown.

Los componentes del core solo conocen la interfaz append/record:
- record_error(context, error)
- record_warning(message)
- record_retry()

El orquestador es quien crea el reporter, le pasa la referencia a cada
componente y lo cierra (finish) al terminar.
"""
from __future__ import annotations

from typing import List, Optional

from loguru import logger

from tablebridge.domain.entities.run_stats import (
    ErrorRecord,
    RunStats,
    TableOutcome,
    TableStatus,
)
from tablebridge.shared.utils.datetime_utils import utc_now


class RunReporter:
    """Dueño exclusivo de RunStats durante la corrida."""

    def __init__(self, stats: Optional[RunStats] = None):
        self._stats = stats or RunStats()

    @property
    def stats(self) -> RunStats:
        return self._stats

    # ==================== Interfaz append/record ====================

    def record_error(self, context: str, error) -> ErrorRecord:
        """Registra un error en el log persistente y en la lista de la corrida."""
        if self._stats.finished:
            raise RuntimeError("La corrida ya terminó; RunStats es de solo lectura")
        record = ErrorRecord(context=context, message=str(error))
        self._stats.errors.append(record)
        logger.error(f"[{context}] {record.message}")
        return record

    def record_warning(self, message: str) -> None:
        if self._stats.finished:
            raise RuntimeError("La corrida ya terminó; RunStats es de solo lectura")
        self._stats.warnings.append(message)
        logger.warning(message)

    def record_retry(self) -> None:
        self._stats.retry_count += 1

    # ==================== Ciclo por tabla ====================

    def start_table(self, name: str) -> TableOutcome:
        outcome = TableOutcome(name=name)
        self._stats.tables.append(outcome)
        self._stats.tables_attempted += 1
        return outcome

    def record_rows(self, outcome: TableOutcome, succeeded: int, failed: int) -> None:
        outcome.rows_loaded += succeeded
        outcome.rows_failed += failed
        self._stats.rows_attempted += succeeded + failed
        self._stats.rows_succeeded += succeeded
        self._stats.rows_failed += failed

    def finish_table(self, outcome: TableOutcome, status: TableStatus) -> None:
        outcome.status = status
        if status in (TableStatus.MIGRATED, TableStatus.MIGRATED_WITH_ERRORS):
            self._stats.tables_succeeded += 1
        elif status is TableStatus.FAILED:
            self._stats.tables_failed += 1

    def finish(self) -> RunStats:
        if not self._stats.finished:
            self._stats.finished_at = utc_now()
        return self._stats

    # ==================== Reporte ====================

    def render_markdown(self) -> str:
        """Reporte legible: resumen, tasas de éxito, tabla por tabla, errores y warnings."""
        s = self._stats
        lines: List[str] = [
            "# Migration Report",
            "",
            f"**Status:** {s.status}",
            f"**Started:** {s.started_at.isoformat()}",
            f"**Finished:** {s.finished_at.isoformat() if s.finished_at else '-'}",
            f"**Duration:** {s.duration_seconds:.2f}s",
            "",
            "## Summary",
            "",
            "| Metric | Total | Succeeded | Failed | Success rate |",
            "|---|---|---|---|---|",
            f"| Tables | {s.tables_attempted} | {s.tables_succeeded} | {s.tables_failed} "
            f"| {_rate(s.tables_succeeded, s.tables_attempted)} |",
            f"| Rows | {s.rows_attempted} | {s.rows_succeeded} | {s.rows_failed} "
            f"| {_rate(s.rows_succeeded, s.rows_attempted)} |",
            "",
            f"Retries: {s.retry_count}",
            "",
            "## Tables",
            "",
            "| Table | Status | Columns | Extracted | Loaded | Failed | Source count | Target count | Reconciled |",
            "|---|---|---|---|---|---|---|---|---|",
        ]
        for t in s.tables:
            lines.append(
                f"| {t.name} | {t.status.value} | {t.columns} | {t.rows_extracted} "
                f"| {t.rows_loaded} | {t.rows_failed} | {_fmt(t.source_count)} "
                f"| {_fmt(t.target_count)} | {_fmt_reconciled(t.reconciled)} |"
            )

        lines += ["", "## Errors", ""]
        if s.errors:
            lines += [f"- `{e.context}` ({e.timestamp.isoformat()}): {e.message}" for e in s.errors]
        else:
            lines.append("No errors.")

        lines += ["", "## Warnings", ""]
        if s.warnings:
            lines += [f"- {w}" for w in s.warnings]
        else:
            lines.append("No warnings.")

        lines.append("")
        return "\n".join(lines)


def _rate(succeeded: int, total: int) -> str:
    if total == 0:
        return "n/a"
    return f"{succeeded / total * 100:.1f}%"


def _fmt(value: Optional[int]) -> str:
    return "-" if value is None else str(value)


def _fmt_reconciled(value: Optional[bool]) -> str:
    if value is None:
        return "-"
    return "yes" if value else "MISMATCH"
