"""
Caso de uso: migración one-shot origen REST -> destino SQL.

Pipeline por tabla (secuencial, en orden de declaración):
    inferir -> materializar -> extraer (con retry) -> ajustar filas -> cargar -> reconciliar

Los errores de fila y de tabla se convierten en contadores y entradas del
reporte; nunca abortan la corrida. Solo los errores de conexión al destino
se propagan.
"""
from __future__ import annotations

import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence

from loguru import logger

from tablebridge.application.services.batch_extractor import BatchExtractor, ExtractionResult
from tablebridge.application.services.bulk_loader import BulkLoader
from tablebridge.application.services.reconciler import Reconciler
from tablebridge.application.services.retry import RetryExhaustedError, retry_with_backoff
from tablebridge.application.services.run_reporter import RunReporter
from tablebridge.application.services.schema_inferrer import SchemaInferrer
from tablebridge.application.services.sql_script_writer import ArtifactWriter, SqlScriptWriter
from tablebridge.application.services.table_materializer import TableMaterializer
from tablebridge.core.config import Settings
from tablebridge.domain.entities.run_stats import RunStats, TableStatus
from tablebridge.domain.entities.schema import TableSpec
from tablebridge.infrastructure.repositories.sql_repository import SqlRepository


@dataclass
class MigrationRunResult:
    stats: RunStats
    report: str
    artifacts: Dict[str, Path] = field(default_factory=dict)


class MigrationRunner:
    """
    Orquestador de la corrida. Es dueño del RunReporter (y de su RunStats)
    y mantiene abierta una única conexión al destino durante toda la corrida.
    """

    def __init__(
        self,
        source_client,
        target_repository: SqlRepository,
        config: Settings,
        *,
        sleep: Callable[[float], None] = time.sleep,
        write_artifacts: bool = True,
        output_dir: Optional[str] = None,
    ):
        self._source = source_client
        self._target = target_repository
        self._config = config
        self._sleep = sleep
        self._write_artifacts = write_artifacts
        self._output_dir = output_dir or config.OUTPUT_DIR

        self.inferrer = SchemaInferrer(source_client, sample_size=config.MIGRATION_SAMPLE_SIZE)
        self.materializer = TableMaterializer(target_repository)
        self.extractor = BatchExtractor(
            source_client,
            page_size=config.MIGRATION_PAGE_SIZE,
            order_by=config.MIGRATION_ORDER_BY or None,
        )
        self.loader = BulkLoader(target_repository, batch_size=config.MIGRATION_INSERT_BATCH_SIZE)
        self.reconciler = Reconciler(source_client, target_repository)

    def run(self, tables: Optional[Sequence[str]] = None, schema_only: bool = False) -> MigrationRunResult:
        tables = list(tables if tables is not None else self._config.migration_tables)
        reporter = RunReporter()
        scripts = SqlScriptWriter(self._target.dialect_name)

        if not tables:
            reporter.record_warning("No hay tablas configuradas para migrar (MIGRATION_TABLES vacío)")

        logger.info(f"Iniciando migración de {len(tables)} tablas: {', '.join(tables)}")
        with self._target.connect() as conn:
            for table in tables:
                self._migrate_table(conn, table, reporter, scripts, schema_only)

        stats = reporter.finish()
        report = reporter.render_markdown()
        artifacts: Dict[str, Path] = {}
        if self._write_artifacts:
            try:
                artifacts = ArtifactWriter(self._output_dir).write(scripts, report)
            except OSError as e:
                logger.error(f"No se pudieron escribir los artefactos: {e}")

        summary = (
            f"Migración terminada: {stats.status} | tablas {stats.tables_succeeded}/{stats.tables_attempted} "
            f"| filas {stats.rows_succeeded}/{stats.rows_attempted} | reintentos {stats.retry_count}"
        )
        if stats.errors:
            logger.warning(summary)
        else:
            logger.success(summary)
        return MigrationRunResult(stats=stats, report=report, artifacts=artifacts)

    # ==================== Pipeline por tabla ====================

    def _migrate_table(self, conn, table: str, reporter: RunReporter, scripts: SqlScriptWriter, schema_only: bool) -> None:
        outcome = reporter.start_table(table)
        logger.info(f"=== {table} ===")

        spec = self.inferrer.infer(table, reporter)
        if spec.is_empty:
            reporter.record_warning(f"{table}: sin esquema derivable, se omite")
            reporter.finish_table(outcome, TableStatus.SKIPPED)
            return
        outcome.columns = len(spec.columns)

        if not self.materializer.materialize(conn, spec, reporter):
            reporter.finish_table(outcome, TableStatus.FAILED)
            return
        scripts.add_table(self.materializer.render(spec))

        if schema_only:
            reporter.finish_table(outcome, TableStatus.MIGRATED)
            return

        try:
            extraction = self._extract_with_retry(table, reporter)
        except RetryExhaustedError as e:
            reporter.record_error(f"extract:{table}", e)
            reporter.finish_table(outcome, TableStatus.FAILED)
            return
        outcome.rows_extracted = len(extraction.rows)

        rows = self._conform_rows(spec, extraction.rows, reporter)
        loaded = self.loader.load(
            conn,
            spec,
            rows,
            reporter,
            on_row_loaded=lambda row: scripts.add_row(spec.name, spec.column_names, row),
        )
        reporter.record_rows(outcome, loaded.succeeded, loaded.failed)

        reconciliation = self.reconciler.reconcile(conn, table, reporter)
        outcome.source_count = reconciliation.source_count
        outcome.target_count = reconciliation.target_count

        status = TableStatus.MIGRATED if loaded.failed == 0 else TableStatus.MIGRATED_WITH_ERRORS
        reporter.finish_table(outcome, status)

    def _extract_with_retry(self, table: str, reporter: RunReporter) -> ExtractionResult:
        def attempt() -> ExtractionResult:
            result = self.extractor.extract(table)
            if result.error is not None:
                raise result.error
            return result

        return retry_with_backoff(
            attempt,
            max_attempts=self._config.RETRY_MAX_ATTEMPTS,
            base_delay_s=self._config.RETRY_BASE_DELAY_MS / 1000,
            sleep=self._sleep,
            on_retry=lambda _attempt, _error: reporter.record_retry(),
            label=f"extract:{table}",
        )

    @staticmethod
    def _conform_rows(spec: TableSpec, rows: List[dict], reporter: RunReporter) -> List[dict]:
        conformed: List[dict] = []
        adjusted = 0
        for row in rows:
            fixed, changed = spec.conform_row(row)
            conformed.append(fixed)
            adjusted += int(changed)
        if adjusted:
            reporter.record_warning(
                f"{spec.name}: {adjusted} filas no coincidían con las columnas inferidas "
                f"(faltantes -> NULL, extra descartadas)"
            )
        return conformed
