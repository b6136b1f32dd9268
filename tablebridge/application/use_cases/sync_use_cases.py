"""
Casos de uso de la sincronización continua (destino autoritativo -> mirror).

Todas las operaciones de escritura exigen SYNC_DIRECTION soportada.
Las corridas que escriben toman sus tablas en TableLockManager: una segunda
corrida sobre la misma tabla se rechaza con 409.
"""
from contextlib import nullcontext
from typing import ContextManager, List, Optional

from loguru import logger

from tablebridge.application.dto.sync_dto import (
    DataSyncResponseDTO,
    FullSyncResponseDTO,
    SchemaSyncResponseDTO,
    SyncLogDTO,
    SyncStatusResponseDTO,
)
from tablebridge.application.services.schema_diff import GateState, SchemaDiffGate, SchemaGateResult
from tablebridge.application.services.table_lock import SCHEMA_LOCK_KEY, TableLockManager
from tablebridge.application.services.upsert_syncer import DataSyncResult, UpsertSyncer
from tablebridge.core.config import SUPPORTED_SYNC_DIRECTION, Settings
from tablebridge.domain.entities.sync_log import SyncLogEntry, SyncRunType
from tablebridge.infrastructure.repositories.sync_log_repository import SyncLogRepository
from tablebridge.shared.exceptions.domain import (
    DestructiveChangeBlockedException,
    SyncDirectionException,
    SyncFailedException,
)


class SyncUseCases:
    """
    Orquesta schema / data / full sync y expone el historial.
    """

    def __init__(
        self,
        config: Settings,
        syncer: UpsertSyncer,
        log_repository: SyncLogRepository,
        schema_gate: Optional[SchemaDiffGate] = None,
    ):
        self.config = config
        self.syncer = syncer
        self.logs = log_repository
        self.schema_gate = schema_gate

    def _ensure_direction(self) -> None:
        if not self.config.sync_direction_supported:
            logger.warning(f"Sync rechazada: SYNC_DIRECTION={self.config.SYNC_DIRECTION}")
            raise SyncDirectionException(self.config.SYNC_DIRECTION, SUPPORTED_SYNC_DIRECTION)

    def _locked(self, dry_run: bool, schema: bool = False) -> ContextManager[None]:
        if dry_run:
            return nullcontext()
        keys = list(self.config.sync_tables)
        if schema:
            keys.append(SCHEMA_LOCK_KEY)
        return TableLockManager.hold(keys)

    def _run_gate(self, dry_run: bool, record_log: bool) -> SchemaGateResult:
        if self.schema_gate is None:
            raise SyncFailedException("schema", "MIRROR_DATABASE_URL no configurada")
        result = self.schema_gate.run(dry_run=dry_run, record_log=record_log)
        if result.state is GateState.BLOCKED:
            raise DestructiveChangeBlockedException(result.preview)
        return result

    @staticmethod
    def _schema_dto(result: SchemaGateResult) -> SchemaSyncResponseDTO:
        if result.dry_run:
            return SchemaSyncResponseDTO(
                ok=True,
                dry_run=True,
                added=result.added,
                updated=result.updated,
                preview=result.preview,
            )
        return SchemaSyncResponseDTO(ok=result.ok, added=result.added, updated=result.updated)

    @staticmethod
    def _data_dto(result: DataSyncResult) -> DataSyncResponseDTO:
        if result.dry_run:
            return DataSyncResponseDTO(ok=True, dry_run=True, tables=result.tables, counts=result.counts)
        return DataSyncResponseDTO(
            ok=result.ok,
            tables=result.tables,
            added=result.added,
            updated=result.updated,
            deleted=result.deleted,
            errors=result.errors,
        )

    # ==================== Operaciones ====================

    def sync_schema(self, dry_run: bool = False) -> SchemaSyncResponseDTO:
        """
        Diff destino -> mirror. Bloquea diffs destructivos (409),
        con dry_run solo devuelve el preview.
        """
        self._ensure_direction()
        with self._locked(dry_run, schema=True):
            result = self._run_gate(dry_run, record_log=True)
        if result.error:
            raise SyncFailedException("schema", result.error)
        return self._schema_dto(result)

    def sync_data(self, dry_run: bool = False) -> DataSyncResponseDTO:
        """Upsert por tabla de la allow-list. dry_run solo cuenta filas."""
        self._ensure_direction()
        tables = self.config.sync_tables
        with self._locked(dry_run):
            result = self.syncer.sync(tables, dry_run=dry_run)
        self.logs.record(
            SyncLogEntry.build(
                SyncRunType.DATA,
                dry_run=dry_run,
                tables=tables,
                added=result.added,
                updated=result.updated,
                deleted=result.deleted,
                errors=result.errors,
            )
        )
        return self._data_dto(result)

    def sync_full(self, dry_run: bool = False) -> FullSyncResponseDTO:
        """
        Schema y luego data. Un diff bloqueado corta antes de tocar datos.
        Se registra una única entrada "full".
        """
        self._ensure_direction()
        tables = self.config.sync_tables
        with self._locked(dry_run, schema=True):
            schema_result = self._run_gate(dry_run, record_log=False)
            if schema_result.error:
                self.logs.record(
                    SyncLogEntry.build(
                        SyncRunType.FULL,
                        dry_run=dry_run,
                        tables=schema_result.tables,
                        errors=[f"schema: {schema_result.error}"],
                    )
                )
                raise SyncFailedException("full", schema_result.error)
            data_result = self.syncer.sync(tables, dry_run=dry_run)

        schema_dto = self._schema_dto(schema_result)
        data_dto = self._data_dto(data_result)
        errors: List[str] = list(data_result.errors)

        self.logs.record(
            SyncLogEntry.build(
                SyncRunType.FULL,
                dry_run=dry_run,
                tables=sorted(set(tables) | set(schema_result.tables)),
                added=schema_result.added + data_result.added,
                updated=schema_result.updated + data_result.updated,
                deleted=data_result.deleted,
                errors=errors,
            )
        )

        if dry_run:
            return FullSyncResponseDTO(ok=True, dry_run=True, schema_result=schema_dto, data=data_dto)
        return FullSyncResponseDTO(
            ok=not errors,
            schema_result=schema_dto,
            tables=tables,
            added=data_result.added,
            updated=data_result.updated,
            deleted=data_result.deleted,
            errors=errors,
        )

    def get_status(self, limit: Optional[int] = None) -> SyncStatusResponseDTO:
        """Últimas N entradas del historial, de la más reciente a la más antigua."""
        entries = self.logs.list_recent(limit or self.config.SYNC_STATUS_LIMIT)
        return SyncStatusResponseDTO(entries=[SyncLogDTO(**e.to_dict()) for e in entries])
