"""
Repositorio para el historial de sincronizaciones (tabla sync_logs).
"""
from typing import List

from loguru import logger
from sqlalchemy import select
from sqlalchemy.engine import Engine

from tablebridge.domain.entities.sync_log import SyncLogEntry, SyncRunType
from tablebridge.infrastructure.database.models import SyncLogModel
from tablebridge.infrastructure.database.session import session_factory


class SyncLogRepository:
    """
    Gestiona la tabla sync_logs (append-only).
    """

    def __init__(self, engine: Engine):
        self._session_factory = session_factory(engine)

    def record(self, entry: SyncLogEntry) -> bool:
        """
        Persiste una entrada del historial.

        Un fallo al registrar no debe romper la sync: se loguea y retorna False.
        """
        try:
            with self._session_factory() as session:
                session.add(
                    SyncLogModel(
                        run_type=entry.run_type.value,
                        dry_run=entry.dry_run,
                        tables=list(entry.tables),
                        added=entry.added,
                        updated=entry.updated,
                        deleted=entry.deleted,
                        errors=entry.errors,
                    )
                )
                session.commit()
            return True
        except Exception as e:
            logger.error(f"No se pudo registrar la sync ({entry.run_type.value}): {e}")
            return False

    def list_recent(self, limit: int) -> List[SyncLogEntry]:
        """Últimas `limit` entradas, de la más reciente a la más antigua."""
        query = select(SyncLogModel).order_by(SyncLogModel.id.desc()).limit(limit)
        with self._session_factory() as session:
            rows = session.execute(query).scalars().all()
            return [self._to_entity(r) for r in rows]

    @staticmethod
    def _to_entity(row: SyncLogModel) -> SyncLogEntry:
        return SyncLogEntry(
            id=row.id,
            run_type=SyncRunType(row.run_type),
            dry_run=bool(row.dry_run),
            tables=tuple(row.tables or ()),
            added=row.added or 0,
            updated=row.updated or 0,
            deleted=row.deleted or 0,
            errors=row.errors or "",
            created_at=row.created_at,
        )
