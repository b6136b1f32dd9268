"""
Reconciliación post-carga: conteo exacto en origen vs destino.
"""
from dataclasses import dataclass
from typing import Optional

from loguru import logger
from sqlalchemy.engine import Connection

from tablebridge.infrastructure.repositories.sql_repository import SqlRepository


@dataclass(frozen=True)
class ReconciliationResult:
    table: str
    source_count: Optional[int]
    target_count: Optional[int]

    @property
    def matched(self) -> bool:
        return self.source_count is not None and self.source_count == self.target_count


class Reconciler:
    """Una diferencia de conteos es warning, nunca error fatal."""

    def __init__(self, source_client, repository: SqlRepository):
        self._source = source_client
        self._repo = repository

    def reconcile(self, conn: Connection, table: str, reporter=None) -> ReconciliationResult:
        try:
            source_count = self._source.fetch_count(table)
            target_count = self._repo.count_rows(conn, table)
        except Exception as e:
            if reporter is not None:
                reporter.record_error(f"reconcile:{table}", e)
            else:
                logger.error(f"No se pudo reconciliar {table}: {e}")
            return ReconciliationResult(table, None, None)

        result = ReconciliationResult(table, source_count, target_count)
        if result.matched:
            logger.success(f"{table}: conteos coinciden ({source_count} == {target_count})")
        else:
            message = f"{table}: conteos no coinciden (origen={source_count}, destino={target_count})"
            if reporter is not None:
                reporter.record_warning(message)
            else:
                logger.warning(message)
        return result
