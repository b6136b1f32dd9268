"""
Sincronización de datos: destino SQL (autoritativo) -> mirror REST por upsert.

No distingue inserts de updates: todo lo escrito cuenta como "added".
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Sequence

from loguru import logger

from tablebridge.infrastructure.repositories.sql_repository import SqlRepository


@dataclass
class DataSyncResult:
    tables: List[str] = field(default_factory=list)
    added: int = 0
    updated: int = 0
    deleted: int = 0
    errors: List[str] = field(default_factory=list)
    dry_run: bool = False
    counts: Dict[str, int] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.errors


class UpsertSyncer:
    def __init__(
        self,
        target_repository: SqlRepository,
        mirror_client,
        batch_size: int = 1000,
        conflict_column: str = "id",
        mirror_deletes: bool = False,
    ):
        self._target = target_repository
        self._mirror = mirror_client
        self._batch_size = batch_size
        self._conflict_column = conflict_column
        self._mirror_deletes = mirror_deletes

    def sync(self, tables: Sequence[str], dry_run: bool = False) -> DataSyncResult:
        """
        Pagina cada tabla del destino (limit/offset) y hace upsert en el mirror.

        Con dry_run solo cuenta filas. Un error afecta solo a su tabla.
        """
        result = DataSyncResult(tables=list(tables), dry_run=dry_run)
        if self._mirror_deletes:
            logger.warning("MIRROR_DELETES activo pero el borrado en el mirror no está implementado; se ignora")

        with self._target.connect() as conn:
            for table in tables:
                try:
                    total = self._target.count_rows(conn, table)
                except Exception as e:
                    conn.rollback()
                    result.errors.append(f"{table}: {e}")
                    logger.error(f"No se pudo contar {table}: {e}")
                    continue

                if dry_run:
                    result.counts[table] = total
                    logger.info(f"[dry run] {table}: {total} filas")
                    continue

                try:
                    written = self._sync_table(conn, table, total)
                except Exception as e:
                    conn.rollback()
                    result.errors.append(f"{table}: {e}")
                    logger.error(f"Error sincronizando {table}: {e}")
                    continue
                result.added += written
                logger.success(f"{table}: {written} filas sincronizadas")

        return result

    def _sync_table(self, conn, table: str, total: int) -> int:
        written = 0
        for offset in range(0, total, self._batch_size):
            rows = self._target.fetch_page(
                conn,
                table,
                limit=self._batch_size,
                offset=offset,
                order_by=self._conflict_column,
            )
            if not rows:
                break
            written += self._mirror.upsert_rows(table, rows, on_conflict=self._conflict_column)
            logger.debug(f"{table}: {offset + len(rows)}/{total}")
        return written
