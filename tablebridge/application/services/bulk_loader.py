"""
Carga de filas en el destino: un INSERT parametrizado por fila.

Los lotes solo marcan el progreso: no son fronteras transaccionales.
Cada fila se confirma (o revierte) de forma independiente.
"""
from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, Iterable, Optional

from loguru import logger
from sqlalchemy.engine import Connection

from tablebridge.domain.entities.schema import ColumnSpec, SourceType, TableSpec
from tablebridge.infrastructure.repositories.sql_repository import SqlRepository
from tablebridge.shared.utils.datetime_utils import parse_iso_timestamp, to_naive_utc


@dataclass
class LoadResult:
    succeeded: int = 0
    failed: int = 0


def prepare_value(column: Optional[ColumnSpec], value: Any) -> Any:
    """
    Adapta un valor del origen al parámetro del INSERT.

    - None pasa como NULL (nunca como el string "null")
    - dict/list se serializa a texto JSON
    - strings ISO en columnas TIMESTAMP -> datetime naive en UTC
    """
    if value is None:
        return None
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False, default=str)
    if column is not None and column.source_type is SourceType.TIMESTAMP:
        if isinstance(value, datetime):
            return to_naive_utc(value)
        if isinstance(value, str):
            parsed = parse_iso_timestamp(value)
            if parsed is not None:
                return to_naive_utc(parsed)
    return value


class BulkLoader:
    def __init__(self, repository: SqlRepository, batch_size: int = 100):
        self._repo = repository
        self._batch_size = max(1, batch_size)

    def load(
        self,
        conn: Connection,
        spec: TableSpec,
        rows: Iterable[Dict[str, Any]],
        reporter=None,
        on_row_loaded: Optional[Callable[[Dict[str, Any]], None]] = None,
    ) -> LoadResult:
        """
        Inserta las filas en `spec.name`.

        Un error de fila se registra y cuenta; la carga sigue con la siguiente.
        """
        columns = spec.column_names
        sql, binds = self._repo.build_insert(spec.name, columns)
        specs = [spec.column(c) for c in columns]
        result = LoadResult()
        processed = 0

        for row in rows:
            params = {
                bind: prepare_value(col_spec, row.get(name))
                for bind, name, col_spec in zip(binds, columns, specs)
            }
            try:
                self._repo.execute(conn, sql, params)
                conn.commit()
            except Exception as e:
                conn.rollback()
                result.failed += 1
                message = f"fila {processed + 1}: {e}"
                if reporter is not None:
                    reporter.record_error(f"load:{spec.name}", message)
                else:
                    logger.error(f"[load:{spec.name}] {message}")
            else:
                result.succeeded += 1
                if on_row_loaded is not None:
                    on_row_loaded(row)

            processed += 1
            if processed % self._batch_size == 0:
                logger.info(
                    f"{spec.name}: lote {processed // self._batch_size} "
                    f"({result.succeeded} ok, {result.failed} con error)"
                )

        logger.info(f"{spec.name}: carga terminada ({result.succeeded} ok, {result.failed} con error)")
        return result
