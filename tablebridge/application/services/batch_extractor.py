"""
Extracción paginada de filas desde el origen REST (offset/limit).

No reintenta: ante un error de página se detiene y devuelve lo acumulado.
El reintento lo decide el orquestador.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from loguru import logger


class ExtractionIncompleteError(RuntimeError):
    """La extracción se cortó antes de la última página."""

    def __init__(self, table: str, offset: int, cause: Exception):
        super().__init__(f"Extracción de {table} interrumpida en offset {offset}: {cause}")
        self.table = table
        self.offset = offset
        self.cause = cause


@dataclass
class ExtractionResult:
    table: str
    rows: List[Dict[str, Any]] = field(default_factory=list)
    pages: int = 0
    error: Optional[ExtractionIncompleteError] = None

    @property
    def complete(self) -> bool:
        return self.error is None


class BatchExtractor:
    def __init__(self, source_client, page_size: int, order_by: Optional[str] = None):
        if page_size <= 0:
            raise ValueError("page_size debe ser positivo")
        self._source = source_client
        self._page_size = page_size
        self._order_by = order_by or None

    @property
    def page_size(self) -> int:
        return self._page_size

    def extract(self, table: str) -> ExtractionResult:
        """Extrae todas las filas; un error corta la extracción sin propagarse."""
        result = ExtractionResult(table=table)
        offset = 0
        while True:
            try:
                page = self._source.fetch_page(table, offset, self._page_size, order=self._order_by)
            except Exception as e:
                result.error = ExtractionIncompleteError(table, offset, e)
                logger.error(str(result.error))
                return result

            result.pages += 1
            result.rows.extend(page)
            logger.debug(f"{table}: página {result.pages} ({len(page)} filas, offset {offset})")
            if len(page) < self._page_size:
                break
            offset += len(page)

        logger.info(f"{table}: {len(result.rows)} filas extraídas en {result.pages} páginas")
        return result
