"""
Inferencia de esquema a partir de filas de muestra del origen REST.

El origen no expone catálogo, así que el esquema se deduce de los valores.
El conjunto de columnas sale de la primera fila muestreada.
"""
from __future__ import annotations

import re
from typing import Any, Dict, List, Optional, Tuple

from loguru import logger

from tablebridge.domain.entities.schema import ColumnSpec, SourceType, TableSpec


UUID_RE = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$",
    re.IGNORECASE,
)
TIMESTAMP_RE = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}")

SHORT_TEXT_MAX = 255
INT32_MIN = -2147483648
INT32_MAX = 2147483647
PRIMARY_KEY_COLUMN = "id"


def infer_value_type(value: Any) -> Tuple[SourceType, Optional[str]]:
    """
    Tipo semántico de un valor (primera regla que matchea gana).

    Returns:
        (tipo semántico, tipo declarado sugerido o None)
    """
    if value is None:
        return SourceType.UNKNOWN, None
    # bool antes que int: en Python bool es subclase de int
    if isinstance(value, bool):
        return SourceType.BOOLEAN, None
    if isinstance(value, int):
        if value < INT32_MIN or value > INT32_MAX:
            return SourceType.INTEGER, "bigint"
        return SourceType.INTEGER, None
    if isinstance(value, float):
        if value.is_integer():
            return infer_value_type(int(value))
        return SourceType.DECIMAL, None
    if isinstance(value, str):
        if UUID_RE.match(value):
            return SourceType.UUID, None
        if TIMESTAMP_RE.match(value):
            return SourceType.TIMESTAMP, None
        if len(value) <= SHORT_TEXT_MAX:
            return SourceType.SHORT_TEXT, None
        return SourceType.LONG_TEXT, None
    if isinstance(value, (dict, list)):
        return SourceType.JSON_OBJECT, None
    return SourceType.UNKNOWN, None


def infer_column(name: str, values: List[Any]) -> ColumnSpec:
    """
    ColumnSpec para una columna a partir de sus valores muestreados.

    Un null en la primera fila se refina con el primer valor no-null del resto
    de la muestra; si todos son null queda UNKNOWN (texto largo).
    """
    first = values[0] if values else None
    if first is None:
        first = next((v for v in values if v is not None), None)
    source_type, declared = infer_value_type(first)

    is_pk = name == PRIMARY_KEY_COLUMN
    if is_pk and source_type is SourceType.UUID:
        # Identificador de ancho fijo aunque el string tenga < 255 chars
        declared = None
    return ColumnSpec(
        name=name,
        source_type=source_type,
        nullable=not is_pk,
        primary_key=is_pk,
        declared_type=declared,
    )


def infer_table_spec(table: str, rows: List[Dict[str, Any]]) -> TableSpec:
    """TableSpec desde filas ya obtenidas. Sin filas -> TableSpec vacío."""
    if not rows:
        return TableSpec(name=table)
    names = list(rows[0].keys())
    columns = tuple(infer_column(n, [r.get(n) for r in rows]) for n in names)
    return TableSpec(name=table, columns=columns)


class SchemaInferrer:
    """
    Muestrea filas del origen y construye el TableSpec.

    Nunca lanza: ante un error de consulta retorna un esquema vacío y lo registra.
    """

    def __init__(self, source_client, sample_size: int = 1):
        self._source = source_client
        self._sample_size = sample_size

    def infer(self, table: str, reporter=None) -> TableSpec:
        try:
            rows = self._source.fetch_page(table, 0, self._sample_size)
        except Exception as e:
            if reporter is not None:
                reporter.record_error(f"infer:{table}", e)
            else:
                logger.error(f"No se pudo muestrear {table}: {e}")
            return TableSpec(name=table)

        spec = infer_table_spec(table, rows)
        if spec.is_empty:
            logger.warning(f"{table}: sin filas de muestra, no se puede derivar esquema")
        else:
            logger.info(
                f"{table}: {len(spec.columns)} columnas inferidas "
                f"({', '.join(f'{c.name}:{c.source_type.value}' for c in spec.columns)})"
            )
        return spec
