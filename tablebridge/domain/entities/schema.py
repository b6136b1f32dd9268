"""
Descripción de esquema inferido (TableSpec / ColumnSpec).

El origen REST no expone catálogo: el esquema se deduce de los datos y
se congela en un TableSpec inmutable antes de empezar a cargar filas.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


class SourceType(Enum):
    """Tipo semántico de una columna en el origen."""

    BOOLEAN = "boolean"
    INTEGER = "integer"
    DECIMAL = "decimal"
    SHORT_TEXT = "short-text"
    LONG_TEXT = "long-text"
    TIMESTAMP = "timestamp"
    UUID = "uuid"
    JSON_OBJECT = "json-object"
    UNKNOWN = "unknown"     # valor null en la muestra; se materializa como texto largo


class DefaultKind(Enum):
    """Clasificación de una expresión DEFAULT del origen."""

    NOW = "now()"
    RANDOM_UUID = "random-uuid()"
    LITERAL = "literal"


@dataclass(frozen=True)
class ColumnSpec:
    """
    Columna de un TableSpec.

    - source_type: tipo semántico (inferido o declarado)
    - declared_type: tipo declarado en el origen si se conoce (ej: "varchar(50)", "int4[]")
    - default: expresión DEFAULT cruda del origen (ej: "now()", "'pending'")
    """

    name: str
    source_type: SourceType
    nullable: bool = True
    default: Optional[str] = None
    primary_key: bool = False
    declared_type: Optional[str] = None


@dataclass(frozen=True)
class TableSpec:
    """Esquema de una tabla: columnas ordenadas + PK opcional."""

    name: str
    columns: Tuple[ColumnSpec, ...] = field(default_factory=tuple)

    @property
    def is_empty(self) -> bool:
        """True cuando no se pudo derivar ningún esquema."""
        return not self.columns

    @property
    def column_names(self) -> List[str]:
        return [c.name for c in self.columns]

    @property
    def primary_key(self) -> List[str]:
        return [c.name for c in self.columns if c.primary_key]

    def column(self, name: str) -> Optional[ColumnSpec]:
        for col in self.columns:
            if col.name == name:
                return col
        return None

    def conform_row(self, row: Dict[str, Any]) -> Tuple[Dict[str, Any], bool]:
        """
        Ajusta una fila al conjunto de columnas de la tabla.

        Las claves faltantes se rellenan con None y las extra se descartan.

        Returns:
            (fila ajustada en el orden de las columnas, True si hubo que ajustarla)
        """
        names = self.column_names
        conformed = {name: row.get(name) for name in names}
        adjusted = len(row) != len(names) or any(name not in row for name in names)
        return conformed, adjusted
