"""
Traducción de tipos del origen a fragmentos DDL del destino.

Funciones puras: no hacen I/O y nunca fallan. Un DEFAULT no reconocido
se descarta en lugar de romper la generación del DDL.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional, Union

from tablebridge.domain.entities.schema import ColumnSpec, DefaultKind, SourceType


JSON_TYPE = "JSON"
IDENTIFIER_TYPE = "CHAR(36)"
ENUM_TYPE = "VARCHAR(50)"

# Tipos semánticos -> tipo destino (dialecto MySQL)
SEMANTIC_TYPES: dict[SourceType, str] = {
    SourceType.BOOLEAN: "TINYINT(1)",
    SourceType.INTEGER: "INT",
    SourceType.DECIMAL: "DECIMAL(10,2)",
    SourceType.SHORT_TEXT: "VARCHAR(255)",
    SourceType.LONG_TEXT: "TEXT",
    SourceType.TIMESTAMP: "DATETIME",
    SourceType.UUID: IDENTIFIER_TYPE,
    SourceType.JSON_OBJECT: JSON_TYPE,
    SourceType.UNKNOWN: "TEXT",
}

# Tipos declarados en el origen (nombres PostgreSQL) -> tipo destino
DECLARED_TYPES: dict[str, str] = {
    "uuid": IDENTIFIER_TYPE,
    "serial": "INT AUTO_INCREMENT",
    "bigserial": "BIGINT AUTO_INCREMENT",
    "integer": "INT",
    "int": "INT",
    "int4": "INT",
    "smallint": "SMALLINT",
    "int2": "SMALLINT",
    "bigint": "BIGINT",
    "int8": "BIGINT",
    "boolean": "TINYINT(1)",
    "bool": "TINYINT(1)",
    "numeric": "DECIMAL",
    "decimal": "DECIMAL",
    "real": "FLOAT",
    "double precision": "DOUBLE",
    "text": "TEXT",
    "varchar": "VARCHAR(255)",
    "character varying": "VARCHAR(255)",
    "timestamp": "DATETIME",
    "timestamptz": "DATETIME",
    "timestamp without time zone": "DATETIME",
    "timestamp with time zone": "DATETIME",
    "jsonb": JSON_TYPE,
    "json": JSON_TYPE,
    "bytea": "BLOB",
    "inet": "VARCHAR(45)",
    "date": "DATE",
    "time": "TIME",
}

# Tipos parametrizados que pasan tal cual (solo se normaliza a mayúsculas)
_PARAMETERIZED_RE = re.compile(
    r"^(varchar|character varying|char|character|numeric|decimal)\s*\(\s*\d+\s*(,\s*\d+\s*)?\)$",
    re.IGNORECASE,
)
_NUMERIC_LITERAL_RE = re.compile(r"^-?\d+(\.\d+)?$")
_STRING_LITERAL_RE = re.compile(r"^'(?:[^']|'')*'$")

SourceTypeLike = Union[SourceType, str]


@dataclass(frozen=True)
class MappedColumnType:
    """Resultado del mapeo de una columna."""

    ddl_type: str
    default_clause: Optional[str] = None


def map_declared_type(declared: str) -> str:
    """
    Mapea un tipo declarado del origen (ej: "varchar(50)", "int4[]", "timestamptz").

    Reglas:
    - arrays -> JSON (el destino no tiene arrays nativos)
    - parametrizados -> pass-through en mayúsculas
    - timestamps con tz -> DATETIME (pérdida de tz documentada)
    - enums / USER-DEFINED -> VARCHAR(50)
    - desconocidos -> TEXT
    """
    raw = declared.strip()
    lowered = raw.lower()

    if lowered.endswith("[]") or lowered == "array":
        return JSON_TYPE
    if _PARAMETERIZED_RE.match(raw):
        normalized = re.sub(r"\s+", " ", raw.upper())
        normalized = normalized.replace("CHARACTER VARYING", "VARCHAR")
        return re.sub(r"^CHARACTER\b", "CHAR", normalized)
    if "::" in lowered or lowered in ("user-defined", "enum"):
        return ENUM_TYPE
    if lowered.startswith("timestamp"):
        return "DATETIME"
    return DECLARED_TYPES.get(lowered, "TEXT")


def map_semantic_type(source_type: SourceType, suffix: Optional[str] = None) -> str:
    """
    Mapea un tipo semántico. `suffix` es la precisión/longitud declarada
    (ej: "(100)" para texto corto, "(12,4)" para decimal).
    """
    base = SEMANTIC_TYPES.get(source_type, "TEXT")
    if suffix and source_type in (SourceType.SHORT_TEXT, SourceType.DECIMAL):
        name = base.split("(", 1)[0]
        return f"{name}{suffix.strip()}".upper()
    return base


def to_target_type(source_type: SourceTypeLike, suffix: Optional[str] = None) -> str:
    """Punto de entrada único: acepta tipo semántico o tipo declarado."""
    if isinstance(source_type, SourceType):
        return map_semantic_type(source_type, suffix)
    declared = source_type if not suffix else f"{source_type}{suffix}"
    return map_declared_type(declared)


def classify_default(expression: Optional[str]) -> Optional[DefaultKind]:
    """Clasifica una expresión DEFAULT; None si no se reconoce."""
    if expression is None:
        return None
    expr = expression.strip()
    lowered = expr.lower()
    if not expr:
        return None
    if "now()" in lowered or "current_timestamp" in lowered:
        return DefaultKind.NOW
    if "gen_random_uuid()" in lowered or "uuid_generate_v4()" in lowered:
        return DefaultKind.RANDOM_UUID
    if lowered in ("true", "false"):
        return DefaultKind.LITERAL
    if _NUMERIC_LITERAL_RE.match(expr):
        return DefaultKind.LITERAL
    literal = expr.split("::", 1)[0]
    if _STRING_LITERAL_RE.match(literal):
        return DefaultKind.LITERAL
    return None


def map_default(expression: Optional[str]) -> Optional[str]:
    """
    Traduce una expresión DEFAULT a la cláusula del destino.

    Returns:
        "DEFAULT ..." o None (expresión ausente o no reconocida)
    """
    kind = classify_default(expression)
    if kind is None:
        return None
    expr = expression.strip()
    if kind is DefaultKind.NOW:
        return "DEFAULT CURRENT_TIMESTAMP"
    if kind is DefaultKind.RANDOM_UUID:
        return "DEFAULT (UUID())"

    lowered = expr.lower()
    if lowered == "true":
        return "DEFAULT 1"
    if lowered == "false":
        return "DEFAULT 0"
    # Literal string con cast PG ('x'::text) -> solo el literal
    return f"DEFAULT {expr.split('::', 1)[0]}"


def map_column(column: ColumnSpec) -> MappedColumnType:
    """Tipo destino + DEFAULT para una ColumnSpec."""
    ddl_type = to_target_type(column.declared_type or column.source_type)
    return MappedColumnType(ddl_type=ddl_type, default_clause=map_default(column.default))
