"""
Materialización de tablas en el destino a partir de un TableSpec.
"""
from __future__ import annotations

from typing import List

from loguru import logger
from sqlalchemy.engine import Connection

from tablebridge.application.services.type_mapper import map_column
from tablebridge.domain.entities.schema import TableSpec
from tablebridge.infrastructure.repositories.sql_repository import SqlRepository


MYSQL_TABLE_OPTIONS = "ENGINE=InnoDB DEFAULT CHARSET=utf8mb4 COLLATE=utf8mb4_unicode_ci"


class TableMaterializer:
    """Renderiza y ejecuta CREATE TABLE IF NOT EXISTS."""

    def __init__(self, repository: SqlRepository):
        self._repo = repository

    def render(self, spec: TableSpec) -> str:
        """
        DDL idempotente para la tabla.

        - NOT NULL salvo columnas nullable
        - DEFAULT traducido cuando existe
        - PRIMARY KEY compuesta con todas las columnas marcadas
        """
        q = self._repo.quote
        definitions: List[str] = []
        for column in spec.columns:
            mapped = map_column(column)
            parts = [q(column.name), mapped.ddl_type]
            if not column.nullable:
                parts.append("NOT NULL")
            if mapped.default_clause:
                parts.append(mapped.default_clause)
            definitions.append(" ".join(parts))

        if spec.primary_key:
            definitions.append(f"PRIMARY KEY ({', '.join(q(c) for c in spec.primary_key)})")

        body = ",\n  ".join(definitions)
        ddl = f"CREATE TABLE IF NOT EXISTS {q(spec.name)} (\n  {body}\n)"
        if self._repo.dialect_name == "mysql":
            ddl += f" {MYSQL_TABLE_OPTIONS}"
        return ddl

    def materialize(self, conn: Connection, spec: TableSpec, reporter=None) -> bool:
        """
        Ejecuta el DDL. Un fallo deja la tabla fuera del resto de la corrida.

        Returns:
            True si la tabla existe al terminar
        """
        if spec.is_empty:
            logger.warning(f"{spec.name}: esquema vacío, no se crea la tabla")
            return False

        ddl = self.render(spec)
        try:
            self._repo.execute_ddl(conn, ddl)
            conn.commit()
        except Exception as e:
            conn.rollback()
            if reporter is not None:
                reporter.record_error(f"materialize:{spec.name}", e)
            else:
                logger.error(f"Error creando tabla {spec.name}: {e}")
            return False

        logger.info(f"Tabla {spec.name} lista ({len(spec.columns)} columnas)")
        return True
