"""
Repositorio SQL (SQLAlchemy Core) para el store destino y el mirror.

Frontera SQL del sistema:
- DDL y DML parametrizado sobre una Connection abierta por el caller
- conteos exactos y lectura paginada (limit/offset)
- sonda de versión / cantidad de tablas

Las transacciones las controla el caller (commit-as-you-go de SQLAlchemy 2.0).
"""

from __future__ import annotations

from typing import Any, Optional, Sequence

from sqlalchemy import inspect, text
from sqlalchemy.engine import Connection, CursorResult, Engine


def _escape_colons(sql: str) -> str:
    # text() interpreta ":nombre" como bind param; en DDL los ":" son literales
    return sql.replace(":", r"\:")


class SqlRepository:
    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    @property
    def engine(self) -> Engine:
        return self._engine

    @property
    def dialect_name(self) -> str:
        return self._engine.dialect.name

    def connect(self) -> Connection:
        """
        Abre conexión. El caller controla commits y debe cerrarla
        (se usa como context manager).
        """
        return self._engine.connect()

    def quote(self, identifier: str) -> str:
        """Cita un identificador con las reglas del dialecto (backticks en MySQL)."""
        return self._engine.dialect.identifier_preparer.quote_identifier(identifier)

    def execute_ddl(self, conn: Connection, statement: str) -> None:
        conn.execute(text(_escape_colons(statement)))

    def execute(
        self,
        conn: Connection,
        statement: str,
        params: Optional[dict[str, Any]] = None,
    ) -> CursorResult:
        """Ejecuta una sentencia con binds ":nombre"."""
        return conn.execute(text(statement), params or {})

    def build_insert(self, table: str, columns: Sequence[str]) -> tuple[str, list[str]]:
        """
        Construye un INSERT parametrizado.

        Returns:
            (sql, nombres de bind en el orden de columns)
        """
        binds = [f"p{i}" for i in range(len(columns))]
        cols_sql = ", ".join(_escape_colons(self.quote(c)) for c in columns)
        values_sql = ", ".join(f":{b}" for b in binds)
        sql = f"INSERT INTO {_escape_colons(self.quote(table))} ({cols_sql}) VALUES ({values_sql})"
        return sql, binds

    def count_rows(self, conn: Connection, table: str) -> int:
        result = conn.execute(text(f"SELECT COUNT(*) AS row_count FROM {_escape_colons(self.quote(table))}"))
        return int(result.scalar() or 0)

    def fetch_page(
        self,
        conn: Connection,
        table: str,
        *,
        limit: int,
        offset: int,
        order_by: Optional[str] = None,
    ) -> list[dict[str, Any]]:
        """Lee una página con LIMIT/OFFSET como lista de dicts."""
        sql = f"SELECT * FROM {_escape_colons(self.quote(table))}"
        if order_by:
            sql += f" ORDER BY {_escape_colons(self.quote(order_by))}"
        sql += " LIMIT :limit OFFSET :offset"
        result = conn.execute(text(sql), {"limit": limit, "offset": offset})
        return [dict(row) for row in result.mappings()]

    def list_tables(self, conn: Connection) -> list[str]:
        return list(inspect(conn).get_table_names())

    def server_version(self, conn: Connection) -> str:
        info = conn.dialect.server_version_info
        if info:
            return ".".join(str(part) for part in info)
        return "unknown"

    def ping(self) -> dict[str, Any]:
        """Sonda de conectividad: versión del servidor + cantidad de tablas."""
        with self.connect() as conn:
            conn.execute(text("SELECT 1"))
            return {
                "dialect": self.dialect_name,
                "version": self.server_version(conn),
                "database": conn.engine.url.database,
                "tables": len(self.list_tables(conn)),
                "connection": "active",
            }
