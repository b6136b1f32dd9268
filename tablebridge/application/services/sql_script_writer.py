"""
Artefactos de la corrida: script DDL, script DML y reporte markdown.

Los archivos son write-once: se crean con modo "x" y nunca se reescriben
ni se les agrega contenido.
"""
from __future__ import annotations

import json
from datetime import date, datetime
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from loguru import logger

from tablebridge.shared.utils.datetime_utils import file_timestamp, utc_now


def _quote_ident(name: str, dialect_name: str) -> str:
    if dialect_name == "mysql":
        return "`" + name.replace("`", "``") + "`"
    return '"' + name.replace('"', '""') + '"'


def sql_literal(value: Any, dialect_name: str = "mysql") -> str:
    """Representación literal SQL de un valor (para el script DML)."""
    if value is None:
        return "NULL"
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, (int, float, Decimal)):
        return str(value)
    if isinstance(value, (dict, list)):
        value = json.dumps(value, ensure_ascii=False, default=str)
    elif isinstance(value, (datetime, date)):
        value = value.isoformat(sep=" ") if isinstance(value, datetime) else value.isoformat()
    text_value = str(value).replace("'", "''")
    if dialect_name == "mysql":
        text_value = text_value.replace("\\", "\\\\")
    return f"'{text_value}'"


class SqlScriptWriter:
    """Acumula las sentencias ejecutadas para dejarlas como scripts reproducibles."""

    def __init__(self, dialect_name: str = "mysql"):
        self._dialect = dialect_name
        self._ddl: List[str] = []
        self._dml: List[str] = []

    def add_table(self, ddl: str) -> None:
        self._ddl.append(ddl.rstrip().rstrip(";") + ";")

    def add_row(self, table: str, columns: Sequence[str], row: Dict[str, Any]) -> None:
        cols = ", ".join(_quote_ident(c, self._dialect) for c in columns)
        values = ", ".join(sql_literal(row.get(c), self._dialect) for c in columns)
        self._dml.append(f"INSERT INTO {_quote_ident(table, self._dialect)} ({cols}) VALUES ({values});")

    def schema_script(self) -> str:
        header = [f"-- Schema generated {utc_now().isoformat()}", ""]
        body = "\n\n".join(self._ddl)
        if self._dialect == "mysql":
            return "\n".join(header + ["SET FOREIGN_KEY_CHECKS = 0;", "", body, "", "SET FOREIGN_KEY_CHECKS = 1;", ""])
        return "\n".join(header + [body, ""])

    def data_script(self) -> str:
        header = [f"-- Data generated {utc_now().isoformat()}", ""]
        return "\n".join(header + self._dml + [""])


def write_once(path: Path, content: str) -> Path:
    """
    Crea el archivo con el contenido dado.

    Raises:
        FileExistsError: si el archivo ya existe
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "x", encoding="utf-8") as fh:
        fh.write(content)
    return path


class ArtifactWriter:
    """Escribe schema_<ts>.sql, data_<ts>.sql y migration_report_<ts>.md."""

    def __init__(self, output_dir: str, timestamp: Optional[str] = None):
        self._output_dir = Path(output_dir)
        self._timestamp = timestamp or file_timestamp()

    @property
    def timestamp(self) -> str:
        return self._timestamp

    def write(self, scripts: SqlScriptWriter, report_markdown: str) -> Dict[str, Path]:
        paths = {
            "schema": write_once(self._output_dir / f"schema_{self._timestamp}.sql", scripts.schema_script()),
            "data": write_once(self._output_dir / f"data_{self._timestamp}.sql", scripts.data_script()),
            "report": write_once(
                self._output_dir / f"migration_report_{self._timestamp}.md", report_markdown
            ),
        }
        for kind, path in paths.items():
            logger.info(f"Artefacto {kind}: {path}")
        return paths
