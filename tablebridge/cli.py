"""
CLI: migración one-shot API REST -> base SQL.

Uso recomendado:
  - Ejecutar como job, fuera del request/response del API.

Variables de entorno requeridas:
  - SOURCE_URL
  - SOURCE_SERVICE_KEY
  - TARGET_DATABASE_URL (mysql://... por defecto)

Ejecución:
  tablebridge-migrate
  tablebridge-migrate --tables customers,orders
  tablebridge-migrate --schema-only --no-artifacts
"""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Optional, Sequence

from dotenv import load_dotenv
from loguru import logger
from sqlalchemy.exc import SQLAlchemyError

from tablebridge.application.use_cases.migration_use_cases import MigrationRunner
from tablebridge.core.config import Settings, parse_table_list
from tablebridge.core.logging import configure_logging
from tablebridge.infrastructure.database.session import build_engine
from tablebridge.infrastructure.external.source_api.rest_client import build_from_settings
from tablebridge.infrastructure.repositories.sql_repository import SqlRepository
from tablebridge.shared.exceptions.domain import ConfigurationException


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tablebridge-migrate",
        description="Migra tablas desde la API REST de origen hacia la base SQL destino.",
    )
    parser.add_argument(
        "--tables",
        default=None,
        help="Lista de tablas (coma o JSON). Por defecto MIGRATION_TABLES.",
    )
    parser.add_argument(
        "--schema-only",
        action="store_true",
        help="Solo infiere y crea las tablas (no copia datos).",
    )
    parser.add_argument(
        "--no-artifacts",
        action="store_true",
        help="No escribe los scripts SQL ni el reporte markdown.",
    )
    parser.add_argument(
        "--output-dir",
        default=None,
        help="Directorio de artefactos. Por defecto OUTPUT_DIR.",
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _build_parser().parse_args(argv)

    load_dotenv(Path.cwd() / ".env", override=False)
    config = Settings()

    try:
        config.require_connection_settings()
    except ConfigurationException as e:
        logger.error(e.message)
        return 1

    configure_logging(config)

    tables = parse_table_list(args.tables) if args.tables else None
    engine = build_engine(config.TARGET_DATABASE_URL)
    runner = MigrationRunner(
        build_from_settings(config),
        SqlRepository(engine),
        config,
        write_artifacts=not args.no_artifacts,
        output_dir=args.output_dir,
    )

    try:
        result = runner.run(tables, schema_only=args.schema_only)
    except SQLAlchemyError as e:
        logger.error(f"No se pudo conectar a la base destino: {e}")
        return 1
    finally:
        engine.dispose()

    for kind, path in result.artifacts.items():
        logger.info(f"{kind}: {path}")
    summary = result.stats.to_dict()
    logger.info(
        f"Estado final: {summary['status']} "
        f"({summary['rows_succeeded']}/{summary['rows_attempted']} filas, "
        f"{summary['tables_failed']} tablas con error, {len(summary['warnings'])} advertencias)"
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
