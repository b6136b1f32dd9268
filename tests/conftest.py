"""
Configuración de fixtures para pytest.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional

import pytest
from sqlalchemy import text

from tablebridge.core.config import Settings
from tablebridge.infrastructure.database.session import Base, build_engine
from tablebridge.infrastructure.repositories.sql_repository import SqlRepository


# SQLite en memoria (StaticPool: una sola conexión compartida)
TEST_DATABASE_URL = "sqlite:///:memory:"


class FakeSourceClient:
    """
    Origen REST en memoria.

    - tables: nombre -> lista de filas
    - failures: nombre -> cantidad de llamadas a fetch_page que fallan antes de responder
    """

    def __init__(self, tables: Optional[Dict[str, List[Dict[str, Any]]]] = None):
        self.tables = tables or {}
        self.failures: Dict[str, int] = {}
        self.page_calls: List[tuple] = []
        self.upserts: List[tuple] = []

    def fetch_page(self, table: str, offset: int, limit: int, *, order: Optional[str] = None):
        self.page_calls.append((table, offset, limit))
        if self.failures.get(table, 0) > 0:
            self.failures[table] -= 1
            raise ConnectionError(f"timeout leyendo {table}")
        return [dict(r) for r in self.tables.get(table, [])[offset:offset + limit]]

    def fetch_count(self, table: str) -> int:
        return len(self.tables.get(table, []))

    def upsert_rows(self, table: str, rows, *, on_conflict: str) -> int:
        self.upserts.append((table, list(rows), on_conflict))
        return len(rows)

    def ping(self) -> dict:
        return {"connection": "active", "mode": "mirror", "tables": len(self.tables)}


@pytest.fixture
def engine():
    """Engine SQLite en memoria, con las tablas propias creadas."""
    eng = build_engine(TEST_DATABASE_URL)
    Base.metadata.create_all(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def repo(engine) -> SqlRepository:
    return SqlRepository(engine)


@pytest.fixture
def source() -> FakeSourceClient:
    return FakeSourceClient()


@pytest.fixture
def config(tmp_path) -> Settings:
    """Settings aislados del entorno: sin esperas reales y artefactos en tmp."""
    return Settings(
        SOURCE_URL="http://source.test",
        SOURCE_SERVICE_KEY="service-key",
        TARGET_DATABASE_URL=TEST_DATABASE_URL,
        MIGRATION_PAGE_SIZE=2,
        RETRY_MAX_ATTEMPTS=3,
        RETRY_BASE_DELAY_MS=1000,
        OUTPUT_DIR=str(tmp_path / "out"),
        LOG_FILE=str(tmp_path / "logs" / "migration.log"),
        ERROR_LOG_FILE=str(tmp_path / "logs" / "migration-errors.log"),
        SYNC_TABLES='["customers"]',
    )


@pytest.fixture
def read_rows(engine):
    """Lectura directa del destino para los asserts."""
    def _read(sql: str) -> List[Dict[str, Any]]:
        with engine.connect() as conn:
            return [dict(r) for r in conn.execute(text(sql)).mappings()]
    return _read
