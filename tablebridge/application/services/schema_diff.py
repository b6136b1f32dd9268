"""
Diff de esquema destino -> mirror y compuerta de aplicación.

Estados de la compuerta:
    Idle -> Diffing -> {Blocked | DryRunPreview | Applying} -> Idle

Un diff destructivo nunca se aplica sin ALLOW_DESTRUCTIVE.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Optional, Protocol, Sequence

from loguru import logger
from sqlalchemy import Column, MetaData, Table, inspect
from sqlalchemy.engine import Engine
from sqlalchemy.schema import CreateTable

from tablebridge.domain.entities.sync_log import SyncLogEntry, SyncRunType
from tablebridge.infrastructure.repositories.sql_repository import SqlRepository


EXCLUDED_TABLES = ("sync_logs",)


def is_destructive(script: str) -> bool:
    """
    Detecta sentencias destructivas en el texto del script:
    DROP TABLE, DROP COLUMN o ALTER TABLE combinado con DROP.
    """
    lowered = " ".join(script.lower().split())
    if "drop table" in lowered or "drop column" in lowered:
        return True
    return "alter table" in lowered and "drop" in lowered


def count_changes(script: str) -> tuple[int, int]:
    """Conteo heurístico por palabra clave: (create table, alter table)."""
    lowered = " ".join(script.lower().split())
    return lowered.count("create table"), lowered.count("alter table")


@dataclass(frozen=True)
class SchemaDiff:
    statements: tuple = ()
    tables: tuple = ()

    @property
    def script(self) -> str:
        return "".join(f"{s.rstrip().rstrip(';')};\n" for s in self.statements)

    @property
    def empty(self) -> bool:
        return not self.statements


class SchemaDiffer(Protocol):
    def compute(self) -> SchemaDiff: ...


class ReflectionSchemaDiffer:
    """
    Diff forward por reflexión (SQLAlchemy inspect) de ambos stores.

    - tabla ausente en el mirror       -> CREATE TABLE
    - columna ausente en el mirror     -> ALTER TABLE .. ADD COLUMN
    - columna solo en el mirror        -> ALTER TABLE .. DROP COLUMN
    - tabla solo en el mirror (scope)  -> DROP TABLE
    """

    def __init__(
        self,
        target_engine: Engine,
        mirror_engine: Engine,
        tables: Optional[Sequence[str]] = None,
        excluded: Iterable[str] = EXCLUDED_TABLES,
    ):
        self._target = target_engine
        self._mirror = mirror_engine
        self._tables = list(tables or [])
        self._excluded = set(excluded)
        self._mirror_repo = SqlRepository(mirror_engine)

    def _scope(self, target_tables: List[str], mirror_tables: List[str]) -> List[str]:
        if self._tables:
            names = self._tables
        else:
            names = sorted(set(target_tables) | set(mirror_tables))
        return [n for n in names if n not in self._excluded]

    def compute(self) -> SchemaDiff:
        target_insp = inspect(self._target)
        mirror_insp = inspect(self._mirror)
        target_tables = target_insp.get_table_names()
        mirror_tables = mirror_insp.get_table_names()
        q = self._mirror_repo.quote

        statements: List[str] = []
        touched: List[str] = []
        for table in self._scope(target_tables, mirror_tables):
            in_target = table in target_tables
            in_mirror = table in mirror_tables
            before = len(statements)

            if in_target and not in_mirror:
                statements.append(self._render_create(table, target_insp))
            elif in_mirror and not in_target:
                statements.append(f"DROP TABLE {q(table)}")
            elif in_target and in_mirror:
                target_cols = {c["name"]: c for c in target_insp.get_columns(table)}
                mirror_cols = {c["name"] for c in mirror_insp.get_columns(table)}
                for name, col in target_cols.items():
                    if name not in mirror_cols:
                        col_type = self._render_type(col["type"])
                        statements.append(f"ALTER TABLE {q(table)} ADD COLUMN {q(name)} {col_type}")
                for name in sorted(mirror_cols - set(target_cols)):
                    statements.append(f"ALTER TABLE {q(table)} DROP COLUMN {q(name)}")

            if len(statements) > before:
                touched.append(table)

        logger.info(f"Diff de esquema: {len(statements)} sentencias sobre {len(touched)} tablas")
        return SchemaDiff(statements=tuple(statements), tables=tuple(touched))

    def _generic(self, col_type):
        try:
            return col_type.as_generic()
        except NotImplementedError:
            return col_type

    def _render_type(self, col_type) -> str:
        return self._generic(col_type).compile(dialect=self._mirror.dialect)

    def _render_create(self, table: str, insp) -> str:
        pk = set(insp.get_pk_constraint(table).get("constrained_columns") or [])
        columns = [
            Column(
                c["name"],
                self._generic(c["type"]),
                primary_key=c["name"] in pk,
                nullable=c.get("nullable", True),
            )
            for c in insp.get_columns(table)
        ]
        ddl = CreateTable(Table(table, MetaData(), *columns))
        return str(ddl.compile(dialect=self._mirror.dialect)).strip()


class GateState(Enum):
    IDLE = "idle"
    DIFFING = "diffing"
    BLOCKED = "blocked"
    DRY_RUN_PREVIEW = "dry_run_preview"
    APPLYING = "applying"


@dataclass
class SchemaGateResult:
    state: GateState
    preview: str = ""
    added: int = 0
    updated: int = 0
    tables: List[str] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.state is not GateState.BLOCKED

    @property
    def dry_run(self) -> bool:
        return self.state is GateState.DRY_RUN_PREVIEW


class SchemaDiffGate:
    """
    Calcula el diff, lo bloquea si es destructivo y lo aplica en una transacción.

    `record_log=False` permite que un caller (sync full) registre una única
    entrada agregada.
    """

    def __init__(
        self,
        differ: SchemaDiffer,
        mirror_repository: Optional[SqlRepository],
        log_repository=None,
        allow_destructive: bool = False,
    ):
        self._differ = differ
        self._mirror = mirror_repository
        self._logs = log_repository
        self._allow_destructive = allow_destructive
        self.state = GateState.IDLE

    def run(self, dry_run: bool = False, record_log: bool = True) -> SchemaGateResult:
        self.state = GateState.DIFFING
        try:
            diff = self._differ.compute()
        except Exception as e:
            self.state = GateState.IDLE
            logger.error(f"Error calculando diff de esquema: {e}")
            self._record(record_log, dry_run, [], 0, 0, [f"diff: {e}"])
            return SchemaGateResult(state=GateState.IDLE, error=str(e))

        preview = diff.script
        added, updated = count_changes(preview)
        tables = list(diff.tables)

        try:
            if is_destructive(preview) and not self._allow_destructive:
                self.state = GateState.BLOCKED
                logger.warning(f"Diff destructivo bloqueado ({len(diff.statements)} sentencias)")
                return SchemaGateResult(state=GateState.BLOCKED, preview=preview, tables=tables)

            if dry_run:
                self.state = GateState.DRY_RUN_PREVIEW
                logger.info(f"Dry run de esquema: {added} create, {updated} alter")
                self._record(record_log, True, tables, added, updated, [])
                return SchemaGateResult(
                    state=GateState.DRY_RUN_PREVIEW,
                    preview=preview,
                    added=added,
                    updated=updated,
                    tables=tables,
                )

            self.state = GateState.APPLYING
            result = self._apply(diff, preview, added, updated, tables)
            self._record(
                record_log,
                False,
                tables,
                result.added,
                result.updated,
                [result.error] if result.error else [],
            )
            return result
        finally:
            self.state = GateState.IDLE

    def _apply(self, diff: SchemaDiff, preview: str, added: int, updated: int, tables: List[str]) -> SchemaGateResult:
        if diff.empty:
            logger.info("Esquema sin cambios")
            return SchemaGateResult(state=GateState.APPLYING, preview=preview, tables=tables)
        if self._mirror is None:
            return SchemaGateResult(
                state=GateState.APPLYING,
                preview=preview,
                tables=tables,
                error="MIRROR_DATABASE_URL no configurada",
            )
        try:
            with self._mirror.engine.begin() as conn:
                for statement in diff.statements:
                    self._mirror.execute_ddl(conn, statement)
        except Exception as e:
            logger.error(f"Error aplicando diff de esquema: {e}")
            return SchemaGateResult(state=GateState.APPLYING, preview=preview, tables=tables, error=str(e))

        logger.success(f"Esquema aplicado: {added} tablas creadas, {updated} alteradas")
        return SchemaGateResult(
            state=GateState.APPLYING, preview=preview, added=added, updated=updated, tables=tables
        )

    def _record(self, enabled: bool, dry_run: bool, tables, added: int, updated: int, errors) -> None:
        if not enabled or self._logs is None:
            return
        self._logs.record(
            SyncLogEntry.build(
                SyncRunType.SCHEMA,
                dry_run=dry_run,
                tables=tables,
                added=added,
                updated=updated,
                errors=errors,
            )
        )
