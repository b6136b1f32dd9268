"""
Estadísticas de una corrida de migración/sync.

RunStats es propiedad del orquestador: se crea por corrida, se pasa
explícitamente a cada componente y queda de solo lectura al terminar.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from tablebridge.shared.utils.datetime_utils import utc_now


class TableStatus(Enum):
    """Resultado final de una tabla dentro de la corrida."""

    MIGRATED = "migrated"
    MIGRATED_WITH_ERRORS = "migrated_with_errors"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class ErrorRecord:
    """Error acumulado en la corrida (contexto + mensaje)."""

    context: str
    message: str
    timestamp: datetime = field(default_factory=utc_now)


@dataclass
class TableOutcome:
    """Fila de la tabla por-tabla del reporte."""

    name: str
    status: TableStatus = TableStatus.FAILED
    columns: int = 0
    rows_extracted: int = 0
    rows_loaded: int = 0
    rows_failed: int = 0
    source_count: Optional[int] = None
    target_count: Optional[int] = None

    @property
    def reconciled(self) -> Optional[bool]:
        if self.source_count is None or self.target_count is None:
            return None
        return self.source_count == self.target_count


@dataclass
class RunStats:
    """Contadores de la corrida."""

    tables_attempted: int = 0
    tables_succeeded: int = 0
    tables_failed: int = 0
    rows_attempted: int = 0
    rows_succeeded: int = 0
    rows_failed: int = 0
    retry_count: int = 0
    started_at: datetime = field(default_factory=utc_now)
    finished_at: Optional[datetime] = None
    errors: List[ErrorRecord] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    tables: List[TableOutcome] = field(default_factory=list)

    @property
    def finished(self) -> bool:
        return self.finished_at is not None

    @property
    def status(self) -> str:
        """SUCCESS solo si la lista de errores está vacía."""
        return "SUCCESS" if not self.errors else "PARTIAL SUCCESS"

    @property
    def duration_seconds(self) -> float:
        end = self.finished_at or utc_now()
        return max((end - self.started_at).total_seconds(), 0.0)

    def to_dict(self) -> Dict[str, Any]:
        """Convierte las estadísticas a diccionario para logs/API."""
        return {
            "status": self.status,
            "tables_attempted": self.tables_attempted,
            "tables_succeeded": self.tables_succeeded,
            "tables_failed": self.tables_failed,
            "rows_attempted": self.rows_attempted,
            "rows_succeeded": self.rows_succeeded,
            "rows_failed": self.rows_failed,
            "retry_count": self.retry_count,
            "started_at": self.started_at.isoformat(),
            "finished_at": self.finished_at.isoformat() if self.finished_at else None,
            "errors": [{"context": e.context, "message": e.message} for e in self.errors],
            "warnings": list(self.warnings),
        }
