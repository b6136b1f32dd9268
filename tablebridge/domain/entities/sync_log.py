"""
Registro persistido de una invocación de sincronización.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional, Tuple


class SyncRunType(Enum):
    SCHEMA = "schema"
    DATA = "data"
    FULL = "full"


@dataclass(frozen=True)
class SyncLogEntry:
    """
    Entrada append-only del historial de sync.

    Se crea una vez por invocación y nunca se modifica.
    """

    run_type: SyncRunType
    dry_run: bool
    tables: Tuple[str, ...] = field(default_factory=tuple)
    added: int = 0
    updated: int = 0
    deleted: int = 0
    errors: str = ""
    id: Optional[int] = None
    created_at: Optional[datetime] = None

    @classmethod
    def build(
        cls,
        run_type: SyncRunType,
        *,
        dry_run: bool,
        tables=(),
        added: int = 0,
        updated: int = 0,
        deleted: int = 0,
        errors=(),
    ) -> "SyncLogEntry":
        """Crea la entrada concatenando la lista de errores en un solo texto."""
        return cls(
            run_type=run_type,
            dry_run=dry_run,
            tables=tuple(tables),
            added=added,
            updated=updated,
            deleted=deleted,
            errors="\n".join(str(e) for e in errors),
        )

    @property
    def failed(self) -> bool:
        return bool(self.errors)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "run_type": self.run_type.value,
            "dry_run": self.dry_run,
            "tables": list(self.tables),
            "added": self.added,
            "updated": self.updated,
            "deleted": self.deleted,
            "errors": self.errors,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
