"""
Entidades del dominio.
"""
from tablebridge.domain.entities.schema import (
    SourceType,
    DefaultKind,
    ColumnSpec,
    TableSpec,
)
from tablebridge.domain.entities.run_stats import (
    ErrorRecord,
    RunStats,
    TableOutcome,
    TableStatus,
)
from tablebridge.domain.entities.sync_log import SyncLogEntry, SyncRunType

__all__ = [
    "SourceType",
    "DefaultKind",
    "ColumnSpec",
    "TableSpec",
    "ErrorRecord",
    "RunStats",
    "TableOutcome",
    "TableStatus",
    "SyncLogEntry",
    "SyncRunType",
]
