"""
DTOs de la superficie HTTP de sincronización.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class SchemaSyncResponseDTO(BaseModel):
    """Resultado de POST /sync/schema."""

    model_config = ConfigDict(populate_by_name=True)

    ok: bool
    added: int = 0
    updated: int = 0
    dry_run: Optional[bool] = Field(None, alias="dryRun")
    preview: Optional[str] = None


class DataSyncResponseDTO(BaseModel):
    """Resultado de POST /sync/data."""

    model_config = ConfigDict(populate_by_name=True)

    ok: bool
    tables: List[str] = Field(default_factory=list)
    added: int = 0
    updated: int = 0
    deleted: int = 0
    errors: List[str] = Field(default_factory=list)
    dry_run: Optional[bool] = Field(None, alias="dryRun")
    counts: Optional[Dict[str, int]] = None


class FullSyncResponseDTO(BaseModel):
    """Resultado de POST /sync/full (schema + data)."""

    model_config = ConfigDict(populate_by_name=True)

    ok: bool
    dry_run: Optional[bool] = Field(None, alias="dryRun")
    schema_result: SchemaSyncResponseDTO = Field(..., alias="schema")
    data: Optional[DataSyncResponseDTO] = None
    tables: List[str] = Field(default_factory=list)
    added: int = 0
    updated: int = 0
    deleted: int = 0
    errors: List[str] = Field(default_factory=list)


class SyncLogDTO(BaseModel):
    id: Optional[int] = None
    run_type: str
    dry_run: bool
    tables: List[str]
    added: int
    updated: int
    deleted: int
    errors: str
    created_at: Optional[datetime] = None


class SyncStatusResponseDTO(BaseModel):
    entries: List[SyncLogDTO]


class StorePingResponseDTO(BaseModel):
    """Sonda de un store. ok=False indica modo degradado, no un error HTTP."""

    ok: bool
    store: str
    details: Optional[Dict[str, Any]] = None
    error: Optional[str] = None
