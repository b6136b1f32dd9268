"""
Endpoints de sincronizacion continua (destino -> mirror).

Las corridas son sincronas (SQLAlchemy + requests) y se ejecutan en un
thread separado para no bloquear el event loop.
"""
import asyncio

from fastapi import APIRouter, Depends, Query

from tablebridge.api.v1.dependencies.use_case_deps import get_sync_use_cases
from tablebridge.application.dto.sync_dto import (
    DataSyncResponseDTO,
    FullSyncResponseDTO,
    SchemaSyncResponseDTO,
    SyncStatusResponseDTO,
)
from tablebridge.application.use_cases.sync_use_cases import SyncUseCases


router = APIRouter(prefix="/sync", tags=["Sync"])


@router.post("/schema", response_model=SchemaSyncResponseDTO, response_model_exclude_none=True)
async def sync_schema(
    dry_run: bool = Query(False, alias="dryRun", description="Solo calcula el diff, no lo aplica"),
    use_cases: SyncUseCases = Depends(get_sync_use_cases),
):
    """
    Aplica el diff de esquema destino -> mirror.

    Responde 409 con el preview si el diff es destructivo y ALLOW_DESTRUCTIVE=false.
    """
    return await asyncio.to_thread(use_cases.sync_schema, dry_run)


@router.post("/data", response_model=DataSyncResponseDTO, response_model_exclude_none=True)
async def sync_data(
    dry_run: bool = Query(False, alias="dryRun", description="Solo cuenta filas por tabla"),
    use_cases: SyncUseCases = Depends(get_sync_use_cases),
):
    """Upsert de las tablas de SYNC_TABLES en el mirror."""
    return await asyncio.to_thread(use_cases.sync_data, dry_run)


@router.post("/full", response_model=FullSyncResponseDTO, response_model_exclude_none=True)
async def sync_full(
    dry_run: bool = Query(False, alias="dryRun"),
    use_cases: SyncUseCases = Depends(get_sync_use_cases),
):
    """Schema y luego data; un diff bloqueado corta antes de tocar datos."""
    return await asyncio.to_thread(use_cases.sync_full, dry_run)


@router.get("/status", response_model=SyncStatusResponseDTO)
async def sync_status(use_cases: SyncUseCases = Depends(get_sync_use_cases)):
    """Historial reciente de sincronizaciones (SYNC_STATUS_LIMIT entradas)."""
    return await asyncio.to_thread(use_cases.get_status)
