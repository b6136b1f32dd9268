"""
Endpoints de administracion: sondas de conectividad.
"""
import asyncio

from fastapi import APIRouter, Depends

from tablebridge.api.v1.dependencies.use_case_deps import get_admin_use_cases
from tablebridge.application.dto.sync_dto import StorePingResponseDTO
from tablebridge.application.use_cases.admin_use_cases import AdminUseCases


router = APIRouter(prefix="/admin", tags=["Admin"])


@router.get("/{store}/ping", response_model=StorePingResponseDTO, response_model_exclude_none=True)
async def ping_store(store: str, use_cases: AdminUseCases = Depends(get_admin_use_cases)):
    """
    Sonda de un store (source, target o mirror).

    Siempre 200 para stores conocidos: ok=false indica modo degradado.
    """
    return await asyncio.to_thread(use_cases.ping, store)
