"""
Data Transfer Objects (DTOs) para la capa de aplicacion.
"""
from .sync_dto import (
    DataSyncResponseDTO,
    FullSyncResponseDTO,
    SchemaSyncResponseDTO,
    StorePingResponseDTO,
    SyncLogDTO,
    SyncStatusResponseDTO,
)

__all__ = [
    "DataSyncResponseDTO",
    "FullSyncResponseDTO",
    "SchemaSyncResponseDTO",
    "StorePingResponseDTO",
    "SyncLogDTO",
    "SyncStatusResponseDTO",
]
