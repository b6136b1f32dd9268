"""
Repositorios de acceso a datos.
"""
from tablebridge.infrastructure.repositories.sql_repository import SqlRepository
from tablebridge.infrastructure.repositories.sync_log_repository import SyncLogRepository

__all__ = ["SqlRepository", "SyncLogRepository"]
