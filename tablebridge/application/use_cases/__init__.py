"""
Casos de uso de la aplicacion.
"""
from .admin_use_cases import AdminUseCases
from .migration_use_cases import MigrationRunner, MigrationRunResult
from .sync_use_cases import SyncUseCases

__all__ = ["AdminUseCases", "MigrationRunner", "MigrationRunResult", "SyncUseCases"]
