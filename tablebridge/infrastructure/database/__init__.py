"""
Configuración de base de datos.

Importa todos los modelos para que se registren con Base
antes de crear las tablas.
"""
from tablebridge.infrastructure.database.models import SyncLogModel

__all__ = ["SyncLogModel"]
