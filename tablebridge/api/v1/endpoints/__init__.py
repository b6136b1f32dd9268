"""
Endpoints de la API v1.
"""
from . import admin, sync

__all__ = ["admin", "sync"]
