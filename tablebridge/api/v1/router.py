"""
Router principal de la API.
Agrupa los endpoints de sincronizacion y administracion.
"""
from fastapi import APIRouter

from tablebridge.api.v1.endpoints import admin, sync


# Sin prefijo de version: la superficie publica es /sync/* y /admin/*
api_router = APIRouter()

api_router.include_router(sync.router)
api_router.include_router(admin.router)
