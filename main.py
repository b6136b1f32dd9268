"""
Punto de entrada principal de la aplicación FastAPI (sync continua).
Configura la aplicación, middlewares, rutas y ciclo de vida.
"""
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from tablebridge.api.middlewares.error_handler import ErrorHandlerMiddleware
from tablebridge.api.v1.router import api_router
from tablebridge.core.config import settings
from tablebridge.core.events import shutdown_handler, startup_handler
from tablebridge.shared.exceptions.base import AppException
from tablebridge.shared.exceptions.domain import DestructiveChangeBlockedException


@asynccontextmanager
async def lifespan(application: FastAPI) -> AsyncIterator[None]:
    """Inicio y cierre de la aplicación (reemplaza los eventos startup/shutdown)."""
    await startup_handler(application)()
    try:
        yield
    finally:
        await shutdown_handler(application)()


def create_application() -> FastAPI:
    """
    Factory para crear y configurar la aplicación FastAPI.

    Returns:
        FastAPI: Instancia configurada de la aplicación
    """
    application = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="Sincronización continua destino SQL -> mirror",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # Middleware personalizado para manejo de errores
    application.add_middleware(ErrorHandlerMiddleware)

    application.include_router(api_router)

    @application.exception_handler(DestructiveChangeBlockedException)
    async def destructive_change_handler(request, exc: DestructiveChangeBlockedException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.message, "preview": exc.preview},
        )

    # Manejador global de excepciones personalizadas
    @application.exception_handler(AppException)
    async def app_exception_handler(request, exc: AppException):
        return JSONResponse(
            status_code=exc.status_code,
            content=exc.to_response(),
        )

    return application


# Crear instancia de la aplicación
app = create_application()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower(),
    )
