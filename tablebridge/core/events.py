"""
Manejadores de eventos de inicio y cierre de la aplicacion.
"""
from typing import Callable

from fastapi import FastAPI
from loguru import logger

from tablebridge.core.config import settings
from tablebridge.core.logging import configure_logging
from tablebridge.infrastructure.database.session import close_db, init_db


def startup_handler(app: FastAPI) -> Callable:
    """
    Manejador de eventos de inicio de la aplicacion.

    Args:
        app: Instancia de FastAPI

    Returns:
        Callable: Funcion asincrona de inicio
    """
    async def startup() -> None:
        """Valida configuracion, configura logging y crea sync_logs."""
        try:
            logger.info(f"Iniciando {settings.APP_NAME} v{settings.APP_VERSION}")

            # Configuracion obligatoria: fatal si falta
            settings.require_connection_settings()
            configure_logging(settings)
            _validate_config()

            init_db()
            logger.info("Base de datos destino inicializada (sync_logs)")

            logger.success("Aplicacion iniciada correctamente")
            _print_available_urls()

        except Exception as e:
            logger.error(f"Error durante startup: {e}")
            logger.exception("Detalle del error:")
            raise

    return startup


def _validate_config() -> None:
    """Advertencias de configuracion no fatales."""
    warnings = []

    if not settings.MIRROR_DATABASE_URL:
        warnings.append("MIRROR_DATABASE_URL no configurada - /sync/schema no estara disponible")
    if not settings.sync_direction_supported:
        warnings.append(f"SYNC_DIRECTION={settings.SYNC_DIRECTION} - las escrituras seran rechazadas")
    if not settings.sync_tables:
        warnings.append("SYNC_TABLES vacio - /sync/data no sincronizara ninguna tabla")
    if settings.MIRROR_DELETES:
        warnings.append("MIRROR_DELETES=true no tiene efecto: el borrado en el mirror no esta implementado")

    for warning in warnings:
        logger.warning(f"CONFIG: {warning}")


def _print_available_urls() -> None:
    """Imprime las URLs disponibles de la aplicacion."""
    access_host = "localhost" if settings.HOST == "0.0.0.0" else settings.HOST
    base_url = f"http://{access_host}:{settings.PORT}"

    logger.opt(colors=True).info("<bold><green>" + "=" * 80 + "</green></bold>")
    logger.opt(colors=True).info(f"<cyan>  Swagger UI:  {base_url}/docs</cyan>")
    logger.opt(colors=True).info(f"<cyan>  Sync status: {base_url}/sync/status</cyan>")
    logger.opt(colors=True).info("<bold><green>" + "=" * 80 + "</green></bold>")


def shutdown_handler(app: FastAPI) -> Callable:
    """
    Manejador de eventos de cierre de la aplicacion.

    Args:
        app: Instancia de FastAPI

    Returns:
        Callable: Funcion asincrona de cierre
    """
    async def shutdown() -> None:
        """Libera recursos al cerrar la aplicacion."""
        logger.info("Cerrando aplicacion...")
        close_db()
        logger.info("Conexiones de base de datos cerradas")
        logger.success("Aplicacion cerrada correctamente")

    return shutdown
