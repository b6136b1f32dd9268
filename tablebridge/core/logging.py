"""
Configuracion de logging (loguru).

Sinks persistentes:
- LOG_FILE: todo lo que supere LOG_LEVEL
- ERROR_LOG_FILE: solo errores (contexto + mensaje + traceback)
"""
from pathlib import Path
from typing import Optional

from loguru import logger

from tablebridge.core.config import Settings, settings as default_settings


_configured_sinks: list[int] = []


def configure_logging(config: Optional[Settings] = None) -> None:
    """
    Agrega los sinks de archivo. Es idempotente: si ya se configuraron,
    los reemplaza.
    """
    config = config or default_settings

    for sink_id in _configured_sinks:
        logger.remove(sink_id)
    _configured_sinks.clear()

    for path in (config.LOG_FILE, config.ERROR_LOG_FILE):
        Path(path).parent.mkdir(parents=True, exist_ok=True)

    _configured_sinks.append(
        logger.add(
            config.LOG_FILE,
            rotation="500 MB",
            retention="10 days",
            level=config.LOG_LEVEL,
        )
    )
    _configured_sinks.append(
        logger.add(
            config.ERROR_LOG_FILE,
            rotation="100 MB",
            retention="30 days",
            level="ERROR",
            backtrace=True,
        )
    )
