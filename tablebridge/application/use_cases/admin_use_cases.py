"""
Casos de uso de administración: sondas de conectividad por store.
"""
from typing import Callable, Dict, Optional

from loguru import logger

from tablebridge.application.dto.sync_dto import StorePingResponseDTO
from tablebridge.shared.exceptions.domain import StoreNotFoundException


STORES = ("source", "target", "mirror")


class AdminUseCases:
    """
    Un store caído no es un error HTTP: se reporta ok=False (modo degradado)
    y los demás stores siguen respondiendo.
    """

    def __init__(self, source_client=None, target_repository=None, mirror_repository=None):
        self._probes: Dict[str, Optional[Callable[[], dict]]] = {
            "source": source_client.ping if source_client is not None else None,
            "target": target_repository.ping if target_repository is not None else None,
            "mirror": mirror_repository.ping if mirror_repository is not None else None,
        }

    def ping(self, store: str) -> StorePingResponseDTO:
        if store not in STORES:
            raise StoreNotFoundException(store, list(STORES))

        probe = self._probes[store]
        if probe is None:
            return StorePingResponseDTO(ok=False, store=store, error=f"{store} no configurado")

        try:
            details = probe()
        except Exception as e:
            logger.warning(f"Ping a {store} falló: {e}")
            return StorePingResponseDTO(ok=False, store=store, error=str(e))
        return StorePingResponseDTO(ok=True, store=store, details=details)
