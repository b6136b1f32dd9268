"""
Locks por tabla para las corridas de sincronización.

Cada request de /sync/* corre en su propio thread (`asyncio.to_thread`), así
que dos corridas simultáneas podrían escribir la misma tabla del mirror.
Una corrida toma todas sus tablas antes de empezar; si alguna ya está
tomada, se rechaza sin esperar (igual que un advisory lock ocupado).
"""
from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Dict, Iterable, Iterator, List

from loguru import logger

from tablebridge.shared.exceptions.domain import SyncInProgressException


# Clave reservada: serializa los diffs de esquema entre sí
SCHEMA_LOCK_KEY = "<schema>"


class TableLockManager:
    """
    Gestor de locks por nombre de tabla (proceso actual).

    - Usa `threading.Lock` porque las corridas son síncronas.
    - Adquiere en orden alfabético para que dos corridas con tablas
      solapadas no queden esperándose entre sí.
    """

    _locks: Dict[str, threading.Lock] = {}
    _meta_lock = threading.Lock()

    @classmethod
    def _get_or_create_lock(cls, key: str) -> threading.Lock:
        with cls._meta_lock:
            lock = cls._locks.get(key)
            if lock is None:
                lock = threading.Lock()
                cls._locks[key] = lock
            return lock

    @classmethod
    @contextmanager
    def hold(cls, keys: Iterable[str]) -> Iterator[None]:
        """
        Toma todas las claves o ninguna.

        Raises:
            SyncInProgressException: si otra corrida tiene alguna de las claves
        """
        acquired: List[threading.Lock] = []
        try:
            for key in sorted(set(keys)):
                lock = cls._get_or_create_lock(key)
                if not lock.acquire(blocking=False):
                    logger.warning(f"Sync ya está corriendo sobre '{key}' (lock ocupado). Se rechaza.")
                    raise SyncInProgressException(key)
                acquired.append(lock)
            yield
        finally:
            for lock in reversed(acquired):
                lock.release()

    @classmethod
    def is_locked(cls, key: str) -> bool:
        """Indica si alguna corrida tiene tomada la clave (para monitoreo)."""
        with cls._meta_lock:
            lock = cls._locks.get(key)
        return lock is not None and lock.locked()
