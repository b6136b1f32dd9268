"""
Excepciones de la aplicación.
"""
from tablebridge.shared.exceptions.base import AppException
from tablebridge.shared.exceptions.domain import (
    DomainException,
    ConfigurationException,
    SyncDirectionException,
    DestructiveChangeBlockedException,
    SyncFailedException,
    StoreNotFoundException,
    SyncInProgressException,
)

__all__ = [
    "AppException",
    "DomainException",
    "ConfigurationException",
    "SyncDirectionException",
    "DestructiveChangeBlockedException",
    "SyncFailedException",
    "StoreNotFoundException",
    "SyncInProgressException",
]
