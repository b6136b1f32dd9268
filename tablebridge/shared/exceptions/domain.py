"""
Excepciones relacionadas con la lógica de migración y sincronización.
"""
from typing import Any, List

from tablebridge.shared.exceptions.base import AppException


class DomainException(AppException):
    """Excepción base para errores de dominio."""

    def __init__(self, message: str, error_code: str = "DOMAIN_ERROR", details=None):
        super().__init__(
            message=message,
            status_code=400,
            error_code=error_code,
            details=details
        )


class ConfigurationException(AppException):
    """Faltan parámetros de conexión obligatorios. Es fatal al iniciar el proceso."""

    def __init__(self, missing: List[str]):
        super().__init__(
            message=f"Faltan variables de entorno obligatorias: {', '.join(missing)}",
            status_code=500,
            error_code="CONFIGURATION_ERROR",
            details={"missing": missing}
        )
        self.missing = missing


class SyncDirectionException(DomainException):
    """SYNC_DIRECTION no habilita operaciones de escritura."""

    def __init__(self, direction: str, supported: str):
        super().__init__(
            message="Invalid sync direction",
            error_code="INVALID_SYNC_DIRECTION",
            details={"direction": direction, "supported": supported}
        )


class DestructiveChangeBlockedException(DomainException):
    """El diff de esquema contiene sentencias destructivas y no hay override."""

    def __init__(self, preview: str):
        super().__init__(
            message=(
                "Destructive changes detected. Set ALLOW_DESTRUCTIVE=true to allow; "
                "currently blocked."
            ),
            error_code="DESTRUCTIVE_CHANGES_BLOCKED",
            details={"preview": preview}
        )
        self.status_code = 409
        self.preview = preview


class SyncFailedException(AppException):
    """Falló la aplicación de una sincronización (esquema o datos)."""

    def __init__(self, kind: str, reason: Any):
        super().__init__(
            message=f"{kind.capitalize()} sync failed",
            status_code=500,
            error_code="SYNC_FAILED",
            details={"kind": kind, "details": str(reason)}
        )


class StoreNotFoundException(DomainException):
    """Excepción cuando se pide un store desconocido."""

    def __init__(self, store: str, valid_stores: List[str]):
        super().__init__(
            message=f"Store '{store}' no existe",
            error_code="STORE_NOT_FOUND",
            details={"store": store, "valid_stores": valid_stores}
        )
        self.status_code = 404


class SyncInProgressException(DomainException):
    """Otra corrida de sync tiene tomada alguna de las tablas pedidas."""

    def __init__(self, resource: str):
        super().__init__(
            message=f"Sync already running on '{resource}'",
            error_code="SYNC_IN_PROGRESS",
            details={"resource": resource}
        )
        self.status_code = 409
