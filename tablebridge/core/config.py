"""
Configuracion central de la aplicacion.
Gestiona variables de entorno para la migracion one-shot (API REST -> SQL)
y para la sincronizacion continua (SQL autoritativo -> mirror).
"""
import json
from typing import List

from pydantic import Field, computed_field, field_validator
from pydantic_settings import BaseSettings

from tablebridge.shared.exceptions.domain import ConfigurationException


SUPPORTED_SYNC_DIRECTION = "target_to_mirror"


class Settings(BaseSettings):
    """
    Clase de configuracion de la aplicacion.
    Lee variables de entorno (o .env) y proporciona valores por defecto.

    Variables obligatorias para cualquier corrida:
    - SOURCE_URL / SOURCE_SERVICE_KEY: API REST de origen
    - TARGET_DATABASE_URL: base SQL destino (mysql+pymysql://... por defecto)
    """

    # Configuracion de la aplicacion
    APP_NAME: str = Field(default="TableBridge Sync")
    APP_VERSION: str = Field(default="1.0.0")
    DEBUG: bool = Field(default=False)

    # Configuracion del servidor
    HOST: str = Field(default="0.0.0.0")
    PORT: int = Field(default=5055)

    # Origen REST (PostgREST / Supabase)
    SOURCE_URL: str = Field(default="")
    SOURCE_SERVICE_KEY: str = Field(default="")
    SOURCE_TIMEOUT_S: int = Field(default=30)

    # Destino SQL y mirror SQL (este ultimo solo para diff de esquema)
    TARGET_DATABASE_URL: str = Field(default="")
    MIRROR_DATABASE_URL: str = Field(default="")

    # Guards de sincronizacion
    SYNC_DIRECTION: str = Field(default=SUPPORTED_SYNC_DIRECTION)
    ALLOW_DESTRUCTIVE: bool = Field(default=False)
    MIRROR_DELETES: bool = Field(default=False)

    # Sincronizacion de datos
    SYNC_BATCH_SIZE: int = Field(default=1000)
    SYNC_TABLES: str = Field(default="[]")
    SYNC_CONFLICT_COLUMN: str = Field(default="id")
    SYNC_STATUS_LIMIT: int = Field(default=20)

    # Migracion one-shot
    MIGRATION_TABLES: str = Field(default="[]")
    MIGRATION_PAGE_SIZE: int = Field(default=500)
    MIGRATION_INSERT_BATCH_SIZE: int = Field(default=100)
    MIGRATION_SAMPLE_SIZE: int = Field(default=1)
    MIGRATION_ORDER_BY: str = Field(default="")
    RETRY_MAX_ATTEMPTS: int = Field(default=3)
    RETRY_BASE_DELAY_MS: int = Field(default=1000)
    OUTPUT_DIR: str = Field(default="migration_output")

    # Logging
    LOG_LEVEL: str = Field(default="INFO")
    LOG_FILE: str = Field(default="logs/migration.log")
    ERROR_LOG_FILE: str = Field(default="logs/migration-errors.log")

    @field_validator(
        "SYNC_BATCH_SIZE",
        "MIGRATION_PAGE_SIZE",
        "MIGRATION_INSERT_BATCH_SIZE",
        "MIGRATION_SAMPLE_SIZE",
        "RETRY_MAX_ATTEMPTS",
        "SYNC_STATUS_LIMIT",
    )
    @classmethod
    def _must_be_positive(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("debe ser un entero positivo")
        return value

    @field_validator("SYNC_TABLES", "MIGRATION_TABLES")
    @classmethod
    def _must_be_table_list(cls, value: str) -> str:
        parse_table_list(value)
        return value

    @computed_field
    @property
    def sync_tables(self) -> List[str]:
        """Allow-list ordenada de tablas para la sincronizacion de datos."""
        return parse_table_list(self.SYNC_TABLES)

    @computed_field
    @property
    def migration_tables(self) -> List[str]:
        """Tablas a migrar en la corrida one-shot, en orden de declaracion."""
        return parse_table_list(self.MIGRATION_TABLES)

    @computed_field
    @property
    def sync_direction_supported(self) -> bool:
        """Indica si SYNC_DIRECTION habilita las operaciones de escritura."""
        return self.SYNC_DIRECTION.strip().lower() == SUPPORTED_SYNC_DIRECTION

    def require_connection_settings(self) -> None:
        """
        Valida que los parametros de conexion obligatorios esten presentes.

        Raises:
            ConfigurationException: si falta alguna variable obligatoria
        """
        missing = [
            name
            for name in ("SOURCE_URL", "SOURCE_SERVICE_KEY", "TARGET_DATABASE_URL")
            if not getattr(self, name)
        ]
        if missing:
            raise ConfigurationException(missing)

    class Config:
        """Configuracion de Pydantic."""
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"


def parse_table_list(raw: str) -> List[str]:
    """
    Parsea una lista de tablas.
    Acepta una lista JSON (["a", "b"]) o nombres separados por coma.

    Raises:
        ValueError: si el JSON no es una lista ni un string
    """
    raw = (raw or "").strip()
    if not raw:
        return []
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError:
        # Si no es JSON valido, retornar como lista simple
        return [name.strip() for name in raw.split(",") if name.strip()]
    if isinstance(parsed, str):
        return [parsed]
    if not isinstance(parsed, list):
        raise ValueError(f"se esperaba una lista de tablas, se recibio {type(parsed).__name__}: {raw!r}")
    return [str(name).strip() for name in parsed if str(name).strip()]


# Instancia global de configuracion
settings = Settings()
