"""
Dependencias para inyeccion de casos de uso.
"""
from fastapi import Depends

from tablebridge.application.services.schema_diff import ReflectionSchemaDiffer, SchemaDiffGate
from tablebridge.application.services.upsert_syncer import UpsertSyncer
from tablebridge.application.use_cases.admin_use_cases import AdminUseCases
from tablebridge.application.use_cases.sync_use_cases import SyncUseCases
from tablebridge.core.config import Settings, settings
from tablebridge.infrastructure.database.session import get_mirror_engine, get_target_engine
from tablebridge.infrastructure.external.source_api.rest_client import SourceApiClient, build_from_settings
from tablebridge.infrastructure.repositories.sql_repository import SqlRepository
from tablebridge.infrastructure.repositories.sync_log_repository import SyncLogRepository


def get_settings() -> Settings:
    """Configuracion global (reemplazable en tests)."""
    return settings


def get_source_client(config: Settings = Depends(get_settings)) -> SourceApiClient:
    """Cliente REST del origen, que en la sync continua actua como mirror."""
    return build_from_settings(config)


def get_sync_use_cases(
    config: Settings = Depends(get_settings),
    source_client: SourceApiClient = Depends(get_source_client),
) -> SyncUseCases:
    """
    Dependencia para obtener los casos de uso de sincronizacion.

    Sin MIRROR_DATABASE_URL no hay compuerta de esquema (schema sync no disponible).
    """
    target_engine = get_target_engine()
    target_repo = SqlRepository(target_engine)
    log_repo = SyncLogRepository(target_engine)

    schema_gate = None
    mirror_engine = get_mirror_engine()
    if mirror_engine is not None:
        differ = ReflectionSchemaDiffer(target_engine, mirror_engine, tables=config.sync_tables)
        schema_gate = SchemaDiffGate(
            differ,
            SqlRepository(mirror_engine),
            log_repository=log_repo,
            allow_destructive=config.ALLOW_DESTRUCTIVE,
        )

    syncer = UpsertSyncer(
        target_repo,
        source_client,
        batch_size=config.SYNC_BATCH_SIZE,
        conflict_column=config.SYNC_CONFLICT_COLUMN,
        mirror_deletes=config.MIRROR_DELETES,
    )
    return SyncUseCases(config, syncer, log_repo, schema_gate=schema_gate)


def get_admin_use_cases(config: Settings = Depends(get_settings)) -> AdminUseCases:
    """
    Casos de uso de administracion. Un store sin configurar se reporta
    como degradado en su ping, no como error.
    """
    source_client = None
    if config.SOURCE_URL and config.SOURCE_SERVICE_KEY:
        source_client = build_from_settings(config)

    target_repo = SqlRepository(get_target_engine()) if config.TARGET_DATABASE_URL else None
    mirror_engine = get_mirror_engine()
    mirror_repo = SqlRepository(mirror_engine) if mirror_engine is not None else None
    return AdminUseCases(source_client, target_repo, mirror_repo)
