"""
Acceso al store de origen: API REST relacional (PostgREST / Supabase).

Solo se asume acceso por páginas y conteos; nunca SQL directo ni
introspección de catálogo, por eso el esquema se infiere desde los datos.
"""
from tablebridge.infrastructure.external.source_api.rest_client import (
    SourceApiClient,
    SourceApiError,
    SourceCredentials,
    build_from_settings,
)

__all__ = ["SourceApiClient", "SourceApiError", "SourceCredentials", "build_from_settings"]
