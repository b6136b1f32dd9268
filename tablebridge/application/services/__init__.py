"""
Servicios de aplicación: piezas del pipeline de migración y de la sync continua.
"""
from tablebridge.application.services.batch_extractor import (
    BatchExtractor,
    ExtractionIncompleteError,
    ExtractionResult,
)
from tablebridge.application.services.bulk_loader import BulkLoader, LoadResult, prepare_value
from tablebridge.application.services.reconciler import Reconciler, ReconciliationResult
from tablebridge.application.services.retry import RetryExhaustedError, backoff_delay, retry_with_backoff
from tablebridge.application.services.run_reporter import RunReporter
from tablebridge.application.services.schema_diff import (
    GateState,
    ReflectionSchemaDiffer,
    SchemaDiff,
    SchemaDiffGate,
    SchemaGateResult,
    count_changes,
    is_destructive,
)
from tablebridge.application.services.schema_inferrer import SchemaInferrer, infer_table_spec, infer_value_type
from tablebridge.application.services.sql_script_writer import ArtifactWriter, SqlScriptWriter, sql_literal
from tablebridge.application.services.table_lock import SCHEMA_LOCK_KEY, TableLockManager
from tablebridge.application.services.table_materializer import TableMaterializer
from tablebridge.application.services.upsert_syncer import DataSyncResult, UpsertSyncer

__all__ = [
    "ArtifactWriter",
    "BatchExtractor",
    "BulkLoader",
    "DataSyncResult",
    "ExtractionIncompleteError",
    "ExtractionResult",
    "GateState",
    "LoadResult",
    "Reconciler",
    "ReconciliationResult",
    "ReflectionSchemaDiffer",
    "RetryExhaustedError",
    "RunReporter",
    "SchemaDiff",
    "SchemaDiffGate",
    "SchemaGateResult",
    "SchemaInferrer",
    "SqlScriptWriter",
    "SCHEMA_LOCK_KEY",
    "TableLockManager",
    "TableMaterializer",
    "UpsertSyncer",
    "backoff_delay",
    "count_changes",
    "infer_table_spec",
    "infer_value_type",
    "is_destructive",
    "prepare_value",
    "retry_with_backoff",
    "sql_literal",
]
