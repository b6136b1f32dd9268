"""
Tests unitarios para TableMaterializer (render + ejecución idempotente).
"""
from unittest.mock import Mock

from sqlalchemy import inspect

from tablebridge.application.services.run_reporter import RunReporter
from tablebridge.application.services.table_materializer import TableMaterializer
from tablebridge.domain.entities.schema import ColumnSpec, SourceType, TableSpec


def _customers_spec() -> TableSpec:
    return TableSpec(
        name="customers",
        columns=(
            ColumnSpec("id", SourceType.UUID, nullable=False, primary_key=True),
            ColumnSpec("email", SourceType.SHORT_TEXT),
            ColumnSpec("active", SourceType.BOOLEAN, nullable=False, default="true"),
            ColumnSpec("created_at", SourceType.TIMESTAMP, default="now()"),
        ),
    )


def test_render_column_definitions(repo):
    ddl = TableMaterializer(repo).render(_customers_spec())

    assert ddl.startswith('CREATE TABLE IF NOT EXISTS "customers"')
    assert '"id" CHAR(36) NOT NULL' in ddl
    assert '"email" VARCHAR(255)' in ddl
    assert '"email" VARCHAR(255) NOT NULL' not in ddl
    assert '"active" TINYINT(1) NOT NULL DEFAULT 1' in ddl
    assert '"created_at" DATETIME DEFAULT CURRENT_TIMESTAMP' in ddl
    assert 'PRIMARY KEY ("id")' in ddl
    # Opciones de tabla solo en MySQL
    assert "ENGINE=InnoDB" not in ddl


def test_render_composite_primary_key(repo):
    spec = TableSpec(
        name="memberships",
        columns=(
            ColumnSpec("user_id", SourceType.INTEGER, nullable=False, primary_key=True),
            ColumnSpec("group_id", SourceType.INTEGER, nullable=False, primary_key=True),
        ),
    )
    ddl = TableMaterializer(repo).render(spec)
    assert 'PRIMARY KEY ("user_id", "group_id")' in ddl


def test_render_mysql_uses_backticks_and_table_options():
    mysql_repo = Mock()
    mysql_repo.dialect_name = "mysql"
    mysql_repo.quote = lambda name: f"`{name}`"

    ddl = TableMaterializer(mysql_repo).render(_customers_spec())

    assert ddl.startswith("CREATE TABLE IF NOT EXISTS `customers`")
    assert "PRIMARY KEY (`id`)" in ddl
    assert ddl.endswith("ENGINE=InnoDB DEFAULT CHARSET=utf8mb4 COLLATE=utf8mb4_unicode_ci")


def test_materialize_is_idempotent_and_keeps_data(engine, repo, read_rows):
    materializer = TableMaterializer(repo)
    spec = TableSpec(
        name="customers",
        columns=(
            ColumnSpec("id", SourceType.UUID, nullable=False, primary_key=True),
            ColumnSpec("email", SourceType.SHORT_TEXT),
        ),
    )

    with repo.connect() as conn:
        assert materializer.materialize(conn, spec) is True
        repo.execute(conn, "INSERT INTO customers (id, email) VALUES (:id, :email)", {"id": "a", "email": "x@y.z"})
        conn.commit()
        assert materializer.materialize(conn, spec) is True

    assert "customers" in inspect(engine).get_table_names()
    assert read_rows("SELECT id, email FROM customers") == [{"id": "a", "email": "x@y.z"}]


def test_materialize_empty_spec_is_skipped(repo):
    with repo.connect() as conn:
        assert TableMaterializer(repo).materialize(conn, TableSpec(name="empty")) is False


def test_materialize_failure_is_recorded(repo):
    broken = TableSpec(name="broken", columns=(ColumnSpec("a", SourceType.INTEGER, default="1"),))
    reporter = RunReporter()
    materializer = TableMaterializer(repo)
    materializer.render = Mock(return_value="CREATE TABLE (((")

    with repo.connect() as conn:
        assert materializer.materialize(conn, broken, reporter) is False

    assert reporter.stats.errors[0].context == "materialize:broken"
