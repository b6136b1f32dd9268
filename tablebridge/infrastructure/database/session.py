"""
Gestión de engines SQL (destino y mirror).

Ambos stores se acceden con engines síncronos de SQLAlchemy: las corridas son
secuenciales y el API las ejecuta en un thread aparte (asyncio.to_thread).
"""
from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from tablebridge.core.config import settings


# Base para modelos de SQLAlchemy
Base = declarative_base()

_target_engine: Optional[Engine] = None
_mirror_engine: Optional[Engine] = None


def normalize_database_url(url: str) -> str:
    """
    Normaliza URLs hacia un driver síncrono instalado.

    Ejemplos:
    - postgres://...                    -> postgresql+psycopg://...
    - postgresql+asyncpg://...          -> postgresql+psycopg://...
    - mysql://...                       -> mysql+pymysql://...

    Si la URL ya declara un driver compatible, se retorna tal cual.
    """
    if "://" not in url:
        return url

    scheme, rest = url.split("://", 1)
    if scheme in ("postgres", "postgresql", "postgresql+asyncpg", "postgres+asyncpg"):
        scheme = "postgresql+psycopg"
    elif scheme in ("mysql", "mysql+aiomysql", "mysql+asyncmy"):
        scheme = "mysql+pymysql"
    return f"{scheme}://{rest}"


def _create_engine_args(url: str) -> dict:
    """
    Construye los argumentos del engine segun el tipo de base de datos.
    SQLite en memoria necesita una única conexión compartida entre threads.
    """
    args = {
        "echo": settings.DEBUG,
        "future": True,
    }

    if url.startswith("sqlite"):
        if ":memory:" in url or url.rstrip("/") == "sqlite:":
            args.update({
                "poolclass": StaticPool,
                "connect_args": {"check_same_thread": False},
            })
    else:
        args["pool_pre_ping"] = True  # Verifica conexion antes de usar

    return args


def build_engine(url: str) -> Engine:
    """Crea un engine para la URL indicada (normalizada)."""
    url = normalize_database_url(url)
    return create_engine(url, **_create_engine_args(url))


def get_target_engine() -> Engine:
    """Engine del store destino (autoritativo en sync continua)."""
    global _target_engine
    if _target_engine is None:
        _target_engine = build_engine(settings.TARGET_DATABASE_URL)
    return _target_engine


def get_mirror_engine() -> Optional[Engine]:
    """Engine SQL del mirror; None si MIRROR_DATABASE_URL no está configurada."""
    global _mirror_engine
    if _mirror_engine is None and settings.MIRROR_DATABASE_URL:
        _mirror_engine = build_engine(settings.MIRROR_DATABASE_URL)
    return _mirror_engine


def session_factory(engine: Engine) -> sessionmaker:
    """Session factory ligada a un engine."""
    return sessionmaker(bind=engine, expire_on_commit=False, autoflush=False)


def init_db(engine: Optional[Engine] = None) -> None:
    """Inicializa la base de datos creando las tablas propias (sync_logs)."""
    # Registrar modelos antes de create_all
    from tablebridge.infrastructure.database import models  # noqa: F401

    Base.metadata.create_all(engine or get_target_engine())


def close_db() -> None:
    """Cierra las conexiones de los engines abiertos."""
    global _target_engine, _mirror_engine
    for engine in (_target_engine, _mirror_engine):
        if engine is not None:
            engine.dispose()
    _target_engine = None
    _mirror_engine = None
