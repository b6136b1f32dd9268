"""
Modelos de base de datos (ORM).
"""
from sqlalchemy import Column, Integer, String, DateTime, Text, Boolean, JSON
from sqlalchemy.sql import func

from tablebridge.infrastructure.database.session import Base


class SyncLogModel(Base):
    """
    Historial append-only de invocaciones de sync (schema / data / full).
    """

    __tablename__ = "sync_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    run_type = Column(String(16), nullable=False, index=True)
    dry_run = Column(Boolean, nullable=False, default=False)
    tables = Column(JSON, nullable=False, default=list)
    added = Column(Integer, nullable=False, default=0)
    updated = Column(Integer, nullable=False, default=0)
    deleted = Column(Integer, nullable=False, default=0)
    errors = Column(Text, nullable=False, default="")
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)

    def __repr__(self):
        return f"<SyncLog(id={self.id}, run_type={self.run_type}, dry_run={self.dry_run})>"
