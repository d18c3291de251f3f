from __future__ import annotations
from contextlib import contextmanager
from typing import Any, Dict, Generator, List, Optional, Union
from sqlalchemy import (
    Column,
    DateTime,
    Index,
    MetaData,
    Numeric,
    String,
    Table,
    create_engine,
    text,
)
from sqlalchemy.engine import Connection, Engine, Result
from sqlalchemy.pool import StaticPool
from sqlalchemy.sql import Executable

# -----------------------------------------------------------------------------
# 1) Schema
# -----------------------------------------------------------------------------

metadata = MetaData()

revenue_entries = Table(
    "revenue_entries",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("user_id", String(64), nullable=False),
    Column("amount", Numeric(14, 2), nullable=False),
    Column("currency", String(3), nullable=False, server_default="USD"),
    Column("source", String(120), nullable=False, server_default="Unknown"),
    Column("status", String(16), nullable=False),
    Column("niche", String(32), nullable=False),
    Column("description", String(500)),
    Column("date", DateTime(timezone=True), nullable=False),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Index("ix_revenue_entries_user_niche_date", "user_id", "niche", "date"),
)

Statement = Union[str, Executable]

# -----------------------------------------------------------------------------
# 2) Client
# -----------------------------------------------------------------------------

class Database:
    """
    Explicitly constructed database client.

    One instance is created by the application factory and handed to
    repositories through FastAPI dependencies.
    """

    def __init__(self, url: str, *, echo: bool = False):
        self.url = url
        self.engine = self._create_engine(url, echo=echo)

    @staticmethod
    def _create_engine(url: str, *, echo: bool) -> Engine:
        if url.startswith("sqlite"):
            kwargs: Dict[str, Any] = {"connect_args": {"check_same_thread": False}}
            if url in ("sqlite://", "sqlite:///:memory:"):
                # Single shared connection, otherwise each checkout sees an empty database.
                kwargs["poolclass"] = StaticPool
            return create_engine(url, echo=echo, future=True, **kwargs)
        return create_engine(
            url,
            echo=echo,
            pool_pre_ping=True,
            pool_size=10,
            max_overflow=20,
            future=True,
        )

    def create_schema(self) -> None:
        metadata.create_all(self.engine)

    def dispose(self) -> None:
        self.engine.dispose()

    @contextmanager
    def begin(self) -> Generator[Connection, None, None]:
        with self.engine.begin() as conn:
            yield conn

    # -------------------------------------------------------------------------
    # Query helpers
    # -------------------------------------------------------------------------

    @staticmethod
    def _prepare(sql: Statement) -> Executable:
        return text(sql) if isinstance(sql, str) else sql

    def fetch_all(self, sql: Statement, params: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        with self.engine.connect() as conn:
            result: Result = conn.execute(self._prepare(sql), params or {})
            return [dict(r) for r in result.mappings().all()]

    def scalar(self, sql: Statement, params: Optional[Dict[str, Any]] = None) -> Any:
        with self.engine.connect() as conn:
            return conn.execute(self._prepare(sql), params or {}).scalar()

    # -------------------------------------------------------------------------
    # Healthcheck (/readyz)
    # -------------------------------------------------------------------------

    def health_check(self) -> Dict[str, Any]:
        with self.engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return {
            "ok": True,
            "dialect": self.engine.dialect.name,
            "database": self.engine.url.database,
        }
