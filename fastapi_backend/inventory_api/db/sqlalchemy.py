"""
SQLAlchemy database helpers for the relational item repository.

Provides:
- Base: Declarative base for ORM models
- build_engine: engine factory with URL normalization (psycopg2 driver for Postgres,
  a shared connection for in-memory SQLite)
- build_sessionmaker: session factory bound to an engine
- get_effective_db_params: redacted connection info for logs and health output

Design:
- Nothing here creates an engine at import time. The repository factory builds one
  when the "sql" backend is selected, so the memory backend never needs a database.
"""

import os
from typing import Any, Dict

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import ArgumentError
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import NullPool, StaticPool

from ..core.logger import get_logger

logger = get_logger(__name__)

# Global ORM base
Base = declarative_base()


def _ensure_psycopg2_scheme(url: str) -> str:
    """
    Ensure the SQLAlchemy URL uses the psycopg2 driver explicitly for Postgres URLs.
    """
    if url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+psycopg2://", 1)
    if url.startswith("postgres://"):
        return url.replace("postgres://", "postgresql+psycopg2://", 1)
    return url


def _is_sqlite_memory(url: str) -> bool:
    parsed = make_url(url)
    return parsed.get_backend_name() == "sqlite" and parsed.database in (None, "", ":memory:")


# PUBLIC_INTERFACE
def get_effective_db_params(url: str) -> Dict[str, Any]:
    """
    Return redacted effective DB parameters for diagnostics without exposing secrets.

    Returns:
        {
          "url_redacted": "...",
          "driver": "<dialect+driver>",
          "host": "<host or None>",
          "port": "<port or None>",
          "database": "<dbname or None>"
        }
    """
    try:
        parsed = make_url(_ensure_psycopg2_scheme(url))
    except ArgumentError as exc:
        return {"url_redacted": "<invalid>", "driver": "unknown", "error": str(exc)}
    return {
        "url_redacted": parsed.render_as_string(hide_password=True),
        "driver": parsed.drivername,
        "host": parsed.host,
        "port": parsed.port,
        "database": parsed.database,
    }


# PUBLIC_INTERFACE
def build_engine(url: str, echo: bool = False) -> Engine:
    """Create a SQLAlchemy Engine for the given connection URL.

    In-memory SQLite gets a single shared connection so every session sees the same
    database across the request thread pool. DISABLE_DB_POOL=1 switches other URLs to
    NullPool for ephemeral environments.
    """
    db_url = _ensure_psycopg2_scheme(url)
    engine_kwargs: Dict[str, Any] = {"echo": bool(echo), "future": True}

    if db_url.startswith("sqlite"):
        engine_kwargs["connect_args"] = {"check_same_thread": False}
        if _is_sqlite_memory(db_url):
            engine_kwargs["poolclass"] = StaticPool
        pool_name = "StaticPool" if _is_sqlite_memory(db_url) else "Default"
    else:
        engine_kwargs["pool_pre_ping"] = True
        use_null_pool = bool(os.getenv("DISABLE_DB_POOL", "").lower() in ("1", "true", "yes"))
        if use_null_pool:
            engine_kwargs["poolclass"] = NullPool
        pool_name = "NullPool" if use_null_pool else "Default"

    engine = create_engine(db_url, **engine_kwargs)
    eff = get_effective_db_params(db_url)
    logger.info(
        "SQLAlchemy engine initialized.",
        extra={"echo": bool(echo), "pool": pool_name, **eff},
    )
    return engine


# PUBLIC_INTERFACE
def build_sessionmaker(engine: Engine) -> sessionmaker:
    """Return a session factory bound to the engine."""
    return sessionmaker(
        bind=engine,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
        class_=Session,
        future=True,
    )
