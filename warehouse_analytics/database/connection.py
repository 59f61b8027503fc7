"""
Database Connection Management

Synchronous SQLAlchemy 2.0 engine for the warehouse database.
Handles engine lifecycle, session scoping, schema provisioning and
health checks.
"""

from contextlib import contextmanager
from pathlib import Path
from typing import Generator, Optional

import structlog
from sqlalchemy import Engine, create_engine, text
from sqlalchemy.engine import make_url
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from warehouse_analytics.config import get_settings
from warehouse_analytics.database.models import Base

logger = structlog.get_logger(__name__)

# Global engine and session factory
_engine: Optional[Engine] = None
_session_factory: Optional[sessionmaker[Session]] = None


def _engine_options(url: str) -> dict:
    """Engine keyword arguments for the given URL"""
    options = {
        "echo": get_settings().database.echo,
        "pool_pre_ping": True,
    }

    parsed = make_url(url)
    if parsed.get_backend_name() == "sqlite":
        database = parsed.database
        if not database or database == ":memory:":
            # One shared connection, otherwise every checkout sees an empty database
            options.update({
                "poolclass": StaticPool,
                "connect_args": {"check_same_thread": False},
            })
        else:
            Path(database).parent.mkdir(parents=True, exist_ok=True)
            options["connect_args"] = {"check_same_thread": False}

    return options


def init_database(url: Optional[str] = None) -> Engine:
    """
    Initialize the warehouse database engine.

    Args:
        url: SQLAlchemy URL, defaults to the configured database URL

    Returns:
        Engine: The initialized database engine
    """
    global _engine, _session_factory

    if _engine is not None:
        logger.warning("Database already initialized")
        return _engine

    url = url or get_settings().database.url
    engine = create_engine(url, **_engine_options(url))

    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
    except Exception as e:
        logger.error("Failed to connect to database", error=str(e))
        engine.dispose()
        raise

    _engine = engine
    _session_factory = sessionmaker(bind=engine, expire_on_commit=False, autoflush=False)

    logger.info("Database connection established", backend=engine.url.get_backend_name())
    return _engine


def close_database() -> None:
    """Dispose of the engine and forget the session factory."""
    global _engine, _session_factory

    if _engine is not None:
        _engine.dispose()
        _engine = None
        _session_factory = None
        logger.info("Database connection pool closed")


def get_engine() -> Engine:
    """
    Get the database engine.

    Raises:
        RuntimeError: If database is not initialized
    """
    if _engine is None:
        raise RuntimeError("Database not initialized. Call init_database() first.")
    return _engine


@contextmanager
def get_db() -> Generator[Session, None, None]:
    """
    Get a database session.

    Commits on success, rolls back and re-raises on error.

    Example:
        with get_db() as db:
            db.execute(query)
    """
    if _session_factory is None:
        logger.error("Database not initialized when get_db() called")
        raise RuntimeError("Database not initialized. Call init_database() first.")

    session = _session_factory()
    try:
        yield session
        session.commit()
    except Exception as e:
        logger.error("Database session error, rolling back", error=str(e), error_type=type(e).__name__)
        session.rollback()
        raise
    finally:
        session.close()


def create_schema(engine: Optional[Engine] = None) -> None:
    """Create all warehouse and report tables that do not exist yet."""
    engine = engine or get_engine()
    Base.metadata.create_all(engine)
    logger.info("Warehouse schema created", tables=sorted(Base.metadata.tables))


def drop_schema(engine: Optional[Engine] = None) -> None:
    """Drop all warehouse and report tables."""
    engine = engine or get_engine()
    Base.metadata.drop_all(engine)
    logger.warning("Warehouse schema dropped", tables=sorted(Base.metadata.tables))


def check_database_health() -> dict:
    """
    Check database health status.

    Returns:
        dict: Health status with latency information
    """
    import time

    try:
        start = time.perf_counter()
        with get_engine().connect() as conn:
            conn.execute(text("SELECT 1"))
        latency_ms = (time.perf_counter() - start) * 1000

        return {
            "status": "healthy",
            "latency_ms": round(latency_ms, 2),
        }
    except Exception as e:
        return {
            "status": "unhealthy",
            "error": str(e),
        }
