import logging
import time
from typing import Generator

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from blogspace.config import Settings

logger = logging.getLogger(__name__)

Base = declarative_base()


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(settings: Settings) -> Engine:
    """Create the engine with a bounded pool and a per-statement timeout."""
    url = settings.database_url

    if url.startswith("sqlite"):
        connect_args = {
            "check_same_thread": False,
            "timeout": settings.DB_STATEMENT_TIMEOUT_MS / 1000,
        }
        if url in ("sqlite://", "sqlite:///:memory:"):
            engine = create_engine(url, connect_args=connect_args, poolclass=StaticPool)
        else:
            engine = create_engine(url, connect_args=connect_args)
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
        return engine

    options = f"-c statement_timeout={settings.DB_STATEMENT_TIMEOUT_MS}"
    if settings.DB_SCHEMA:
        options += f" -c search_path={settings.DB_SCHEMA}"

    return create_engine(
        url,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_recycle=settings.DB_POOL_RECYCLE,
        pool_timeout=settings.DB_POOL_TIMEOUT,
        pool_pre_ping=True,
        connect_args={"options": options, "connect_timeout": settings.DB_HEALTH_TIMEOUT * 5},
    )


class Database:
    """Owns the engine and session factory for one application instance."""

    def __init__(self, settings: Settings):
        self.settings = settings
        self.engine = build_engine(settings)
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)
        logger.info("[DATABASE] Connected to %s", self.engine.url.render_as_string(hide_password=True))

    def migrate_schema(self):
        # Import models so every table is registered on Base.metadata
        from blogspace import models  # noqa: F401

        Base.metadata.create_all(bind=self.engine)
        logger.info("[DATABASE] Migration successful")

    def session(self) -> Session:
        return self.SessionLocal()

    def get_db(self) -> Generator[Session, None, None]:
        db = self.SessionLocal()
        try:
            yield db
        finally:
            db.close()

    def health(self) -> dict:
        stats = {}
        started = time.monotonic()
        try:
            with self.engine.connect() as conn:
                if self.engine.dialect.name == "postgresql":
                    timeout_ms = self.settings.DB_HEALTH_TIMEOUT * 1000
                    conn.execute(text(f"SET LOCAL statement_timeout = {timeout_ms}"))
                conn.execute(text("SELECT 1"))
        except Exception as e:
            logger.error("[DATABASE] Health check failed: %s", e)
            stats["status"] = "down"
            stats["error"] = f"DB down: {e}"
            return stats

        pool = self.engine.pool
        stats["status"] = "up"
        stats["message"] = "Database is healthy"
        stats["latency_ms"] = str(round((time.monotonic() - started) * 1000, 2))
        for name in ("size", "checkedin", "checkedout", "overflow"):
            probe = getattr(pool, name, None)
            if callable(probe):
                stats[name] = str(probe())
        return stats

    def close(self):
        self.engine.dispose()
        logger.info("[DATABASE] Disconnected")
