"""
Engine, session factory and transaction scope for the relational store.

One Database instance is built per application from its Settings and kept
on app.state. The engine and its connection pool are thread-safe and shared;
every request gets its own Session.
"""
import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine, event, text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.orm.exc import StaleDataError
from sqlalchemy.pool import StaticPool

from helpdesk.core.config import Settings
from helpdesk.core.errors import ConflictError, NotFoundError, StorageError
from helpdesk.db import models  # noqa: F401  (registers the tables on Base.metadata)
from helpdesk.db.base import Base

logger = logging.getLogger(__name__)

# SQLSTATE codes reported by PostgreSQL drivers
UNIQUE_VIOLATION = "23505"
FOREIGN_KEY_VIOLATION = "23503"


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite ignores FOREIGN KEY clauses (and ON DELETE CASCADE) unless asked
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """Owns the engine and hands out sessions."""

    def __init__(self, settings: Settings):
        self.url = settings.DATABASE_URL
        engine_kwargs = {"echo": settings.SQL_ECHO}

        if settings.is_sqlite:
            engine_kwargs["connect_args"] = {"check_same_thread": False}
            # in-memory databases live and die with their single connection
            if self.url in ("sqlite://", "sqlite:///:memory:"):
                engine_kwargs["poolclass"] = StaticPool
        else:
            engine_kwargs["pool_pre_ping"] = True
            engine_kwargs["pool_recycle"] = 3600

        self.engine = create_engine(self.url, **engine_kwargs)
        if settings.is_sqlite:
            event.listen(self.engine, "connect", _enable_sqlite_foreign_keys)

        self.session_factory = sessionmaker(
            bind=self.engine,
            autoflush=False,
            expire_on_commit=False,
        )

    def create_tables(self) -> None:
        Base.metadata.create_all(bind=self.engine)

    def ping(self) -> bool:
        try:
            with self.engine.connect() as connection:
                connection.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError as e:
            logger.error(f"Database ping failed: {e}")
            return False

    def dispose(self) -> None:
        self.engine.dispose()

    def session(self) -> Iterator[Session]:
        """Dependency-style generator: one session per request, always closed."""
        session = self.session_factory()
        try:
            yield session
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()


def _integrity_kind(error: IntegrityError) -> str:
    orig = error.orig
    code = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
    message = str(orig).lower()
    if code == UNIQUE_VIOLATION or "unique" in message:
        return "unique"
    if code == FOREIGN_KEY_VIOLATION or "foreign key" in message:
        return "foreign_key"
    return "other"


@contextmanager
def atomic(session: Session) -> Iterator[Session]:
    """
    Run a multi-step mutation as one transaction.

    Commits when the block exits normally and rolls back on any exception.
    Storage exceptions are translated into the core taxonomy:
    unique violations become ConflictError. Foreign key violations and
    rows that vanished under a pending UPDATE become NotFoundError.
    Anything else becomes StorageError.
    """
    try:
        yield session
        session.commit()
    except IntegrityError as e:
        session.rollback()
        kind = _integrity_kind(e)
        if kind == "unique":
            raise ConflictError("Record already exists") from e
        if kind == "foreign_key":
            raise NotFoundError("Referenced record not found") from e
        logger.error(f"Integrity error: {e}")
        raise StorageError() from e
    except StaleDataError as e:
        # row deleted by another session after it was read
        session.rollback()
        logger.info(f"Stale row: {e}")
        raise NotFoundError("Record not found") from e
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Storage error: {e}", exc_info=True)
        raise StorageError() from e
    except Exception:
        session.rollback()
        raise
