import logging
import sqlite3
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Iterator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker, declarative_base

from stocktrail.core.config import settings

logger = logging.getLogger(__name__)

DATABASE_URL = settings.database_url

# SQLite needs check_same_thread, Postgres must NOT have it
connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(DATABASE_URL, connect_args=connect_args)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


@event.listens_for(Engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite ignores ON DELETE CASCADE unless this is set per connection
    if isinstance(dbapi_connection, sqlite3.Connection):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def utcnow() -> datetime:
    # naive UTC, matches what DateTime columns hand back on SQLite and Postgres
    return datetime.now(timezone.utc).replace(tzinfo=None)


@contextmanager
def transaction(db: Session) -> Iterator[Session]:
    """Commit everything done inside the block, or nothing."""
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise


def init_db(bind: Engine = engine) -> None:
    # import models so they register on Base.metadata
    from stocktrail.models import inventory_log, product, user  # noqa: F401
    from stocktrail.core.seed import seed_users_if_empty

    Base.metadata.create_all(bind=bind)
    logger.info("Database tables ready")

    db = Session(bind=bind)
    try:
        seed_users_if_empty(db)
    finally:
        db.close()
