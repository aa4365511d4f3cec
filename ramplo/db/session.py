import logging

from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker

from ramplo.core.config import settings

logger = logging.getLogger("ramplo.db")


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(url: str):
    """Engine for the app database. SQLite gets FK enforcement, Postgres gets pre-ping."""
    if url.startswith("sqlite"):
        engine = create_engine(url, connect_args={"check_same_thread": False})
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
        if settings.ENVIRONMENT == "production":
            logger.warning("Using SQLite in production is not supported. Use PostgreSQL.")
        return engine
    return create_engine(url, pool_pre_ping=True)


engine = build_engine(settings.DATABASE_URL)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
