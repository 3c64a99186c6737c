"""SQLAlchemy engine, per-request sessions and table creation for readings."""

from sqlalchemy import create_engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker

from meter_reader.core.config import settings


def _connect_args(database_url: str) -> dict:
    # SQLite connections are shared with FastAPI's threadpool
    if database_url.startswith("sqlite"):
        return {"check_same_thread": False}
    return {}


engine = create_engine(
    settings.DATABASE_URL,
    connect_args=_connect_args(settings.DATABASE_URL),
    pool_pre_ping=True,
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class Base(DeclarativeBase):
    """Declarative base for the reading tables."""


def init_db() -> None:
    """Create the readings table if it does not exist yet."""
    from meter_reader.models import reading  # noqa: F401

    Base.metadata.create_all(bind=engine)


def get_db():
    """Yield a session for one request and close it afterwards."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
