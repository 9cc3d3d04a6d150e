import logging
from typing import Generator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import QueuePool
from sqlmodel import Session, SQLModel, create_engine

from app.core.config import settings

# Configure logging
logger = logging.getLogger(__name__)


def engine_args(url: str) -> dict:
    """Pooling and SSL options; SQLite gets the driver defaults."""
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    return {
        "pool_pre_ping": True,  # Enable connection health checks
        "pool_recycle": 300,    # Recycle connections after 5 minutes
        "pool_size": 5,
        "max_overflow": 10,
        "poolclass": QueuePool,
        "connect_args": {
            **({"sslmode": "require"} if settings.ENV == "production" else {})
        },
    }


engine = create_engine(settings.database_url, **engine_args(settings.database_url))
logger.info(f"Database engine created for {engine.url.render_as_string(hide_password=True)}")


def create_db_and_tables() -> None:
    """Create any missing tables. Existing tables and rows are left alone."""
    # Imported for its side effect of registering the tables on the metadata
    import app.models  # noqa: F401

    SQLModel.metadata.create_all(engine)
    logger.info("Database tables ensured")


def session() -> Generator[Session, None, None]:
    """
    Dependency function that yields a SQLModel session
    """
    db_session = Session(engine)
    try:
        yield db_session
    except SQLAlchemyError as e:
        logger.error(f"Database session error: {e}")
        db_session.rollback()
        raise
    finally:
        db_session.close()


if __name__ == "__main__":
    create_db_and_tables()
