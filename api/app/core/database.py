from sqlmodel import SQLModel, create_engine, Session
from sqlalchemy.engine import Engine
from app.core.config import settings
import logging

logger = logging.getLogger(__name__)


def normalize_database_url(db_url: str) -> str:
    """Ensure the URL uses postgresql:// (not postgres://) for SQLAlchemy."""
    if db_url.startswith("postgres://"):
        return db_url.replace("postgres://", "postgresql://", 1)
    return db_url


def build_engine(db_url: str) -> Engine:
    """
    Create a database engine for the given URL.

    SQLite connections are shared with the threadpool that serves the
    aggregation views, so same-thread checking is disabled there.
    Server databases get a sized connection pool.
    """
    db_url = normalize_database_url(db_url)
    if db_url.startswith("sqlite"):
        return create_engine(
            db_url,
            echo=False,
            connect_args={"check_same_thread": False},
        )
    return create_engine(
        db_url,
        echo=False,
        pool_pre_ping=True,  # Verify connections before using
        pool_size=5,
        max_overflow=10,
    )


logger.info(f"Connecting to database: {settings.database_url[:20]}...")  # Log partial URL for debugging

engine = build_engine(settings.database_url)


def get_session():
    """Dependency for getting database sessions."""
    with Session(engine) as session:
        yield session


def get_engine() -> Engine:
    """Dependency for services that open their own sessions per concurrent fetch."""
    return engine


def init_db():
    """Initialize database tables."""
    SQLModel.metadata.create_all(engine)
