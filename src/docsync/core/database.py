"""Database engine and table management."""

from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base

from .config import settings
from .logging import get_logger

logger = get_logger(__name__)

# Base class for all database models
Base = declarative_base()


def create_store_engine(url: Optional[str] = None) -> Engine:
    """Create a synchronous engine for the document store."""
    database_url = settings.get_database_url(url)
    options = {"echo": settings.database.echo}

    if database_url.startswith("postgresql"):
        options["pool_size"] = settings.database.pool_size
        options["max_overflow"] = settings.database.max_overflow

    return create_engine(database_url, **options)


def create_tables(engine: Engine) -> None:
    """Create all database tables."""
    # Register models on the metadata
    from .. import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created successfully")
