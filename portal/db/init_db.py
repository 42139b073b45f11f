"""Database initialization utilities."""
from typing import Optional

from sqlalchemy.engine import Engine

from portal.core.logging import get_logger
from portal.db.base import Base
from portal.db.session import engine as default_engine

logger = get_logger(__name__)


def init_db(bind: Optional[Engine] = None) -> None:
    """
    Create any missing tables.

    Note: This is suitable for development and tests.
    For production, manage the schema with migrations.
    """
    bind = bind or default_engine
    try:
        Base.metadata.create_all(bind=bind)
        logger.info("Database tables ensured")
    except Exception as e:
        logger.error(f"Error initializing database: {e}")
        raise
