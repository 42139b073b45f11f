"""Database session management."""
from typing import Any, Dict, Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, sessionmaker

from portal.config.settings import Settings, settings


def build_engine(config: Settings) -> Engine:
    """Create the SQLAlchemy engine for the configured database URL."""
    url = make_url(config.get_database_url())
    kwargs: Dict[str, Any] = {"echo": config.DB_ECHO, "pool_pre_ping": True}

    if url.get_backend_name() == "sqlite":
        # Sessions are used from FastAPI's worker threads
        kwargs["connect_args"] = {"check_same_thread": False}
    else:
        kwargs["pool_size"] = config.DB_POOL_SIZE
        kwargs["max_overflow"] = config.DB_POOL_OVERFLOW

    return create_engine(url, **kwargs)


engine = build_engine(settings)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """
    Dependency function that yields a database session.

    Usage in FastAPI endpoints:
        @router.get("/items/")
        def read_items(db: Session = Depends(get_db)):
            ...
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
