import logging
from collections.abc import Generator
from typing import Any

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine, ExceptionContext
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from app.core.config import settings
from app.core.errors import StorageUnavailableError

logger = logging.getLogger(__name__)

engine = create_engine(
    settings.APP_DATABASE_DSN,
    connect_args=({"check_same_thread": False} if "sqlite" in settings.APP_DATABASE_DSN else {}),
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base: Any = declarative_base()


@event.listens_for(Engine, "handle_error")
def translate_storage_errors(context: ExceptionContext) -> None:
    """Surface an unreachable store as StorageUnavailableError instead of a driver error."""
    if context.is_disconnect or isinstance(context.sqlalchemy_exception, OperationalError):
        logger.error("Entity store unavailable: %s", context.original_exception)
        raise StorageUnavailableError() from context.original_exception


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db() -> None:
    """Initialize database tables."""
    import app.models  # noqa: F401

    Base.metadata.create_all(bind=engine)
