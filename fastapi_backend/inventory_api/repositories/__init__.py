"""
Item repositories and the factory that picks one from settings.
"""

from ..core.config import Settings
from ..core.logger import get_logger
from ..db.sqlalchemy import build_engine
from .base import ItemRepository
from .memory import InMemoryItemRepository
from .sql import SqlItemRepository

logger = get_logger(__name__)


# PUBLIC_INTERFACE
def build_repository(settings: Settings) -> ItemRepository:
    """Build the repository selected by STORAGE_BACKEND.

    The SQL backend gets its own engine and has its table created here.
    """
    if settings.STORAGE_BACKEND == "sql":
        repository = SqlItemRepository(build_engine(settings.DATABASE_URL, echo=settings.DB_ECHO))
        repository.create_schema()
    else:
        repository = InMemoryItemRepository()
    logger.info("Item repository selected", extra={"backend": settings.STORAGE_BACKEND})
    return repository


__all__ = [
    "ItemRepository",
    "InMemoryItemRepository",
    "SqlItemRepository",
    "build_repository",
]
