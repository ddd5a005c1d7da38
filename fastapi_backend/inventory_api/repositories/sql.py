"""
Relational item repository backed by the 'items' table.

Every statement goes through the SQLAlchemy ORM/expression layer, so values are
always sent as bound parameters. SQLAlchemy errors are rolled back and surfaced
as RepositoryError; a missing row is NotFoundError.
"""

from contextlib import contextmanager
from typing import Iterator, List, Optional, Tuple

from sqlalchemy import select, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from ..core.errors import NotFoundError, RepositoryError
from ..core.logger import get_logger
from ..db.sqlalchemy import Base, build_sessionmaker
from ..models.schemas import InventoryItem
from ..models.sql_models import MAX_ITEM_ID, ItemRecord

logger = get_logger(__name__)


# PUBLIC_INTERFACE
class SqlItemRepository:
    """ItemRepository over a SQLAlchemy engine. Ids are assigned by the database."""

    def __init__(self, engine: Engine, session_factory: Optional[sessionmaker] = None) -> None:
        self._engine = engine
        self._session_factory = session_factory or build_sessionmaker(engine)

    # PUBLIC_INTERFACE
    def create_schema(self) -> None:
        """Create the items table if it does not exist yet."""
        try:
            Base.metadata.create_all(self._engine, tables=[ItemRecord.__table__])
        except SQLAlchemyError as exc:
            raise RepositoryError("Could not create items table") from exc

    @contextmanager
    def _session(self) -> Iterator[Session]:
        db: Session = self._session_factory()
        try:
            yield db
        except SQLAlchemyError as exc:
            db.rollback()
            logger.error("Item repository query failed", exc_info=exc)
            raise RepositoryError("Item repository query failed") from exc
        finally:
            db.close()

    @staticmethod
    def _load(db: Session, item_id: int) -> ItemRecord:
        # Ids outside the column range cannot exist and would fail to bind.
        record = db.get(ItemRecord, item_id) if 1 <= item_id <= MAX_ITEM_ID else None
        if record is None:
            raise NotFoundError(f"No item with id {item_id}")
        return record

    def create(self, name: str, description: str = "", photo_ref: Optional[str] = None) -> InventoryItem:
        with self._session() as db:
            record = ItemRecord(name=name, description=description or "", photo_ref=photo_ref)
            db.add(record)
            db.commit()
            db.refresh(record)
            return InventoryItem.model_validate(record)

    def list_all(self) -> List[InventoryItem]:
        with self._session() as db:
            rows = db.execute(select(ItemRecord).order_by(ItemRecord.id.asc())).scalars().all()
            return [InventoryItem.model_validate(row) for row in rows]

    def get(self, item_id: int) -> InventoryItem:
        with self._session() as db:
            return InventoryItem.model_validate(self._load(db, item_id))

    def update_fields(
        self,
        item_id: int,
        name: Optional[str] = None,
        description: Optional[str] = None,
    ) -> InventoryItem:
        with self._session() as db:
            record = self._load(db, item_id)
            changed = False
            if name:
                record.name = name
                changed = True
            if description:
                record.description = description
                changed = True
            if changed:
                db.commit()
                db.refresh(record)
            return InventoryItem.model_validate(record)

    def set_photo(self, item_id: int, photo_ref: Optional[str]) -> Tuple[InventoryItem, Optional[str]]:
        with self._session() as db:
            record = self._load(db, item_id)
            previous = record.photo_ref
            record.photo_ref = photo_ref
            db.commit()
            db.refresh(record)
            return InventoryItem.model_validate(record), previous

    def delete(self, item_id: int) -> InventoryItem:
        with self._session() as db:
            record = self._load(db, item_id)
            removed = InventoryItem.model_validate(record)
            db.delete(record)
            db.commit()
            return removed

    def ping(self) -> None:
        with self._session() as db:
            db.execute(text("SELECT 1"))
