"""
Inventory service: coordinates the item repository and the photo blob store.

The service keeps one invariant across every operation: an item's photo_ref,
when set, names a blob that exists, and a blob that an item stops referencing
is deleted. There is no transaction spanning disk and database, so partial
failures are repaired with compensating deletes:

- register:      name validated before anything is written; blob written, then
                 record created; if the record fails, the blob is deleted.
- replace_photo: new blob written, reference swapped, then the old blob deleted.
                 If the swap fails the new blob is deleted and the old one kept.
- delete_item:   record deleted, then the blob deleted best-effort.

Photo replacement, field updates and deletion of the same item id are
serialized through a striped lock table, so concurrent replacements cannot
orphan a blob.
"""

from __future__ import annotations

import math
import threading
from dataclasses import dataclass
from typing import Any, BinaryIO, List, Optional

from ..core.errors import NotFoundError, ValidationError
from ..core.logger import get_logger
from ..models.schemas import InventoryItem, ItemOut
from ..models.sql_models import MAX_ITEM_ID
from ..repositories.base import ItemRepository
from ..storage.blob_store import LocalBlobStore

logger = get_logger(__name__)

# Photos are served with a fixed content type; the uploaded format is not inspected.
PHOTO_MEDIA_TYPE = "image/jpeg"


# PUBLIC_INTERFACE
@dataclass(frozen=True)
class UploadedPhoto:
    """Photo upload already read into memory by the HTTP layer."""
    filename: Optional[str]
    content: bytes


# PUBLIC_INTERFACE
def photo_url_for(item: InventoryItem) -> Optional[str]:
    """Public URL of the item's photo, or None when it has none."""
    if item.photo_ref is None:
        return None
    return f"/inventory/{item.id}/photo"


def _to_out(item: InventoryItem) -> ItemOut:
    return ItemOut(
        id=item.id,
        name=item.name,
        description=item.description or "",
        photo_url=photo_url_for(item),
    )


def _parse_search_id(raw: Any) -> Optional[int]:
    """Parse a search id.

    Returns the integer id, or None when the value is numeric but cannot name an
    item (fractional, below 1 or above MAX_ITEM_ID). Raises ValidationError for
    non-numeric input.
    """
    if raw is None or isinstance(raw, bool):
        raise ValidationError("Invalid ID")
    if isinstance(raw, int):
        value: float = raw
    else:
        text = str(raw).strip()
        if not text:
            raise ValidationError("Invalid ID")
        try:
            value = int(text)
        except ValueError:
            try:
                value = float(text)
            except ValueError:
                raise ValidationError("Invalid ID") from None
    if isinstance(value, float):
        if not math.isfinite(value):
            raise ValidationError("Invalid ID")
        if not value.is_integer():
            return None
        value = int(value)
    return value if 1 <= value <= MAX_ITEM_ID else None


class _StripedLocks:
    """Fixed pool of locks; an item id always maps to the same lock."""

    def __init__(self, stripes: int) -> None:
        self._locks = [threading.Lock() for _ in range(max(1, stripes))]

    def for_id(self, item_id: int) -> threading.Lock:
        return self._locks[item_id % len(self._locks)]


# PUBLIC_INTERFACE
class InventoryService:
    """Item-and-photo lifecycle operations over an injected repository and blob store."""

    def __init__(self, repository: ItemRepository, blob_store: LocalBlobStore, lock_stripes: int = 64) -> None:
        self.repository = repository
        self.blob_store = blob_store
        self._locks = _StripedLocks(lock_stripes)

    # PUBLIC_INTERFACE
    def register(
        self,
        name: Optional[str],
        description: Optional[str] = None,
        photo: Optional[UploadedPhoto] = None,
    ) -> ItemOut:
        """Create an item, storing its photo first when one was uploaded.

        Raises:
            ValidationError: name missing or blank. Nothing is written.
            StorageWriteError / RepositoryError: backend failure; no blob is left behind.
        """
        if not name or not name.strip():
            raise ValidationError('The "name" field is required')

        photo_ref = self.blob_store.store(photo.content, photo.filename) if photo is not None else None
        try:
            item = self.repository.create(name=name, description=description or "", photo_ref=photo_ref)
        except Exception:
            if photo_ref is not None:
                logger.warning("Item creation failed; removing uploaded photo", extra={"ref": photo_ref})
                self.blob_store.delete(photo_ref)
            raise
        logger.info("Item registered", extra={"item_id": item.id, "has_photo": photo_ref is not None})
        return _to_out(item)

    # PUBLIC_INTERFACE
    def list_items(self) -> List[ItemOut]:
        return [_to_out(item) for item in self.repository.list_all()]

    # PUBLIC_INTERFACE
    def get_item(self, item_id: int) -> ItemOut:
        return _to_out(self.repository.get(item_id))

    # PUBLIC_INTERFACE
    def update_fields(
        self,
        item_id: int,
        name: Optional[str] = None,
        description: Optional[str] = None,
    ) -> ItemOut:
        """Partial update: only non-empty values replace the stored ones."""
        with self._locks.for_id(item_id):
            item = self.repository.update_fields(item_id, name=name, description=description)
        return _to_out(item)

    # PUBLIC_INTERFACE
    def replace_photo(self, item_id: int, photo: Optional[UploadedPhoto]) -> ItemOut:
        """Swap the item's photo for a newly uploaded one and delete the old blob.

        Raises:
            ValidationError: no photo uploaded.
            NotFoundError: no such item; the uploaded blob is not kept.
        """
        if photo is None:
            raise ValidationError("Photo file not sent")

        with self._locks.for_id(item_id):
            # Reject unknown ids before touching the disk.
            self.repository.get(item_id)
            new_ref = self.blob_store.store(photo.content, photo.filename)
            try:
                item, previous_ref = self.repository.set_photo(item_id, new_ref)
            except Exception:
                logger.warning(
                    "Photo swap failed; removing uploaded photo",
                    extra={"item_id": item_id, "ref": new_ref},
                )
                self.blob_store.delete(new_ref)
                raise
            if previous_ref and previous_ref != new_ref:
                self.blob_store.delete(previous_ref)

        logger.info("Item photo replaced", extra={"item_id": item_id})
        return _to_out(item)

    # PUBLIC_INTERFACE
    def get_photo(self, item_id: int) -> BinaryIO:
        """Open the item's photo for reading; the caller closes the stream.

        Raises:
            NotFoundError: no such item, no photo, or the file is gone.
        """
        item = self.repository.get(item_id)
        if item.photo_ref is None:
            raise NotFoundError("Photo not found")
        return self.blob_store.retrieve(item.photo_ref)

    # PUBLIC_INTERFACE
    def delete_item(self, item_id: int) -> InventoryItem:
        """Delete the record, then its photo. A failed photo delete is only logged."""
        with self._locks.for_id(item_id):
            removed = self.repository.delete(item_id)
            if removed.photo_ref is not None:
                self.blob_store.delete(removed.photo_ref)
        logger.info("Item deleted", extra={"item_id": item_id})
        return removed

    # PUBLIC_INTERFACE
    def search_by_id(self, raw_id: Any) -> ItemOut:
        """Look an item up by a client-supplied id of any type.

        Raises:
            ValidationError: the id is missing or not a number.
            NotFoundError: the id is numeric but names no item.
        """
        item_id = _parse_search_id(raw_id)
        if item_id is None:
            raise NotFoundError("Item not found")
        return self.get_item(item_id)
