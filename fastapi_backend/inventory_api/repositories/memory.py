"""
Volatile item repository.

Items live in an ordered list owned by the repository instance. Ids come from a
counter on the same instance that starts at 1 and is never rewound, so ids of
deleted items are not reused. All access goes through one lock.
"""

import threading
from typing import List, Optional, Tuple

from ..core.errors import NotFoundError
from ..models.schemas import InventoryItem


# PUBLIC_INTERFACE
class InMemoryItemRepository:
    """List-backed ItemRepository; contents are lost when the process exits."""

    def __init__(self) -> None:
        self._items: List[InventoryItem] = []
        self._next_id = 1
        self._lock = threading.Lock()

    def _find(self, item_id: int) -> InventoryItem:
        for item in self._items:
            if item.id == item_id:
                return item
        raise NotFoundError(f"No item with id {item_id}")

    def create(self, name: str, description: str = "", photo_ref: Optional[str] = None) -> InventoryItem:
        with self._lock:
            item = InventoryItem(
                id=self._next_id,
                name=name,
                description=description or "",
                photo_ref=photo_ref,
            )
            self._next_id += 1
            self._items.append(item)
            return item.model_copy()

    def list_all(self) -> List[InventoryItem]:
        with self._lock:
            return [item.model_copy() for item in self._items]

    def get(self, item_id: int) -> InventoryItem:
        with self._lock:
            return self._find(item_id).model_copy()

    def update_fields(
        self,
        item_id: int,
        name: Optional[str] = None,
        description: Optional[str] = None,
    ) -> InventoryItem:
        with self._lock:
            item = self._find(item_id)
            if name:
                item.name = name
            if description:
                item.description = description
            return item.model_copy()

    def set_photo(self, item_id: int, photo_ref: Optional[str]) -> Tuple[InventoryItem, Optional[str]]:
        with self._lock:
            item = self._find(item_id)
            previous = item.photo_ref
            item.photo_ref = photo_ref
            return item.model_copy(), previous

    def delete(self, item_id: int) -> InventoryItem:
        with self._lock:
            item = self._find(item_id)
            self._items.remove(item)
            return item

    def ping(self) -> None:
        return None
