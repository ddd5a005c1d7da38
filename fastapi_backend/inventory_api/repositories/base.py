"""Item repository capability shared by the memory and SQL backends."""

from typing import List, Optional, Protocol, Tuple, runtime_checkable

from ..models.schemas import InventoryItem


# PUBLIC_INTERFACE
@runtime_checkable
class ItemRepository(Protocol):
    """Persistence contract for inventory items.

    Lookups of an unknown id raise NotFoundError; backend failures raise
    RepositoryError. Name validation happens before a call reaches the repository.
    """

    def create(self, name: str, description: str = "", photo_ref: Optional[str] = None) -> InventoryItem:
        """Persist a new item and return it with its assigned id."""
        ...

    def list_all(self) -> List[InventoryItem]:
        """Return every item in a stable backend-specific order."""
        ...

    def get(self, item_id: int) -> InventoryItem:
        ...

    def update_fields(
        self,
        item_id: int,
        name: Optional[str] = None,
        description: Optional[str] = None,
    ) -> InventoryItem:
        """Replace name/description, but only with truthy values."""
        ...

    def set_photo(self, item_id: int, photo_ref: Optional[str]) -> Tuple[InventoryItem, Optional[str]]:
        """Swap the photo reference, returning the updated item and the previous reference."""
        ...

    def delete(self, item_id: int) -> InventoryItem:
        """Remove the item and return it as it was."""
        ...

    def ping(self) -> None:
        """Raise RepositoryError when the backend is unreachable."""
        ...
