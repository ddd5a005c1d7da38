"""
Domain error taxonomy.

Routers translate these into HTTP responses:
- ValidationError   -> 400
- NotFoundError     -> 404
- StorageWriteError -> 500 (opaque message, full detail logged)
- RepositoryError   -> 500 (opaque message, full detail logged)
"""


class InventoryError(Exception):
    """Base class for errors raised by the inventory core."""


class ValidationError(InventoryError):
    """Bad or missing input."""


class NotFoundError(InventoryError):
    """No such item, or the item has no retrievable photo."""


class StorageWriteError(InventoryError):
    """A photo could not be written to the blob store."""


class RepositoryError(InventoryError):
    """The item repository failed (connectivity or query error)."""
