from .blob_store import LocalBlobStore

__all__ = ["LocalBlobStore"]
