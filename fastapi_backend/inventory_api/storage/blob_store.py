"""
Local filesystem blob store for item photos.

Every photo is written once under a freshly generated key inside the configured
root directory and never overwritten. The key (a bare filename) is the storage
reference kept on the item record; it is resolved against the root on every
access, and references that resolve outside the root are treated as missing.
"""

import os
import random
import time
from pathlib import Path
from typing import BinaryIO, Optional

from ..core.errors import NotFoundError, StorageWriteError
from ..core.logger import get_logger

logger = get_logger(__name__)

_KEY_PREFIX = "photo"
_MAX_KEY_ATTEMPTS = 5


def _generate_key(original_name: Optional[str]) -> str:
    """Build `photo-<epoch millis>-<random>` plus the original extension."""
    ext = Path(original_name or "").suffix.lower()
    unique_suffix = f"{int(time.time() * 1000)}-{random.randint(0, 10**9)}"
    return f"{_KEY_PREFIX}-{unique_suffix}{ext}"


# PUBLIC_INTERFACE
class LocalBlobStore:
    """Stores one binary payload per key under a root directory on local disk."""

    def __init__(self, root: str) -> None:
        self.root = Path(root).resolve()
        self.root.mkdir(parents=True, exist_ok=True)
        logger.info("Blob store ready", extra={"root": str(self.root)})

    def _resolve(self, ref: Optional[str]) -> Optional[Path]:
        if not ref:
            return None
        candidate = (self.root / ref).resolve()
        if candidate.parent != self.root:
            return None
        return candidate

    # PUBLIC_INTERFACE
    def store(self, data: bytes, original_name: Optional[str] = None) -> str:
        """Write `data` under a new unique key and return the key.

        Raises:
            StorageWriteError: the file could not be created or written.
        """
        for _ in range(_MAX_KEY_ATTEMPTS):
            key = _generate_key(original_name)
            path = self.root / key
            try:
                # "xb" refuses to open an existing file, so a blob is never overwritten.
                with open(path, "xb") as fh:
                    fh.write(data)
            except FileExistsError:
                continue
            except OSError as exc:
                if path.exists():
                    self._unlink_quietly(path)
                raise StorageWriteError(f"Could not write photo {key!r}") from exc
            logger.info("Photo stored", extra={"ref": key, "size": len(data)})
            return key
        raise StorageWriteError("Could not allocate a unique photo key")

    # PUBLIC_INTERFACE
    def retrieve(self, ref: Optional[str]) -> BinaryIO:
        """Open the blob for binary reading. The caller closes the stream.

        Raises:
            NotFoundError: no reference, or the file is absent.
        """
        path = self._resolve(ref)
        if path is None:
            raise NotFoundError("Photo not found")
        try:
            return open(path, "rb")
        except FileNotFoundError as exc:
            raise NotFoundError("Photo not found") from exc

    # PUBLIC_INTERFACE
    def exists(self, ref: Optional[str]) -> bool:
        path = self._resolve(ref)
        return path is not None and path.is_file()

    # PUBLIC_INTERFACE
    def delete(self, ref: Optional[str]) -> bool:
        """Remove the blob if present. Never raises; returns True when a file was removed."""
        path = self._resolve(ref)
        if path is None:
            if ref:
                logger.warning("Refusing to delete photo outside blob root", extra={"ref": ref})
            else:
                logger.info("No photo reference to delete")
            return False
        removed = self._unlink_quietly(path)
        if removed:
            logger.info("Photo deleted", extra={"ref": ref})
        return removed

    @staticmethod
    def _unlink_quietly(path: Path) -> bool:
        try:
            os.remove(path)
            return True
        except FileNotFoundError:
            logger.info("Photo already absent", extra={"path": str(path)})
        except OSError as exc:
            logger.warning("Could not delete photo", exc_info=exc, extra={"path": str(path)})
        return False
