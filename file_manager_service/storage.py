"""On-disk blob storage for uploaded files."""
import os
import random
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Protocol

import aiofiles
import aiofiles.os

from errors import StorageError
from logging_config import get_logger

logger = get_logger(__name__)

RANDOM_SUFFIX_MAX = 10 ** 9


class AsyncReadable(Protocol):
    async def read(self, size: int = -1) -> bytes: ...


def resolve_stored_name(original_name: str, now_ms: Optional[int] = None, token: Optional[int] = None) -> str:
    """Build ``<millis>-<random><ext>`` keeping the extension of ``original_name``."""
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    if token is None:
        token = random.randint(0, RANDOM_SUFFIX_MAX)
    _, ext = os.path.splitext(original_name or "")
    return f"{now_ms}-{token}{ext}"


@dataclass(frozen=True)
class StoredBlob:
    stored_name: str
    size: int
    path: str


class BlobStore:
    """Flat directory of blobs addressed by stored name."""

    def __init__(self, root: Path, chunk_size: int = 1024 * 1024):
        self.root = Path(root)
        self.chunk_size = chunk_size
        if not self.root.exists():
            logger.info(f"Creating uploads directory at {self.root}")
            self.root.mkdir(parents=True, exist_ok=True)
        else:
            logger.info(f"Uploads directory already exists at {self.root}")

    def path_for(self, stored_name: str) -> str:
        return (self.root / stored_name).as_posix()

    async def save(self, stream: AsyncReadable, original_name: str) -> StoredBlob:
        stored_name = resolve_stored_name(original_name)
        path = self.path_for(stored_name)
        size = 0
        logger.info(f"Saving '{original_name}' to {path}")
        try:
            async with aiofiles.open(path, 'wb') as out_file:
                while chunk := await stream.read(self.chunk_size):
                    await out_file.write(chunk)
                    size += len(chunk)
        except OSError as e:
            logger.exception(f"Error saving '{original_name}' to {path}")
            await self._discard_partial(path)
            raise StorageError(f"could not write {path}: {e}") from e
        logger.debug(f"Wrote {size} bytes to {path}")
        return StoredBlob(stored_name=stored_name, size=size, path=path)

    async def exists(self, path: str) -> bool:
        return await aiofiles.os.path.isfile(path)

    async def delete(self, path: str) -> None:
        try:
            await aiofiles.os.remove(path)
        except FileNotFoundError:
            logger.debug(f"Blob {path} already absent, nothing to delete")
        except OSError as e:
            raise StorageError(f"could not delete {path}: {e}") from e
        else:
            logger.info(f"Deleted blob {path}")

    async def _discard_partial(self, path: str) -> None:
        try:
            await aiofiles.os.remove(path)
        except FileNotFoundError:
            pass
        except OSError:
            logger.warning(f"Could not remove partially written blob {path}")
