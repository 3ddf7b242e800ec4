"""Filesystem blob store."""

import os
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from uuid import uuid4

import aiofiles
import aiofiles.os
import structlog

from kbsync.domain.exceptions import (
    BlobNotFound,
    InfrastructurePermissionError,
    StorageUnavailable,
)

logger = structlog.get_logger(__name__)


class LocalBlobStore:
    """Blobs stored as files under a root directory, addressed by relative path.

    Writes go to a temporary sibling file and are renamed into place, so a
    reader never sees a partially written blob.
    """

    def __init__(self, root: str | os.PathLike[str], required_role: str = "Storage Admin") -> None:
        self._root = Path(root).resolve()
        self._required_role = required_role

    def _resolve(self, path: str) -> Path:
        target = (self._root / path).resolve()
        if target == self._root or not target.is_relative_to(self._root):
            raise ValueError(f"Blob path escapes storage root: {path!r}")
        return target

    @contextmanager
    def _translate_errors(self, path: str) -> Iterator[None]:
        try:
            yield
        except FileNotFoundError as e:
            raise BlobNotFound(path) from e
        except PermissionError as e:
            raise InfrastructurePermissionError("blob store", self._required_role, detail=str(e)) from e
        except OSError as e:
            raise StorageUnavailable(f"Blob store I/O failed for {path}: {e}") from e

    async def put(self, path: str, data: bytes, content_type: str) -> None:
        target = self._resolve(path)
        tmp = target.with_name(f".{target.name}.{uuid4().hex}.tmp")
        with self._translate_errors(path):
            await aiofiles.os.makedirs(target.parent, exist_ok=True)
            try:
                async with aiofiles.open(tmp, "wb") as f:
                    await f.write(data)
                await aiofiles.os.replace(tmp, target)
            except BaseException:
                if await aiofiles.os.path.exists(tmp):
                    await aiofiles.os.remove(tmp)
                raise
        logger.debug("blob.stored", storage_path=path, size=len(data), content_type=content_type)

    async def get(self, path: str) -> bytes:
        target = self._resolve(path)
        with self._translate_errors(path):
            async with aiofiles.open(target, "rb") as f:
                return await f.read()

    async def delete(self, path: str) -> None:
        target = self._resolve(path)
        with self._translate_errors(path):
            await aiofiles.os.remove(target)
        logger.debug("blob.deleted", storage_path=path)

    async def exists(self, path: str) -> bool:
        target = self._resolve(path)
        with self._translate_errors(path):
            try:
                await aiofiles.os.stat(target)
            except FileNotFoundError:
                return False
        return True
