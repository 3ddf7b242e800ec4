"""Blob store port - binary storage for uploaded files."""

from typing import Protocol


class BlobStore(Protocol):
    """Path-addressed binary storage.

    Implementations raise BlobNotFound for a missing path,
    InfrastructurePermissionError when access is denied and
    StorageUnavailable for other I/O failures.
    """

    async def put(self, path: str, data: bytes, content_type: str) -> None: ...

    async def get(self, path: str) -> bytes: ...

    async def delete(self, path: str) -> None: ...

    async def exists(self, path: str) -> bool: ...
