"""Unit of Work port - transactional boundary."""

from collections.abc import AsyncIterator
from typing import Protocol

from kbsync.application.ports.repositories.aggregate_repository import (
    AggregateRepository,
)
from kbsync.application.ports.repositories.document_repository import DocumentRepository


class UnitOfWork(Protocol):
    """Unit of Work - catalog and aggregate writes commit together."""

    @property
    def documents(self) -> DocumentRepository: ...

    @property
    def aggregate(self) -> AggregateRepository: ...

    async def commit(self) -> None: ...

    async def rollback(self) -> None: ...


class UnitOfWorkFactory(Protocol):
    """Factory for creating UnitOfWork instances."""

    async def __call__(self) -> AsyncIterator[UnitOfWork]: ...
