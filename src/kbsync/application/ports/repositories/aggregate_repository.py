"""Knowledge aggregate repository port."""

from datetime import datetime
from typing import Protocol

from kbsync.domain.entities import KnowledgeAggregate


class AggregateRepository(Protocol):
    """Port for the singleton knowledge aggregate."""

    async def get(self) -> KnowledgeAggregate: ...

    async def compare_and_set(
        self,
        expected_version: int,
        content: str,
        updated_at: datetime,
    ) -> KnowledgeAggregate | None:
        """Write content if the stored version still equals expected_version.

        Returns the new aggregate, or None when another writer got there first.
        """
        ...
