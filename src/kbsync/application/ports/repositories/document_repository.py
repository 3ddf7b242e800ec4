"""Document catalog repository port."""

from typing import Protocol
from uuid import UUID

from kbsync.domain.entities import Document


class DocumentRepository(Protocol):
    """Port for the document catalog."""

    async def get_by_id(self, document_id: UUID) -> Document | None: ...

    async def create_batch(self, documents: list[Document]) -> None: ...

    async def delete(self, document_id: UUID) -> bool: ...

    async def list(self) -> list[Document]:
        """All documents, uploaded_at descending then id ascending."""
        ...
