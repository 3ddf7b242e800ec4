"""Get document use case."""

from uuid import UUID

from kbsync.application.dto.document_dto import DocumentOutput
from kbsync.domain.exceptions import NotFound


class GetDocumentUseCase:
    """Get a cataloged document by id."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(self, document_id: UUID) -> DocumentOutput:
        async with self._uow_factory() as uow:
            document = await uow.documents.get_by_id(document_id)
        if not document:
            raise NotFound("Document", str(document_id))
        return DocumentOutput.from_entity(document)
