"""Delete document use case."""

from uuid import UUID

import structlog

from kbsync.application.dto.document_dto import OperationResult
from kbsync.application.services.document_processor import DocumentProcessor
from kbsync.application.services.knowledge_writer import KnowledgeWriter
from kbsync.domain.exceptions import InfrastructurePermissionError, NotFound
from kbsync.domain.value_objects import DocumentState

logger = structlog.get_logger(__name__)


class DeleteDocumentUseCase:
    """Remove a document's blob and catalog record, then rebuild the aggregate."""

    def __init__(
        self,
        unit_of_work_factory: type,
        processor: DocumentProcessor,
        writer: KnowledgeWriter,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._processor = processor
        self._writer = writer

    async def execute(self, document_id: UUID) -> OperationResult:
        """Delete document by id.

        Raises NotFound without touching the aggregate, also when the record
        vanishes between the lookup and the commit.
        """
        async with self._uow_factory() as uow:
            document = await uow.documents.get_by_id(document_id)
        if document is None:
            raise NotFound("Document", str(document_id))

        state = DocumentState.CATALOGED.advance(DocumentState.DELETING)
        try:
            if not await self._processor.delete_blob(document.storage_path):
                logger.warning(
                    "delete.blob_already_missing",
                    document_id=str(document.id),
                    storage_path=document.storage_path,
                )
            outcome = await self._writer.commit(removals=[document.id])
        except InfrastructurePermissionError as e:
            logger.error("delete.aborted", document_id=str(document.id), detail=e.detail)
            return OperationResult(success=False, message=e.remediation)
        state.advance(DocumentState.REMOVED)

        logger.info(
            "delete.completed",
            document_id=str(document.id),
            file_name=document.file_name,
            aggregate_version=outcome.aggregate.version,
        )
        return OperationResult(
            success=True,
            message=f"Document '{document.file_name}' deleted. Knowledge base updated.",
        )
