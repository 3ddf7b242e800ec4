"""Rebuild knowledge base use case."""

import structlog

from kbsync.application.dto.document_dto import RebuildResult
from kbsync.application.services.knowledge_writer import KnowledgeWriter
from kbsync.domain.exceptions import InfrastructurePermissionError

logger = structlog.get_logger(__name__)


class RebuildKnowledgeBaseUseCase:
    """Recompute the aggregate from the catalog and the stored blobs.

    Every document is re-extracted from its blob. Unreadable documents are
    skipped and reported; they never fail the rebuild.
    """

    def __init__(self, writer: KnowledgeWriter) -> None:
        self._writer = writer

    async def execute(self) -> RebuildResult:
        try:
            outcome = await self._writer.commit(refresh=True)
        except InfrastructurePermissionError as e:
            logger.error("rebuild.aborted", resource=e.resource, detail=e.detail)
            return RebuildResult(success=False, message=e.remediation)

        included = len(outcome.included)
        skipped = len(outcome.skipped)
        if included == 0 and skipped == 0:
            message = "Knowledge base is empty and has been cleared."
        elif skipped:
            message = (
                f"Knowledge base rebuilt from {included} document(s); "
                f"{skipped} unreadable document(s) skipped."
            )
        else:
            message = f"Knowledge base rebuilt from {included} document(s)."
        logger.info("rebuild.completed", documents=included, skipped=skipped)
        return RebuildResult(
            success=True,
            message=message,
            document_count=included,
            skipped_count=skipped,
        )
