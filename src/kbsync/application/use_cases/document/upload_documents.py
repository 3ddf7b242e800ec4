"""Upload documents use case."""

import mimetypes
from datetime import UTC, datetime
from uuid import uuid4

import structlog

from kbsync.application.dto.document_dto import (
    FileOutcome,
    FileStatus,
    UploadFile,
    UploadResult,
)
from kbsync.application.services.aggregator import ExtractedDocument
from kbsync.application.services.document_processor import DocumentProcessor, fan_out
from kbsync.application.services.knowledge_writer import KnowledgeWriter
from kbsync.domain.entities import Document
from kbsync.domain.exceptions import (
    InfrastructurePermissionError,
    KBSyncError,
    ValidationError,
)
from kbsync.domain.value_objects import DocumentState, StoragePath

logger = structlog.get_logger(__name__)

DEFAULT_CONTENT_TYPE = "application/octet-stream"


class UploadDocumentsUseCase:
    """Store, extract and catalog a batch of files, then rebuild the aggregate.

    Files are processed concurrently. A failing file is dropped from the
    batch; only a permission failure on the backing stores aborts it.
    """

    def __init__(
        self,
        processor: DocumentProcessor,
        writer: KnowledgeWriter,
        blob_prefix: str = "knowledge_base",
        max_upload_bytes: int = 5 * 1024 * 1024,
    ) -> None:
        self._processor = processor
        self._writer = writer
        self._blob_prefix = blob_prefix
        self._max_upload_bytes = max_upload_bytes

    async def execute(self, files: list[UploadFile]) -> UploadResult:
        """Upload files and commit the successful ones with a fresh aggregate."""
        if not files:
            raise ValidationError("At least one file required")

        total = len(files)
        statuses: list[FileStatus | None] = [None] * total
        accepted: list[int] = []
        for index, upload in enumerate(files):
            reason = self._rejection_reason(upload)
            if reason:
                statuses[index] = FileStatus(upload.file_name, FileOutcome.REJECTED, error=reason)
                logger.info("upload.file_rejected", file_name=upload.file_name, reason=reason)
            else:
                accepted.append(index)

        uploaded_at = datetime.now(UTC)
        written: set[str] = set()
        try:
            results = await fan_out(
                self._ingest(files[i], uploaded_at, written) for i in accepted
            )
        except InfrastructurePermissionError as e:
            await self._processor.discard(sorted(written))
            return self._aborted(files, e)

        additions: list[ExtractedDocument] = []
        for index, (extracted, status) in zip(accepted, results, strict=True):
            statuses[index] = status
            if extracted is not None:
                additions.append(extracted)

        if additions:
            try:
                await self._writer.commit(additions=additions)
            except InfrastructurePermissionError as e:
                await self._processor.discard(sorted(written))
                return self._aborted(files, e)
            except Exception:
                await self._processor.discard(sorted(written))
                raise

        success_count = len(additions)
        logger.info("upload.completed", total=total, succeeded=success_count)
        return UploadResult(
            success_count=success_count,
            total=total,
            files=[s for s in statuses if s is not None],
            message=self._summary(success_count, total),
        )

    def _rejection_reason(self, upload: UploadFile) -> str | None:
        if not upload.data:
            return "File is empty"
        if len(upload.data) > self._max_upload_bytes:
            return f"File exceeds maximum size of {self._max_upload_bytes} bytes"
        if not self._processor.supports(upload.file_name, upload.content_type):
            return "Unsupported file type"
        return None

    async def _ingest(
        self,
        upload: UploadFile,
        uploaded_at: datetime,
        written: set[str],
    ) -> tuple[ExtractedDocument | None, FileStatus]:
        """uploading -> extracting -> (cataloged | discarded) for one file."""
        state = DocumentState.UPLOADING
        document_id = uuid4()
        path = str(StoragePath.generate(self._blob_prefix, upload.file_name, key=document_id))
        content_type = upload.content_type or _guess_content_type(upload.file_name)
        try:
            await self._processor.store(path, upload.data, content_type)
            written.add(path)
            state = state.advance(DocumentState.EXTRACTING)
            text = await self._processor.extract(upload.data, upload.file_name, content_type)
        except InfrastructurePermissionError:
            raise
        except KBSyncError as e:
            state = state.advance(DocumentState.DISCARDED)
            if path in written:
                written.discard(path)
                await self._processor.discard([path])
            logger.warning(
                "upload.document_discarded",
                file_name=upload.file_name,
                storage_path=path,
                error=str(e),
            )
            return None, FileStatus(upload.file_name, FileOutcome.DISCARDED, error=str(e))

        document = Document(
            id=document_id,
            file_name=upload.file_name,
            storage_path=path,
            uploaded_at=uploaded_at,
            size_bytes=len(upload.data),
            content_type=content_type,
        )
        status = FileStatus(upload.file_name, FileOutcome.CATALOGED, document_id=document_id)
        return ExtractedDocument(document=document, text=text), status

    def _aborted(self, files: list[UploadFile], error: InfrastructurePermissionError) -> UploadResult:
        logger.error(
            "upload.batch_aborted",
            resource=error.resource,
            required_role=error.required_role,
            detail=error.detail,
        )
        return UploadResult(
            success_count=0,
            total=len(files),
            files=[
                FileStatus(f.file_name, FileOutcome.DISCARDED, error="Batch aborted")
                for f in files
            ],
            message=error.remediation,
            aborted=True,
        )

    @staticmethod
    def _summary(success_count: int, total: int) -> str:
        if success_count == 0:
            return f"No documents were uploaded ({total} failed). Knowledge base unchanged."
        return f"{success_count} of {total} document(s) uploaded. Knowledge base updated."


def _guess_content_type(file_name: str) -> str:
    guessed, _ = mimetypes.guess_type(file_name)
    return guessed or DEFAULT_CONTENT_TYPE
