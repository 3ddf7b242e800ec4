"""Single writer of the knowledge aggregate."""

import asyncio
from collections.abc import Collection
from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import UUID

import structlog
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt

from kbsync.application.services.aggregator import (
    ExtractedDocument,
    catalog_order,
    compose_aggregate,
)
from kbsync.application.services.document_processor import DocumentProcessor, fan_out
from kbsync.domain.entities import Document, KnowledgeAggregate
from kbsync.domain.exceptions import (
    AggregateConflict,
    InfrastructurePermissionError,
    KBSyncError,
    NotFound,
)

logger = structlog.get_logger(__name__)


@dataclass
class CommitOutcome:
    """What a catalog+aggregate commit wrote."""

    aggregate: KnowledgeAggregate
    included: list[Document] = field(default_factory=list)
    skipped: list[Document] = field(default_factory=list)


class KnowledgeWriter:
    """Owns every write to the aggregate.

    Each commit recomputes the aggregate from the full catalog and writes it
    in the same transaction as the catalog change, guarded by a
    compare-and-swap on the aggregate version. Writers in one process are
    serialized by a lock; writers in other processes lose the CAS and
    recompute from a fresh snapshot.
    """

    def __init__(
        self,
        unit_of_work_factory: type,
        processor: DocumentProcessor,
        commit_attempts: int = 5,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._processor = processor
        self._commit_attempts = commit_attempts
        self._lock = asyncio.Lock()

    async def commit(
        self,
        additions: Collection[ExtractedDocument] = (),
        removals: Collection[UUID] = (),
        refresh: bool = False,
    ) -> CommitOutcome:
        """Apply catalog additions/removals and rewrite the aggregate atomically.

        refresh=True re-extracts every document instead of using cached text.
        Raises InfrastructurePermissionError without writing anything, and
        NotFound when a removal targets a record another writer already deleted.
        """
        async with self._lock:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(self._commit_attempts),
                retry=retry_if_exception_type(AggregateConflict),
                reraise=True,
            ):
                with attempt:
                    if attempt.retry_state.attempt_number > 1:
                        logger.info(
                            "aggregate.commit_retry",
                            attempt=attempt.retry_state.attempt_number,
                        )
                    return await self._recompute_and_commit(additions, removals, refresh)

    async def _recompute_and_commit(
        self,
        additions: Collection[ExtractedDocument],
        removals: Collection[UUID],
        refresh: bool,
    ) -> CommitOutcome:
        async with self._uow_factory() as uow:
            current = await uow.aggregate.get()
            catalog = await uow.documents.list()

        excluded = set(removals) | {a.document.id for a in additions}
        existing = [d for d in catalog if d.id not in excluded]
        loaded = await fan_out(self._load(d, refresh) for d in existing)

        sections = [s for s in loaded if s is not None] + list(additions)
        skipped = [d for d, s in zip(existing, loaded, strict=True) if s is None]
        content = compose_aggregate(sections)

        async with self._uow_factory() as uow:
            for document_id in removals:
                if not await uow.documents.delete(document_id):
                    raise NotFound("Document", str(document_id))
            if additions:
                await uow.documents.create_batch([a.document for a in additions])
            written = await uow.aggregate.compare_and_set(
                current.version, content, datetime.now(UTC)
            )
            if written is None:
                raise AggregateConflict(
                    f"Aggregate changed since version {current.version}"
                )

        for addition in additions:
            self._processor.remember(addition.document.storage_path, addition.text)
        logger.info(
            "aggregate.committed",
            version=written.version,
            documents=len(sections),
            added=len(additions),
            removed=len(removals),
            skipped=len(skipped),
            chars=len(content),
        )
        return CommitOutcome(
            aggregate=written,
            included=catalog_order(s.document for s in sections),
            skipped=skipped,
        )

    async def _load(self, document: Document, refresh: bool) -> ExtractedDocument | None:
        try:
            text = await self._processor.load_text(document, use_cache=not refresh)
        except InfrastructurePermissionError:
            raise
        except KBSyncError as e:
            logger.warning(
                "aggregate.document_skipped",
                document_id=str(document.id),
                file_name=document.file_name,
                storage_path=document.storage_path,
                error=str(e),
            )
            return None
        return ExtractedDocument(document=document, text=text)
