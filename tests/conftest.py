"""Pytest fixtures for KBSync tests."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from uuid import UUID, uuid4

import pytest

from kbsync.application.services.document_processor import DocumentProcessor
from kbsync.application.services.knowledge_writer import KnowledgeWriter
from kbsync.application.services.retry_policy import RetryPolicy
from kbsync.application.services.text_cache import ExtractedTextCache
from kbsync.domain.entities import Document, KnowledgeAggregate
from kbsync.domain.exceptions import (
    BlobNotFound,
    ExtractionFailure,
    InfrastructurePermissionError,
    StorageUnavailable,
)

# --- Fake catalog (documents + aggregate share one transactional store) ---


class FakeCatalogStore:
    """Committed state shared by every FakeUnitOfWork.

    before_cas hooks run one per compare_and_set call and may mutate the
    committed state to simulate a writer in another process.
    """

    def __init__(self) -> None:
        self.documents: dict[UUID, Document] = {}
        self.aggregate = KnowledgeAggregate.empty()
        self.deny_writes = False
        self.before_cas: list[Callable[[FakeCatalogStore], None]] = []
        self.commits = 0

    def add(self, document: Document) -> None:
        """Insert a committed document directly (test setup)."""
        self.documents[document.id] = document

    def bump_version(self, content: str = "external") -> None:
        self.aggregate = KnowledgeAggregate(
            content=content,
            version=self.aggregate.version + 1,
            last_updated_at=datetime.now(UTC),
        )

    def _check_writable(self) -> None:
        if self.deny_writes:
            raise InfrastructurePermissionError(
                "document catalog", "kbsync_writer", detail="permission denied for table"
            )


class FakeDocumentRepository:
    """In-memory document repository over a staged copy of the catalog."""

    def __init__(self, store: FakeCatalogStore) -> None:
        self._store = store
        self._by_id: dict[UUID, Document] = dict(store.documents)
        self.added: dict[UUID, Document] = {}
        self.removed: set[UUID] = set()

    async def get_by_id(self, document_id: UUID) -> Document | None:
        return self._by_id.get(document_id)

    async def create_batch(self, documents: list[Document]) -> None:
        self._store._check_writable()
        for d in documents:
            self._by_id[d.id] = d
            self.added[d.id] = d

    async def delete(self, document_id: UUID) -> bool:
        self._store._check_writable()
        self.removed.add(document_id)
        return self._by_id.pop(document_id, None) is not None

    async def list(self) -> list[Document]:
        return sorted(
            self._by_id.values(),
            key=lambda d: (-d.uploaded_at.timestamp(), str(d.id)),
        )


class FakeAggregateRepository:
    """In-memory aggregate row with a version check against committed state."""

    def __init__(self, store: FakeCatalogStore) -> None:
        self._store = store
        self.staged: KnowledgeAggregate | None = None

    async def get(self) -> KnowledgeAggregate:
        return self._store.aggregate

    async def compare_and_set(
        self,
        expected_version: int,
        content: str,
        updated_at: datetime,
    ) -> KnowledgeAggregate | None:
        self._store._check_writable()
        if self._store.before_cas:
            self._store.before_cas.pop(0)(self._store)
        if self._store.aggregate.version != expected_version:
            return None
        self.staged = KnowledgeAggregate(
            content=content, version=expected_version + 1, last_updated_at=updated_at
        )
        return self.staged


# --- Fake UnitOfWork ---


class FakeUnitOfWork:
    """In-memory Unit of Work; changes reach the store only on commit."""

    def __init__(self, store: FakeCatalogStore) -> None:
        self._store = store
        self.documents = FakeDocumentRepository(store)
        self.aggregate = FakeAggregateRepository(store)

    async def commit(self) -> None:
        for document_id in self.documents.removed:
            self._store.documents.pop(document_id, None)
        self._store.documents.update(self.documents.added)
        if self.aggregate.staged is not None:
            self._store.aggregate = self.aggregate.staged
        self._store.commits += 1

    async def rollback(self) -> None:
        pass


def make_uow_factory(store: FakeCatalogStore):
    """Factory mirroring the Postgres one: commit on success, rollback on error."""

    @asynccontextmanager
    async def _factory() -> AsyncIterator[FakeUnitOfWork]:
        uow = FakeUnitOfWork(store)
        try:
            yield uow
        except BaseException:
            await uow.rollback()
            raise
        await uow.commit()

    return _factory


# --- Fake blob store and extractor ---


class InMemoryBlobStore:
    """Dict-backed blob store with failure injection."""

    def __init__(self) -> None:
        self.blobs: dict[str, bytes] = {}
        self.deny_writes = False
        self.transient_failures = 0
        self.put_calls = 0

    async def put(self, path: str, data: bytes, content_type: str) -> None:
        self.put_calls += 1
        if self.deny_writes:
            raise InfrastructurePermissionError("blob store", "Storage Admin", detail="403")
        if self.transient_failures > 0:
            self.transient_failures -= 1
            raise StorageUnavailable(f"Blob store I/O failed for {path}")
        self.blobs[path] = data

    async def get(self, path: str) -> bytes:
        if path not in self.blobs:
            raise BlobNotFound(path)
        return self.blobs[path]

    async def delete(self, path: str) -> None:
        if path not in self.blobs:
            raise BlobNotFound(path)
        del self.blobs[path]

    async def exists(self, path: str) -> bool:
        return path in self.blobs


class ScriptedExtractor:
    """Decodes bytes as UTF-8 unless the content starts with a script marker.

    b"CORRUPT" raises ExtractionFailure, b"SLOW" sleeps for `slow_seconds`.
    """

    SUPPORTED = (".txt", ".md", ".pdf", ".docx")

    def __init__(self, slow_seconds: float = 5.0) -> None:
        self.slow_seconds = slow_seconds
        self.calls: list[str] = []

    def supports(self, file_name: str, content_type: str | None = None) -> bool:
        return file_name.lower().endswith(self.SUPPORTED)

    async def extract_text(
        self,
        data: bytes,
        file_name: str,
        content_type: str | None = None,
    ) -> str:
        self.calls.append(file_name)
        if data.startswith(b"CORRUPT"):
            raise ExtractionFailure(file_name, "file is corrupted")
        if data.startswith(b"SLOW"):
            await asyncio.sleep(self.slow_seconds)
        return data.decode("utf-8")


def make_document(
    file_name: str = "doc.txt",
    uploaded_at: datetime | None = None,
    storage_path: str | None = None,
) -> Document:
    document_id = uuid4()
    return Document(
        id=document_id,
        file_name=file_name,
        storage_path=storage_path or f"knowledge_base/{document_id}_{file_name}",
        uploaded_at=uploaded_at or datetime.now(UTC),
        size_bytes=1,
        content_type="text/plain",
    )


FAST_RETRY = RetryPolicy(attempts=3, min_wait=0.0, max_wait=0.0, multiplier=0.0)


# --- Fixtures ---


@pytest.fixture
def catalog() -> FakeCatalogStore:
    return FakeCatalogStore()


@pytest.fixture
def uow_factory(catalog: FakeCatalogStore):
    """Factory returning async context manager with FakeUnitOfWork."""
    return make_uow_factory(catalog)


@pytest.fixture
def blob_store() -> InMemoryBlobStore:
    return InMemoryBlobStore()


@pytest.fixture
def extractor() -> ScriptedExtractor:
    return ScriptedExtractor()


@pytest.fixture
def processor(blob_store: InMemoryBlobStore, extractor: ScriptedExtractor) -> DocumentProcessor:
    return DocumentProcessor(
        blob_store=blob_store,
        extractor=extractor,
        retry_policy=FAST_RETRY,
        extraction_timeout=1.0,
        text_cache=ExtractedTextCache(max_size=64),
    )


@pytest.fixture
def writer(uow_factory, processor: DocumentProcessor) -> KnowledgeWriter:
    return KnowledgeWriter(unit_of_work_factory=uow_factory, processor=processor)
