"""Per-document blob and extraction work shared by the pipeline use cases."""

import asyncio
from collections.abc import Awaitable, Iterable
from typing import TypeVar

import structlog

from kbsync.application.ports import BlobStore, TextExtractor
from kbsync.application.services.retry_policy import RetryPolicy
from kbsync.application.services.text_cache import ExtractedTextCache
from kbsync.domain.entities import Document
from kbsync.domain.exceptions import BlobNotFound, ExtractionTimeout, KBSyncError

logger = structlog.get_logger(__name__)

T = TypeVar("T")


async def fan_out(coros: Iterable[Awaitable[T]]) -> list[T]:
    """Run coroutines concurrently and return their results in order.

    The first exception cancels the remaining tasks and is re-raised
    unwrapped. Callers contain per-document errors inside each coroutine,
    so only batch-wide failures get here.
    """
    tasks: list[asyncio.Task[T]] = []
    try:
        async with asyncio.TaskGroup() as tg:
            for coro in coros:
                tasks.append(tg.create_task(coro))
    except ExceptionGroup as eg:
        raise eg.exceptions[0] from None
    return [t.result() for t in tasks]


class DocumentProcessor:
    """Blob store and extractor calls with retry, deadlines and a text cache."""

    def __init__(
        self,
        blob_store: BlobStore,
        extractor: TextExtractor,
        retry_policy: RetryPolicy | None = None,
        extraction_timeout: float = 60.0,
        max_concurrent_extractions: int = 8,
        text_cache: ExtractedTextCache | None = None,
    ) -> None:
        self._blob_store = blob_store
        self._extractor = extractor
        self._retry = retry_policy or RetryPolicy()
        self._extraction_timeout = extraction_timeout
        self._extraction_slots = asyncio.Semaphore(max(1, max_concurrent_extractions))
        self._cache = text_cache if text_cache is not None else ExtractedTextCache(max_size=0)

    def supports(self, file_name: str, content_type: str | None = None) -> bool:
        return self._extractor.supports(file_name, content_type)

    async def store(self, path: str, data: bytes, content_type: str) -> None:
        await self._retry.call(self._blob_store.put, path, data, content_type)

    async def fetch(self, path: str) -> bytes:
        return await self._retry.call(self._blob_store.get, path)

    async def extract(self, data: bytes, file_name: str, content_type: str | None = None) -> str:
        """Extract text; each attempt has its own deadline."""
        return await self._retry.call(self._extract_once, data, file_name, content_type)

    async def _extract_once(self, data: bytes, file_name: str, content_type: str | None) -> str:
        """One deadline-bound extraction attempt.

        The slot is taken before the deadline starts and is released only when
        the extraction itself finishes. A timed-out parse keeps running in its
        worker thread, so it keeps its slot until the thread is done.
        """
        await self._extraction_slots.acquire()
        work = asyncio.ensure_future(self._extractor.extract_text(data, file_name, content_type))
        work.add_done_callback(self._release_slot)
        try:
            async with asyncio.timeout(self._extraction_timeout):
                return await asyncio.shield(work)
        except TimeoutError:
            logger.warning(
                "extraction.timed_out",
                file_name=file_name,
                timeout=self._extraction_timeout,
            )
            raise ExtractionTimeout(file_name, self._extraction_timeout) from None

    def _release_slot(self, work: asyncio.Future) -> None:
        self._extraction_slots.release()
        if not work.cancelled():
            # abandoned attempts still need their outcome retrieved
            work.exception()

    def remember(self, storage_path: str, text: str) -> None:
        self._cache.put(storage_path, text)

    async def blob_exists(self, path: str) -> bool:
        return await self._retry.call(self._blob_store.exists, path)

    async def load_text(self, document: Document, use_cache: bool = True) -> str:
        """Fetch a cataloged document's blob and extract its text.

        Cached text is used only while its blob still exists, and any failed
        load evicts the entry, so every commit sees the same set of readable
        documents.
        """
        path = document.storage_path
        if use_cache:
            cached = self._cache.get(path)
            if cached is not None and await self.blob_exists(path):
                return cached
        try:
            data = await self.fetch(path)
            text = await self.extract(data, document.file_name, document.content_type)
        except KBSyncError:
            self._cache.discard(path)
            raise
        self._cache.put(path, text)
        return text

    async def delete_blob(self, path: str) -> bool:
        """Delete a blob. Returns False when it was already missing."""
        self._cache.discard(path)
        try:
            await self._retry.call(self._blob_store.delete, path)
        except BlobNotFound:
            return False
        return True

    async def discard(self, paths: Iterable[str]) -> None:
        """Best-effort cleanup of blobs that will not be cataloged."""
        for path in paths:
            try:
                await self.delete_blob(path)
            except KBSyncError as e:
                logger.warning("blob.cleanup_failed", storage_path=path, error=str(e))
