"""Lifespan middleware - opens the pool and prepares blob storage on startup."""

from pathlib import Path
from typing import Any

import structlog
from psycopg_pool import AsyncConnectionPool

from kbsync.infrastructure.extraction.parser_extractor import ParserTextExtractor

logger = structlog.get_logger(__name__)


class LifespanMiddleware:
    """Opens the connection pool on startup; closes it and the parser pool on shutdown."""

    def __init__(
        self,
        pool: AsyncConnectionPool,
        blob_root: str | None = None,
        extractor: ParserTextExtractor | None = None,
    ) -> None:
        self._pool = pool
        self._blob_root = blob_root
        self._extractor = extractor

    async def process_startup(
        self, scope: dict[str, Any], event: dict[str, Any]
    ) -> None:
        if self._blob_root:
            Path(self._blob_root).mkdir(parents=True, exist_ok=True)
        await self._pool.open()
        logger.info("app.started", blob_root=self._blob_root)

    async def process_shutdown(
        self, scope: dict[str, Any], event: dict[str, Any]
    ) -> None:
        if self._extractor is not None:
            self._extractor.close()
        await self._pool.close()
        logger.info("app.stopped")
