"""Application entry point and composition root."""

from functools import partial

from kbsync import __version__
from kbsync.application.services.document_processor import DocumentProcessor
from kbsync.application.services.knowledge_writer import KnowledgeWriter
from kbsync.application.services.retry_policy import RetryPolicy
from kbsync.application.services.text_cache import ExtractedTextCache
from kbsync.application.use_cases.document.delete_document import DeleteDocumentUseCase
from kbsync.application.use_cases.document.get_document import GetDocumentUseCase
from kbsync.application.use_cases.document.list_documents import ListDocumentsUseCase
from kbsync.application.use_cases.document.upload_documents import UploadDocumentsUseCase
from kbsync.application.use_cases.knowledge.get_knowledge import GetKnowledgeUseCase
from kbsync.application.use_cases.knowledge.rebuild_knowledge import (
    RebuildKnowledgeBaseUseCase,
)
from kbsync.config import get_settings
from kbsync.infrastructure.extraction.parser_extractor import ParserTextExtractor
from kbsync.infrastructure.persistence.postgres.connection import create_pool, ping
from kbsync.infrastructure.persistence.postgres.unit_of_work import create_uow_factory
from kbsync.infrastructure.storage.local_blob_store import LocalBlobStore
from kbsync.interfaces.api.app import create_app
from kbsync.interfaces.api.middleware.cors import CORSMiddleware
from kbsync.interfaces.api.middleware.lifespan import LifespanMiddleware
from kbsync.interfaces.api.middleware.logging import LoggingMiddleware, configure_logging
from kbsync.interfaces.api.resources.documents import DocumentResource, DocumentsResource
from kbsync.interfaces.api.resources.health import HealthResource
from kbsync.interfaces.api.resources.knowledge import (
    KnowledgeRebuildResource,
    KnowledgeResource,
)


def main() -> None:
    """CLI entry point."""
    print(f"KBSync v{__version__}")


def create_kbsync_app():
    """Composition root - build Falcon app with all dependencies."""
    settings = get_settings()
    configure_logging(
        "DEBUG" if settings.debug else settings.log_level,
        json_output=settings.environment == "production",
    )

    pool = create_pool(settings.database_url)
    uow_factory = create_uow_factory(pool, required_role=settings.catalog_required_role)

    extractor = ParserTextExtractor(max_workers=settings.extraction_concurrency)
    processor = DocumentProcessor(
        blob_store=LocalBlobStore(
            settings.blob_storage_root,
            required_role=settings.storage_required_role,
        ),
        extractor=extractor,
        retry_policy=RetryPolicy(
            attempts=settings.retry_attempts,
            min_wait=settings.retry_min_wait_seconds,
            max_wait=settings.retry_max_wait_seconds,
        ),
        extraction_timeout=settings.extraction_timeout_seconds,
        max_concurrent_extractions=settings.extraction_concurrency,
        text_cache=ExtractedTextCache(max_size=settings.text_cache_size),
    )
    writer = KnowledgeWriter(
        unit_of_work_factory=uow_factory,
        processor=processor,
        commit_attempts=settings.commit_attempts,
    )

    upload_documents = UploadDocumentsUseCase(
        processor=processor,
        writer=writer,
        blob_prefix=settings.blob_prefix,
        max_upload_bytes=settings.max_upload_bytes,
    )
    list_documents = ListDocumentsUseCase(unit_of_work_factory=uow_factory)
    get_document = GetDocumentUseCase(unit_of_work_factory=uow_factory)
    delete_document = DeleteDocumentUseCase(
        unit_of_work_factory=uow_factory,
        processor=processor,
        writer=writer,
    )
    rebuild = RebuildKnowledgeBaseUseCase(writer=writer)
    get_knowledge = GetKnowledgeUseCase(unit_of_work_factory=uow_factory)

    cors_origins = [o.strip() for o in settings.cors_origins.split(",") if o.strip()]
    return create_app(
        documents_resource=DocumentsResource(upload_documents, list_documents),
        document_resource=DocumentResource(get_document, delete_document),
        knowledge_resource=KnowledgeResource(get_knowledge),
        knowledge_rebuild_resource=KnowledgeRebuildResource(rebuild),
        health_resource=HealthResource(readiness_check=partial(ping, pool)),
        middleware=[
            LoggingMiddleware(),
            CORSMiddleware(cors_origins),
            LifespanMiddleware(
                pool,
                blob_root=settings.blob_storage_root,
                extractor=extractor,
            ),
        ],
    )


def serve() -> None:
    """Run uvicorn server."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(create_kbsync_app(), host=settings.host, port=settings.port)
