"""Fixtures for API tests."""

import pytest

from kbsync.application.use_cases.document.delete_document import DeleteDocumentUseCase
from kbsync.application.use_cases.document.get_document import GetDocumentUseCase
from kbsync.application.use_cases.document.list_documents import ListDocumentsUseCase
from kbsync.application.use_cases.document.upload_documents import UploadDocumentsUseCase
from kbsync.application.use_cases.knowledge.get_knowledge import GetKnowledgeUseCase
from kbsync.application.use_cases.knowledge.rebuild_knowledge import (
    RebuildKnowledgeBaseUseCase,
)
from kbsync.interfaces.api.app import create_app
from kbsync.interfaces.api.middleware.cors import CORSMiddleware
from kbsync.interfaces.api.middleware.logging import LoggingMiddleware
from kbsync.interfaces.api.resources.documents import DocumentResource, DocumentsResource
from kbsync.interfaces.api.resources.health import HealthResource
from kbsync.interfaces.api.resources.knowledge import (
    KnowledgeRebuildResource,
    KnowledgeResource,
)


@pytest.fixture
def app(uow_factory, processor, writer):
    """Falcon ASGI app wired to in-memory fakes."""
    upload = UploadDocumentsUseCase(processor=processor, writer=writer, max_upload_bytes=1024)
    delete = DeleteDocumentUseCase(unit_of_work_factory=uow_factory, processor=processor, writer=writer)
    return create_app(
        documents_resource=DocumentsResource(upload, ListDocumentsUseCase(uow_factory)),
        document_resource=DocumentResource(GetDocumentUseCase(uow_factory), delete),
        knowledge_resource=KnowledgeResource(GetKnowledgeUseCase(uow_factory)),
        knowledge_rebuild_resource=KnowledgeRebuildResource(RebuildKnowledgeBaseUseCase(writer)),
        health_resource=HealthResource(),
        middleware=[LoggingMiddleware(), CORSMiddleware(["http://admin.local"])],
    )


@pytest.fixture
def client(app):
    """Falcon ASGI test client."""
    from falcon.testing import TestClient
    return TestClient(app)
