"""Falcon ASGI application."""

import falcon
import falcon.asgi
import structlog
from falcon.asgi import App

from kbsync.interfaces.api.resources.documents import DocumentResource, DocumentsResource
from kbsync.interfaces.api.resources.health import HealthResource
from kbsync.interfaces.api.resources.knowledge import (
    KnowledgeRebuildResource,
    KnowledgeResource,
)

logger = structlog.get_logger(__name__)


async def _log_exception(req, resp, ex, params) -> None:
    logger.exception("request_failed", method=req.method, path=req.path, error=str(ex))
    resp.status = falcon.HTTP_500
    resp.media = {"title": "500 Internal Server Error"}


def create_app(
    documents_resource: DocumentsResource,
    document_resource: DocumentResource,
    knowledge_resource: KnowledgeResource,
    knowledge_rebuild_resource: KnowledgeRebuildResource,
    health_resource: HealthResource,
    middleware: list | None = None,
) -> App:
    """Create Falcon ASGI app with routes."""
    app = falcon.asgi.App(middleware=middleware or [])
    app.add_error_handler(Exception, _log_exception)
    app.add_route("/v1/health", health_resource)
    app.add_route("/v1/health/ready", health_resource, suffix="ready")
    app.add_route("/v1/documents", documents_resource)
    app.add_route("/v1/documents/{document_id}", document_resource)
    app.add_route("/v1/knowledge", knowledge_resource)
    app.add_route("/v1/knowledge/rebuild", knowledge_rebuild_resource)
    return app
