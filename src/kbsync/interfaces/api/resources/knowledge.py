"""Knowledge aggregate API resources."""

import falcon.asgi

from kbsync.application.use_cases.knowledge.get_knowledge import GetKnowledgeUseCase
from kbsync.application.use_cases.knowledge.rebuild_knowledge import (
    RebuildKnowledgeBaseUseCase,
)


class KnowledgeResource:
    """GET /v1/knowledge - aggregate for the question-answering service."""

    def __init__(self, get_knowledge: GetKnowledgeUseCase) -> None:
        self._get_knowledge = get_knowledge

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        aggregate = await self._get_knowledge.execute()
        resp.media = {
            "content": aggregate.content,
            "last_updated_at": (
                aggregate.last_updated_at.isoformat() if aggregate.last_updated_at else None
            ),
            "version": aggregate.version,
        }
        resp.status = falcon.HTTP_200


class KnowledgeRebuildResource:
    """POST /v1/knowledge/rebuild - recompute the aggregate from the catalog."""

    def __init__(self, rebuild: RebuildKnowledgeBaseUseCase) -> None:
        self._rebuild = rebuild

    async def on_post(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        result = await self._rebuild.execute()
        resp.media = {
            "success": result.success,
            "message": result.message,
            "document_count": result.document_count,
            "skipped_count": result.skipped_count,
        }
        resp.status = falcon.HTTP_200 if result.success else falcon.HTTP_403
