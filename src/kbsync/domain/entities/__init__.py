"""Domain entities."""

from kbsync.domain.entities.document import Document
from kbsync.domain.entities.knowledge_aggregate import KnowledgeAggregate

__all__ = [
    "Document",
    "KnowledgeAggregate",
]
