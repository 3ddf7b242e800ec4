"""Repository ports."""

from kbsync.application.ports.repositories.aggregate_repository import (
    AggregateRepository,
)
from kbsync.application.ports.repositories.document_repository import (
    DocumentRepository,
)

__all__ = [
    "AggregateRepository",
    "DocumentRepository",
]
