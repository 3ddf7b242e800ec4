"""Knowledge aggregate entity."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class KnowledgeAggregate:
    """Singleton consolidated text of every cataloged document.

    version is 0 until the first write and grows by one per committed write.
    """

    content: str
    version: int
    last_updated_at: datetime | None = None

    @classmethod
    def empty(cls) -> "KnowledgeAggregate":
        return cls(content="", version=0, last_updated_at=None)
