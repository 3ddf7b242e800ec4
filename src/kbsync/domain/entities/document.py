"""Document entity."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True)
class Document:
    """Cataloged source document. Its text lives only in the stored blob."""

    id: UUID
    file_name: str
    storage_path: str
    uploaded_at: datetime
    size_bytes: int
    content_type: str
