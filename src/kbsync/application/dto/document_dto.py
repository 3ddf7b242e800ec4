"""Document and pipeline DTOs."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from uuid import UUID

from kbsync.domain.entities import Document, KnowledgeAggregate
from kbsync.domain.exceptions import ValidationError


@dataclass
class UploadFile:
    """One file submitted for upload."""

    data: bytes
    file_name: str
    content_type: str | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.data, (bytes, bytearray)):
            raise ValidationError("File data must be bytes")
        self.data = bytes(self.data)
        self.file_name = (self.file_name or "").strip()
        if not self.file_name:
            raise ValidationError("File name is required")


class FileOutcome(StrEnum):
    """Final status of one file in an upload batch."""

    CATALOGED = "cataloged"
    DISCARDED = "discarded"
    REJECTED = "rejected"


@dataclass
class FileStatus:
    """Per-file result of an upload batch."""

    file_name: str
    status: FileOutcome
    document_id: UUID | None = None
    error: str | None = None


@dataclass
class UploadResult:
    """Result of an upload batch. Partial failure shows up as counts."""

    success_count: int
    total: int
    files: list[FileStatus] = field(default_factory=list)
    message: str = ""
    aborted: bool = False

    @property
    def success(self) -> bool:
        return not self.aborted and self.success_count > 0

    @property
    def failure_count(self) -> int:
        return self.total - self.success_count


@dataclass
class OperationResult:
    """Generic {success, message} result."""

    success: bool
    message: str


@dataclass
class RebuildResult(OperationResult):
    """Result of a knowledge base rebuild."""

    document_count: int = 0
    skipped_count: int = 0


@dataclass
class DocumentOutput:
    """Output DTO for a cataloged document."""

    id: UUID
    file_name: str
    storage_path: str
    uploaded_at: datetime
    size_bytes: int
    content_type: str

    @classmethod
    def from_entity(cls, document: Document) -> "DocumentOutput":
        return cls(
            id=document.id,
            file_name=document.file_name,
            storage_path=document.storage_path,
            uploaded_at=document.uploaded_at,
            size_bytes=document.size_bytes,
            content_type=document.content_type,
        )


@dataclass
class AggregateOutput:
    """Read-only view of the knowledge aggregate for the QA collaborator."""

    content: str
    last_updated_at: datetime | None
    version: int

    @classmethod
    def from_entity(cls, aggregate: KnowledgeAggregate) -> "AggregateOutput":
        return cls(
            content=aggregate.content,
            last_updated_at=aggregate.last_updated_at,
            version=aggregate.version,
        )
