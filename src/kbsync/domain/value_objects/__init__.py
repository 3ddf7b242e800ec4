"""Domain value objects."""

from kbsync.domain.value_objects.document_state import DocumentState
from kbsync.domain.value_objects.storage_path import StoragePath, sanitize_file_name

__all__ = [
    "DocumentState",
    "StoragePath",
    "sanitize_file_name",
]
