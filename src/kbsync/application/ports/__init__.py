"""Application ports - interfaces for external adapters."""

from kbsync.application.ports.blob_store import BlobStore
from kbsync.application.ports.text_extractor import TextExtractor
from kbsync.application.ports.unit_of_work import UnitOfWork, UnitOfWorkFactory

__all__ = [
    "BlobStore",
    "TextExtractor",
    "UnitOfWork",
    "UnitOfWorkFactory",
]
