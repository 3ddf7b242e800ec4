"""Aggregator: renders the knowledge text from cataloged documents."""

from collections.abc import Iterable
from dataclasses import dataclass

from kbsync.domain.entities import Document

SECTION_HEADER = "\n\n--- Content from {file_name} ---\n\n"


@dataclass(frozen=True)
class ExtractedDocument:
    """A cataloged (or about to be cataloged) document with its extracted text."""

    document: Document
    text: str


def catalog_sort_key(document: Document) -> tuple[float, str]:
    """Newest upload first; id breaks ties."""
    return (-document.uploaded_at.timestamp(), str(document.id))


def catalog_order(documents: Iterable[Document]) -> list[Document]:
    return sorted(documents, key=catalog_sort_key)


def compose_aggregate(sections: Iterable[ExtractedDocument]) -> str:
    """Concatenate document texts in catalog order.

    The result depends only on the set of sections passed in, so equal
    catalogs always produce byte-identical aggregates.
    """
    ordered = sorted(sections, key=lambda s: catalog_sort_key(s.document))
    return "".join(
        SECTION_HEADER.format(file_name=s.document.file_name) + s.text for s in ordered
    )
