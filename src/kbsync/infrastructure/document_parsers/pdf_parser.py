"""Parser for PDF."""

import io

from pypdf import PdfReader
from pypdf.errors import PdfReadError

from kbsync.infrastructure.document_parsers.base import ParsedText, join_blocks


def parse_pdf(data: bytes) -> ParsedText:
    """Extract text from every page."""
    try:
        reader = PdfReader(io.BytesIO(data))
        pages = [page.extract_text() or "" for page in reader.pages]
    except (PdfReadError, ValueError, KeyError, TypeError) as e:
        raise ValueError(f"Invalid or corrupted PDF: {e}") from e
    return ParsedText(text=join_blocks(pages), page_count=len(pages))
