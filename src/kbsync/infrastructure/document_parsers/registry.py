"""Registry: select parser by extension or MIME type."""

from pathlib import Path

from kbsync.infrastructure.document_parsers.base import DocumentParser, ParsedText
from kbsync.infrastructure.document_parsers.docx_parser import parse_docx
from kbsync.infrastructure.document_parsers.pdf_parser import parse_pdf
from kbsync.infrastructure.document_parsers.pptx_parser import parse_pptx
from kbsync.infrastructure.document_parsers.text_parser import (
    parse_csv,
    parse_text,
    parse_tsv,
)
from kbsync.infrastructure.document_parsers.xlsx_parser import parse_xlsx

# extension (lower) -> parse function
_PARSERS_BY_EXT: dict[str, DocumentParser] = {
    "txt": parse_text,
    "md": parse_text,
    "csv": parse_csv,
    "tsv": parse_tsv,
    "pdf": parse_pdf,
    "docx": parse_docx,
    "xlsx": parse_xlsx,
    "pptx": parse_pptx,
}

_MIME_TO_EXT: dict[str, str] = {
    "text/plain": "txt",
    "text/markdown": "md",
    "text/csv": "csv",
    "text/tab-separated-values": "tsv",
    "application/pdf": "pdf",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": "docx",
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet": "xlsx",
    "application/vnd.openxmlformats-officedocument.presentationml.presentation": "pptx",
}


def extension_of(filename: str | None) -> str:
    if not filename:
        return ""
    return Path(filename).suffix.lstrip(".").lower()


def get_parser_for_filename(filename: str | None) -> DocumentParser | None:
    """Parser for the file's extension, or None."""
    return _PARSERS_BY_EXT.get(extension_of(filename))


def get_parser_for_content_type(content_type: str | None) -> DocumentParser | None:
    """Parser for a MIME type (parameters ignored), or None."""
    if not content_type:
        return None
    mime = content_type.split(";")[0].strip().lower()
    ext = _MIME_TO_EXT.get(mime)
    return _PARSERS_BY_EXT.get(ext) if ext else None


def find_parser(filename: str | None, content_type: str | None = None) -> DocumentParser | None:
    """The extension wins over the declared content type."""
    return get_parser_for_filename(filename) or get_parser_for_content_type(content_type)


def parse_file(
    data: bytes,
    filename: str | None = None,
    content_type: str | None = None,
) -> ParsedText:
    """
    Select parser by filename (extension) or content_type and run it.
    Raises ValueError if no parser found or parse failed.
    """
    parser = find_parser(filename, content_type)
    if not parser:
        kind = Path(filename).suffix if filename and Path(filename).suffix else content_type or "unknown"
        raise ValueError(f"No parser for file type: {kind}")
    return parser(data)


def supported_extensions() -> list[str]:
    """Supported file extensions (e.g. for a frontend accept attribute)."""
    return sorted(_PARSERS_BY_EXT.keys())
