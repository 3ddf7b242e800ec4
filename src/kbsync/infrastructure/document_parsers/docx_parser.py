"""Parser for .docx (Office Open XML Word)."""

import io
from zipfile import BadZipFile

from docx import Document as DocxDocument
from docx.opc.exceptions import PackageNotFoundError

from kbsync.infrastructure.document_parsers.base import ParsedText, join_blocks


def parse_docx(data: bytes) -> ParsedText:
    """Paragraphs first, then table rows (cells separated by tabs)."""
    try:
        doc = DocxDocument(io.BytesIO(data))
    except (PackageNotFoundError, BadZipFile, KeyError) as e:
        raise ValueError("Invalid or corrupted docx file") from e
    blocks = [p.text for p in doc.paragraphs]
    rows = [
        "\t".join(cell.text.strip() for cell in row.cells if cell.text.strip())
        for table in doc.tables
        for row in table.rows
    ]
    text = join_blocks(blocks)
    table_text = join_blocks(rows, separator="\n")
    if table_text:
        text = f"{text}\n\n{table_text}" if text else table_text
    return ParsedText(text=text)
