"""Parser for plain text, markdown, CSV, TSV."""

import csv
import io

from kbsync.infrastructure.document_parsers.base import ParsedText


def decode_text(data: bytes) -> str:
    """UTF-8 (BOM tolerated), then cp1251, then UTF-8 with replacement."""
    for encoding in ("utf-8-sig", "cp1251"):
        try:
            return data.decode(encoding)
        except UnicodeDecodeError:
            continue
    return data.decode("utf-8", errors="replace")


def parse_text(data: bytes) -> ParsedText:
    """Plain text and markdown are stored as-is."""
    return ParsedText(text=decode_text(data))


def _parse_delimited(data: bytes, delimiter: str) -> ParsedText:
    reader = csv.reader(io.StringIO(decode_text(data)), delimiter=delimiter)
    lines = [" ".join(cell.strip() for cell in row if cell.strip()) for row in reader]
    return ParsedText(text="\n".join(line for line in lines if line))


def parse_csv(data: bytes) -> ParsedText:
    return _parse_delimited(data, ",")


def parse_tsv(data: bytes) -> ParsedText:
    return _parse_delimited(data, "\t")
