"""Parser for .xlsx (Excel)."""

import io
from zipfile import BadZipFile

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from kbsync.infrastructure.document_parsers.base import ParsedText, join_blocks


def parse_xlsx(data: bytes) -> ParsedText:
    """One block per sheet; one line per non-empty row."""
    try:
        wb = load_workbook(io.BytesIO(data), read_only=True, data_only=True)
    except (InvalidFileException, BadZipFile, KeyError) as e:
        raise ValueError(f"Invalid or corrupted xlsx file: {e}") from e
    try:
        sheets: list[str] = []
        for sheet in wb.worksheets:
            lines = []
            for row in sheet.iter_rows(values_only=True):
                cells = [str(c).strip() for c in row if c is not None and str(c).strip()]
                if cells:
                    lines.append("\t".join(cells))
            if lines:
                sheets.append(f"# {sheet.title}\n" + "\n".join(lines))
        return ParsedText(text=join_blocks(sheets), page_count=len(wb.worksheets))
    finally:
        wb.close()
