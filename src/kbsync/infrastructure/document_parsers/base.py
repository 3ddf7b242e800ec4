"""Base protocol for document parsers."""

from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class ParsedText:
    """Plain text extracted from a file, plus its page/slide/sheet count when known."""

    text: str
    page_count: int | None = None


class DocumentParser(Protocol):
    """Parser that extracts plain text from file bytes."""

    def __call__(self, data: bytes) -> ParsedText:
        """Extract text. Raises ValueError on a corrupted or unreadable file."""
        ...


def join_blocks(blocks: list[str], separator: str = "\n\n") -> str:
    """Join non-blank text blocks."""
    return separator.join(b.strip() for b in blocks if b and b.strip())
