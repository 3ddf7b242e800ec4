"""Document parsers: extract plain text from files."""

from kbsync.infrastructure.document_parsers.base import ParsedText
from kbsync.infrastructure.document_parsers.registry import (
    find_parser,
    parse_file,
    supported_extensions,
)

__all__ = ["ParsedText", "find_parser", "parse_file", "supported_extensions"]
