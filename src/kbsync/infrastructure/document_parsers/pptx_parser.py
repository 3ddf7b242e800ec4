"""Parser for .pptx (PowerPoint)."""

import io
from zipfile import BadZipFile

from pptx import Presentation
from pptx.exc import PackageNotFoundError

from kbsync.infrastructure.document_parsers.base import ParsedText, join_blocks


def parse_pptx(data: bytes) -> ParsedText:
    """Text frames of every slide, one block per slide."""
    try:
        prs = Presentation(io.BytesIO(data))
    except (PackageNotFoundError, BadZipFile, KeyError) as e:
        raise ValueError(f"Invalid or corrupted pptx file: {e}") from e
    slides: list[str] = []
    for slide in prs.slides:
        texts = [shape.text for shape in slide.shapes if getattr(shape, "has_text_frame", False)]
        slides.append(join_blocks(texts, separator="\n"))
    return ParsedText(text=join_blocks(slides), page_count=len(prs.slides))
