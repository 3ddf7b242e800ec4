"""Text extraction port."""

from typing import Protocol


class TextExtractor(Protocol):
    """Converts raw document bytes into plain text. Raises ExtractionFailure."""

    async def extract_text(
        self,
        data: bytes,
        file_name: str,
        content_type: str | None = None,
    ) -> str: ...

    def supports(self, file_name: str, content_type: str | None = None) -> bool: ...
