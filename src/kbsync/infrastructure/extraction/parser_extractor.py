"""Text extractor backed by the local document parser registry."""

import asyncio
from concurrent.futures import ThreadPoolExecutor

from kbsync.domain.exceptions import ExtractionFailure
from kbsync.infrastructure.document_parsers import find_parser, parse_file


class ParserTextExtractor:
    """Extract text in worker threads so parsing never blocks the event loop.

    Parsing runs on its own bounded pool rather than the loop's default
    executor, which blob I/O shares. A parse that overruns its deadline keeps
    its worker until it returns, so the pool size caps parser threads.
    """

    def __init__(self, max_workers: int = 8) -> None:
        self._executor = ThreadPoolExecutor(
            max_workers=max(1, max_workers),
            thread_name_prefix="kbsync-parse",
        )

    def supports(self, file_name: str, content_type: str | None = None) -> bool:
        return find_parser(file_name, content_type) is not None

    async def extract_text(
        self,
        data: bytes,
        file_name: str,
        content_type: str | None = None,
    ) -> str:
        loop = asyncio.get_running_loop()
        try:
            parsed = await loop.run_in_executor(
                self._executor, parse_file, data, file_name, content_type
            )
        except ValueError as e:
            raise ExtractionFailure(file_name, str(e)) from e
        except Exception as e:
            # Parser libraries raise a wide range of errors on malformed input.
            raise ExtractionFailure(file_name, f"{type(e).__name__}: {e}") from e
        text = parsed.text.strip()
        if not text:
            raise ExtractionFailure(file_name, "no extractable text")
        return text

    def close(self) -> None:
        """Stop accepting work; queued parses are dropped."""
        self._executor.shutdown(wait=False, cancel_futures=True)
