"""In-process cache of extracted text keyed by storage path.

Storage paths embed a fresh uuid per upload and blobs are never rewritten,
so a cached entry cannot go stale; it only goes away on eviction or delete.
"""

from collections import OrderedDict


class ExtractedTextCache:
    """LRU cache for extracted document text."""

    def __init__(self, max_size: int = 256) -> None:
        self.max_size = max_size
        self._entries: OrderedDict[str, str] = OrderedDict()

    def get(self, storage_path: str) -> str | None:
        text = self._entries.get(storage_path)
        if text is not None:
            self._entries.move_to_end(storage_path)
        return text

    def put(self, storage_path: str, text: str) -> None:
        if self.max_size <= 0:
            return
        self._entries[storage_path] = text
        self._entries.move_to_end(storage_path)
        while len(self._entries) > self.max_size:
            self._entries.popitem(last=False)

    def discard(self, storage_path: str) -> None:
        self._entries.pop(storage_path, None)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, storage_path: object) -> bool:
        return storage_path in self._entries
