"""Blob storage key for an uploaded document."""

import re
from dataclasses import dataclass
from uuid import UUID, uuid4

_UNSAFE_CHARS = re.compile(r"[^\w.\-]+")


def sanitize_file_name(file_name: str) -> str:
    """Reduce a client file name to a single safe path segment."""
    name = file_name.replace("\\", "/").rsplit("/", 1)[-1].strip()
    name = _UNSAFE_CHARS.sub("_", name).strip("._")
    return name or "document"


@dataclass(frozen=True)
class StoragePath:
    """Unique blob path: <prefix>/<uuid>_<file name>."""

    value: str

    def __post_init__(self) -> None:
        if not self.value or self.value.startswith("/") or ".." in self.value.split("/"):
            raise ValueError(f"Invalid storage path: {self.value!r}")

    @classmethod
    def generate(cls, prefix: str, file_name: str, key: UUID | None = None) -> "StoragePath":
        key = key or uuid4()
        prefix = prefix.strip("/")
        segment = f"{key}_{sanitize_file_name(file_name)}"
        return cls(f"{prefix}/{segment}" if prefix else segment)

    def __str__(self) -> str:
        return self.value
