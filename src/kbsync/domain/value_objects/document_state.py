"""Document lifecycle states."""

from enum import StrEnum

from kbsync.domain.exceptions import InvalidStateTransition


class DocumentState(StrEnum):
    """Where a document is in the ingestion pipeline."""

    UPLOADING = "uploading"
    EXTRACTING = "extracting"
    CATALOGED = "cataloged"
    DISCARDED = "discarded"
    DELETING = "deleting"
    REMOVED = "removed"

    def can_become(self, target: "DocumentState") -> bool:
        return target in _TRANSITIONS[self]

    def advance(self, target: "DocumentState") -> "DocumentState":
        """Return target, or raise InvalidStateTransition."""
        if not self.can_become(target):
            raise InvalidStateTransition(f"{self.value} -> {target.value}")
        return target

    @property
    def is_terminal(self) -> bool:
        return not _TRANSITIONS[self]


_TRANSITIONS: dict[DocumentState, frozenset[DocumentState]] = {
    DocumentState.UPLOADING: frozenset({DocumentState.EXTRACTING, DocumentState.DISCARDED}),
    DocumentState.EXTRACTING: frozenset({DocumentState.CATALOGED, DocumentState.DISCARDED}),
    DocumentState.CATALOGED: frozenset({DocumentState.DELETING}),
    DocumentState.DELETING: frozenset({DocumentState.REMOVED}),
    DocumentState.DISCARDED: frozenset(),
    DocumentState.REMOVED: frozenset(),
}
