"""Unit tests for domain value objects."""

from uuid import UUID

import pytest

from kbsync.domain.exceptions import InvalidStateTransition
from kbsync.domain.value_objects import DocumentState, StoragePath, sanitize_file_name


class TestDocumentState:
    """Tests for the document lifecycle."""

    def test_success_path(self) -> None:
        state = DocumentState.UPLOADING
        state = state.advance(DocumentState.EXTRACTING)
        state = state.advance(DocumentState.CATALOGED)
        assert state == DocumentState.CATALOGED

    def test_failure_path_from_either_stage(self) -> None:
        assert DocumentState.UPLOADING.advance(DocumentState.DISCARDED) == DocumentState.DISCARDED
        assert DocumentState.EXTRACTING.advance(DocumentState.DISCARDED) == DocumentState.DISCARDED

    def test_delete_path(self) -> None:
        state = DocumentState.CATALOGED.advance(DocumentState.DELETING)
        assert state.advance(DocumentState.REMOVED) == DocumentState.REMOVED

    @pytest.mark.parametrize(
        ("source", "target"),
        [
            (DocumentState.UPLOADING, DocumentState.CATALOGED),
            (DocumentState.DISCARDED, DocumentState.EXTRACTING),
            (DocumentState.CATALOGED, DocumentState.REMOVED),
            (DocumentState.REMOVED, DocumentState.CATALOGED),
        ],
    )
    def test_invalid_transition_raises(self, source: DocumentState, target: DocumentState) -> None:
        with pytest.raises(InvalidStateTransition, match=f"{source.value} -> {target.value}"):
            source.advance(target)

    def test_terminal_states(self) -> None:
        terminal = {s for s in DocumentState if s.is_terminal}
        assert terminal == {DocumentState.DISCARDED, DocumentState.REMOVED}


class TestSanitizeFileName:
    """Tests for sanitize_file_name."""

    def test_keeps_safe_name(self) -> None:
        assert sanitize_file_name("report-2024.pdf") == "report-2024.pdf"

    def test_strips_directories(self) -> None:
        assert sanitize_file_name("../../etc/passwd") == "passwd"
        assert sanitize_file_name("C:\\Users\\me\\notes.txt") == "notes.txt"

    def test_replaces_unsafe_characters(self) -> None:
        assert sanitize_file_name("my report (1).pdf") == "my_report_1_.pdf"

    def test_keeps_unicode_letters(self) -> None:
        assert sanitize_file_name("отчёт.docx") == "отчёт.docx"

    def test_empty_falls_back(self) -> None:
        assert sanitize_file_name("...") == "document"
        assert sanitize_file_name("") == "document"


class TestStoragePath:
    """Tests for StoragePath."""

    def test_generate_with_key(self) -> None:
        key = UUID("12345678-1234-5678-1234-567812345678")
        path = StoragePath.generate("knowledge_base", "a b.pdf", key=key)
        assert str(path) == f"knowledge_base/{key}_a_b.pdf"

    def test_generate_is_unique_per_call(self) -> None:
        a = StoragePath.generate("kb", "same.txt")
        b = StoragePath.generate("kb", "same.txt")
        assert a != b

    def test_generate_without_prefix(self) -> None:
        key = UUID("12345678-1234-5678-1234-567812345678")
        assert str(StoragePath.generate("/", "x.txt", key=key)) == f"{key}_x.txt"

    @pytest.mark.parametrize("value", ["", "/abs/path", "kb/../secret"])
    def test_invalid_paths_rejected(self, value: str) -> None:
        with pytest.raises(ValueError):
            StoragePath(value)
