"""Unit tests for PostgresAggregateRepository against a scripted connection."""

from datetime import UTC, datetime

import pytest

from kbsync.infrastructure.persistence.postgres.aggregate_repository import (
    AGGREGATE_ROW_ID,
    PostgresAggregateRepository,
)


class ScriptedCursor:
    def __init__(self, row: tuple | None) -> None:
        self._row = row

    async def fetchone(self) -> tuple | None:
        return self._row


class ScriptedConnection:
    """Records executed statements and answers each with the next scripted row."""

    def __init__(self, *rows: tuple | None) -> None:
        self._rows = list(rows)
        self.executed: list[tuple[str, object]] = []

    async def execute(self, query: str, params: object = None) -> ScriptedCursor:
        self.executed.append((query, params))
        return ScriptedCursor(self._rows.pop(0))


UPDATED_AT = datetime(2026, 1, 5, 12, 0, tzinfo=UTC)


class TestCompareAndSet:
    """Tests for the conditional aggregate upsert."""

    @pytest.mark.asyncio
    async def test_update_guarded_by_expected_version(self) -> None:
        conn = ScriptedConnection((4,))
        written = await PostgresAggregateRepository(conn).compare_and_set(3, "KB", UPDATED_AT)

        query, params = conn.executed[0]
        assert "ON CONFLICT (id) DO UPDATE" in query
        assert "version = knowledge_aggregate.version + 1" in query
        assert "WHERE knowledge_aggregate.version = %(expected)s" in query
        assert "RETURNING version" in query
        assert params == {
            "id": AGGREGATE_ROW_ID,
            "content": "KB",
            "updated_at": UPDATED_AT,
            "expected": 3,
        }
        assert (written.content, written.version, written.last_updated_at) == ("KB", 4, UPDATED_AT)

    @pytest.mark.asyncio
    async def test_stale_version_returns_none(self) -> None:
        # ON CONFLICT ... WHERE false: no row updated, nothing returned
        conn = ScriptedConnection(None)
        assert await PostgresAggregateRepository(conn).compare_and_set(3, "KB", UPDATED_AT) is None

    @pytest.mark.asyncio
    async def test_first_write_inserts_version_one(self) -> None:
        conn = ScriptedConnection((1,))
        written = await PostgresAggregateRepository(conn).compare_and_set(0, "KB", UPDATED_AT)
        assert "VALUES (%(id)s, %(content)s, 1, %(updated_at)s)" in conn.executed[0][0]
        assert written.version == 1


class TestGet:
    """Tests for reading the aggregate row."""

    @pytest.mark.asyncio
    async def test_missing_row_is_empty_aggregate(self) -> None:
        aggregate = await PostgresAggregateRepository(ScriptedConnection(None)).get()
        assert (aggregate.content, aggregate.version, aggregate.last_updated_at) == ("", 0, None)

    @pytest.mark.asyncio
    async def test_reads_row(self) -> None:
        conn = ScriptedConnection(("KB", 7, UPDATED_AT))
        aggregate = await PostgresAggregateRepository(conn).get()
        assert (aggregate.content, aggregate.version) == ("KB", 7)
        assert conn.executed[0][1] == (AGGREGATE_ROW_ID,)
