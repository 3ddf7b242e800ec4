"""PostgreSQL knowledge aggregate repository."""

from datetime import datetime

from psycopg import AsyncConnection

from kbsync.domain.entities import KnowledgeAggregate

AGGREGATE_ROW_ID = 1


class PostgresAggregateRepository:
    """The single knowledge_aggregate row (id = 1)."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def get(self) -> KnowledgeAggregate:
        cur = await self._conn.execute(
            "SELECT content, version, last_updated_at FROM knowledge_aggregate WHERE id = %s",
            (AGGREGATE_ROW_ID,),
        )
        r = await cur.fetchone()
        if not r:
            return KnowledgeAggregate.empty()
        return KnowledgeAggregate(content=r[0], version=r[1], last_updated_at=r[2])

    async def compare_and_set(
        self,
        expected_version: int,
        content: str,
        updated_at: datetime,
    ) -> KnowledgeAggregate | None:
        """Conditional upsert keyed on the stored version."""
        cur = await self._conn.execute(
            "INSERT INTO knowledge_aggregate (id, content, version, last_updated_at) "
            "VALUES (%(id)s, %(content)s, 1, %(updated_at)s) "
            "ON CONFLICT (id) DO UPDATE SET "
            "content = EXCLUDED.content, "
            "version = knowledge_aggregate.version + 1, "
            "last_updated_at = EXCLUDED.last_updated_at "
            "WHERE knowledge_aggregate.version = %(expected)s "
            "RETURNING version",
            {
                "id": AGGREGATE_ROW_ID,
                "content": content,
                "updated_at": updated_at,
                "expected": expected_version,
            },
        )
        r = await cur.fetchone()
        if not r:
            return None
        return KnowledgeAggregate(content=content, version=r[0], last_updated_at=updated_at)
