"""PostgreSQL document catalog repository."""

from uuid import UUID

from psycopg import AsyncConnection

from kbsync.domain.entities import Document

_COLUMNS = "id, file_name, storage_path, uploaded_at, size_bytes, content_type"


def _row_to_document(r: tuple) -> Document:
    return Document(
        id=r[0],
        file_name=r[1],
        storage_path=r[2],
        uploaded_at=r[3],
        size_bytes=r[4],
        content_type=r[5],
    )


class PostgresDocumentRepository:
    """Catalog rows in knowledge_document."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def get_by_id(self, document_id: UUID) -> Document | None:
        """Get document by id."""
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM knowledge_document WHERE id = %s",
            (document_id,),
        )
        r = await cur.fetchone()
        return _row_to_document(r) if r else None

    async def create_batch(self, documents: list[Document]) -> None:
        """Insert documents in one round trip."""
        if not documents:
            return
        async with self._conn.cursor() as cur:
            await cur.executemany(
                f"INSERT INTO knowledge_document ({_COLUMNS}) VALUES (%s, %s, %s, %s, %s, %s)",
                [
                    (d.id, d.file_name, d.storage_path, d.uploaded_at, d.size_bytes, d.content_type)
                    for d in documents
                ],
            )

    async def delete(self, document_id: UUID) -> bool:
        """Delete document row. Returns False when nothing was deleted."""
        cur = await self._conn.execute(
            "DELETE FROM knowledge_document WHERE id = %s",
            (document_id,),
        )
        return cur.rowcount > 0

    async def list(self) -> list[Document]:
        """All documents in catalog order."""
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM knowledge_document ORDER BY uploaded_at DESC, id ASC"
        )
        rows = await cur.fetchall()
        return [_row_to_document(r) for r in rows]
