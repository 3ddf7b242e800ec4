"""Initial schema - document catalog and knowledge aggregate.

Revision ID: 001
Revises:
Create Date: 2026-10-19

"""

from collections.abc import Sequence

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "knowledge_document",
        sa.Column("id", sa.UUID(), primary_key=True),
        sa.Column("file_name", sa.String(512), nullable=False),
        sa.Column("storage_path", sa.String(1024), nullable=False),
        sa.Column("uploaded_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("size_bytes", sa.BigInteger(), nullable=False),
        sa.Column("content_type", sa.String(255), nullable=False),
    )
    op.create_index(
        "ix_knowledge_document_storage_path",
        "knowledge_document",
        ["storage_path"],
        unique=True,
    )
    op.create_index(
        "ix_knowledge_document_uploaded_at",
        "knowledge_document",
        [sa.text("uploaded_at DESC"), "id"],
    )

    # Single-row table; version drives compare-and-swap writes
    op.create_table(
        "knowledge_aggregate",
        sa.Column("id", sa.SmallInteger(), primary_key=True),
        sa.Column("content", sa.Text(), nullable=False, server_default=""),
        sa.Column("version", sa.BigInteger(), nullable=False, server_default="0"),
        sa.Column("last_updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint("id = 1", name="ck_knowledge_aggregate_single_row"),
    )
    op.execute("""
        INSERT INTO knowledge_aggregate (id, content, version, last_updated_at)
        VALUES (1, '', 0, NULL)
    """)


def downgrade() -> None:
    op.drop_table("knowledge_aggregate")
    op.drop_index("ix_knowledge_document_uploaded_at", table_name="knowledge_document")
    op.drop_index("ix_knowledge_document_storage_path", table_name="knowledge_document")
    op.drop_table("knowledge_document")
