# @TASK P0-T0.6 - Initial schema for institutions, documents and document bodies

"""Create institutions, documents and document_contents tables.

Revision ID: 001_initial_schema
Revises: None
Create Date: 2026-10-19 09:00:00.000000

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "001_initial_schema"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Apply schema migrations."""
    # Create institutions table
    op.create_table(
        "institutions",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("logo", sa.String(500), nullable=False, server_default=""),
        sa.Column("description", sa.Text, nullable=False, server_default=""),
        sa.Column("website", sa.String(500), nullable=False, server_default=""),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_institutions_name", "institutions", ["name"], unique=False)

    # Create documents table (metadata only)
    op.create_table(
        "documents",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("title", sa.String(1000), nullable=False, server_default=""),
        sa.Column("institution_id", sa.String(64), nullable=True),
        sa.Column("document_type", sa.String(255), nullable=False, server_default=""),
        sa.Column("legal_status", sa.String(255), nullable=False, server_default=""),
        sa.Column("publication_date", sa.Date, nullable=True),
        sa.Column("tags", sa.Text, nullable=False, server_default=""),
        sa.Column("keywords", sa.Text, nullable=False, server_default=""),
        sa.Column("description", sa.Text, nullable=False, server_default=""),
        sa.Column("url_slug", sa.String(500), nullable=False, server_default=""),
        sa.Column("status", sa.String(20), nullable=False, server_default="active"),
        sa.Column("page_count", sa.Integer, nullable=True),
        sa.Column("file_size_mb", sa.Float, nullable=True),
        sa.Column("pdf_url", sa.String(1000), nullable=False, server_default=""),
        sa.Column("uploaded_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.ForeignKeyConstraint(["institution_id"], ["institutions.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "idx_documents_status_institution", "documents", ["status", "institution_id"], unique=False
    )
    op.create_index("idx_documents_publication_date", "documents", ["publication_date"], unique=False)
    op.create_index("idx_documents_url_slug", "documents", ["url_slug"], unique=False)

    # Create document_contents table (body text)
    op.create_table(
        "document_contents",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("document_id", sa.String(64), nullable=False),
        sa.Column("body", sa.Text, nullable=False, server_default=""),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.ForeignKeyConstraint(["document_id"], ["documents.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_document_contents_document_id", "document_contents", ["document_id"], unique=False
    )


def downgrade() -> None:
    """Revert schema migrations."""
    op.drop_index("ix_document_contents_document_id", table_name="document_contents")
    op.drop_table("document_contents")

    op.drop_index("idx_documents_url_slug", table_name="documents")
    op.drop_index("idx_documents_publication_date", table_name="documents")
    op.drop_index("idx_documents_status_institution", table_name="documents")
    op.drop_table("documents")

    op.drop_index("idx_institutions_name", table_name="institutions")
    op.drop_table("institutions")
