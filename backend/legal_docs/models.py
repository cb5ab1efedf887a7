# @TASK P0-T0.5 - Document, content and institution schema

import uuid
from datetime import date, datetime

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column

from legal_docs.constants import DocumentStatus
from legal_docs.database import Base


def _new_id() -> str:
    return uuid.uuid4().hex


class Institution(Base):
    """Issuing institution (ministry, authority, board...)."""

    __tablename__ = "institutions"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=_new_id)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    logo: Mapped[str] = mapped_column(String(500), default="")
    description: Mapped[str] = mapped_column(Text, default="")
    website: Mapped[str] = mapped_column(String(500), default="")
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    __table_args__ = (Index("idx_institutions_name", "name"),)


class Document(Base):
    """Metadata of a published legal document.

    The body text lives in ``document_contents`` so metadata scans stay cheap.
    """

    __tablename__ = "documents"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=_new_id)
    title: Mapped[str] = mapped_column(String(1000), default="")
    institution_id: Mapped[str | None] = mapped_column(
        String(64), ForeignKey("institutions.id", ondelete="SET NULL"), nullable=True
    )
    document_type: Mapped[str] = mapped_column(String(255), default="")
    legal_status: Mapped[str] = mapped_column(String(255), default="")  # e.g. "Yürürlükte"
    publication_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    tags: Mapped[str] = mapped_column(Text, default="")  # comma separated
    keywords: Mapped[str] = mapped_column(Text, default="")  # comma separated
    description: Mapped[str] = mapped_column(Text, default="")
    url_slug: Mapped[str] = mapped_column(String(500), default="")
    status: Mapped[str] = mapped_column(String(20), default=DocumentStatus.ACTIVE)
    page_count: Mapped[int | None] = mapped_column(Integer, nullable=True)
    file_size_mb: Mapped[float | None] = mapped_column(Float, nullable=True)
    pdf_url: Mapped[str] = mapped_column(String(1000), default="")
    uploaded_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        Index("idx_documents_status_institution", "status", "institution_id"),
        Index("idx_documents_publication_date", "publication_date"),
        Index("idx_documents_url_slug", "url_slug"),
    )


class DocumentContent(Base):
    """Extracted full text of a document."""

    __tablename__ = "document_contents"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=_new_id)
    document_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("documents.id", ondelete="CASCADE"), index=True
    )
    body: Mapped[str] = mapped_column(Text, default="")
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
