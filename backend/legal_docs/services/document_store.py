# @TASK P3-T3.1 - Document store (metadata, content, institutions)
# @TEST tests/test_document_store.py

"""Read-only data access for the search and autocomplete engines.

Every query opens its own short-lived session from the session factory, so
independent scans can run concurrently on separate connections. Rows are
decoded into pydantic records; a row that fails validation is skipped and the
scan continues. Connection and statement failures are raised as
:class:`DocumentStoreError` and abort the calling request.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date
from typing import Any, NamedTuple, TypeVar

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator
from sqlalchemy import Select, func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from legal_docs.constants import DocumentStatus
from legal_docs.models import Document, DocumentContent, Institution

logger = logging.getLogger(__name__)

_LIKE_ESCAPE = "\\"

# Metadata columns that may be scanned for a substring
_SEARCHABLE_COLUMNS = {
    "title": Document.title,
    "description": Document.description,
    "keywords": Document.keywords,
    "tags": Document.tags,
}


class DocumentStoreError(Exception):
    """Raised when the database cannot be reached or a query fails."""


@dataclass(frozen=True)
class InstitutionFilter:
    """Resolved institution restriction for a scan.

    ``institution_id`` of None means "any institution". An unsatisfiable
    filter comes from a name that matched no known institution; scans with
    it return nothing without touching the database.
    """

    institution_id: str | None = None
    unsatisfiable: bool = False

    @classmethod
    def unrestricted(cls) -> InstitutionFilter:
        return cls()

    @classmethod
    def nothing(cls) -> InstitutionFilter:
        return cls(unsatisfiable=True)


class _Record(BaseModel):
    model_config = ConfigDict(from_attributes=True, frozen=True)


class DocumentRecord(_Record):
    """Decoded metadata row of an active document."""

    id: str
    title: str = ""
    institution_id: str | None = None
    document_type: str = ""
    legal_status: str = ""
    publication_date: date | None = None
    tags: str = ""
    keywords: str = ""
    description: str = ""
    url_slug: str = ""
    status: str = DocumentStatus.ACTIVE
    page_count: int | None = None
    file_size_mb: float | None = None
    pdf_url: str = ""

    @field_validator(
        "title",
        "document_type",
        "legal_status",
        "tags",
        "keywords",
        "description",
        "url_slug",
        "pdf_url",
        mode="before",
    )
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value


class ContentRecord(_Record):
    """Decoded body text row."""

    id: str
    document_id: str
    body: str = ""

    @field_validator("body", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value


class InstitutionInfo(_Record):
    """Decoded institution row, as held by the institution cache."""

    id: str
    name: str
    logo: str = ""
    description: str = ""
    website: str = ""
    is_active: bool = True

    @field_validator("logo", "description", "website", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value


class ContentHit(NamedTuple):
    """A body match together with the metadata of its document."""

    document: DocumentRecord
    content: ContentRecord


_R = TypeVar("_R", bound=_Record)


def like_pattern(query: str) -> str:
    """Build a ``%query%`` pattern with LIKE wildcards in *query* escaped."""
    escaped = (
        query.replace(_LIKE_ESCAPE, _LIKE_ESCAPE * 2).replace("%", _LIKE_ESCAPE + "%").replace("_", _LIKE_ESCAPE + "_")
    )
    return f"%{escaped}%"


def _decode(row: Any, model: type[_R]) -> _R | None:
    try:
        return model.model_validate(row)
    except ValidationError as exc:
        logger.debug("Skipping undecodable %s row: %s", model.__name__, exc.errors()[:1])
        return None


class DocumentStore:
    """Async repository over the documents, contents and institutions tables.

    Args:
        session_factory: Factory producing :class:`AsyncSession` objects.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    # ------------------------------------------------------------------
    # Metadata
    # ------------------------------------------------------------------

    async def find_active_by_field_match(
        self,
        fields: Sequence[str],
        query: str,
        institution_filter: InstitutionFilter,
        limit: int,
    ) -> list[DocumentRecord]:
        """Return active documents where any of *fields* contains *query*.

        Newest publications come first.
        """
        if institution_filter.unsatisfiable:
            return []

        pattern = like_pattern(query)
        conditions = [self._column(field).ilike(pattern, escape=_LIKE_ESCAPE) for field in fields]

        stmt = (
            select(Document)
            .where(Document.status == DocumentStatus.ACTIVE, or_(*conditions))
            .order_by(Document.publication_date.desc().nulls_last(), Document.id)
            .limit(limit)
        )
        stmt = self._restrict(stmt, institution_filter)

        rows = await self._scalars(stmt)
        return [record for row in rows if (record := _decode(row, DocumentRecord)) is not None]

    async def find_active_by_id(self, document_id: str) -> DocumentRecord | None:
        stmt = select(Document).where(Document.id == document_id, Document.status == DocumentStatus.ACTIVE)
        rows = await self._scalars(stmt)
        return _decode(rows[0], DocumentRecord) if rows else None

    async def count_active_by_filter(self, institution_filter: InstitutionFilter) -> int:
        if institution_filter.unsatisfiable:
            return 0
        stmt = select(func.count()).select_from(Document).where(Document.status == DocumentStatus.ACTIVE)
        stmt = self._restrict(stmt, institution_filter)
        rows = await self._scalars(stmt)
        return int(rows[0]) if rows else 0

    async def count_active_by_document_type(self) -> list[tuple[str, int]]:
        """Active document counts grouped by type, largest group first."""
        document_type = func.coalesce(Document.document_type, "").label("document_type")
        count = func.count().label("count")
        stmt = (
            select(document_type, count)
            .where(Document.status == DocumentStatus.ACTIVE)
            .group_by(document_type)
            .order_by(count.desc(), document_type)
        )
        rows = await self._rows(stmt)
        return [(row.document_type or "", int(row.count)) for row in rows]

    # ------------------------------------------------------------------
    # Content
    # ------------------------------------------------------------------

    async def find_content_by_body_match(
        self,
        query: str,
        institution_filter: InstitutionFilter,
        limit: int,
    ) -> list[ContentHit]:
        """Return bodies containing *query*, joined to their active documents."""
        if institution_filter.unsatisfiable:
            return []

        stmt = (
            select(DocumentContent, Document)
            .join(Document, DocumentContent.document_id == Document.id)
            .where(
                Document.status == DocumentStatus.ACTIVE,
                DocumentContent.body.ilike(like_pattern(query), escape=_LIKE_ESCAPE),
            )
            .order_by(Document.publication_date.desc().nulls_last(), DocumentContent.id)
            .limit(limit)
        )
        stmt = self._restrict(stmt, institution_filter)

        hits: list[ContentHit] = []
        for content_row, document_row in await self._rows(stmt):
            content = _decode(content_row, ContentRecord)
            document = _decode(document_row, DocumentRecord)
            if content is None or document is None:
                continue
            hits.append(ContentHit(document=document, content=content))
        return hits

    async def find_content_by_metadata_id(self, document_id: str) -> ContentRecord | None:
        stmt = (
            select(DocumentContent)
            .where(DocumentContent.document_id == document_id)
            .order_by(DocumentContent.id)
            .limit(1)
        )
        rows = await self._scalars(stmt)
        return _decode(rows[0], ContentRecord) if rows else None

    # ------------------------------------------------------------------
    # Institutions
    # ------------------------------------------------------------------

    async def load_institutions(self) -> list[InstitutionInfo]:
        """Return all institutions ordered by name."""
        rows = await self._scalars(select(Institution).order_by(Institution.name, Institution.id))
        return [record for row in rows if (record := _decode(row, InstitutionInfo)) is not None]

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _column(field: str):
        try:
            return _SEARCHABLE_COLUMNS[field]
        except KeyError:
            raise ValueError(f"Field is not searchable: {field!r}") from None

    @staticmethod
    def _restrict(stmt: Select, institution_filter: InstitutionFilter) -> Select:
        if institution_filter.institution_id is not None:
            stmt = stmt.where(Document.institution_id == institution_filter.institution_id)
        return stmt

    async def _scalars(self, stmt: Select) -> Sequence[Any]:
        try:
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                return result.scalars().all()
        except (SQLAlchemyError, OSError) as exc:
            raise DocumentStoreError(str(exc)) from exc

    async def _rows(self, stmt: Select) -> Sequence[Any]:
        try:
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                return result.all()
        except (SQLAlchemyError, OSError) as exc:
            raise DocumentStoreError(str(exc)) from exc
