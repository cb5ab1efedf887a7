# @TASK P4-T4.4 - Document detail and corpus statistics
# @TEST tests/test_api_documents.py

"""Document detail and statistics endpoints.

Provides:
- ``GET /documents/{document_id}`` -- Metadata and body text of an active document.
- ``GET /statistics`` -- Institution count, active document count and
  active document counts per document type.
"""

from __future__ import annotations

import asyncio
import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel

from legal_docs.api.deps import get_document_store
from legal_docs.config import get_settings
from legal_docs.constants import UNSPECIFIED_DOCUMENT_TYPE
from legal_docs.services.document_store import DocumentStore, DocumentStoreError, InstitutionFilter
from legal_docs.services.institution_cache import InstitutionCache, get_institution_cache
from legal_docs.utils.i18n import get_language
from legal_docs.utils.messages import msg
from legal_docs.utils.text_utils import date_to_iso

logger = logging.getLogger(__name__)

router = APIRouter(tags=["documents"])


class DocumentDetailResponse(BaseModel):
    """Full view of one active document."""

    id: str
    title: str
    institution_id: str | None = None
    institution_name: str
    institution_logo: str = ""
    document_type: str = ""
    legal_status: str = ""
    publication_date: str | None = None
    tags: str = ""
    keywords: str = ""
    description: str = ""
    url_slug: str = ""
    page_count: int | None = None
    file_size_mb: float | None = None
    pdf_url: str = ""
    content: str | None = None


class DocumentTypeCount(BaseModel):
    document_type: str
    count: int


class StatisticsResponse(BaseModel):
    """Corpus overview."""

    total_institutions: int
    total_documents: int
    document_types: list[DocumentTypeCount]


@router.get("/documents/{document_id}", response_model=DocumentDetailResponse)
async def get_document(
    document_id: str,
    request: Request,
    store: DocumentStore = Depends(get_document_store),  # noqa: B008
    institutions: InstitutionCache = Depends(get_institution_cache),  # noqa: B008
) -> DocumentDetailResponse:
    """Return an active document together with its body text.

    Raises:
        HTTPException 404: No active document has this id.
        HTTPException 500: The store could not be queried.
        HTTPException 504: The lookup did not finish in time.
    """
    lang = get_language(request)

    async def _load():
        document = await store.find_active_by_id(document_id)
        if document is None:
            return None, None
        return document, await store.find_content_by_metadata_id(document.id)

    try:
        document, content = await asyncio.wait_for(_load(), timeout=get_settings().REQUEST_TIMEOUT_SECONDS)
    except TimeoutError as exc:
        logger.warning("Document lookup timed out: id=%s", document_id)
        raise HTTPException(status_code=504, detail=msg("request.timeout", lang)) from exc
    except DocumentStoreError as exc:
        logger.exception("Document lookup failed: id=%s", document_id)
        raise HTTPException(status_code=500, detail=msg("document.fetch_failed", lang, detail=str(exc))) from exc

    if document is None:
        raise HTTPException(status_code=404, detail=msg("document.not_found", lang))

    return DocumentDetailResponse(
        id=document.id,
        title=document.title,
        institution_id=document.institution_id,
        institution_name=institutions.name_for(document.institution_id),
        institution_logo=institutions.logo_for(document.institution_id),
        document_type=document.document_type,
        legal_status=document.legal_status,
        publication_date=date_to_iso(document.publication_date),
        tags=document.tags,
        keywords=document.keywords,
        description=document.description,
        url_slug=document.url_slug,
        page_count=document.page_count,
        file_size_mb=document.file_size_mb,
        pdf_url=document.pdf_url,
        content=content.body if content else None,
    )


@router.get("/statistics", response_model=StatisticsResponse)
async def get_statistics(
    request: Request,
    store: DocumentStore = Depends(get_document_store),  # noqa: B008
    institutions: InstitutionCache = Depends(get_institution_cache),  # noqa: B008
) -> StatisticsResponse:
    """Return corpus counts; documents without a type are reported as "Belirtilmemiş"."""
    lang = get_language(request)

    async def _count():
        return await asyncio.gather(
            store.count_active_by_filter(InstitutionFilter.unrestricted()),
            store.count_active_by_document_type(),
        )

    try:
        total_documents, by_type = await asyncio.wait_for(_count(), timeout=get_settings().REQUEST_TIMEOUT_SECONDS)
    except TimeoutError as exc:
        logger.warning("Statistics query timed out")
        raise HTTPException(status_code=504, detail=msg("request.timeout", lang)) from exc
    except DocumentStoreError as exc:
        logger.exception("Statistics query failed")
        raise HTTPException(status_code=500, detail=msg("statistics.failed", lang, detail=str(exc))) from exc

    return StatisticsResponse(
        total_institutions=len(institutions),
        total_documents=total_documents,
        document_types=[
            DocumentTypeCount(document_type=document_type or UNSPECIFIED_DOCUMENT_TYPE, count=count)
            for document_type, count in by_type
        ],
    )
