# @TASK P4-T4.5 - Institution listing and cache refresh
# @TEST tests/test_api_documents.py

"""Institution endpoints backed by the in-memory cache.

Provides:
- ``GET /institutions`` -- Current cache snapshot, ordered by name.
- ``POST /institutions/cache/refresh`` -- Reload the cache from the database.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel

from legal_docs.api.deps import get_document_store
from legal_docs.config import get_settings
from legal_docs.services.document_store import DocumentStore, DocumentStoreError, InstitutionInfo
from legal_docs.services.institution_cache import InstitutionCache, get_institution_cache
from legal_docs.utils.i18n import get_language
from legal_docs.utils.messages import msg

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/institutions", tags=["institutions"])


class InstitutionListResponse(BaseModel):
    institutions: list[InstitutionInfo]
    total: int


class CacheRefreshResponse(BaseModel):
    message: str
    count: int


@router.get("", response_model=InstitutionListResponse)
async def list_institutions(
    institutions: InstitutionCache = Depends(get_institution_cache),  # noqa: B008
) -> InstitutionListResponse:
    """Return every cached institution."""
    items = institutions.all_institutions()
    return InstitutionListResponse(institutions=items, total=len(items))


@router.post("/cache/refresh", response_model=CacheRefreshResponse)
async def refresh_cache(
    request: Request,
    store: DocumentStore = Depends(get_document_store),  # noqa: B008
    institutions: InstitutionCache = Depends(get_institution_cache),  # noqa: B008
) -> CacheRefreshResponse:
    """Reload the institution cache; the previous snapshot survives a failure."""
    lang = get_language(request)
    try:
        count = await institutions.refresh(store, timeout=get_settings().CACHE_REFRESH_TIMEOUT_SECONDS)
    except TimeoutError as exc:
        logger.warning("Institution cache refresh timed out")
        raise HTTPException(status_code=504, detail=msg("request.timeout", lang)) from exc
    except DocumentStoreError as exc:
        logger.exception("Institution cache refresh failed")
        raise HTTPException(
            status_code=500, detail=msg("institutions.refresh_failed", lang, detail=str(exc))
        ) from exc

    return CacheRefreshResponse(message=msg("institutions.refreshed", lang, count=count), count=count)
