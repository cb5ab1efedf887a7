# @TASK P4-T4.3 - Search and autocomplete endpoints
# @TEST tests/test_api_search.py

"""Search API endpoints for the legal documents corpus.

Provides:
- ``GET /search`` -- Ranked substring search over metadata and body text.
- ``GET /autocomplete`` -- Suggestions for a partial query.
- ``OPTIONS /search``, ``OPTIONS /autocomplete`` -- Preflight, empty 200.

Numeric parameters are accepted as raw strings: malformed or out-of-range
values fall back to their defaults instead of failing validation.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response
from pydantic import BaseModel

from legal_docs.api.deps import get_document_store
from legal_docs.config import get_settings
from legal_docs.search.engine import SearchEngine
from legal_docs.search.query import (
    MIN_QUERY_LENGTH,
    InvalidQueryError,
    normalize_autocomplete_query,
    normalize_search_query,
)
from legal_docs.search.schemas import SearchResult, SuggestionItem
from legal_docs.services.document_store import DocumentStore, DocumentStoreError
from legal_docs.services.institution_cache import InstitutionCache, get_institution_cache
from legal_docs.utils.i18n import get_language
from legal_docs.utils.messages import msg

logger = logging.getLogger(__name__)

router = APIRouter(tags=["search"])


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class SearchResponse(BaseModel):
    """Search API response containing one page of results."""

    results: list[SearchResult]
    query: str
    total: int
    limit: int
    offset: int


class AutocompleteResponse(BaseModel):
    """Autocomplete API response."""

    suggestions: list[SuggestionItem]
    query: str


# ---------------------------------------------------------------------------
# Engine factory (extracted for easy mocking in tests)
# ---------------------------------------------------------------------------


def _build_engine(store: DocumentStore, institutions: InstitutionCache) -> SearchEngine:
    """Create a SearchEngine instance.

    Extracted as a function to allow easy mocking in tests.
    """
    return SearchEngine(store, institutions)


def _invalid_query(exc: InvalidQueryError, lang: str) -> HTTPException:
    key = "query.missing" if exc.reason == "missing" else "query.too_short"
    return HTTPException(status_code=400, detail=msg(key, lang, min_length=MIN_QUERY_LENGTH))


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@router.get("/search", response_model=SearchResponse)
async def search(
    request: Request,
    response: Response,
    q: str | None = Query(None, description="Search query (at least 2 characters)"),  # noqa: B008
    limit: str | None = Query(None, description="Page size, 1-100 (default 20)"),  # noqa: B008
    offset: str | None = Query(None, description="Results to skip (default 0)"),  # noqa: B008
    institution: str | None = Query(None, description="Institution name filter"),  # noqa: B008
    institution_id: str | None = Query(None, description="Institution id filter"),  # noqa: B008
    store: DocumentStore = Depends(get_document_store),  # noqa: B008
    institutions: InstitutionCache = Depends(get_institution_cache),  # noqa: B008
) -> SearchResponse:
    """Search active documents by title, tags, keywords, description and body.

    Returns:
        SearchResponse with the requested page and the pre-pagination total.
        The page window is echoed in the ``X-Total-Count``, ``X-Limit`` and
        ``X-Offset`` headers.
    """
    lang = get_language(request)
    try:
        query = normalize_search_query(
            q,
            limit=limit,
            offset=offset,
            institution=institution,
            institution_id=institution_id,
            institutions=institutions.all_institutions(),
        )
    except InvalidQueryError as exc:
        raise _invalid_query(exc, lang) from exc

    logger.info(
        "Search request: query=%r, limit=%d, offset=%d, institution=%s, institution_id=%s",
        query.text,
        query.limit,
        query.offset,
        institution,
        institution_id,
    )

    engine = _build_engine(store, institutions)
    try:
        page = await engine.search(query, timeout=get_settings().SEARCH_TIMEOUT_SECONDS)
    except TimeoutError as exc:
        logger.warning("Search timed out: query=%r", query.text)
        raise HTTPException(status_code=504, detail=msg("search.timeout", lang)) from exc
    except DocumentStoreError as exc:
        logger.exception("Search failed: query=%r", query.text)
        raise HTTPException(status_code=500, detail=msg("search.failed", lang, detail=str(exc))) from exc

    response.headers["X-Total-Count"] = str(page.total)
    response.headers["X-Limit"] = str(page.limit)
    response.headers["X-Offset"] = str(page.offset)

    return SearchResponse(
        results=page.results,
        query=query.text,
        total=page.total,
        limit=page.limit,
        offset=page.offset,
    )


@router.get("/autocomplete", response_model=AutocompleteResponse)
async def autocomplete(
    request: Request,
    q: str | None = Query(None, description="Partial query (at least 2 characters)"),  # noqa: B008
    limit: str | None = Query(None, description="Maximum suggestions, 1-50 (default 10)"),  # noqa: B008
    institution: str | None = Query(None, description="Institution name filter"),  # noqa: B008
    institution_id: str | None = Query(None, description="Institution id filter"),  # noqa: B008
    store: DocumentStore = Depends(get_document_store),  # noqa: B008
    institutions: InstitutionCache = Depends(get_institution_cache),  # noqa: B008
) -> AutocompleteResponse:
    """Suggest completions drawn from titles, keywords, tags, bodies and institutions."""
    lang = get_language(request)
    try:
        query = normalize_autocomplete_query(
            q,
            limit=limit,
            institution=institution,
            institution_id=institution_id,
            institutions=institutions.all_institutions(),
        )
    except InvalidQueryError as exc:
        raise _invalid_query(exc, lang) from exc

    logger.info("Autocomplete request: query=%r, limit=%d", query.text, query.limit)

    engine = _build_engine(store, institutions)
    try:
        suggestions = await engine.autocomplete(query, timeout=get_settings().AUTOCOMPLETE_TIMEOUT_SECONDS)
    except TimeoutError as exc:
        logger.warning("Autocomplete timed out: query=%r", query.text)
        raise HTTPException(status_code=504, detail=msg("autocomplete.timeout", lang)) from exc
    except DocumentStoreError as exc:
        logger.exception("Autocomplete failed: query=%r", query.text)
        raise HTTPException(status_code=500, detail=msg("autocomplete.failed", lang, detail=str(exc))) from exc

    return AutocompleteResponse(suggestions=suggestions, query=query.text)


@router.options("/search", include_in_schema=False)
@router.options("/autocomplete", include_in_schema=False)
async def preflight() -> Response:
    """Answer CORS preflight requests with an empty 200."""
    return Response(status_code=200)
