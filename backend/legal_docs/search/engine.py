# @TASK P2-T2.7 - Search and autocomplete orchestration
# @TEST tests/test_engine.py

"""Search and autocomplete engines over the legal document corpus.

Search: the metadata and content scans run concurrently, their results are
merged by document id, non-positive scores are dropped, the rest is ranked by
score and the requested page is cut from the in-memory list.

Autocomplete: title, keyword, tag and body passes plus the institution-name
pass are tallied into one suggestion map, ranked by count and type.

Both flows are bounded by a timeout; on timeout or on a store failure in any
scan, the sibling scans are cancelled and the error propagates.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable
from typing import Any

from legal_docs.search.content import ContentMatcher
from legal_docs.search.matcher import SubstringMatcher
from legal_docs.search.merge import drop_irrelevant, merge_results
from legal_docs.search.metadata import MetadataMatcher
from legal_docs.search.pagination import paginate
from legal_docs.search.params import get_search_params
from legal_docs.search.query import AutocompleteQuery, SearchQuery
from legal_docs.search.ranking import rank_results
from legal_docs.search.schemas import SearchPage, SearchResult, SuggestionItem
from legal_docs.search.suggestions import aggregate_suggestions, institution_tally
from legal_docs.services.document_store import DocumentStore
from legal_docs.services.institution_cache import InstitutionCache

logger = logging.getLogger(__name__)


async def _run_together(*aws: Awaitable[Any]) -> list[Any]:
    """Await all of *aws* concurrently; if one fails, cancel the rest."""
    tasks = [asyncio.ensure_future(aw) for aw in aws]
    try:
        return list(await asyncio.gather(*tasks))
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise


class SearchEngine:
    """Substring search with heuristic relevance ranking.

    Args:
        store: Document store shared by all scans.
        institutions: Institution cache for name resolution and display.
        phrases_enabled: Enable phrase suggestions (see :class:`ContentMatcher`).
    """

    def __init__(
        self,
        store: DocumentStore,
        institutions: InstitutionCache,
        phrases_enabled: bool | None = None,
    ) -> None:
        self._institutions = institutions
        self._metadata = MetadataMatcher(store, institutions)
        self._content = ContentMatcher(store, institutions, phrases_enabled=phrases_enabled)

    async def search(self, query: SearchQuery, timeout: float | None = None) -> SearchPage:
        """Run a search and return the requested page.

        Raises:
            DocumentStoreError: Either scan failed.
            TimeoutError: The scans did not finish within *timeout* seconds.
        """
        return await asyncio.wait_for(self._search(query), timeout=timeout)

    async def autocomplete(self, query: AutocompleteQuery, timeout: float | None = None) -> list[SuggestionItem]:
        """Return up to ``query.limit`` suggestions for a partial query.

        Raises:
            DocumentStoreError: A scan pass failed.
            TimeoutError: The passes did not finish within *timeout* seconds.
        """
        return await asyncio.wait_for(self._autocomplete(query), timeout=timeout)

    async def ranked_results(self, query: SearchQuery) -> list[SearchResult]:
        """Return the full ranked list before pagination."""
        metadata_results, content_results = await _run_together(
            self._metadata.search(query),
            self._content.search(query),
        )
        merged = drop_irrelevant(merge_results(metadata_results, content_results))
        return rank_results(merged)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _search(self, query: SearchQuery) -> SearchPage:
        ranked = await self.ranked_results(query)
        page, total = paginate(ranked, query.limit, query.offset)
        logger.info(
            "Search %r: %d results, returning %d (limit=%d, offset=%d)",
            query.text,
            total,
            len(page),
            query.limit,
            query.offset,
        )
        return SearchPage(results=page, total=total, limit=query.limit, offset=query.offset)

    async def _autocomplete(self, query: AutocompleteQuery) -> list[SuggestionItem]:
        field_tallies, content_tallies = await _run_together(
            self._metadata.suggest(query),
            self._content.suggest(query),
        )

        params = get_search_params()
        institutions = institution_tally(
            self._institutions.all_institutions(),
            SubstringMatcher(query.text),
            min_length=int(params["autocomplete_min_token_length"]),
        )

        suggestions = aggregate_suggestions([*field_tallies, *content_tallies, institutions], query.limit)
        logger.info("Autocomplete %r: %d suggestions", query.text, len(suggestions))
        return suggestions
