# @TASK P2-T2.3 - Content (body text) matcher
# @TEST tests/test_content_matcher.py

"""Scoring of full document bodies.

Score = occurrences * 0.5 + density * 100, where density is the share of the
body covered by query occurrences. Shorter bodies with the same number of
hits therefore rank higher.
"""

from __future__ import annotations

import logging
from typing import Any

from legal_docs.config import get_settings
from legal_docs.constants import MatchType, SuggestionType
from legal_docs.search.matcher import FieldMatcher, SubstringMatcher
from legal_docs.search.params import get_search_params
from legal_docs.search.query import AutocompleteQuery, SearchQuery
from legal_docs.search.ranking import relevance_percentage
from legal_docs.search.schemas import SearchResult
from legal_docs.search.suggestions import SuggestionTally, extract_phrases, extract_tokens
from legal_docs.services.document_store import ContentHit, DocumentStore
from legal_docs.services.institution_cache import InstitutionCache
from legal_docs.utils.text_utils import date_to_iso, truncate_text

logger = logging.getLogger(__name__)


def content_relevance(body: str, matcher: FieldMatcher, params: dict[str, Any]) -> float:
    """Occurrence score plus a density bonus for short bodies."""
    occurrences = matcher.count(body)
    score = occurrences * float(params["occurrence_weight"])
    if body:
        density = (len(matcher.query) * occurrences) / len(body)
        score += density * float(params["density_multiplier"])
    return score


def extract_content_preview(
    body: str,
    matcher: FieldMatcher,
    context_chars: int = 75,
    fallback_chars: int = 150,
) -> str:
    """Return the text around the first occurrence of the query.

    ``context_chars`` characters are kept on each side, with '...' marking a
    cut at either end. Without an occurrence the start of the body is
    returned instead.
    """
    index = matcher.find(body)
    if index == -1:
        return truncate_text(body, fallback_chars)

    start = max(index - context_chars, 0)
    end = min(index + len(matcher.query) + context_chars, len(body))

    preview = body[start:end]
    if start > 0:
        preview = "..." + preview
    if end < len(body):
        preview = preview + "..."
    return preview


def build_content_result(
    hit: ContentHit,
    institutions: InstitutionCache,
    matcher: FieldMatcher,
    params: dict[str, Any],
) -> SearchResult:
    doc, content = hit.document, hit.content
    score = content_relevance(content.body, matcher, params)
    return SearchResult(
        id=doc.id,
        title=doc.title,
        institution_name=institutions.name_for(doc.institution_id),
        institution_logo=institutions.logo_for(doc.institution_id),
        document_type=doc.document_type,
        legal_status=doc.legal_status,
        publication_date=date_to_iso(doc.publication_date),
        tags=doc.tags,
        description=truncate_text(doc.description, int(params["description_max_chars"])),
        url_slug=doc.url_slug,
        match_type=MatchType.CONTENT,
        content_preview=extract_content_preview(
            content.body,
            matcher,
            context_chars=int(params["preview_context_chars"]),
            fallback_chars=int(params["preview_fallback_chars"]),
        ),
        relevance_score=score,
        relevance_percentage=relevance_percentage(score),
        match_count=matcher.count(content.body),
    )


class ContentMatcher:
    """Body-text scan phase of search and autocomplete.

    Args:
        store: Document store used for the scans.
        institutions: Institution cache for display fields.
        phrases_enabled: Also tally 2-4 word phrases in autocomplete.
            Defaults to the ``AUTOCOMPLETE_PHRASES_ENABLED`` setting.
    """

    def __init__(
        self,
        store: DocumentStore,
        institutions: InstitutionCache,
        phrases_enabled: bool | None = None,
    ) -> None:
        self._store = store
        self._institutions = institutions
        if phrases_enabled is None:
            phrases_enabled = get_settings().AUTOCOMPLETE_PHRASES_ENABLED
        self._phrases_enabled = phrases_enabled

    async def search(self, query: SearchQuery) -> list[SearchResult]:
        params = get_search_params()
        matcher = SubstringMatcher(query.text)
        hits = await self._store.find_content_by_body_match(
            query.text,
            query.institution_filter,
            limit=query.limit * int(params["overfetch_factor"]),
        )

        # A document may have several content rows; the first one wins.
        results: dict[str, SearchResult] = {}
        for hit in hits:
            if hit.document.id not in results:
                results[hit.document.id] = build_content_result(hit, self._institutions, matcher, params)

        logger.debug("Content scan for %r: %d candidates", query.text, len(results))
        return list(results.values())

    async def suggest(self, query: AutocompleteQuery) -> list[SuggestionTally]:
        """Tally body words (and optionally phrases) from a few matching bodies.

        Returns the word tally, followed by the phrase tally when phrases
        are enabled.
        """
        params = get_search_params()
        matcher = SubstringMatcher(query.text)
        hits = await self._store.find_content_by_body_match(
            query.text,
            query.institution_filter,
            limit=int(params["autocomplete_content_scan_limit"]),
        )

        min_length = int(params["autocomplete_min_content_token_length"])
        words = SuggestionTally()
        phrases = SuggestionTally()
        for hit in hits:
            body = hit.content.body
            words.add_all(extract_tokens(body, matcher, min_length), SuggestionType.CONTENT)
            if self._phrases_enabled:
                phrases.add_all(
                    extract_phrases(
                        body,
                        matcher,
                        min_tokens=int(params["phrase_min_tokens"]),
                        max_tokens=int(params["phrase_max_tokens"]),
                    ),
                    SuggestionType.PHRASE,
                )

        if self._phrases_enabled:
            return [words, phrases]
        return [words]
