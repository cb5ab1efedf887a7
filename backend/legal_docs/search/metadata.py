# @TASK P2-T2.2 - Metadata matcher
# @TEST tests/test_metadata_matcher.py

"""Scoring of document metadata (title, institution, tags, keywords, description).

Search mode produces one :class:`SearchResult` per candidate document with an
additive score over every matching field. Autocomplete mode runs one pass per
field and tallies the matching words.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from legal_docs.constants import MatchType, SuggestionType
from legal_docs.search.matcher import FieldMatcher, SubstringMatcher
from legal_docs.search.params import get_search_params
from legal_docs.search.query import AutocompleteQuery, SearchQuery
from legal_docs.search.ranking import relevance_percentage
from legal_docs.search.schemas import SearchResult
from legal_docs.search.suggestions import SuggestionTally, extract_tokens
from legal_docs.services.document_store import DocumentRecord, DocumentStore
from legal_docs.services.institution_cache import InstitutionCache
from legal_docs.utils.text_utils import date_to_iso, truncate_text

logger = logging.getLogger(__name__)

_SEARCH_FIELDS = ("title", "description", "keywords", "tags")

# (document field, suggestion type) in pass order
_AUTOCOMPLETE_PASSES = (
    ("title", SuggestionType.TITLE),
    ("keywords", SuggestionType.KEYWORD),
    ("tags", SuggestionType.TAG),
)


def _field_texts(doc: DocumentRecord, institution_name: str) -> list[tuple[MatchType, str]]:
    """Metadata fields in match-type priority order."""
    return [
        (MatchType.TITLE, doc.title),
        (MatchType.INSTITUTION, institution_name),
        (MatchType.TAGS, doc.tags),
        (MatchType.KEYWORDS, doc.keywords),
        (MatchType.DESCRIPTION, doc.description),
    ]


def score_document(
    doc: DocumentRecord,
    institution_name: str,
    matcher: FieldMatcher,
    params: dict[str, Any],
) -> float:
    """Sum the weights of every metadata field that contains the query."""
    weights = {
        MatchType.TITLE: params["title_weight"],
        MatchType.INSTITUTION: params["institution_weight"],
        MatchType.TAGS: params["tags_weight"],
        MatchType.KEYWORDS: params["keywords_weight"],
        MatchType.DESCRIPTION: params["description_weight"],
    }
    score = 0.0
    for match_type, text in _field_texts(doc, institution_name):
        if matcher.contains(text):
            score += float(weights[match_type])
    return score


def determine_match_type(doc: DocumentRecord, institution_name: str, matcher: FieldMatcher) -> str:
    """Return the highest-priority field containing the query.

    Falls back to "description": the document was selected by the scan, so
    the hit must be there even if the in-memory check disagrees.
    """
    for match_type, text in _field_texts(doc, institution_name):
        if matcher.contains(text):
            return match_type
    return MatchType.DESCRIPTION


def count_matches(doc: DocumentRecord, institution_name: str, matcher: FieldMatcher) -> int:
    return sum(matcher.count(text) for _, text in _field_texts(doc, institution_name))


def build_metadata_result(
    doc: DocumentRecord,
    institutions: InstitutionCache,
    matcher: FieldMatcher,
    params: dict[str, Any],
) -> SearchResult:
    institution_name = institutions.name_for(doc.institution_id)
    score = score_document(doc, institution_name, matcher, params)
    return SearchResult(
        id=doc.id,
        title=doc.title,
        institution_name=institution_name,
        institution_logo=institutions.logo_for(doc.institution_id),
        document_type=doc.document_type,
        legal_status=doc.legal_status,
        publication_date=date_to_iso(doc.publication_date),
        tags=doc.tags,
        description=truncate_text(doc.description, int(params["description_max_chars"])),
        url_slug=doc.url_slug,
        match_type=determine_match_type(doc, institution_name, matcher),
        relevance_score=score,
        relevance_percentage=relevance_percentage(score),
        match_count=count_matches(doc, institution_name, matcher),
    )


class MetadataMatcher:
    """Metadata scan phase of search and autocomplete.

    Args:
        store: Document store used for the scans.
        institutions: Institution cache snapshot provider.
    """

    def __init__(self, store: DocumentStore, institutions: InstitutionCache) -> None:
        self._store = store
        self._institutions = institutions

    async def search(self, query: SearchQuery) -> list[SearchResult]:
        """Scan metadata for *query* and score each candidate document.

        Candidates are documents whose title, description, keywords or tags
        contain the query. The institution name only adds to the score of a
        candidate.
        """
        params = get_search_params()
        matcher = SubstringMatcher(query.text)

        documents = await self._store.find_active_by_field_match(
            _SEARCH_FIELDS,
            query.text,
            query.institution_filter,
            limit=query.limit * int(params["overfetch_factor"]),
        )

        results: list[SearchResult] = []
        seen: set[str] = set()
        for doc in documents:
            if doc.id in seen:
                continue
            seen.add(doc.id)
            results.append(build_metadata_result(doc, self._institutions, matcher, params))

        logger.debug("Metadata scan for %r: %d candidates", query.text, len(results))
        return results

    async def suggest(self, query: AutocompleteQuery) -> list[SuggestionTally]:
        """Run the title, keyword and tag passes; one tally per pass."""
        params = get_search_params()
        matcher = SubstringMatcher(query.text)
        scan_limit = int(params["autocomplete_field_scan_limit"])
        min_length = int(params["autocomplete_min_token_length"])

        async def _pass(field: str, suggestion_type: str) -> SuggestionTally:
            documents = await self._store.find_active_by_field_match(
                (field,), query.text, query.institution_filter, limit=scan_limit
            )
            tally = SuggestionTally()
            for doc in documents:
                tally.add_all(extract_tokens(getattr(doc, field), matcher, min_length), suggestion_type)
            return tally

        return list(await asyncio.gather(*(_pass(field, stype) for field, stype in _AUTOCOMPLETE_PASSES)))
