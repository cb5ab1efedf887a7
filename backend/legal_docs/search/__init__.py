# @TASK P2-T2.1 - Search engine package

"""Substring search, relevance ranking and autocomplete for legal documents."""

from legal_docs.search.engine import SearchEngine
from legal_docs.search.query import (
    AutocompleteQuery,
    InvalidQueryError,
    SearchQuery,
    normalize_autocomplete_query,
    normalize_search_query,
)
from legal_docs.search.schemas import SearchPage, SearchResult, SuggestionItem

__all__ = [
    "AutocompleteQuery",
    "InvalidQueryError",
    "SearchEngine",
    "SearchPage",
    "SearchQuery",
    "SearchResult",
    "SuggestionItem",
    "normalize_autocomplete_query",
    "normalize_search_query",
]
