# @TASK P2-T2.4 - Relevance ranking
# @TEST tests/test_ranking.py

"""Ordering of search results and suggestions, and the percentage mapping."""

from __future__ import annotations

import math

from legal_docs.constants import OTHER_SUGGESTION_PRIORITY, SUGGESTION_TYPE_PRIORITY
from legal_docs.search.params import PERCENTAGE_BANDS
from legal_docs.search.schemas import SearchResult, SuggestionItem


def relevance_percentage(score: float) -> int:
    """Map an unbounded relevance score onto 0-100.

    Monotonic and piecewise linear: each band of :data:`PERCENTAGE_BANDS`
    is scaled by the score's position inside it, floored, and capped at 100.
    Non-positive scores map to 0.
    """
    if score <= 0 or math.isnan(score):
        return 0

    for band in PERCENTAGE_BANDS:
        if score >= band.lower:
            fraction = (score - band.lower) / (band.upper - band.lower)
            percentage = band.base + fraction * band.span
            return min(100, int(percentage))
    return 0


def rank_results(results: list[SearchResult]) -> list[SearchResult]:
    """Sort by relevance score, highest first.

    The sort is stable: equal scores keep their incoming order (metadata
    hits by publication date, then content-only hits).
    """
    return sorted(results, key=lambda result: result.relevance_score, reverse=True)


def suggestion_priority(suggestion_type: str) -> int:
    """Type priority used for tie-breaking; lower wins."""
    return SUGGESTION_TYPE_PRIORITY.get(suggestion_type, OTHER_SUGGESTION_PRIORITY)


def rank_suggestions(suggestions: list[SuggestionItem], limit: int | None = None) -> list[SuggestionItem]:
    """Sort by count descending, then by type priority; truncate to *limit*."""
    ranked = sorted(suggestions, key=lambda item: (-item.count, suggestion_priority(item.type)))
    if limit is not None:
        ranked = ranked[:limit]
    return ranked
