"""Centralized search parameter management.

Scoring weights, scan caps and the relevance percentage bands are kept here
instead of inline in the matchers. Weights can be overridden per deployment
through the ``SEARCH_PARAMS`` setting (a JSON object).

Usage in matchers::

    from legal_docs.search.params import get_search_params
    params = get_search_params()
    score += params["title_weight"]
"""

from __future__ import annotations

from typing import Any, NamedTuple

DEFAULT_SEARCH_PARAMS: dict[str, float | int] = {
    # Metadata field weights (additive)
    "title_weight": 10.0,
    "institution_weight": 5.0,
    "tags_weight": 3.0,
    "keywords_weight": 2.0,
    "description_weight": 1.0,
    # Content scoring
    "occurrence_weight": 0.5,
    "density_multiplier": 100.0,
    # Search fan-out: each scan fetches limit * overfetch_factor candidates
    "overfetch_factor": 2,
    # Autocomplete scan caps
    "autocomplete_field_scan_limit": 100,
    "autocomplete_content_scan_limit": 5,
    "autocomplete_min_token_length": 2,
    "autocomplete_min_content_token_length": 3,
    "phrase_min_tokens": 2,
    "phrase_max_tokens": 4,
    # Display
    "preview_context_chars": 75,
    "preview_fallback_chars": 150,
    "description_max_chars": 200,
}


class PercentageBand(NamedTuple):
    """Scores in [lower, upper) map linearly onto [base, base + span)."""

    lower: float
    upper: float
    base: float
    span: float


# Highest band first; the top band is open-ended and capped at 100 afterwards.
PERCENTAGE_BANDS: tuple[PercentageBand, ...] = (
    PercentageBand(1000.0, 11000.0, 95.0, 5.0),
    PercentageBand(100.0, 1000.0, 80.0, 15.0),
    PercentageBand(50.0, 100.0, 60.0, 20.0),
    PercentageBand(10.0, 50.0, 30.0, 30.0),
    PercentageBand(1.0, 10.0, 10.0, 20.0),
    PercentageBand(0.0, 1.0, 0.0, 10.0),
)


def get_search_params() -> dict[str, Any]:
    """Return current search parameters, merging setting overrides with defaults.

    Unknown keys in the override are ignored.
    """
    from legal_docs.config import get_settings

    saved: dict[str, Any] = get_settings().SEARCH_PARAMS
    merged = {**DEFAULT_SEARCH_PARAMS}
    if isinstance(saved, dict):
        for key in DEFAULT_SEARCH_PARAMS:
            if key in saved:
                merged[key] = saved[key]
    return merged
