# @TASK P2-T2.1 - Query normalization
# @TEST tests/test_query.py

"""Validation and clamping of raw search / autocomplete parameters.

Only a missing or too-short query is an error. Malformed or out-of-range
numbers silently fall back to their defaults, and an institution name that
matches nothing turns into a filter no document can satisfy.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import NamedTuple

from legal_docs.services.document_store import InstitutionFilter, InstitutionInfo
from legal_docs.utils.text_utils import fold_case

logger = logging.getLogger(__name__)

MIN_QUERY_LENGTH = 2


class InvalidQueryError(ValueError):
    """Raised when the query parameter is missing or too short.

    Attributes:
        reason: ``"missing"`` or ``"too_short"``; used to pick the
            localized response message.
    """

    def __init__(self, reason: str) -> None:
        self.reason = reason
        if reason == "missing":
            message = "Search query 'q' parameter is required"
        else:
            message = f"Search query must be at least {MIN_QUERY_LENGTH} characters long"
        super().__init__(message)


class LimitPolicy(NamedTuple):
    default: int
    maximum: int


SEARCH_LIMIT = LimitPolicy(default=20, maximum=100)
AUTOCOMPLETE_LIMIT = LimitPolicy(default=10, maximum=50)


@dataclass(frozen=True)
class SearchQuery:
    text: str
    limit: int
    offset: int
    institution_filter: InstitutionFilter


@dataclass(frozen=True)
class AutocompleteQuery:
    text: str
    limit: int
    institution_filter: InstitutionFilter


def clean_query(raw: str | None) -> str:
    """Trim *raw* and enforce the minimum length."""
    if raw is None or raw == "":
        raise InvalidQueryError("missing")
    text = raw.strip()
    if len(text) < MIN_QUERY_LENGTH:
        raise InvalidQueryError("too_short")
    return text


def _parse_int(raw: str | int | None) -> int | None:
    if raw is None or isinstance(raw, bool):
        return None
    try:
        return int(raw)
    except (TypeError, ValueError):
        return None


def parse_limit(raw: str | int | None, policy: LimitPolicy) -> int:
    value = _parse_int(raw)
    if value is None or value < 1 or value > policy.maximum:
        return policy.default
    return value


def parse_offset(raw: str | int | None) -> int:
    value = _parse_int(raw)
    if value is None or value < 0:
        return 0
    return value


def resolve_institution(
    institutions: Iterable[InstitutionInfo],
    name: str | None = None,
    institution_id: str | None = None,
) -> InstitutionFilter:
    """Turn the optional institution parameters into a scan filter.

    An explicit id wins and is used as-is. A name is matched as a
    case-insensitive substring of the cached institution names; the first
    institution in cache order is taken, even when a later one matches
    more closely.
    """
    institution_id = (institution_id or "").strip()
    if institution_id:
        return InstitutionFilter(institution_id=institution_id)

    name = (name or "").strip()
    if not name:
        return InstitutionFilter.unrestricted()

    needle = fold_case(name)
    for institution in institutions:
        if needle in fold_case(institution.name):
            return InstitutionFilter(institution_id=institution.id)

    logger.info("Institution filter %r matched no cached institution", name)
    return InstitutionFilter.nothing()


def normalize_search_query(
    q: str | None,
    limit: str | int | None = None,
    offset: str | int | None = None,
    institution: str | None = None,
    institution_id: str | None = None,
    institutions: Iterable[InstitutionInfo] = (),
) -> SearchQuery:
    return SearchQuery(
        text=clean_query(q),
        limit=parse_limit(limit, SEARCH_LIMIT),
        offset=parse_offset(offset),
        institution_filter=resolve_institution(institutions, institution, institution_id),
    )


def normalize_autocomplete_query(
    q: str | None,
    limit: str | int | None = None,
    institution: str | None = None,
    institution_id: str | None = None,
    institutions: Iterable[InstitutionInfo] = (),
) -> AutocompleteQuery:
    return AutocompleteQuery(
        text=clean_query(q),
        limit=parse_limit(limit, AUTOCOMPLETE_LIMIT),
        institution_filter=resolve_institution(institutions, institution, institution_id),
    )
