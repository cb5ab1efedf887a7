"""Small text helpers shared by the search result builders."""

from __future__ import annotations

from datetime import date


def truncate_text(text: str, max_length: int) -> str:
    """Cut *text* to *max_length* characters, appending '...' when cut."""
    if len(text) <= max_length:
        return text
    return text[:max_length] + "..."


def date_to_iso(value: date | None) -> str | None:
    """Convert a date to an ISO 8601 string, or None."""
    return value.isoformat() if value else None


def fold_case(text: str) -> str:
    """Lowercase *text* for case-insensitive comparison.

    "İ" folds to a plain "i" instead of the two-character "i̇" that
    ``str.lower`` produces, so "İdaresi" and "idaresi" compare equal.
    """
    return text.replace("İ", "i").lower()
