# @TASK P2-T2.6 - Autocomplete suggestion aggregation
# @TEST tests/test_suggestions.py

"""Token extraction and tallying for autocomplete.

Each scan pass (titles, keywords, tags, bodies, institution names) produces a
:class:`SuggestionTally` keyed by the case-folded token. Tallies are folded
together in pass order, so the displayed text keeps the casing seen first and
the type keeps the highest priority seen for that token.
"""

from __future__ import annotations

from collections.abc import Iterable

from legal_docs.constants import SuggestionType
from legal_docs.search.matcher import FieldMatcher
from legal_docs.search.ranking import rank_suggestions, suggestion_priority
from legal_docs.search.schemas import SuggestionItem
from legal_docs.services.document_store import InstitutionInfo
from legal_docs.utils.text_utils import fold_case


def clean_word(word: str) -> str:
    """Drop every character that is not a letter or a digit."""
    return "".join(ch for ch in word if ch.isalnum())


def extract_tokens(text: str, matcher: FieldMatcher, min_length: int = 2) -> list[str]:
    """Return the cleaned words of *text* that contain the query.

    Words are split on whitespace; duplicates are kept so that repeated
    occurrences add to the tally.
    """
    tokens: list[str] = []
    for word in text.split():
        cleaned = clean_word(word)
        if len(cleaned) < min_length:
            continue
        if matcher.contains(cleaned):
            tokens.append(cleaned)
    return tokens


def extract_phrases(
    text: str,
    matcher: FieldMatcher,
    min_tokens: int = 2,
    max_tokens: int = 4,
) -> list[str]:
    """Return multi-word phrases that start at a word containing the query.

    For every matching word, the windows of *min_tokens* .. *max_tokens*
    consecutive words beginning there are emitted, e.g. "vergi usul" and
    "vergi usul kanunu".
    """
    words = [cleaned for cleaned in (clean_word(word) for word in text.split()) if cleaned]
    phrases: list[str] = []
    for index, word in enumerate(words):
        if not matcher.contains(word):
            continue
        for size in range(min_tokens, max_tokens + 1):
            window = words[index : index + size]
            if len(window) < size:
                break
            phrases.append(" ".join(window))
    return phrases


class SuggestionTally:
    """Count/type map of suggestion candidates keyed by case-folded text."""

    def __init__(self) -> None:
        self._items: dict[str, SuggestionItem] = {}

    def add(self, text: str, suggestion_type: str, count: int = 1) -> None:
        key = fold_case(text)
        existing = self._items.get(key)
        if existing is None:
            self._items[key] = SuggestionItem(text=text, count=count, type=suggestion_type)
            return
        existing.count += count
        if suggestion_priority(suggestion_type) < suggestion_priority(existing.type):
            existing.type = suggestion_type

    def add_all(self, texts: Iterable[str], suggestion_type: str) -> None:
        for text in texts:
            self.add(text, suggestion_type)

    def merge(self, other: SuggestionTally) -> SuggestionTally:
        """Fold *other* into this tally and return self."""
        for item in other.items():
            self.add(item.text, item.type, item.count)
        return self

    def items(self) -> list[SuggestionItem]:
        return list(self._items.values())

    def get(self, text: str) -> SuggestionItem | None:
        return self._items.get(fold_case(text))

    def __len__(self) -> int:
        return len(self._items)

    def ranked(self, limit: int | None = None) -> list[SuggestionItem]:
        return rank_suggestions(self.items(), limit)


def institution_tally(
    institutions: Iterable[InstitutionInfo],
    matcher: FieldMatcher,
    min_length: int = 2,
) -> SuggestionTally:
    """Tally words of institution names that contain the query."""
    tally = SuggestionTally()
    for institution in institutions:
        if matcher.contains(institution.name):
            tally.add_all(extract_tokens(institution.name, matcher, min_length), SuggestionType.INSTITUTION)
    return tally


def aggregate_suggestions(tallies: Iterable[SuggestionTally], limit: int) -> list[SuggestionItem]:
    """Fold the per-pass tallies in order and return the top *limit* items."""
    combined = SuggestionTally()
    for tally in tallies:
        combined.merge(tally)
    return combined.ranked(limit)
