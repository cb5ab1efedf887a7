# @TASK P2-T2.3 - Content matcher tests
# @TEST tests/test_content_matcher.py

"""Tests for body-text scoring, previews and the ContentMatcher scan phase."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from legal_docs.search.content import (
    ContentMatcher,
    build_content_result,
    content_relevance,
    extract_content_preview,
)
from legal_docs.search.matcher import SubstringMatcher
from legal_docs.search.params import DEFAULT_SEARCH_PARAMS
from legal_docs.search.query import normalize_autocomplete_query, normalize_search_query
from legal_docs.services.document_store import ContentHit, ContentRecord, DocumentRecord
from legal_docs.services.institution_cache import InstitutionCache

PARAMS = dict(DEFAULT_SEARCH_PARAMS)


def _hit(doc_id: str, body: str, content_id: str | None = None) -> ContentHit:
    return ContentHit(
        document=DocumentRecord(id=doc_id, title=f"Belge {doc_id}"),
        content=ContentRecord(id=content_id or f"c-{doc_id}", document_id=doc_id, body=body),
    )


def _store_returning(hits: list[ContentHit]) -> MagicMock:
    store = MagicMock()
    store.find_content_by_body_match = AsyncMock(return_value=hits)
    return store


# ---------------------------------------------------------------------------
# Scoring
# ---------------------------------------------------------------------------


class TestContentRelevance:
    def test_occurrences_plus_density(self):
        body = "vergi " * 2 + "x" * 88  # 100 characters, 2 occurrences
        score = content_relevance(body, SubstringMatcher("vergi"), PARAMS)
        # 2 * 0.5 + (5 * 2 / 100) * 100
        assert score == pytest.approx(11.0)

    def test_shorter_body_scores_higher(self):
        matcher = SubstringMatcher("vergi")
        short = content_relevance("vergi kanunu", matcher, PARAMS)
        long = content_relevance("vergi kanunu " + "y" * 500, matcher, PARAMS)
        assert short > long

    def test_no_occurrence(self):
        assert content_relevance("prim affı", SubstringMatcher("vergi"), PARAMS) == 0.0

    def test_empty_body(self):
        assert content_relevance("", SubstringMatcher("vergi"), PARAMS) == 0.0


# ---------------------------------------------------------------------------
# Preview
# ---------------------------------------------------------------------------


class TestContentPreview:
    def test_context_with_ellipses(self):
        body = "a" * 100 + "vergi" + "b" * 100
        preview = extract_content_preview(body, SubstringMatcher("vergi"))
        assert preview == "..." + "a" * 75 + "vergi" + "b" * 75 + "..."

    def test_no_leading_ellipsis_near_start(self):
        body = "vergi" + "b" * 100
        preview = extract_content_preview(body, SubstringMatcher("vergi"))
        assert preview == "vergi" + "b" * 75 + "..."

    def test_short_body_unchanged(self):
        body = "Bu tebliğ vergi usul kanunu hükümlerine göre hazırlanmıştır."
        assert extract_content_preview(body, SubstringMatcher("usul")) == body

    def test_fallback_without_occurrence(self):
        body = "z" * 200
        assert extract_content_preview(body, SubstringMatcher("vergi")) == "z" * 150 + "..."

    def test_case_insensitive_position(self):
        body = "x" * 80 + "VERGİ"
        preview = extract_content_preview(body, SubstringMatcher("VERGİ"), context_chars=5)
        assert preview == "...xxxxxVERGİ"


class TestBuildContentResult:
    def test_fields(self):
        result = build_content_result(
            _hit("d1", "tebliğ " * 3), InstitutionCache(), SubstringMatcher("tebliğ"), PARAMS
        )
        assert result.match_type == "content"
        assert result.match_count == 3
        assert result.institution_name == "Bilinmeyen Kurum"
        assert result.content_preview is not None
        assert result.relevance_score > 0


# ---------------------------------------------------------------------------
# Scan phase
# ---------------------------------------------------------------------------


class TestContentMatcherSearch:
    @pytest.mark.asyncio
    async def test_first_content_row_per_document(self):
        store = _store_returning([_hit("d1", "vergi", "c1"), _hit("d1", "vergi vergi", "c2"), _hit("d2", "vergi")])
        results = await ContentMatcher(store, InstitutionCache()).search(normalize_search_query("vergi", limit="5"))

        assert [r.id for r in results] == ["d1", "d2"]
        assert results[0].match_count == 1
        assert store.find_content_by_body_match.call_args.kwargs["limit"] == 10


class TestContentMatcherSuggest:
    @pytest.mark.asyncio
    async def test_words_only_by_default(self):
        store = _store_returning([_hit("d1", "Vergi usul kanunu ve vergilendirme")])
        tallies = await ContentMatcher(store, InstitutionCache(), phrases_enabled=False).suggest(
            normalize_autocomplete_query("ver")
        )

        assert len(tallies) == 1
        assert [(i.text, i.type) for i in tallies[0].items()] == [("Vergi", "content"), ("vergilendirme", "content")]
        assert store.find_content_by_body_match.call_args.kwargs["limit"] == 5

    @pytest.mark.asyncio
    async def test_short_words_skipped(self):
        """Body words need at least 3 characters."""
        store = _store_returning([_hit("d1", "ab abc")])
        (words,) = await ContentMatcher(store, InstitutionCache(), phrases_enabled=False).suggest(
            normalize_autocomplete_query("ab")
        )
        assert [i.text for i in words.items()] == ["abc"]

    @pytest.mark.asyncio
    async def test_phrases_when_enabled(self):
        store = _store_returning([_hit("d1", "Vergi usul kanunu")])
        words, phrases = await ContentMatcher(store, InstitutionCache(), phrases_enabled=True).suggest(
            normalize_autocomplete_query("vergi")
        )

        assert [i.text for i in words.items()] == ["Vergi"]
        assert [(i.text, i.type) for i in phrases.items()] == [
            ("Vergi usul", "phrase"),
            ("Vergi usul kanunu", "phrase"),
        ]
