# @TASK P2-T2.2 - Metadata matcher tests
# @TEST tests/test_metadata_matcher.py

"""Tests for metadata scoring and the MetadataMatcher scan phase.

The store is mocked so that only the scoring and candidate handling are
exercised here; SQL behaviour is covered by test_document_store.py.
"""

from __future__ import annotations

from datetime import date
from unittest.mock import AsyncMock, MagicMock

import pytest

from legal_docs.search.matcher import SubstringMatcher
from legal_docs.search.metadata import (
    MetadataMatcher,
    build_metadata_result,
    count_matches,
    determine_match_type,
    score_document,
)
from legal_docs.search.params import DEFAULT_SEARCH_PARAMS
from legal_docs.search.query import normalize_autocomplete_query, normalize_search_query
from legal_docs.services.document_store import DocumentRecord, InstitutionInfo
from legal_docs.services.institution_cache import InstitutionCache

PARAMS = dict(DEFAULT_SEARCH_PARAMS)


def _doc(doc_id: str = "d1", **fields) -> DocumentRecord:
    return DocumentRecord(id=doc_id, **fields)


@pytest.fixture
def cache() -> InstitutionCache:
    cache = InstitutionCache()
    cache.replace(
        [
            InstitutionInfo(id="inst-gib", name="Gelir İdaresi Başkanlığı", logo="/logos/gib.png"),
            InstitutionInfo(id="inst-vergi", name="Vergi Denetim Kurulu"),
        ]
    )
    return cache


# ---------------------------------------------------------------------------
# Scoring
# ---------------------------------------------------------------------------


class TestScoreDocument:
    def test_weights_add_up(self):
        doc = _doc(title="Vergi Tebliği", tags="vergi, usul", keywords="VUK", description="Vergi usul esasları")
        matcher = SubstringMatcher("vergi")
        # title 10 + tags 3 + description 1
        assert score_document(doc, "Gelir İdaresi Başkanlığı", matcher, PARAMS) == 14.0

    def test_institution_weight(self):
        doc = _doc(title="Denetim Raporu")
        assert score_document(doc, "Vergi Denetim Kurulu", SubstringMatcher("vergi"), PARAMS) == 5.0

    def test_no_match_scores_zero(self):
        doc = _doc(title="Prim Affı")
        assert score_document(doc, "Sosyal Güvenlik Kurumu", SubstringMatcher("vergi"), PARAMS) == 0.0

    def test_overridden_weight(self):
        doc = _doc(title="Vergi Tebliği")
        params = {**PARAMS, "title_weight": 12}
        assert score_document(doc, "", SubstringMatcher("vergi"), params) == 12.0


class TestMatchType:
    @pytest.mark.parametrize(
        ("fields", "institution", "expected"),
        [
            ({"title": "Vergi", "tags": "vergi"}, "", "title"),
            ({"tags": "vergi"}, "Vergi Denetim Kurulu", "institution"),
            ({"tags": "vergi", "keywords": "vergi"}, "", "tags"),
            ({"keywords": "vergi", "description": "vergi"}, "", "keywords"),
            ({"description": "vergi"}, "", "description"),
        ],
    )
    def test_priority(self, fields, institution, expected):
        assert determine_match_type(_doc(**fields), institution, SubstringMatcher("vergi")) == expected

    def test_falls_back_to_description(self):
        assert determine_match_type(_doc(title="Prim"), "", SubstringMatcher("vergi")) == "description"


class TestCountMatches:
    def test_sums_all_fields(self):
        doc = _doc(title="Vergi ve vergi", tags="vergi", description="VERGI")
        assert count_matches(doc, "Vergi Denetim Kurulu", SubstringMatcher("vergi")) == 5


class TestBuildResult:
    def test_display_fields(self, cache):
        doc = _doc(
            title="Vergi Tebliği",
            institution_id="inst-gib",
            document_type="Tebliğ",
            publication_date=date(2024, 3, 1),
            description="x" * 250,
        )
        result = build_metadata_result(doc, cache, SubstringMatcher("vergi"), PARAMS)

        assert result.institution_name == "Gelir İdaresi Başkanlığı"
        assert result.institution_logo == "/logos/gib.png"
        assert result.publication_date == "2024-03-01"
        assert result.description == "x" * 200 + "..."
        assert result.relevance_score == 10.0
        assert result.relevance_percentage == 30
        assert result.match_type == "title"
        assert result.content_preview is None

    def test_unknown_institution(self, cache):
        result = build_metadata_result(_doc(title="Vergi", institution_id="gone"), cache, SubstringMatcher("vergi"), PARAMS)
        assert result.institution_name == "Bilinmeyen Kurum"


# ---------------------------------------------------------------------------
# Scan phase
# ---------------------------------------------------------------------------


class TestMetadataMatcherSearch:
    @pytest.mark.asyncio
    async def test_overfetch_without_institution_candidates(self, cache):
        """Fetches limit x 2 field matches; institution names do not widen the scan."""
        store = MagicMock()
        store.find_active_by_field_match = AsyncMock(return_value=[])
        query = normalize_search_query("vergi", limit="7")

        await MetadataMatcher(store, cache).search(query)

        args, kwargs = store.find_active_by_field_match.call_args
        assert args[0] == ("title", "description", "keywords", "tags")
        assert args[1] == "vergi"
        assert kwargs["limit"] == 14
        assert "institution_ids" not in kwargs

    @pytest.mark.asyncio
    async def test_duplicates_dropped(self, cache):
        doc = _doc("d1", title="Vergi Tebliği")
        store = MagicMock()
        store.find_active_by_field_match = AsyncMock(return_value=[doc, doc, _doc("d2", tags="vergi")])

        results = await MetadataMatcher(store, cache).search(normalize_search_query("vergi"))

        assert [r.id for r in results] == ["d1", "d2"]
        assert results[1].match_type == "tags"


class TestMetadataMatcherSuggest:
    @pytest.mark.asyncio
    async def test_one_tally_per_field(self, cache):
        docs_by_field = {
            "title": [_doc("d1", title="Vergi Usul Kanunu"), _doc("d2", title="Katma Değer Vergisi")],
            "keywords": [_doc("d1", keywords="vergi, beyan")],
            "tags": [_doc("d3", tags="gelir vergisi")],
        }

        async def _find(fields, query, institution_filter, limit):
            assert limit == 100
            return docs_by_field[fields[0]]

        store = MagicMock()
        store.find_active_by_field_match = AsyncMock(side_effect=_find)

        title, keyword, tag = await MetadataMatcher(store, cache).suggest(normalize_autocomplete_query("ver"))

        assert [(i.text, i.type) for i in title.items()] == [("Vergi", "title"), ("Vergisi", "title")]
        assert [(i.text, i.type) for i in keyword.items()] == [("vergi", "keyword")]
        assert [(i.text, i.type) for i in tag.items()] == [("vergisi", "tag")]
