# @TASK P2-T2.5 - Metadata/content result merge
# @TEST tests/test_merge.py

"""Union of the metadata and content scan results by document id."""

from __future__ import annotations

from legal_docs.constants import MatchType
from legal_docs.search.ranking import relevance_percentage
from legal_docs.search.schemas import SearchResult


def combine(metadata_result: SearchResult, content_result: SearchResult) -> SearchResult:
    """Merge the two hits of one document.

    The higher score wins, match counts add up, the match type widens to
    "<metadata type>+content" and the preview comes from the body hit.
    """
    score = max(metadata_result.relevance_score, content_result.relevance_score)
    return metadata_result.model_copy(
        update={
            "relevance_score": score,
            "relevance_percentage": relevance_percentage(score),
            "match_type": f"{metadata_result.match_type}+{MatchType.CONTENT}",
            "match_count": metadata_result.match_count + content_result.match_count,
            "content_preview": content_result.content_preview,
        }
    )


def merge_results(
    metadata_results: list[SearchResult],
    content_results: list[SearchResult],
) -> list[SearchResult]:
    """Combine both scans into one list with a single entry per document.

    Metadata hits keep their order, content-only hits follow in theirs.
    The outcome does not depend on which scan completed first.
    """
    merged: dict[str, SearchResult] = {}
    for result in metadata_results:
        merged.setdefault(result.id, result)

    for result in content_results:
        existing = merged.get(result.id)
        if existing is None:
            merged[result.id] = result
        elif existing.match_type == MatchType.CONTENT:
            continue  # duplicate body hit
        elif not existing.match_type.endswith(f"+{MatchType.CONTENT}"):
            merged[result.id] = combine(existing, result)

    return list(merged.values())


def drop_irrelevant(results: list[SearchResult]) -> list[SearchResult]:
    """Remove results whose final score is not positive."""
    return [result for result in results if result.relevance_score > 0]
