"""Request-scoped search and autocomplete result models."""

from __future__ import annotations

from pydantic import BaseModel, Field


class SearchResult(BaseModel):
    """A single ranked document hit.

    Attributes:
        id: Document id.
        match_type: Field that produced the hit ("title", "tags", ...), or
            "<field>+content" when both the metadata and body scans matched.
        relevance_score: Unbounded heuristic score, recomputed per request.
        relevance_percentage: Display transform of the score (0-100).
        match_count: Number of query occurrences across matched fields.
        content_preview: Body excerpt around the first occurrence.
    """

    id: str
    title: str
    institution_name: str
    institution_logo: str = ""
    document_type: str = ""
    legal_status: str = ""
    publication_date: str | None = None
    tags: str = ""
    description: str = ""
    url_slug: str = ""
    match_type: str
    content_preview: str | None = None
    relevance_score: float
    relevance_percentage: int = 0
    match_count: int = 0


class SearchPage(BaseModel):
    """Paginated search results with the pre-pagination total."""

    results: list[SearchResult]
    total: int
    limit: int
    offset: int


class SuggestionItem(BaseModel):
    """An autocomplete candidate; identity is the lowercased text."""

    text: str
    count: int = Field(default=1, ge=1)
    type: str
