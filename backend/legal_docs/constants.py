from enum import StrEnum


class DocumentStatus(StrEnum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class MatchType(StrEnum):
    """Field that produced a search hit, in descending metadata priority."""

    TITLE = "title"
    INSTITUTION = "institution"
    TAGS = "tags"
    KEYWORDS = "keywords"
    DESCRIPTION = "description"
    CONTENT = "content"
    PHRASE = "phrase"


class SuggestionType(StrEnum):
    TITLE = "title"
    PHRASE = "phrase"
    KEYWORD = "keyword"
    TAG = "tag"
    CONTENT = "content"
    INSTITUTION = "institution"


# Lower value wins when the same token is seen in several fields
SUGGESTION_TYPE_PRIORITY: dict[str, int] = {
    SuggestionType.TITLE: 1,
    SuggestionType.PHRASE: 2,
    SuggestionType.KEYWORD: 3,
    SuggestionType.TAG: 4,
    SuggestionType.CONTENT: 5,
    SuggestionType.INSTITUTION: 6,
}
OTHER_SUGGESTION_PRIORITY = 7

UNKNOWN_INSTITUTION_NAME = "Bilinmeyen Kurum"
UNSPECIFIED_DOCUMENT_TYPE = "Belirtilmemiş"
