"""Language detection for localized API messages."""

from __future__ import annotations

from fastapi import Request

SUPPORTED_LANGUAGES = ("tr", "en")
DEFAULT_LANGUAGE = "tr"


def get_language(request: Request) -> str:
    """Extract preferred language from the Accept-Language header.

    Returns 'tr' or 'en'. Defaults to 'tr' if the header is missing
    or names an unsupported language.
    """
    header = request.headers.get("accept-language", DEFAULT_LANGUAGE)
    lang = header.split(",")[0].strip().lower()
    if lang.startswith("en"):
        return "en"
    return DEFAULT_LANGUAGE
