"""Bilingual message translations for API responses.

Usage:
    from legal_docs.utils.messages import msg
    msg("document.not_found", lang)                  # → "Belge bulunamadı" or "Document not found"
    msg("search.failed", lang, detail="timeout")     # → "Arama başarısız: timeout" or "Failed to search: timeout"
"""

from __future__ import annotations

_MESSAGES: dict[str, dict[str, str]] = {
    # Query validation
    "query.missing": {
        "tr": "Arama sorgusu 'q' parametresi zorunludur",
        "en": "Search query 'q' parameter is required",
    },
    "query.too_short": {
        "tr": "Arama sorgusu en az {min_length} karakter olmalıdır",
        "en": "Search query must be at least {min_length} characters long",
    },
    # Search
    "search.failed": {
        "tr": "Arama başarısız: {detail}",
        "en": "Failed to search: {detail}",
    },
    "search.timeout": {
        "tr": "Arama zaman aşımına uğradı",
        "en": "Search timed out",
    },
    # Autocomplete
    "autocomplete.failed": {
        "tr": "Öneriler alınamadı: {detail}",
        "en": "Failed to get suggestions: {detail}",
    },
    "autocomplete.timeout": {
        "tr": "Öneri isteği zaman aşımına uğradı",
        "en": "Autocomplete timed out",
    },
    # Documents
    "document.not_found": {
        "tr": "Belge bulunamadı",
        "en": "Document not found",
    },
    "document.fetch_failed": {
        "tr": "Belge alınamadı: {detail}",
        "en": "Failed to fetch document: {detail}",
    },
    "statistics.failed": {
        "tr": "İstatistikler alınamadı: {detail}",
        "en": "Failed to fetch statistics: {detail}",
    },
    "request.timeout": {
        "tr": "İstek zaman aşımına uğradı",
        "en": "Request timed out",
    },
    # Institutions
    "institutions.refreshed": {
        "tr": "{count} kurum önbelleğe yüklendi",
        "en": "{count} institutions loaded into cache",
    },
    "institutions.refresh_failed": {
        "tr": "Kurumlar yüklenemedi: {detail}",
        "en": "Failed to load institutions: {detail}",
    },
}


def msg(key: str, lang: str = "tr", **kwargs: object) -> str:
    """Return the translated message for *key*, formatted with *kwargs*.

    Falls back to Turkish, then to the key itself for unknown keys.
    """
    translations = _MESSAGES.get(key)
    if translations is None:
        return key
    template = translations.get(lang) or translations["tr"]
    return template.format(**kwargs) if kwargs else template
