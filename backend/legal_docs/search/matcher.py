"""Case-insensitive field matching.

All scoring goes through a :class:`FieldMatcher`, so the naive substring scan
can later be replaced (for example by an inverted index lookup) without
changing the merge and ranking code.
"""

from __future__ import annotations

import re
from typing import Protocol


class FieldMatcher(Protocol):
    """Locates a fixed query inside arbitrary field text."""

    query: str

    def find(self, text: str) -> int:
        """Return the start position of the first match, or -1."""
        ...

    def contains(self, text: str) -> bool: ...

    def count(self, text: str) -> int:
        """Return the number of non-overlapping matches."""
        ...


class SubstringMatcher:
    """Literal, case-insensitive substring matcher.

    The query is escaped, so characters such as ``.`` or ``(`` match
    themselves. Positions refer to the original (not lowercased) text, which
    keeps previews correct for characters whose lowercase form has a
    different length (Turkish "İ").
    """

    def __init__(self, query: str) -> None:
        self.query = query
        self._pattern = re.compile(re.escape(query), re.IGNORECASE)

    def find(self, text: str) -> int:
        if not text:
            return -1
        match = self._pattern.search(text)
        return match.start() if match else -1

    def contains(self, text: str) -> bool:
        return self.find(text) != -1

    def count(self, text: str) -> int:
        if not text:
            return 0
        return sum(1 for _ in self._pattern.finditer(text))
