"""Offset/limit windowing over an in-memory ranked list."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TypeVar

T = TypeVar("T")


def paginate(items: Sequence[T], limit: int, offset: int = 0) -> tuple[list[T], int]:
    """Return the ``[offset, offset + limit)`` window and the full length.

    An offset past the end yields an empty page rather than an error; a
    window running past the end is truncated.
    """
    total = len(items)
    start = min(max(offset, 0), total)
    end = min(start + max(limit, 0), total)
    return list(items[start:end]), total
