# @TASK P3-T3.2 - In-memory institution cache
# @TEST tests/test_institution_cache.py

"""Process-wide institution cache.

Readers work on an immutable snapshot (``MappingProxyType``) and never block.
A refresh loads the full table, builds a new snapshot and publishes it with a
single reference assignment, so a reader sees either the old map or the new
one, never a mix. Concurrent refreshes are serialized by an ``asyncio.Lock``.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from functools import lru_cache
from types import MappingProxyType

from legal_docs.constants import UNKNOWN_INSTITUTION_NAME
from legal_docs.services.document_store import DocumentStore, InstitutionInfo

logger = logging.getLogger(__name__)


class InstitutionCache:
    """Snapshot map of institution id -> :class:`InstitutionInfo`."""

    def __init__(self) -> None:
        self._snapshot: Mapping[str, InstitutionInfo] = MappingProxyType({})
        self._refresh_lock = asyncio.Lock()

    def snapshot(self) -> Mapping[str, InstitutionInfo]:
        """Return the current read-only snapshot (insertion order = name order)."""
        return self._snapshot

    def all_institutions(self) -> list[InstitutionInfo]:
        return list(self._snapshot.values())

    def by_id(self, institution_id: str | None) -> InstitutionInfo | None:
        if institution_id is None:
            return None
        return self._snapshot.get(institution_id)

    def name_for(self, institution_id: str | None) -> str:
        institution = self.by_id(institution_id)
        return institution.name if institution else UNKNOWN_INSTITUTION_NAME

    def logo_for(self, institution_id: str | None) -> str:
        institution = self.by_id(institution_id)
        return institution.logo if institution else ""

    def __len__(self) -> int:
        return len(self._snapshot)

    def replace(self, institutions: list[InstitutionInfo]) -> None:
        """Publish a new snapshot built from *institutions*."""
        self._snapshot = MappingProxyType({inst.id: inst for inst in institutions})

    async def refresh(self, store: DocumentStore, timeout: float | None = None) -> int:
        """Reload every institution from *store* and swap the snapshot.

        Raises:
            DocumentStoreError: The institutions could not be loaded; the
                previous snapshot stays in place.
            TimeoutError: Loading took longer than *timeout* seconds.
        """
        async with self._refresh_lock:
            institutions = await asyncio.wait_for(store.load_institutions(), timeout=timeout)
            self.replace(institutions)
        logger.info("Loaded %d institutions into cache", len(institutions))
        return len(institutions)


@lru_cache
def get_institution_cache() -> InstitutionCache:
    """Return the process-wide cache (also used as a FastAPI dependency)."""
    return InstitutionCache()
