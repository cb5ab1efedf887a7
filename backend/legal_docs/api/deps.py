# @TASK P4-T4.1 - Shared API dependencies

"""FastAPI dependencies shared by the routers.

Overridden in tests through ``app.dependency_overrides``.
"""

from __future__ import annotations

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from legal_docs.database import get_session_factory
from legal_docs.services.document_store import DocumentStore


def get_document_store(
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),  # noqa: B008
) -> DocumentStore:
    return DocumentStore(session_factory)
