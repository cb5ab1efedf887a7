# @TASK P0-T0.3 - FastAPI app entrypoint

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from legal_docs.config import get_settings
from legal_docs.database import async_session_factory, engine
from legal_docs.services.document_store import DocumentStore, DocumentStoreError
from legal_docs.services.institution_cache import get_institution_cache

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application lifespan: startup and shutdown events."""
    settings = get_settings()
    logging.getLogger("legal_docs").setLevel(settings.LOG_LEVEL.upper())

    # Startup: create all database tables if they don't exist
    from legal_docs import models  # noqa: F401 - Import models to register them with Base
    from legal_docs.database import Base

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    # Warm the institution cache; the API still serves without it
    try:
        await get_institution_cache().refresh(
            DocumentStore(async_session_factory),
            timeout=settings.CACHE_REFRESH_TIMEOUT_SECONDS,
        )
    except (DocumentStoreError, TimeoutError) as exc:
        logger.warning("Failed to load institutions into cache: %s", exc)

    yield
    # Shutdown: dispose the async engine connection pool
    await engine.dispose()


app = FastAPI(
    title="Mevzuat Search API",
    description="Search and autocomplete over published legal documents",
    version="0.1.0",
    lifespan=lifespan,
)

# --- CORS Middleware ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
    expose_headers=["X-Total-Count", "X-Limit", "X-Offset"],
)

# --- Router includes ---
from legal_docs.api.documents import router as documents_router  # noqa: E402
from legal_docs.api.institutions import router as institutions_router  # noqa: E402
from legal_docs.api.search import router as search_router  # noqa: E402

app.include_router(search_router, prefix="/api/v1")
app.include_router(documents_router, prefix="/api/v1")
app.include_router(institutions_router, prefix="/api/v1")


@app.get("/api/v1/health", tags=["health"])
async def health_check() -> dict[str, str]:
    """Health check endpoint.

    Returns a simple status response to verify the API is running.
    """
    return {"status": "ok"}
