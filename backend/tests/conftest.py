# @TASK P0-T0.3 - Test configuration
import os
from collections.abc import AsyncGenerator
from datetime import date

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

# Set test environment variables before importing app modules
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("LOG_LEVEL", "DEBUG")


@pytest.fixture(scope="session")
def anyio_backend():
    return "asyncio"


# ---------------------------------------------------------------------------
# Seed data
# ---------------------------------------------------------------------------

INSTITUTIONS = [
    {"id": "inst-gib", "name": "Gelir İdaresi Başkanlığı", "logo": "/logos/gib.png"},
    {"id": "inst-hmb", "name": "Hazine ve Maliye Bakanlığı", "logo": "/logos/hmb.png"},
    {"id": "inst-sgk", "name": "Sosyal Güvenlik Kurumu", "logo": ""},
]

DOCUMENTS = [
    {
        "id": "doc-vuk",
        "title": "Vergi Usul Kanunu Genel Tebliği",
        "institution_id": "inst-gib",
        "document_type": "Tebliğ",
        "legal_status": "Yürürlükte",
        "publication_date": date(2024, 3, 1),
        "tags": "vergi, usul",
        "keywords": "VUK, beyanname",
        "description": "Vergi usul kanunu kapsamındaki genel tebliğ.",
        "url_slug": "vergi-usul-kanunu-genel-tebligi",
        "page_count": 12,
        "file_size_mb": 1.5,
        "pdf_url": "/pdf/vuk.pdf",
    },
    {
        "id": "doc-kdv",
        "title": "Katma Değer Vergisi Uygulama Tebliği",
        "institution_id": "inst-gib",
        "document_type": "Tebliğ",
        "legal_status": "Yürürlükte",
        "publication_date": date(2023, 6, 15),
        "tags": "kdv",
        "keywords": "katma değer",
        "description": "KDV uygulamalarına ilişkin açıklamalar.",
        "url_slug": "kdv-uygulama-tebligi",
    },
    {
        "id": "doc-borc",
        "title": "Borçlanma Yönetmeliği",
        "institution_id": "inst-hmb",
        "document_type": "Yönetmelik",
        "legal_status": "Yürürlükte",
        "publication_date": date(2022, 1, 10),
        "tags": "borç, hazine",
        "keywords": "iç borçlanma",
        "description": "Hazine borçlanma esasları.",
        "url_slug": "borclanma-yonetmeligi",
    },
    {
        "id": "doc-prim",
        "title": "Prim Affı Genelgesi",
        "institution_id": "inst-sgk",
        "document_type": "",
        "legal_status": "Yürürlükte",
        "publication_date": None,
        "tags": "prim",
        "keywords": "sigorta",
        "description": "Prim borçlarının yapılandırılması.",
        "url_slug": "prim-affi-genelgesi",
    },
    {
        "id": "doc-old",
        "title": "Mülga Vergi Tebliği",
        "institution_id": "inst-gib",
        "document_type": "Tebliğ",
        "legal_status": "Mülga",
        "publication_date": date(2010, 5, 5),
        "tags": "vergi",
        "keywords": "",
        "description": "Yürürlükten kaldırılmış tebliğ.",
        "url_slug": "mulga-vergi-tebligi",
        "status": "inactive",
    },
]

CONTENTS = [
    {"id": "content-vuk", "document_id": "doc-vuk", "body": "Bu tebliğ vergi usul kanunu hükümlerine göre hazırlanmıştır."},
    {
        "id": "content-borc",
        "document_id": "doc-borc",
        "body": "Hazine tarafından yapılacak borçlanmalarda vergi istisnası uygulanır.",
    },
    {"id": "content-old", "document_id": "doc-old", "body": "vergi vergi vergi"},
]


# ---------------------------------------------------------------------------
# Database fixtures
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture(scope="function")
async def session_factory(tmp_path) -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    """Provide a session factory bound to a fresh SQLite database file.

    Each test gets its own database with all tables created.
    Uses a per-test engine to avoid event loop issues.
    """
    from legal_docs.database import Base
    import legal_docs.models  # noqa: F401 - Import to register models with Base

    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'legal_docs.db'}", echo=False)
    factory = async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield factory

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def seeded_factory(session_factory) -> async_sessionmaker[AsyncSession]:
    """Session factory over a database holding the seed institutions and documents."""
    from legal_docs.models import Document, DocumentContent, Institution

    async with session_factory() as session:
        session.add_all(Institution(**row) for row in INSTITUTIONS)
        await session.flush()
        session.add_all(Document(**row) for row in DOCUMENTS)
        await session.flush()
        session.add_all(DocumentContent(**row) for row in CONTENTS)
        await session.commit()

    return session_factory


@pytest.fixture
def store(seeded_factory):
    from legal_docs.services.document_store import DocumentStore

    return DocumentStore(seeded_factory)


@pytest_asyncio.fixture
async def institution_cache(store):
    from legal_docs.services.institution_cache import InstitutionCache

    cache = InstitutionCache()
    await cache.refresh(store)
    return cache


# ---------------------------------------------------------------------------
# API fixtures
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def client(store, institution_cache) -> AsyncGenerator[AsyncClient, None]:
    """httpx client against the app with the seeded store and cache injected."""
    from legal_docs.api.deps import get_document_store
    from legal_docs.main import app
    from legal_docs.services.institution_cache import get_institution_cache

    app.dependency_overrides[get_document_store] = lambda: store
    app.dependency_overrides[get_institution_cache] = lambda: institution_cache

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
