import uuid
from datetime import datetime
from typing import Dict, List, Optional

import httpx
import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from readstack.core.cache import ListingCache
from readstack.core.capabilities import ExtractedPage, NewReading, SearchHit
from readstack.core.context import RequestContext
from readstack.core.errors import Conflict, UpstreamError
from readstack.database import Base
from readstack.models import Reading, User  # noqa: F401  registers tables


# 1) deterministic stand-ins for the external services


class FakeExtractor:
    def __init__(self, page: Optional[ExtractedPage] = None, error: Optional[Exception] = None):
        self.page = page
        self.error = error
        self.calls: List[str] = []

    async def extract(self, url: str) -> ExtractedPage:
        self.calls.append(url)
        if self.error:
            raise self.error
        if self.page is not None:
            return self.page
        return ExtractedPage(url=url, content=f"content of {url}", title=f"Title of {url}")


class FakeSummarizer:
    def __init__(self, text: str = "A short summary.", error: Optional[Exception] = None):
        self.text = text
        self.error = error
        self.prompts: List[str] = []

    async def summarize(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.error:
            raise self.error
        return self.text


class FakeEmbedder:
    def __init__(self, vector: Optional[List[float]] = None, fail_for: Optional[str] = None):
        self.vector = vector or [0.1, 0.2, 0.3]
        self.fail_for = fail_for
        self.texts: List[str] = []

    async def embed(self, text: str) -> List[float]:
        self.texts.append(text)
        if self.fail_for and self.fail_for in text:
            raise UpstreamError("Failed to generate embedding")
        return list(self.vector)


class InMemoryStore:
    """Reading store backed by a dict, counting every write."""

    def __init__(self):
        self.rows: Dict[uuid.UUID, Reading] = {}
        self.embeddings: Dict[uuid.UUID, List[float]] = {}
        self.writes = 0
        self.lookups = 0
        self.search_calls: List[dict] = []
        self.search_results: List[SearchHit] = []

    async def find_by_url(self, user_id, url):
        self.lookups += 1
        for row in self.rows.values():
            if row.user_id == user_id and row.url == url:
                return row
        return None

    async def insert(self, reading: NewReading) -> Reading:
        # Mirrors the database's (user_id, url) unique constraint
        for row in self.rows.values():
            if row.user_id == reading.user_id and row.url == reading.url:
                raise Conflict()
        self.writes += 1
        row = Reading(
            id=uuid.uuid4(),
            user_id=reading.user_id,
            url=reading.url,
            title=reading.title,
            og_image=reading.og_image,
            favicon=reading.favicon,
            summary=reading.summary,
            content=reading.content,
            is_read=reading.is_read,
            embedding=None,
            created_at=datetime.utcnow(),
        )
        self.rows[row.id] = row
        return row

    async def list_for_owner(self, user_id, unread_only=False):
        rows = [r for r in self.rows.values() if r.user_id == user_id]
        if unread_only:
            rows = [r for r in rows if not r.is_read]
        return sorted(rows, key=lambda r: r.created_at, reverse=True)

    async def set_read(self, user_id, reading_id, is_read):
        row = self.rows.get(reading_id)
        if row is None or row.user_id != user_id:
            return None
        self.writes += 1
        row.is_read = is_read
        return row

    async def delete(self, user_id, reading_id):
        row = self.rows.get(reading_id)
        if row is None or row.user_id != user_id:
            return False
        self.writes += 1
        del self.rows[reading_id]
        return True

    async def search(self, user_id, embedding, threshold, limit):
        self.search_calls.append(
            {"user_id": user_id, "embedding": embedding, "threshold": threshold, "limit": limit}
        )
        return self.search_results[:limit]

    async def pending_embeddings(self, user_id, limit, exclude_ids=()):
        rows = [
            r for r in self.rows.values()
            if r.id not in self.embeddings
            and r.id not in exclude_ids
            and (user_id is None or r.user_id == user_id)
        ]
        return rows[:limit]

    async def set_embedding(self, reading_id, embedding):
        self.writes += 1
        self.embeddings[reading_id] = embedding


# 2) workflow context wired to the stand-ins


@pytest.fixture
def owner_id():
    return uuid.uuid4()


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def extractor():
    return FakeExtractor()


@pytest.fixture
def summarizer():
    return FakeSummarizer()


@pytest.fixture
def embedder():
    return FakeEmbedder()


@pytest.fixture
def listing_cache():
    return ListingCache(ttl_seconds=60)


@pytest.fixture
def ctx(owner_id, store, extractor, summarizer, embedder, listing_cache):
    return RequestContext(
        owner_id=owner_id,
        store=store,
        extractor=extractor,
        summarizer=summarizer,
        embedder=embedder,
        listing_cache=listing_cache,
        search_match_threshold=0.5,
        search_match_count=20,
    )


@pytest.fixture
def anonymous_ctx(ctx):
    ctx.owner_id = None
    return ctx


# 3) in-process ASGI client with the context dependency overridden


@pytest.fixture
async def client(ctx):
    from readstack.api.deps import get_context
    from readstack.main import app

    async def override_get_context():
        return ctx

    app.dependency_overrides[get_context] = override_get_context
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as http:
        yield http
    app.dependency_overrides.clear()


# 4) SQLite-backed session for the SQLAlchemy store and auth endpoints


@pytest.fixture
async def db_session():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session

    await engine.dispose()
