import uuid
from datetime import datetime

import pytest

from readstack.core.capabilities import SearchHit
from readstack.core.errors import Unauthorized, ValidationError
from readstack.core.ingestion import ingest
from readstack.core.search import embed_pending, embedding_text, semantic_search
from readstack.models import Reading

from tests.conftest import FakeEmbedder


def _reading(title):
    return Reading(
        id=uuid.uuid4(),
        user_id=uuid.uuid4(),
        url=f"https://example.com/{title}",
        title=title,
        summary="",
        content="",
        is_read=False,
        created_at=datetime.utcnow(),
    )


@pytest.mark.parametrize("query", [None, "", "   \n\t"])
async def test_blank_query_never_calls_embedder(ctx, embedder, store, query):
    with pytest.raises(ValidationError):
        await semantic_search(ctx, query)

    assert embedder.texts == []
    assert store.search_calls == []


async def test_search_requires_session(anonymous_ctx, embedder):
    with pytest.raises(Unauthorized):
        await semantic_search(anonymous_ctx, "climate")

    assert embedder.texts == []


async def test_search_passes_configured_threshold_and_cap(ctx, store, embedder, owner_id):
    ctx.search_match_count = 5
    ctx.search_match_threshold = 0.7

    await semantic_search(ctx, "climate policy")

    assert embedder.texts == ["climate policy"]
    assert store.search_calls == [
        {"user_id": owner_id, "embedding": embedder.vector, "threshold": 0.7, "limit": 5}
    ]


async def test_search_limit_cannot_exceed_configured_cap(ctx, store):
    await semantic_search(ctx, "q", limit=100)
    await semantic_search(ctx, "q", limit=3)

    assert [call["limit"] for call in store.search_calls] == [20, 3]


async def test_search_returns_store_order(ctx, store):
    hits = [SearchHit(_reading("b"), 0.9), SearchHit(_reading("a"), 0.6)]
    store.search_results = hits

    assert await semantic_search(ctx, "anything") == hits


def test_embedding_text_caps_length():
    reading = _reading("Title")
    reading.content = "c" * 100

    assert embedding_text(reading, limit=20) == "Title. " + "c" * 13


async def test_embed_pending_skips_failures(ctx, store):
    a = await ingest(ctx, "https://example.com/a")
    b = await ingest(ctx, "https://example.com/broken")
    embedder = FakeEmbedder(fail_for="broken")

    report = await embed_pending(store, embedder, user_id=ctx.owner_id)

    assert (report.processed, report.embedded, report.failed) == (2, 1, 1)
    assert a.id in store.embeddings
    assert b.id not in store.embeddings


async def test_embed_pending_pages_past_failed_rows(ctx, store):
    await ingest(ctx, "https://example.com/broken1")
    await ingest(ctx, "https://example.com/broken2")
    good = await ingest(ctx, "https://example.com/good")
    embedder = FakeEmbedder(fail_for="broken")

    report = await embed_pending(store, embedder, user_id=ctx.owner_id, batch_size=2)

    assert (report.processed, report.embedded, report.failed) == (3, 1, 2)
    assert list(store.embeddings) == [good.id]


async def test_embed_pending_stops_after_max_batches(ctx, store):
    for name in ("a", "b", "c"):
        await ingest(ctx, f"https://example.com/{name}")

    report = await embed_pending(store, FakeEmbedder(), user_id=ctx.owner_id, batch_size=1, max_batches=2)

    assert (report.processed, report.embedded) == (2, 2)
    assert len(store.embeddings) == 2


async def test_ingestion_never_writes_embeddings(ctx, store, embedder):
    await ingest(ctx, "https://example.com/a")

    assert embedder.texts == []
    assert store.embeddings == {}
