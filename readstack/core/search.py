"""
Semantic search and embedding backfill.
"""
import logging
from dataclasses import dataclass
from typing import List, Optional, Set
from uuid import UUID

from readstack.core.capabilities import Embedder, ReadingStore, SearchHit
from readstack.core.context import RequestContext
from readstack.core.errors import UpstreamError, ValidationError
from readstack.models.reading import Reading

logger = logging.getLogger(__name__)


async def semantic_search(
    ctx: RequestContext,
    query: Optional[str],
    limit: Optional[int] = None,
) -> List[SearchHit]:
    """
    Readings closest in meaning to ``query``, most similar first.

    Ranking is entirely the store's; results are returned as received.
    """
    owner_id = ctx.require_owner()

    if not isinstance(query, str) or not query.strip():
        raise ValidationError("Search query is required")

    match_count = ctx.search_match_count
    if limit is not None:
        match_count = min(limit, match_count)

    embedding = await ctx.embedder.embed(query)

    return await ctx.store.search(
        owner_id,
        embedding,
        threshold=ctx.search_match_threshold,
        limit=match_count,
    )


@dataclass
class BackfillReport:
    processed: int = 0
    embedded: int = 0
    failed: int = 0


def embedding_text(reading: Reading, limit: int = 8000) -> str:
    """Title plus the leading part of the content, capped at ``limit`` chars."""
    text = f"{reading.title}. {reading.content or ''}".strip()
    return text[:limit]


async def embed_pending(
    store: ReadingStore,
    embedder: Embedder,
    user_id: Optional[UUID] = None,
    batch_size: int = 50,
    text_limit: int = 8000,
    max_batches: Optional[int] = None,
) -> BackfillReport:
    """
    Embed readings that have no embedding yet, ``batch_size`` rows at a time.

    A failed row is logged and left pending for a later run; within this run
    it is skipped so later batches can reach newer rows. Paging stops when a
    batch comes back short or after ``max_batches`` batches.
    """
    report = BackfillReport()
    failed_ids: Set[UUID] = set()
    batches = 0

    while max_batches is None or batches < max_batches:
        batch = await store.pending_embeddings(user_id, limit=batch_size, exclude_ids=failed_ids)
        batches += 1

        for reading in batch:
            report.processed += 1
            try:
                vector = await embedder.embed(embedding_text(reading, text_limit))
            except UpstreamError:
                logger.warning("Embedding failed for reading %s; leaving it pending", reading.id)
                failed_ids.add(reading.id)
                report.failed += 1
                continue

            await store.set_embedding(reading.id, vector)
            report.embedded += 1

        if len(batch) < batch_size:
            break

    logger.info(
        "Embedding backfill: %d processed, %d embedded, %d failed",
        report.processed, report.embedded, report.failed,
    )
    return report
