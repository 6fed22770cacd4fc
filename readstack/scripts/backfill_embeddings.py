"""
Backfill embeddings for saved readings.

Ingestion stores readings without an embedding; semantic search only sees
rows that have one. This script embeds pending rows in batches until none
are left; rows that fail are skipped for the rest of the run.

Usage:
    python -m readstack.scripts.backfill_embeddings --batch-size 50
    python -m readstack.scripts.backfill_embeddings --user-id <uuid> --max-batches 1
"""
import argparse
import asyncio
import logging
import sys
from typing import Optional
from uuid import UUID

from readstack.config import settings
from readstack.core.search import BackfillReport, embed_pending
from readstack.database import AsyncSessionLocal, async_engine
from readstack.logger import setup_logging
from readstack.services import OpenAIEmbedder, SqlReadingStore

logger = logging.getLogger("readstack.scripts.backfill_embeddings")


async def run(batch_size: int, user_id: Optional[UUID] = None, max_batches: int = 0) -> BackfillReport:
    embedder = OpenAIEmbedder.from_settings()

    try:
        async with AsyncSessionLocal() as session:
            return await embed_pending(
                SqlReadingStore(session),
                embedder,
                user_id=user_id,
                batch_size=batch_size,
                text_limit=settings.embedding_text_limit,
                max_batches=max_batches or None,
            )
    finally:
        await async_engine.dispose()


def main() -> int:
    parser = argparse.ArgumentParser(description="Embed saved readings that have no embedding")
    parser.add_argument("--batch-size", type=int, default=50, help="Readings per batch")
    parser.add_argument("--user-id", type=UUID, default=None, help="Only backfill this user's readings")
    parser.add_argument("--max-batches", type=int, default=0, help="Stop after N batches (0 = until done)")
    args = parser.parse_args()

    setup_logging(settings.log_level, settings.log_file)

    total = asyncio.run(run(args.batch_size, args.user_id, args.max_batches))
    logger.info(
        "Backfill finished: %d processed, %d embedded, %d failed",
        total.processed, total.embedded, total.failed,
    )
    return 1 if total.failed else 0


if __name__ == "__main__":
    sys.exit(main())
