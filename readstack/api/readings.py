"""
Reading list endpoints: add, fetch-or-scrape, list, mark read, delete.
"""
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status

from readstack.config import settings
from readstack.core import (
    RequestContext,
    ingest,
    fetch_or_scrape,
    list_readings as list_readings_for_owner,
    set_read,
    delete_reading as delete_reading_for_owner,
    embed_pending,
)
from readstack.schemas.reading import (
    ReadingCreate,
    ReadingUpdate,
    ReadingSummary,
    ReadingResponse,
    ReadingDetail,
    ScrapedArticle,
    AddReadingResponse,
    FetchReadingResponse,
    BackfillResponse,
)
from readstack.api.deps import get_context

router = APIRouter()


def _render_listing(readings) -> List[ReadingResponse]:
    return [ReadingResponse.model_validate(reading) for reading in readings]


@router.get("", response_model=List[ReadingResponse])
async def list_readings(
    unread_only: bool = False,
    ctx: RequestContext = Depends(get_context),
):
    """List saved articles, newest first."""
    return await list_readings_for_owner(ctx, unread_only=unread_only, render=_render_listing)


@router.post("", response_model=AddReadingResponse)
async def add_reading(
    item_data: ReadingCreate,
    ctx: RequestContext = Depends(get_context),
):
    """Scrape, summarize and save an article."""
    reading = await ingest(ctx, item_data.url)
    return AddReadingResponse(data=ReadingSummary.model_validate(reading))


@router.get("/fetch", response_model=FetchReadingResponse)
async def fetch_reading(
    url: Optional[str] = Query(default=None),
    ctx: RequestContext = Depends(get_context),
):
    """Return the saved article for a URL, or scrape it without saving."""
    result = await fetch_or_scrape(ctx, url)

    if result.source == "database":
        data = ReadingDetail.model_validate(result.reading)
    else:
        data = ScrapedArticle.model_validate(result.page)

    return FetchReadingResponse(source=result.source, data=data)


@router.post("/embeddings/backfill", response_model=BackfillResponse)
async def backfill_embeddings(
    batch_size: int = Query(default=50, ge=1, le=500),
    ctx: RequestContext = Depends(get_context),
):
    """Embed the caller's readings that have no embedding yet."""
    owner_id = ctx.require_owner()
    report = await embed_pending(
        ctx.store,
        ctx.embedder,
        user_id=owner_id,
        batch_size=batch_size,
        text_limit=settings.embedding_text_limit,
    )
    return BackfillResponse.model_validate(report)


@router.patch("/{reading_id}", response_model=ReadingResponse)
async def update_reading(
    reading_id: UUID,
    item_data: ReadingUpdate,
    ctx: RequestContext = Depends(get_context),
):
    """Mark an article read or unread."""
    return await set_read(ctx, reading_id, item_data.is_read)


@router.delete("/{reading_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_reading(
    reading_id: UUID,
    ctx: RequestContext = Depends(get_context),
):
    """Remove an article from the reading list."""
    await delete_reading_for_owner(ctx, reading_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
