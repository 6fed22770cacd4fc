"""
Listing, read-state and deletion of saved readings.
"""
import logging
from typing import Any, Callable, List
from uuid import UUID

from readstack.core.context import RequestContext
from readstack.core.errors import NotFound
from readstack.models.reading import Reading

logger = logging.getLogger(__name__)


async def list_readings(
    ctx: RequestContext,
    unread_only: bool = False,
    render: Callable[[List[Reading]], Any] = list,
) -> Any:
    """
    Owner's readings, newest first.

    ``render`` shapes the rows before they are cached, so cached listings
    never hold session-bound objects.
    """
    owner_id = ctx.require_owner()

    cached = ctx.listing_cache.get(owner_id, key=unread_only)
    if cached is not None:
        return cached

    readings = await ctx.store.list_for_owner(owner_id, unread_only=unread_only)
    listing = render(readings)
    ctx.listing_cache.put(owner_id, listing, key=unread_only)
    return listing


async def set_read(ctx: RequestContext, reading_id: UUID, is_read: bool) -> Reading:
    owner_id = ctx.require_owner()

    reading = await ctx.store.set_read(owner_id, reading_id, is_read)
    if reading is None:
        raise NotFound()

    ctx.listing_cache.invalidate(owner_id)
    return reading


async def delete_reading(ctx: RequestContext, reading_id: UUID) -> None:
    owner_id = ctx.require_owner()

    if not await ctx.store.delete(owner_id, reading_id):
        raise NotFound()

    ctx.listing_cache.invalidate(owner_id)
    logger.info("Deleted reading %s for user %s", reading_id, owner_id)
