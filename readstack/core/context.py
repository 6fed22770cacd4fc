"""
Per-request context handed to every workflow.
"""
from dataclasses import dataclass
from typing import Optional
from uuid import UUID

from readstack.config import settings
from readstack.core.cache import ListingCache
from readstack.core.capabilities import ContentExtractor, Embedder, ReadingStore, Summarizer
from readstack.core.errors import Unauthorized


@dataclass
class RequestContext:
    """
    Everything a workflow needs for one request.

    ``owner_id`` is None when the caller has no valid session.
    """
    owner_id: Optional[UUID]
    store: ReadingStore
    extractor: ContentExtractor
    summarizer: Summarizer
    embedder: Embedder
    listing_cache: ListingCache
    search_match_threshold: float = settings.search_match_threshold
    search_match_count: int = settings.search_match_count

    def require_owner(self) -> UUID:
        if self.owner_id is None:
            raise Unauthorized()
        return self.owner_id
