"""
Capabilities the workflows depend on.

Each external collaborator is modelled as a small protocol so handlers can
receive real service clients in production and deterministic stand-ins in
tests.
"""
from dataclasses import dataclass
from typing import Collection, List, Optional, Protocol
from uuid import UUID

from readstack.models.reading import Reading


@dataclass
class ExtractedPage:
    """Main content and metadata returned by the extraction service."""
    url: str
    content: str
    title: Optional[str] = None
    og_image: Optional[str] = None
    favicon: Optional[str] = None


@dataclass
class NewReading:
    """Fields written when a reading is first stored."""
    user_id: UUID
    url: str
    title: str
    summary: str
    content: str
    og_image: Optional[str] = None
    favicon: Optional[str] = None
    is_read: bool = False


@dataclass
class SearchHit:
    reading: Reading
    similarity: float


class ContentExtractor(Protocol):
    async def extract(self, url: str) -> ExtractedPage:
        ...


class Summarizer(Protocol):
    async def summarize(self, prompt: str) -> str:
        ...


class Embedder(Protocol):
    async def embed(self, text: str) -> List[float]:
        ...


class ReadingStore(Protocol):
    """Persistence for readings, always scoped to an owner."""

    async def find_by_url(self, user_id: UUID, url: str) -> Optional[Reading]:
        ...

    async def insert(self, reading: NewReading) -> Reading:
        ...

    async def list_for_owner(self, user_id: UUID, unread_only: bool = False) -> List[Reading]:
        ...

    async def set_read(self, user_id: UUID, reading_id: UUID, is_read: bool) -> Optional[Reading]:
        ...

    async def delete(self, user_id: UUID, reading_id: UUID) -> bool:
        ...

    async def search(
        self,
        user_id: UUID,
        embedding: List[float],
        threshold: float,
        limit: int,
    ) -> List[SearchHit]:
        ...

    async def pending_embeddings(
        self,
        user_id: Optional[UUID],
        limit: int,
        exclude_ids: Collection[UUID] = (),
    ) -> List[Reading]:
        ...

    async def set_embedding(self, reading_id: UUID, embedding: List[float]) -> None:
        ...
