"""
SQLAlchemy-backed reading store.
"""
import logging
from typing import Collection, List, Optional
from uuid import UUID

from sqlalchemy import select, update, delete
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from readstack.core.capabilities import NewReading, SearchHit
from readstack.core.errors import Conflict, StorageError
from readstack.models.reading import Reading

logger = logging.getLogger(__name__)


def similarity_query(user_id: UUID, embedding: List[float], threshold: float, limit: int):
    """
    Select the owner's readings closer to ``embedding`` than ``threshold``.

    Similarity is ``1 - cosine distance``; rows without an embedding never
    match. Rows come back ordered by descending similarity.
    """
    distance = Reading.embedding.cosine_distance(embedding)
    similarity = (1 - distance).label("similarity")

    return (
        select(Reading, similarity)
        .where(
            Reading.user_id == user_id,
            Reading.embedding.is_not(None),
            (1 - distance) > threshold,
        )
        .order_by(distance)
        .limit(limit)
    )


class SqlReadingStore:
    """
    Reading persistence over an async session.

    Every database failure surfaces as ``StorageError``; a violation of the
    per-owner URL uniqueness constraint surfaces as ``Conflict``.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_by_url(self, user_id: UUID, url: str) -> Optional[Reading]:
        try:
            result = await self.db.execute(
                select(Reading).where(
                    Reading.user_id == user_id,
                    Reading.url == url,
                )
            )
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Reading lookup failed for %s: %r", url, e)
            raise StorageError("Failed to look up article") from e

    async def insert(self, reading: NewReading) -> Reading:
        item = Reading(
            user_id=reading.user_id,
            url=reading.url,
            title=reading.title,
            og_image=reading.og_image,
            favicon=reading.favicon,
            summary=reading.summary,
            content=reading.content,
            is_read=reading.is_read,
        )

        try:
            self.db.add(item)
            await self.db.commit()
            await self.db.refresh(item)
        except IntegrityError as e:
            await self.db.rollback()
            logger.info("Duplicate insert rejected for %s: %r", reading.url, e.orig)
            raise Conflict() from e
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error("Database insert error for %s: %r", reading.url, e)
            raise StorageError("Failed to save article") from e

        return item

    async def list_for_owner(self, user_id: UUID, unread_only: bool = False) -> List[Reading]:
        query = select(Reading).where(Reading.user_id == user_id)

        if unread_only:
            query = query.where(Reading.is_read == False)

        query = query.order_by(Reading.created_at.desc())

        try:
            result = await self.db.execute(query)
        except SQLAlchemyError as e:
            logger.error("Listing readings failed: %r", e)
            raise StorageError("Failed to load readings") from e
        return list(result.scalars().all())

    async def set_read(self, user_id: UUID, reading_id: UUID, is_read: bool) -> Optional[Reading]:
        try:
            result = await self.db.execute(
                select(Reading).where(
                    Reading.id == reading_id,
                    Reading.user_id == user_id,
                )
            )
            item = result.scalar_one_or_none()
            if not item:
                return None

            item.is_read = is_read
            await self.db.commit()
            await self.db.refresh(item)
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error("Updating reading %s failed: %r", reading_id, e)
            raise StorageError("Failed to update article") from e

        return item

    async def delete(self, user_id: UUID, reading_id: UUID) -> bool:
        try:
            result = await self.db.execute(
                delete(Reading).where(
                    Reading.id == reading_id,
                    Reading.user_id == user_id,
                )
            )
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error("Deleting reading %s failed: %r", reading_id, e)
            raise StorageError("Failed to delete article") from e

        return result.rowcount > 0

    async def search(
        self,
        user_id: UUID,
        embedding: List[float],
        threshold: float,
        limit: int,
    ) -> List[SearchHit]:
        """Cosine-similarity search over the owner's embedded readings."""
        try:
            result = await self.db.execute(similarity_query(user_id, embedding, threshold, limit))
        except SQLAlchemyError as e:
            logger.error("Search error: %r", e)
            raise StorageError("Search failed") from e

        return [
            SearchHit(reading=row.Reading, similarity=float(row.similarity))
            for row in result.all()
        ]

    async def pending_embeddings(
        self,
        user_id: Optional[UUID],
        limit: int,
        exclude_ids: Collection[UUID] = (),
    ) -> List[Reading]:
        query = select(Reading).where(Reading.embedding.is_(None))

        if user_id is not None:
            query = query.where(Reading.user_id == user_id)
        if exclude_ids:
            query = query.where(Reading.id.not_in(list(exclude_ids)))

        query = query.order_by(Reading.created_at.asc()).limit(limit)

        try:
            result = await self.db.execute(query)
        except SQLAlchemyError as e:
            logger.error("Loading readings without embeddings failed: %r", e)
            raise StorageError("Failed to load readings") from e
        return list(result.scalars().all())

    async def set_embedding(self, reading_id: UUID, embedding: List[float]) -> None:
        try:
            await self.db.execute(
                update(Reading)
                .where(Reading.id == reading_id)
                .values(embedding=embedding)
            )
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error("Storing embedding for %s failed: %r", reading_id, e)
            raise StorageError("Failed to store embedding") from e
