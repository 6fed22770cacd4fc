"""
Shared API dependencies: password hashing, JWT tokens, current user and the
per-request workflow context.
"""
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional
from uuid import UUID

import bcrypt
import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from readstack.config import settings
from readstack.core.cache import ListingCache
from readstack.core.context import RequestContext
from readstack.core.errors import Unauthorized
from readstack.database import get_db
from readstack.models.user import User
from readstack.services import ClaudeSummarizer, FirecrawlExtractor, OpenAIEmbedder, SqlReadingStore

bearer_scheme = HTTPBearer(auto_error=False)

listing_cache = ListingCache(ttl_seconds=settings.listing_cache_ttl_seconds)


def get_password_hash(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        return False


def _create_token(user_id: UUID, token_type: str, expires_delta: timedelta) -> str:
    payload = {
        "sub": str(user_id),
        "type": token_type,
        "exp": datetime.now(timezone.utc) + expires_delta,
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def create_access_token(user_id: UUID) -> str:
    return _create_token(
        user_id, "access", timedelta(minutes=settings.access_token_expire_minutes)
    )


def create_refresh_token(user_id: UUID) -> str:
    return _create_token(
        user_id, "refresh", timedelta(days=settings.refresh_token_expire_days)
    )


def decode_token(token: str) -> Dict[str, Any]:
    try:
        return jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except jwt.PyJWTError:
        raise Unauthorized("Invalid or expired token")


async def _user_from_token(token: str, db: AsyncSession) -> Optional[User]:
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except jwt.PyJWTError:
        return None

    if payload.get("type") != "access" or not payload.get("sub"):
        return None

    try:
        user_id = UUID(payload["sub"])
    except ValueError:
        return None

    result = await db.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()


async def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> Optional[User]:
    """Resolve the bearer token to a user, or None when there is no valid session."""
    if credentials is None:
        return None
    return await _user_from_token(credentials.credentials, db)


async def get_current_user(
    user: Optional[User] = Depends(get_optional_user),
) -> User:
    if user is None:
        raise Unauthorized()
    return user


async def get_context(
    db: AsyncSession = Depends(get_db),
    user: Optional[User] = Depends(get_optional_user),
) -> RequestContext:
    """
    Build the workflow context for this request.

    An unauthenticated caller still gets a context (with ``owner_id`` None);
    the workflow itself rejects it before doing any work.
    """
    return RequestContext(
        owner_id=user.id if user else None,
        store=SqlReadingStore(db),
        extractor=FirecrawlExtractor.from_settings(),
        summarizer=ClaudeSummarizer.from_settings(),
        embedder=OpenAIEmbedder.from_settings(),
        listing_cache=listing_cache,
        search_match_threshold=settings.search_match_threshold,
        search_match_count=settings.search_match_count,
    )
