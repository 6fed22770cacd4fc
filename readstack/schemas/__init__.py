"""
Pydantic schemas for API request/response validation.
"""
from readstack.schemas.auth import (
    UserCreate,
    UserLogin,
    UserResponse,
    Token,
    TokenRefresh,
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
from readstack.schemas.search import (
    SearchRequest,
    SearchResult,
    SearchResponse,
)

__all__ = [
    # Auth
    "UserCreate",
    "UserLogin",
    "UserResponse",
    "Token",
    "TokenRefresh",
    # Readings
    "ReadingCreate",
    "ReadingUpdate",
    "ReadingSummary",
    "ReadingResponse",
    "ReadingDetail",
    "ScrapedArticle",
    "AddReadingResponse",
    "FetchReadingResponse",
    "BackfillResponse",
    # Search
    "SearchRequest",
    "SearchResult",
    "SearchResponse",
]
