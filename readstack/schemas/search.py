"""
Semantic search schemas.
"""
from typing import List, Optional
from pydantic import BaseModel, Field

from readstack.schemas.reading import ReadingResponse


class SearchRequest(BaseModel):
    query: Optional[str] = None
    limit: Optional[int] = Field(default=None, ge=1)


class SearchResult(ReadingResponse):
    similarity: float


class SearchResponse(BaseModel):
    results: List[SearchResult]
