"""
Reading schemas.
"""
from datetime import datetime
from typing import Literal, Optional, Union
from pydantic import BaseModel
from uuid import UUID


class ReadingCreate(BaseModel):
    url: Optional[str] = None


class ReadingUpdate(BaseModel):
    is_read: bool


class ReadingSummary(BaseModel):
    """Public subset returned after an article is saved."""
    id: UUID
    url: str
    title: str
    og_image: Optional[str] = None
    favicon: Optional[str] = None
    summary: str

    class Config:
        from_attributes = True


class ReadingResponse(ReadingSummary):
    is_read: bool
    created_at: datetime


class ReadingDetail(ReadingResponse):
    user_id: UUID
    content: str


class ScrapedArticle(BaseModel):
    url: str
    title: str
    og_image: Optional[str] = None
    favicon: Optional[str] = None
    content: str

    class Config:
        from_attributes = True


class AddReadingResponse(BaseModel):
    success: bool = True
    data: ReadingSummary


class FetchReadingResponse(BaseModel):
    success: bool = True
    source: Literal["database", "scrape"]
    data: Union[ReadingDetail, ScrapedArticle]


class BackfillResponse(BaseModel):
    processed: int
    embedded: int
    failed: int

    class Config:
        from_attributes = True
