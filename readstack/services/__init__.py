"""
External service integrations for readstack.
"""
from readstack.services.extraction import FirecrawlExtractor
from readstack.services.summarizer import ClaudeSummarizer
from readstack.services.embeddings import OpenAIEmbedder
from readstack.services.store import SqlReadingStore

__all__ = [
    "FirecrawlExtractor",
    "ClaudeSummarizer",
    "OpenAIEmbedder",
    "SqlReadingStore",
]
