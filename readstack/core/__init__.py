"""
Core workflows for readstack.
"""
from readstack.core.context import RequestContext
from readstack.core.ingestion import ingest, fetch_or_scrape, FetchResult
from readstack.core.readings import list_readings, set_read, delete_reading
from readstack.core.search import semantic_search, embed_pending, BackfillReport

__all__ = [
    "RequestContext",
    "ingest",
    "fetch_or_scrape",
    "FetchResult",
    "list_readings",
    "set_read",
    "delete_reading",
    "semantic_search",
    "embed_pending",
    "BackfillReport",
]
