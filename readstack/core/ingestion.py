"""
Article ingestion and fetch-or-scrape workflows.

``ingest`` turns a submitted URL into a stored reading: authenticate,
validate, deduplicate, extract, summarize, persist. Every step runs in
sequence and any failure ends the request; nothing is retried and nothing is
rolled back.
"""
import dataclasses
import logging
from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlparse

from readstack.core.capabilities import ExtractedPage, NewReading
from readstack.core.context import RequestContext
from readstack.core.errors import Conflict, ValidationError
from readstack.models.reading import Reading, SUMMARY_MAX_LENGTH

logger = logging.getLogger(__name__)

SUMMARY_SOURCE_CHARS = 3000
DEFAULT_TITLE = "Untitled Article"
DEFAULT_SCRAPE_TITLE = "Untitled"

SUMMARY_PROMPT = (
    "Summarize this article in maximum {limit} characters. "
    "Be concise and capture the main point:\n\n{content}"
)


@dataclass
class FetchResult:
    """Outcome of ``fetch_or_scrape``; exactly one of reading/page is set."""
    source: str  # "database" or "scrape"
    reading: Optional[Reading] = None
    page: Optional[ExtractedPage] = None


def validate_url(url: Optional[str]) -> str:
    """Return the trimmed URL or raise ``ValidationError``."""
    if not isinstance(url, str) or not url.strip():
        raise ValidationError("URL is required")

    url = url.strip()
    try:
        parsed = urlparse(url)
    except ValueError:
        raise ValidationError("Invalid URL format")

    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValidationError("Invalid URL format")

    return url


def build_summary_prompt(content: str) -> str:
    return SUMMARY_PROMPT.format(
        limit=SUMMARY_MAX_LENGTH,
        content=content[:SUMMARY_SOURCE_CHARS],
    )


async def ingest(ctx: RequestContext, url: Optional[str]) -> Reading:
    """
    Add an article to the caller's reading list.

    Raises:
        Unauthorized: No valid session
        ValidationError: Missing or malformed URL
        Conflict: The caller already saved this URL
        ConfigurationError: Extraction credentials are missing
        UpstreamError: Extraction or summarization failed
        StorageError: The insert was rejected
    """
    owner_id = ctx.require_owner()
    url = validate_url(url)

    existing = await ctx.store.find_by_url(owner_id, url)
    if existing:
        logger.info("Rejected duplicate article %s for user %s", url, owner_id)
        raise Conflict()

    page = await ctx.extractor.extract(url)

    summary = await ctx.summarizer.summarize(build_summary_prompt(page.content))

    reading = await ctx.store.insert(
        NewReading(
            user_id=owner_id,
            url=url,
            title=page.title or DEFAULT_TITLE,
            og_image=page.og_image,
            favicon=page.favicon,
            summary=summary[:SUMMARY_MAX_LENGTH],
            content=page.content,
            is_read=False,
        )
    )

    ctx.listing_cache.invalidate(owner_id)
    logger.info("Saved article %s (%s) for user %s", reading.id, url, owner_id)
    return reading


async def fetch_or_scrape(ctx: RequestContext, url: Optional[str]) -> FetchResult:
    """
    Return the caller's stored reading for a URL, or scrape it on demand.

    Scraped pages are not summarized and not stored.
    """
    owner_id = ctx.require_owner()
    url = validate_url(url)

    existing = await ctx.store.find_by_url(owner_id, url)
    if existing:
        return FetchResult(source="database", reading=existing)

    page = await ctx.extractor.extract(url)
    return FetchResult(
        source="scrape",
        page=dataclasses.replace(page, title=page.title or DEFAULT_SCRAPE_TITLE),
    )
