"""
Content extraction through the Firecrawl scrape API.
"""
import logging
from typing import Optional

import httpx

from readstack.config import settings
from readstack.core.capabilities import ExtractedPage
from readstack.core.errors import ConfigurationError, UpstreamError

logger = logging.getLogger(__name__)


class FirecrawlExtractor:
    """
    Scrapes a URL into markdown content plus page metadata.

    Requests both markdown and html formats; only the markdown body and the
    metadata block are used.
    """

    FORMATS = ["markdown", "html"]

    def __init__(
        self,
        api_key: str,
        endpoint: str = "https://api.firecrawl.dev/v1/scrape",
        timeout: float = 60.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.endpoint = endpoint
        self.timeout = timeout
        self._transport = transport

    @classmethod
    def from_settings(cls) -> "FirecrawlExtractor":
        return cls(
            api_key=settings.firecrawl_api_key,
            endpoint=settings.firecrawl_url,
            timeout=settings.firecrawl_timeout_seconds,
        )

    async def extract(self, url: str) -> ExtractedPage:
        """
        Scrape a page.

        Args:
            url: Absolute URL of the article

        Returns:
            Extracted markdown and metadata; absent fields are None

        Raises:
            ConfigurationError: No Firecrawl API key is configured
            UpstreamError: Firecrawl was unreachable or returned a failure
        """
        if not self.api_key:
            raise ConfigurationError(
                "Firecrawl API key not configured. "
                "Please add FIRECRAWL_API_KEY to your environment variables."
            )

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(
                    self.endpoint,
                    headers={
                        "Authorization": f"Bearer {self.api_key}",
                        "Content-Type": "application/json",
                    },
                    json={"url": url, "formats": self.FORMATS},
                )
        except httpx.HTTPError as e:
            logger.error("Firecrawl request for %s failed: %r", url, e)
            raise UpstreamError("Failed to scrape article") from e

        if not response.is_success:
            logger.error(
                "Firecrawl error for %s (status %s): %s",
                url, response.status_code, response.text,
            )
            raise UpstreamError("Failed to scrape article")

        try:
            payload = response.json()
        except ValueError as e:
            logger.error("Firecrawl returned non-JSON body for %s: %s", url, response.text[:500])
            raise UpstreamError("Failed to scrape article") from e

        data = (payload.get("data") or {}) if isinstance(payload, dict) else None
        if not isinstance(data, dict):
            logger.error("Firecrawl returned unexpected body for %s: %s", url, response.text[:500])
            raise UpstreamError("Failed to scrape article")

        metadata = data.get("metadata")
        if not isinstance(metadata, dict):
            metadata = {}

        return ExtractedPage(
            url=url,
            content=data.get("markdown") or "",
            title=metadata.get("title") or None,
            og_image=metadata.get("ogImage") or metadata.get("image") or None,
            favicon=metadata.get("favicon") or None,
        )
