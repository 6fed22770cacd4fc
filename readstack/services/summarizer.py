"""
Article summaries generated with Claude.
"""
import logging
from typing import Optional

import anthropic

from readstack.config import settings
from readstack.core.errors import ConfigurationError, UpstreamError

logger = logging.getLogger(__name__)


class ClaudeSummarizer:
    """Sends a single-turn prompt to the Messages API and returns the text."""

    def __init__(
        self,
        api_key: str,
        model: str = "claude-3-5-haiku-20241022",
        max_tokens: int = 280,
        client: Optional[anthropic.AsyncAnthropic] = None,
    ):
        self.api_key = api_key
        self.model = model
        self.max_tokens = max_tokens
        self._client = client

    @classmethod
    def from_settings(cls) -> "ClaudeSummarizer":
        return cls(
            api_key=settings.anthropic_api_key,
            model=settings.summary_model,
            max_tokens=settings.summary_max_tokens,
        )

    @property
    def client(self) -> anthropic.AsyncAnthropic:
        if self._client is None:
            if not self.api_key:
                raise ConfigurationError("Anthropic API key not configured")
            self._client = anthropic.AsyncAnthropic(api_key=self.api_key)
        return self._client

    async def summarize(self, prompt: str) -> str:
        client = self.client

        try:
            response = await client.messages.create(
                model=self.model,
                max_tokens=self.max_tokens,
                messages=[{"role": "user", "content": prompt}],
            )
        except anthropic.APIError as e:
            logger.error("Summary generation failed (model %s): %r", self.model, e)
            raise UpstreamError("Failed to summarize article") from e

        return "".join(
            block.text for block in response.content if block.type == "text"
        ).strip()
