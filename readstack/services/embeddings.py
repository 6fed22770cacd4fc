"""
Text embeddings through the OpenAI embeddings API.
"""
import logging
from typing import List, Optional

import openai

from readstack.config import settings
from readstack.core.errors import ConfigurationError, UpstreamError

logger = logging.getLogger(__name__)


class OpenAIEmbedder:
    """Embeds a single text into a fixed-dimension vector."""

    def __init__(
        self,
        api_key: str,
        model: str = "text-embedding-3-small",
        dimensions: int = 1536,
        client: Optional[openai.AsyncOpenAI] = None,
    ):
        self.api_key = api_key
        self.model = model
        self.dimensions = dimensions
        self._client = client

    @classmethod
    def from_settings(cls) -> "OpenAIEmbedder":
        return cls(
            api_key=settings.openai_api_key,
            model=settings.embedding_model,
            dimensions=settings.embedding_dimensions,
        )

    @property
    def client(self) -> openai.AsyncOpenAI:
        if self._client is None:
            if not self.api_key:
                raise ConfigurationError("OpenAI API key not configured")
            self._client = openai.AsyncOpenAI(api_key=self.api_key)
        return self._client

    async def embed(self, text: str) -> List[float]:
        client = self.client

        try:
            response = await client.embeddings.create(
                model=self.model,
                input=text,
                dimensions=self.dimensions,
            )
        except openai.OpenAIError as e:
            logger.error("Embedding request failed (model %s): %r", self.model, e)
            raise UpstreamError("Failed to generate embedding") from e

        return list(response.data[0].embedding)
