"""Embedding generation service for creating vector representations of transcripts."""

import logging
from typing import Optional
import numpy as np
from openai import OpenAI
from tenacity import retry, stop_after_attempt, wait_exponential

from ..config import settings
from ..utils.error_handling import ExternalServiceError

logger = logging.getLogger(__name__)


class EmbeddingService:
    """
    Generates embeddings for text using OpenAI's embedding API.

    Supports:
    - Automatic retries on failure
    - Dimension checks against the configured model
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        client: Optional[OpenAI] = None
    ):
        """
        Initialize embedding service.

        Args:
            api_key: OpenAI API key (uses settings if not provided)
            model: Embedding model name (uses settings if not provided)
            client: Preconfigured OpenAI client
        """
        self.api_key = api_key or settings.openai_api_key
        if client is None and not self.api_key:
            raise ValueError("OpenAI API key is required")

        self.client = client or OpenAI(
            api_key=self.api_key,
            timeout=settings.provider_timeout_seconds
        )
        self.model = model or settings.embedding_model
        self.embedding_dimension = self._get_embedding_dimension()

        logger.info(f"Initialized embedding service with model: {self.model}")

    def _get_embedding_dimension(self) -> int:
        """
        Get embedding dimension for the configured model.

        Returns:
            Embedding dimension size
        """
        # OpenAI embedding dimensions
        dimensions = {
            'text-embedding-3-small': 1536,
            'text-embedding-3-large': 3072,
            'text-embedding-ada-002': 1536
        }
        return dimensions.get(self.model, settings.embedding_dimension)

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True
    )
    def _create_embedding(self, text: str) -> list:
        response = self.client.embeddings.create(
            input=text,
            model=self.model
        )
        return response.data[0].embedding

    def generate_embedding(self, text: str) -> np.ndarray:
        """
        Generate embedding for a single text.

        Args:
            text: Input text

        Returns:
            Embedding vector as numpy array

        Raises:
            ValueError: If the text is empty
            ExternalServiceError: If the provider fails or returns a
                vector of the wrong dimension
        """
        if not text or not text.strip():
            raise ValueError("Cannot embed empty text")

        try:
            raw = self._create_embedding(text)
        except Exception as e:
            logger.error(f"Error generating embedding: {e}")
            raise ExternalServiceError(
                f"Embedding request failed: {e}",
                service="embeddings"
            ) from e

        embedding = np.array(raw, dtype=np.float32)

        if embedding.shape[0] != self.embedding_dimension:
            raise ExternalServiceError(
                f"Expected {self.embedding_dimension} dimensions, got {embedding.shape[0]}",
                service="embeddings",
                details={"model": self.model}
            )

        return embedding
