"""Embedding model with canonical dimension enforcement."""
import time
import logging
from typing import List

import numpy as np

from errors import DimensionMismatchError, ProviderError
from services.ai_providers import AIProvider

logger = logging.getLogger(__name__)


class EmbeddingModel:
    """Wraps an AIProvider so every vector it hands out has the canonical dimension."""

    def __init__(self, provider: AIProvider, dimension: int):
        """
        Initialize the embedding model.

        Args:
            provider: Active AIProvider
            dimension: Canonical vector size of the chunks.embedding column

        Raises:
            DimensionMismatchError: If the provider's native dimension differs
                from the canonical one, so a misconfiguration fails at startup
                rather than on the first vector
        """
        if provider.dimension and provider.dimension != dimension:
            raise DimensionMismatchError(
                expected=dimension,
                actual=provider.dimension,
                provider=provider.name,
            )

        self.provider = provider
        self.dimension = dimension
        logger.info(
            f"Initialized EmbeddingModel with provider: {provider.name}, dimension: {dimension}"
        )

    def embed_text(self, text: str) -> List[float]:
        """
        Generate an embedding for a single text string.

        Args:
            text: Text to embed

        Returns:
            Embedding vector as list of floats

        Raises:
            ValidationError: If text is empty
            ProviderError: If the provider call fails or returns non-finite values
            DimensionMismatchError: If the vector length is not the canonical dimension
        """
        start_time = time.time()
        raw = self.provider.embed(text)
        elapsed = time.time() - start_time

        vector = self.validate(raw)
        logger.debug(f"Embedded {len(text)} characters in {elapsed:.2f}s")
        return vector

    def validate(self, raw: List[float]) -> List[float]:
        """Check a provider vector against the canonical dimension. Never reshapes."""
        try:
            vector = np.asarray(raw, dtype=np.float64)
        except (TypeError, ValueError) as e:
            raise ProviderError(
                "Embedding is not a numeric vector",
                details={"provider": self.provider.name, "original_error": str(e)},
            )

        if vector.ndim != 1:
            raise ProviderError(
                f"Expected a flat embedding vector, got shape {vector.shape}",
                details={"provider": self.provider.name},
            )

        if vector.shape[0] != self.dimension:
            logger.error(
                f"Dimension mismatch from {self.provider.name}: "
                f"expected {self.dimension}, got {vector.shape[0]}"
            )
            raise DimensionMismatchError(
                expected=self.dimension,
                actual=int(vector.shape[0]),
                provider=self.provider.name,
            )

        if not np.all(np.isfinite(vector)):
            raise ProviderError(
                "Embedding contains non-finite values",
                details={"provider": self.provider.name},
            )

        return vector.tolist()
