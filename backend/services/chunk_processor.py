"""Turns document text into embedded chunks ready for storage."""
import logging
from typing import List

from models.chunk import EmbeddedChunk
from services.chunking_engine import ChunkingEngine
from services.embedding_model import EmbeddingModel

logger = logging.getLogger(__name__)


class ChunkProcessor:
    """Splits a document and embeds its chunks one at a time, in order."""

    def __init__(self, chunking_engine: ChunkingEngine, embedding_model: EmbeddingModel):
        self.chunking_engine = chunking_engine
        self.embedding_model = embedding_model

    def process(self, text: str) -> List[EmbeddedChunk]:
        """
        Split text and embed every chunk.

        Embedding calls are sequential to stay under provider rate limits. The
        first failure propagates and the remaining chunks are not embedded, so
        the caller never sees a partially embedded document.

        Args:
            text: Raw document text

        Returns:
            EmbeddedChunk list in chunk index order

        Raises:
            ProviderError: If an embedding call fails
            DimensionMismatchError: If a vector has the wrong dimension
        """
        candidates = self.chunking_engine.split(text)
        processed: List[EmbeddedChunk] = []

        for candidate in candidates:
            embedding = self.embedding_model.embed_text(candidate.content)
            processed.append(EmbeddedChunk(
                index=candidate.index,
                content=candidate.content,
                embedding=embedding,
            ))
            logger.debug(f"Embedded chunk {candidate.index + 1}/{len(candidates)}")

        return processed
