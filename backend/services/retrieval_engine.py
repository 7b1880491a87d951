"""Retrieval engine: similarity search with position and length re-ranking."""
import logging
from dataclasses import dataclass
from typing import List, Optional

from config import (
    SIMILARITY_THRESHOLD,
    TOP_K,
    POSITION_DECAY,
    MIN_CHUNK_LENGTH,
    MAX_CHUNK_LENGTH,
    LENGTH_PENALTY,
)
from errors import ValidationError
from models.chunk import SearchResult, StoredChunk
from services.embedding_model import EmbeddingModel
from services.vector_store import VectorStore

logger = logging.getLogger(__name__)


def position_weight(chunk_index: int) -> float:
    """Favour chunks near the start of a document: 1 / (1 + 0.1 * index)."""
    if chunk_index == 0:
        return 1.0
    return 1.0 / (1.0 + POSITION_DECAY * chunk_index)


def length_weight(content: str) -> float:
    """Penalise chunks that are abnormally short or long."""
    if MIN_CHUNK_LENGTH <= len(content) <= MAX_CHUNK_LENGTH:
        return 1.0
    return LENGTH_PENALTY


def score_chunk(chunk: StoredChunk) -> SearchResult:
    """Attach the ranking weights to a candidate chunk."""
    p_weight = position_weight(chunk.chunk_index)
    l_weight = length_weight(chunk.content)
    return SearchResult(
        chunk=chunk,
        similarity=chunk.similarity,
        position_weight=p_weight,
        length_weight=l_weight,
        rank=chunk.similarity * p_weight * l_weight,
    )


def rank_candidates(candidates: List[StoredChunk], threshold: float, top_k: int) -> List[SearchResult]:
    """
    Filter, score and order candidate chunks.

    Candidates with similarity <= threshold are dropped. The rest are ordered by
    similarity * position_weight * length_weight, descending; ties keep the
    store's order. At most top_k results are returned.
    """
    scored = [score_chunk(chunk) for chunk in candidates if chunk.similarity > threshold]
    scored.sort(key=lambda result: result.rank, reverse=True)
    return scored[:top_k]


@dataclass
class Retrieval:
    """Results of one question together with the vector they were searched with."""
    query_embedding: List[float]
    results: List[SearchResult]


class RetrievalEngine:
    """Query-time search over the vector store."""

    def __init__(
        self,
        vector_store: VectorStore,
        embedding_model: EmbeddingModel,
        threshold: float = SIMILARITY_THRESHOLD,
        top_k: int = TOP_K,
    ):
        """
        Initialize the retrieval engine.

        Args:
            vector_store: VectorStore instance for similarity search
            embedding_model: EmbeddingModel instance for query embedding
            threshold: Minimum (exclusive) cosine similarity of a usable chunk
            top_k: Default number of results
        """
        self.vector_store = vector_store
        self.embedding_model = embedding_model
        self.threshold = threshold
        self.top_k = top_k
        logger.info(f"Initialized RetrievalEngine (threshold={threshold}, top_k={top_k})")

    def search(self, query_embedding: List[float], top_k: Optional[int] = None) -> List[SearchResult]:
        """
        Rank the chunks most relevant to a query vector.

        The store already orders by composite rank and returns at most top_k
        rows; the weights are recomputed here for the result fields.

        Args:
            query_embedding: Query vector of the canonical dimension
            top_k: Maximum number of results (defaults to the engine's top_k)

        Returns:
            SearchResult list ordered by composite rank descending, possibly empty

        Raises:
            ValueError: If top_k is not positive
            StorageError: If the store query fails
        """
        k = top_k if top_k is not None else self.top_k
        if k <= 0:
            raise ValueError("top_k must be positive")

        candidates = self.vector_store.match_chunks(query_embedding, self.threshold, match_count=k)
        results = rank_candidates(candidates, self.threshold, k)

        if results:
            logger.info(
                f"Retrieved {len(results)} chunks "
                f"(top rank: {results[0].rank:.3f}, top similarity: {results[0].similarity:.3f})"
            )
        else:
            logger.info(f"No chunks above similarity threshold {self.threshold}")
        return results

    def retrieve(self, query: str, top_k: Optional[int] = None) -> Retrieval:
        """
        Embed a question and search with its vector.

        Returns:
            Retrieval holding the query vector and the ranked results

        Raises:
            ValidationError: If the query is empty
            ProviderError: If embedding fails
        """
        if not query or not query.strip():
            raise ValidationError("Query cannot be empty")

        logger.debug(f"Embedding query: {query[:100]}...")
        query_embedding = self.embedding_model.embed_text(query)
        return Retrieval(
            query_embedding=query_embedding,
            results=self.search(query_embedding, top_k=top_k),
        )

    def max_similarity(self, query_embedding: List[float]) -> Optional[float]:
        """Best similarity anywhere in the corpus, for diagnosing empty results."""
        best = self.vector_store.max_similarity(query_embedding)
        logger.info(f"Maximum similarity score found: {best}")
        return best
