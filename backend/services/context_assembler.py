"""Builds the labelled context window sent to the answer generator."""
import logging
from typing import List

from models.chunk import SearchResult
from services.vector_store import VectorStore

logger = logging.getLogger(__name__)

BLOCK_SEPARATOR = "\n\n---\n\n"
NEIGHBOUR_RADIUS = 1


class ContextAssembler:
    """Expands each search result with its neighbouring chunks and labels it with its source."""

    def __init__(self, vector_store: VectorStore, radius: int = NEIGHBOUR_RADIUS):
        self.vector_store = vector_store
        self.radius = radius

    def assemble(self, results: List[SearchResult]) -> List[str]:
        """
        One formatted context block per result, in result order.

        Each block holds the chunks at index - 1, index and index + 1 of the
        same document, joined by a blank line. Neighbours that do not exist are
        left out. Results that share neighbours are not deduplicated.

        Raises:
            StorageError: If a neighbour lookup fails
        """
        blocks = []
        for result in results:
            chunk = result.chunk
            window = self.vector_store.get_chunk_window(
                chunk.document_id, chunk.chunk_index, radius=self.radius
            )
            # The store should always return the match itself; fall back to it if not
            contents = [c.content for c in window] or [chunk.content]
            blocks.append(self.format_block(
                title=chunk.title,
                similarity=result.similarity,
                url=chunk.url,
                body="\n\n".join(contents),
            ))

        logger.debug(f"Assembled {len(blocks)} context blocks")
        return blocks

    @staticmethod
    def format_block(title: str, similarity: float, url: str, body: str) -> str:
        return f"From {title} (Similarity: {similarity:.2f}):\n\n{body}\n\nSource: {url}"

    @staticmethod
    def join(blocks: List[str]) -> str:
        return BLOCK_SEPARATOR.join(blocks)
