"""Chunking engine with sentence-aware boundaries and character overlap."""
import logging
from typing import List

from models.chunk import ChunkCandidate
from config import CHUNK_SIZE, CHUNK_OVERLAP, SENTENCE_SEARCH_BACKTRACK, SENTENCE_LOOKAHEAD

logger = logging.getLogger(__name__)


class ChunkingEngine:
    """Splits document text into overlapping chunks that prefer to end on a sentence."""

    def __init__(
        self,
        chunk_size: int = CHUNK_SIZE,
        chunk_overlap: int = CHUNK_OVERLAP,
        sentence_backtrack: int = SENTENCE_SEARCH_BACKTRACK,
        sentence_lookahead: int = SENTENCE_LOOKAHEAD,
    ):
        """
        Initialize ChunkingEngine.

        Args:
            chunk_size: Target chunk size in characters
            chunk_overlap: Overlap between consecutive chunks in characters
            sentence_backtrack: How far before the raw boundary a period may end the chunk
            sentence_lookahead: How far past the raw boundary a period may end the chunk

        Raises:
            ValueError: If sizes are inconsistent
        """
        if chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        if chunk_overlap < 0 or chunk_overlap >= chunk_size:
            raise ValueError("chunk_overlap must be in [0, chunk_size)")
        if sentence_backtrack < 0 or sentence_lookahead < 0:
            raise ValueError("sentence search window must be non-negative")

        self.chunk_size = chunk_size
        self.chunk_overlap = chunk_overlap
        self.sentence_backtrack = sentence_backtrack
        self.sentence_lookahead = sentence_lookahead

    def split(self, text: str) -> List[ChunkCandidate]:
        """
        Split text into ordered, overlapping chunk candidates.

        The same input always produces the same chunks. Indices run from 0 with
        no gaps; slices that are blank after trimming are skipped without
        consuming an index.

        Args:
            text: Raw document text

        Returns:
            List of ChunkCandidate objects in document order
        """
        chunks: List[ChunkCandidate] = []
        length = len(text)
        cursor = 0

        while cursor < length:
            boundary = self._find_boundary(text, cursor)

            content = text[cursor:boundary].strip()
            if content:
                chunks.append(ChunkCandidate(
                    index=len(chunks),
                    content=content,
                    start=cursor,
                    end=boundary,
                ))

            if boundary >= length:
                break

            # Step back by the overlap, but always move forward
            cursor = max(boundary - self.chunk_overlap, cursor + 1)

        logger.debug(f"Split {length} characters into {len(chunks)} chunks")
        return chunks

    def _find_boundary(self, text: str, cursor: int) -> int:
        """
        End position (exclusive) of the chunk starting at cursor.

        Moves the raw boundary to just past the first period found in
        [boundary - backtrack, boundary + lookahead); keeps the raw boundary
        when there is none.
        """
        boundary = cursor + self.chunk_size
        if boundary >= len(text):
            return len(text)

        search_from = max(boundary - self.sentence_backtrack, cursor)
        search_to = min(boundary + self.sentence_lookahead, len(text))
        period = text.find(".", search_from, search_to)
        if period != -1:
            return period + 1
        return boundary
