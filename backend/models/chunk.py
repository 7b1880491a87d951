"""Chunk data models."""
from dataclasses import dataclass
from typing import List


@dataclass
class ChunkCandidate:
    """A trimmed slice of a document produced by the chunking engine."""
    index: int  # zero-based, contiguous within the document
    content: str
    start: int  # raw span [start, end) in the source text, before trimming
    end: int


@dataclass
class EmbeddedChunk:
    """A chunk ready for storage."""
    index: int
    content: str
    embedding: List[float]


@dataclass
class StoredChunk:
    """A chunk row returned by the vector store."""
    document_id: int
    chunk_index: int
    content: str
    title: str = ""
    url: str = ""
    similarity: float = 0.0  # 1 - cosine distance to the query


@dataclass
class SearchResult:
    """Chunk with the scores used to rank it."""
    chunk: StoredChunk
    similarity: float
    position_weight: float
    length_weight: float
    rank: float  # similarity * position_weight * length_weight
