"""Data models for JFK Files RAG Chatbot."""
from .document import Document
from .chunk import ChunkCandidate, EmbeddedChunk, StoredChunk, SearchResult
from .conversation import Turn
from .answer import Answered, NoContext, QueryResult, SourceRef
from .api import QueryRequest, QueryResponse, Source, IngestResponse

__all__ = [
    "Document",
    "ChunkCandidate",
    "EmbeddedChunk",
    "StoredChunk",
    "SearchResult",
    "Turn",
    "Answered",
    "NoContext",
    "QueryResult",
    "SourceRef",
    "QueryRequest",
    "QueryResponse",
    "Source",
    "IngestResponse",
]
