"""Request and response schemas for the HTTP API."""
from typing import List, Optional

from pydantic import BaseModel, Field


class QueryRequest(BaseModel):
    question: Optional[str] = Field(default=None, description="Question about the JFK files")


class Source(BaseModel):
    title: str
    url: str
    similarity: float


class QueryResponse(BaseModel):
    answer: str
    sources: List[Source] = Field(default_factory=list)


class IngestResponse(BaseModel):
    message: str
    file_count: int
    chunk_count: int
