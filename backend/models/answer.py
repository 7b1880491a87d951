"""Outcome of a question: either an answer grounded on sources or no usable context."""
from dataclasses import dataclass, field
from typing import List, Optional, Union

NO_CONTEXT_MESSAGE = (
    "I apologize, but I couldn't find any relevant information to answer your question. "
    "Could you please try rephrasing your question or ask about a different topic?"
)


@dataclass
class SourceRef:
    """A cited source."""
    title: str
    url: str
    similarity: float


@dataclass
class Answered:
    text: str
    sources: List[SourceRef]


@dataclass
class NoContext:
    """No chunk cleared the similarity threshold."""
    max_similarity: Optional[float]
    message: str = NO_CONTEXT_MESSAGE
    sources: List[SourceRef] = field(default_factory=list)


QueryResult = Union[Answered, NoContext]
