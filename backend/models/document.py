"""Document data models."""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass
class Document:
    """A markdown file from the corpus, keyed by its repository path."""
    path: str
    title: str
    content: str
    url: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
