"""Conversation data models."""
from dataclasses import dataclass
from typing import Dict

ROLES = ("system", "user", "assistant")


@dataclass(frozen=True)
class Turn:
    """A single role/content message sent to the answer generator."""
    role: str
    content: str

    def __post_init__(self):
        if self.role not in ROLES:
            raise ValueError(f"Unknown role: {self.role}")

    def to_message(self) -> Dict[str, str]:
        return {"role": self.role, "content": self.content}
