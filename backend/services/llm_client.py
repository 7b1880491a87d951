"""Answer generation over the active AI provider."""
import time
import logging
from dataclasses import dataclass
from typing import List

from models.conversation import Turn
from services.ai_providers import AIProvider
from services.context_assembler import ContextAssembler

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """You are a helpful assistant that answers questions about JFK files. Use the provided context to answer the user's question.
Guidelines:
1. Only use information from the provided context
2. If the context doesn't contain enough information to fully answer the question, say so
3. Always cite your sources using the file titles and similarity scores provided
4. If you find conflicting information in different sources, mention this
5. Be precise and factual in your responses
6. If you're not certain about something, express that uncertainty"""


@dataclass
class LLMResponse:
    """Response from answer generation."""
    text: str
    latency_ms: int
    provider: str
    model_used: str


class AnswerGenerator:
    """Sends the assembled context and question to the provider as a system + user conversation."""

    def __init__(self, provider: AIProvider):
        self.provider = provider
        logger.info(f"AnswerGenerator initialized with provider: {provider.name}")

    def generate(self, question: str, context_blocks: List[str]) -> LLMResponse:
        """
        Generate a grounded answer.

        Args:
            question: User question
            context_blocks: Formatted blocks from ContextAssembler, at least one

        Returns:
            LLMResponse with the answer text and latency

        Raises:
            ValueError: If no context blocks are given
            ProviderError: If the provider fails or returns no content
        """
        turns = self.build_messages(question, context_blocks)

        start_time = time.time()
        text = self.provider.generate(turns)
        latency_ms = int((time.time() - start_time) * 1000)

        logger.info(
            f"Generated response: provider={self.provider.name}, "
            f"context_blocks={len(context_blocks)}, latency={latency_ms}ms"
        )

        return LLMResponse(
            text=text,
            latency_ms=latency_ms,
            provider=self.provider.name,
            model_used=self.provider.chat_model,
        )

    @staticmethod
    def build_messages(question: str, context_blocks: List[str]) -> List[Turn]:
        """
        Build the system + user conversation.

        Raises:
            ValueError: If context_blocks is empty; an answer must never be
                generated without context
        """
        if not context_blocks:
            raise ValueError("Cannot generate an answer without context")

        context = ContextAssembler.join(context_blocks)
        return [
            Turn(role="system", content=SYSTEM_PROMPT),
            Turn(role="user", content=f"Context:\n{context}\n\nQuestion: {question}"),
        ]
