"""Question answering pipeline: embed, search, assemble context, generate."""
import time
import logging
from typing import List

from errors import ValidationError
from models.answer import Answered, NoContext, QueryResult, SourceRef
from models.chunk import SearchResult
from services.context_assembler import ContextAssembler
from services.llm_client import AnswerGenerator
from services.retrieval_engine import RetrievalEngine

logger = logging.getLogger(__name__)


class RAGService:
    """Answers one question end to end."""

    def __init__(
        self,
        retrieval_engine: RetrievalEngine,
        context_assembler: ContextAssembler,
        answer_generator: AnswerGenerator,
    ):
        self.retrieval_engine = retrieval_engine
        self.context_assembler = context_assembler
        self.answer_generator = answer_generator

    def answer(self, question: str) -> QueryResult:
        """
        Answer a question from the corpus.

        Returns:
            Answered with the generated text and cited sources, or NoContext
            when no chunk clears the similarity threshold. The generator is not
            called in the NoContext case.

        Raises:
            ValidationError: If the question is empty
            ProviderError: If embedding or generation fails
            StorageError: If the store fails
        """
        if not question or not question.strip():
            raise ValidationError("Query parameter is required")

        start_time = time.time()
        logger.info(f"Processing query: {question[:100]}...")

        retrieval = self.retrieval_engine.retrieve(question)
        results = retrieval.results

        if not results:
            best = self.retrieval_engine.max_similarity(retrieval.query_embedding)
            logger.info(f"No relevant context (max similarity: {best})")
            return NoContext(max_similarity=best)

        blocks = self.context_assembler.assemble(results)
        response = self.answer_generator.generate(question, blocks)

        total_latency_ms = int((time.time() - start_time) * 1000)
        logger.info(f"Query processed successfully in {total_latency_ms}ms")

        return Answered(text=response.text, sources=self._sources(results))

    @staticmethod
    def _sources(results: List[SearchResult]) -> List[SourceRef]:
        return [
            SourceRef(
                title=result.chunk.title,
                url=result.chunk.url,
                similarity=result.similarity,
            )
            for result in results
        ]
