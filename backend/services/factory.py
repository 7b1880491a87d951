"""Builds the service graph from a Settings instance."""
import logging
from dataclasses import dataclass

from config import Settings
from services.ai_providers import create_ai_provider
from services.chunk_processor import ChunkProcessor
from services.chunking_engine import ChunkingEngine
from services.context_assembler import ContextAssembler
from services.document_loader import DocumentLoader
from services.embedding_model import EmbeddingModel
from services.ingestion_service import IngestionService
from services.llm_client import AnswerGenerator
from services.rag_service import RAGService
from services.retrieval_engine import RetrievalEngine
from services.vector_store import VectorStore

logger = logging.getLogger(__name__)


@dataclass
class Services:
    rag_service: RAGService
    ingestion_service: IngestionService


def build_services(settings: Settings) -> Services:
    """
    Wire every component once, at process start.

    Raises:
        ConfigurationError: If the active provider has no API key
        DimensionMismatchError: If the provider's native dimension is not the
            canonical EMBEDDING_DIMENSION
        ValueError: If Supabase credentials are missing
    """
    logger.info(f"Building services with settings: {settings.describe()}")

    provider = create_ai_provider(settings)
    embedding_model = EmbeddingModel(provider, settings.embedding_dimension)
    vector_store = VectorStore(settings.supabase_url, settings.supabase_key)

    retrieval_engine = RetrievalEngine(
        vector_store,
        embedding_model,
        threshold=settings.similarity_threshold,
        top_k=settings.top_k,
    )
    rag_service = RAGService(
        retrieval_engine=retrieval_engine,
        context_assembler=ContextAssembler(vector_store),
        answer_generator=AnswerGenerator(provider),
    )

    chunk_processor = ChunkProcessor(
        ChunkingEngine(chunk_size=settings.chunk_size, chunk_overlap=settings.chunk_overlap),
        embedding_model,
    )
    ingestion_service = IngestionService(
        vector_store=vector_store,
        document_loader=DocumentLoader(
            repo=settings.corpus_repo,
            branch=settings.corpus_branch,
            github_token=settings.github_token,
        ),
        chunk_processor=chunk_processor,
    )

    return Services(
        rag_service=rag_service,
        ingestion_service=ingestion_service,
    )
