"""Services for JFK Files RAG Chatbot."""
from .ai_providers import AIProvider, OpenAIProvider, MistralProvider, create_ai_provider
from .chunking_engine import ChunkingEngine
from .embedding_model import EmbeddingModel
from .chunk_processor import ChunkProcessor
from .vector_store import VectorStore
from .retrieval_engine import RetrievalEngine, Retrieval
from .context_assembler import ContextAssembler
from .llm_client import AnswerGenerator, LLMResponse
from .document_loader import DocumentLoader
from .ingestion_service import IngestionService, IngestionReport
from .rag_service import RAGService

__all__ = [
    'AIProvider', 'OpenAIProvider', 'MistralProvider', 'create_ai_provider',
    'ChunkingEngine', 'EmbeddingModel', 'ChunkProcessor', 'VectorStore',
    'RetrievalEngine', 'Retrieval', 'ContextAssembler', 'AnswerGenerator', 'LLMResponse',
    'DocumentLoader', 'IngestionService', 'IngestionReport', 'RAGService',
]
