"""Idempotent, all-or-nothing corpus ingestion."""
import time
import logging
from dataclasses import dataclass
from typing import Any, Dict, List

from services.chunk_processor import ChunkProcessor
from services.document_loader import DocumentLoader
from services.vector_store import VectorStore

logger = logging.getLogger(__name__)


@dataclass
class IngestionReport:
    """Outcome of an ingestion run."""
    already_initialized: bool
    file_count: int
    chunk_count: int

    @property
    def message(self) -> str:
        if self.already_initialized:
            return "Files already initialized"
        return "Files initialized successfully"


class IngestionService:
    """Populates an empty store with the whole corpus, or does nothing."""

    def __init__(
        self,
        vector_store: VectorStore,
        document_loader: DocumentLoader,
        chunk_processor: ChunkProcessor,
    ):
        self.vector_store = vector_store
        self.document_loader = document_loader
        self.chunk_processor = chunk_processor

    def ingest(self) -> IngestionReport:
        """
        Ingest the corpus unless the store already holds documents.

        Every document is chunked and embedded in memory first; the store is
        written once at the end through a single transactional call. A failure
        at any step therefore leaves the store untouched.

        Returns:
            IngestionReport with the existing counts (no work done) or the
            counts written by this run

        Raises:
            ProviderError, DimensionMismatchError: If any chunk fails to embed
            StorageError: If the store cannot be read or the commit fails
            httpx.HTTPError: If the corpus cannot be downloaded
        """
        existing_files = self.vector_store.count_documents()
        logger.info(f"Existing files count: {existing_files}")

        if existing_files > 0:
            existing_chunks = self.vector_store.count_chunks()
            logger.info(f"Existing chunks count: {existing_chunks}")
            return IngestionReport(
                already_initialized=True,
                file_count=existing_files,
                chunk_count=existing_chunks,
            )

        start_time = time.time()
        payload: List[Dict[str, Any]] = []

        for document in self.document_loader.iter_documents():
            processed = self.chunk_processor.process(document.content)
            logger.info(f"Generated {len(processed)} chunks for file: {document.path}")
            payload.append({
                "file_path": document.path,
                "title": document.title,
                "content": document.content,
                "url": document.url,
                "chunks": [
                    {
                        "chunk_index": chunk.index,
                        "content": chunk.content,
                        "embedding": chunk.embedding,
                    }
                    for chunk in processed
                ],
            })

        if not payload:
            logger.warning("Corpus is empty, nothing to ingest")
            return IngestionReport(already_initialized=False, file_count=0, chunk_count=0)

        counts = self.vector_store.ingest_corpus(payload)
        elapsed = time.time() - start_time
        logger.info(
            f"Ingested {counts['file_count']} files and {counts['chunk_count']} chunks in {elapsed:.1f}s"
        )
        return IngestionReport(
            already_initialized=False,
            file_count=counts["file_count"],
            chunk_count=counts["chunk_count"],
        )
