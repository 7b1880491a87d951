"""Vector store implementation using Supabase pgvector."""
import logging
from typing import Any, Dict, List, Optional

from supabase import create_client, Client

from errors import StorageError
from models.chunk import StoredChunk

logger = logging.getLogger(__name__)


class VectorStore:
    """
    Access to the files/chunks tables and their pgvector index.

    The SQL objects used here (tables, ivfflat index and the match_chunks,
    max_similarity and ingest_corpus functions) are created by
    migrations/001_create_jfk_tables.sql.
    """

    def __init__(
        self,
        supabase_url: Optional[str],
        supabase_key: Optional[str],
        files_table: str = "files",
        chunks_table: str = "chunks",
        client: Optional[Client] = None,
    ):
        """
        Initialize the vector store with a Supabase client.

        Args:
            supabase_url: Supabase project URL
            supabase_key: Supabase API key
            files_table: Table holding document records
            chunks_table: Table holding chunk records
            client: Pre-built client, mostly for tests

        Raises:
            ValueError: If Supabase credentials are missing
        """
        if client is None and (not supabase_url or not supabase_key):
            raise ValueError("SUPABASE_URL and SUPABASE_KEY environment variables are required")

        self.files_table = files_table
        self.chunks_table = chunks_table
        self.client: Client = client or create_client(supabase_url, supabase_key)

        logger.info(f"Initialized VectorStore with tables: {files_table}, {chunks_table}")

    def count_documents(self) -> int:
        """Number of document records."""
        return self._count(self.files_table)

    def count_chunks(self) -> int:
        """Number of chunk records."""
        return self._count(self.chunks_table)

    def match_chunks(self, query_embedding: List[float], threshold: float, match_count: int) -> List[StoredChunk]:
        """
        Best-ranked chunks whose cosine similarity to the query exceeds threshold.

        Postgres computes similarity as 1 - (embedding <=> query), orders the
        candidates by similarity * position score * length score and returns
        at most match_count rows, so the API row cap never truncates the set
        that ranking depends on.

        Args:
            query_embedding: Query vector of the canonical dimension
            threshold: Exclusive lower bound on similarity
            match_count: Maximum number of rows to return

        Returns:
            StoredChunk list ordered by composite rank descending

        Raises:
            ValueError: If query_embedding is empty or match_count is not positive
            StorageError: If the RPC fails
        """
        if not query_embedding:
            raise ValueError("Query embedding cannot be empty")
        if match_count <= 0:
            raise ValueError("match_count must be positive")

        try:
            response = self.client.rpc(
                "match_chunks",
                {
                    "query_embedding": query_embedding,
                    "match_threshold": threshold,
                    "match_count": match_count,
                }
            ).execute()
        except Exception as e:
            raise self._storage_error("search vector store", e)

        chunks = [self._row_to_chunk(row) for row in response.data or []]
        logger.debug(f"Found {len(chunks)} chunks above similarity {threshold}")
        return chunks

    def max_similarity(self, query_embedding: List[float]) -> Optional[float]:
        """
        Highest similarity between the query and any chunk, ignoring thresholds.

        Returns:
            The maximum similarity, or None when the store has no chunks
        """
        try:
            response = self.client.rpc(
                "max_similarity",
                {"query_embedding": query_embedding}
            ).execute()
        except Exception as e:
            raise self._storage_error("compute max similarity", e)

        data = response.data
        # Scalar functions come back bare; some client versions wrap them in a row
        if isinstance(data, list):
            data = data[0].get("max_similarity") if data else None
        return float(data) if data is not None else None

    def get_chunk_window(self, document_id: int, center_index: int, radius: int = 1) -> List[StoredChunk]:
        """
        Chunks of one document with indices in [center - radius, center + radius].

        Indices outside the document simply match no rows.

        Returns:
            StoredChunk list in chunk index order
        """
        try:
            response = (
                self.client.table(self.chunks_table)
                .select("file_id, chunk_index, content")
                .eq("file_id", document_id)
                .gte("chunk_index", center_index - radius)
                .lte("chunk_index", center_index + radius)
                .order("chunk_index")
                .execute()
            )
        except Exception as e:
            raise self._storage_error("fetch neighbouring chunks", e)

        rows = sorted(response.data or [], key=lambda row: row["chunk_index"])
        return [
            StoredChunk(
                document_id=row["file_id"],
                chunk_index=row["chunk_index"],
                content=row["content"],
            )
            for row in rows
        ]

    def ingest_corpus(self, documents: List[Dict[str, Any]]) -> Dict[str, int]:
        """
        Upsert documents and their chunks in one database transaction.

        Each document dict carries file_path, title, content, url and a chunks
        list of {chunk_index, content, embedding}. The ingest_corpus function
        runs as a single statement, so either every row is written or none is.

        Returns:
            {"file_count": ..., "chunk_count": ...} written by the call

        Raises:
            StorageError: If the transaction fails (nothing is committed)
        """
        if not documents:
            raise ValueError("Documents list cannot be empty")

        chunk_total = sum(len(doc["chunks"]) for doc in documents)
        logger.info(f"Committing {len(documents)} documents and {chunk_total} chunks")

        try:
            response = self.client.rpc("ingest_corpus", {"documents": documents}).execute()
        except Exception as e:
            raise self._storage_error("commit corpus", e)

        data = response.data
        if isinstance(data, list):
            data = data[0] if data else {}
        data = data or {}
        return {
            "file_count": int(data.get("file_count", len(documents))),
            "chunk_count": int(data.get("chunk_count", chunk_total)),
        }

    def _count(self, table: str) -> int:
        try:
            response = self.client.table(table).select("id", count="exact").execute()
        except Exception as e:
            raise self._storage_error(f"count rows in {table}", e)
        return response.count if response.count is not None else 0

    @staticmethod
    def _row_to_chunk(row: Dict[str, Any]) -> StoredChunk:
        # Clamp to [0, 1]: 1 - cosine distance can dip below 0 for opposed vectors
        similarity = max(0.0, min(1.0, float(row["similarity"])))
        return StoredChunk(
            document_id=row["file_id"],
            chunk_index=row["chunk_index"],
            content=row["content"],
            title=row.get("title", ""),
            url=row.get("url", ""),
            similarity=similarity,
        )

    @staticmethod
    def _storage_error(action: str, error: Exception) -> StorageError:
        error_msg = f"Failed to {action}: {error}"
        logger.error(error_msg)
        return StorageError(error_msg, details={"original_error": str(error)})
