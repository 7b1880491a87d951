"""Main entry point for JFK Files RAG Chatbot API."""
import logging
from typing import Optional

import httpx
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from config import Settings
from errors import DimensionMismatchError, ProviderError, RAGError, ValidationError
from logger import setup_logging
from models.answer import Answered, QueryResult
from models.api import IngestResponse, QueryRequest, QueryResponse, Source
from services.factory import build_services
from services.ingestion_service import IngestionService
from services.rag_service import RAGService

settings = Settings.from_env()
setup_logging(settings.log_level, json_format=settings.log_json)

logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="JFK Files RAG Chatbot",
    description="Answers questions about the JFK files with cited sources",
    version="1.0.0"
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)

# Initialize services (will be done on startup)
rag_service: Optional[RAGService] = None
ingestion_service: Optional[IngestionService] = None


@app.on_event("startup")
def startup_event():
    """Initialize services on startup."""
    global rag_service, ingestion_service

    logger.info("Initializing JFK Files RAG Chatbot services...")

    try:
        services = build_services(settings)
        rag_service = services.rag_service
        ingestion_service = services.ingestion_service
        logger.info("All services initialized successfully")
    except Exception as e:
        logger.error(f"Failed to initialize services: {e}", exc_info=True)
        raise


@app.get("/health")
def health():
    """Health check endpoint."""
    return {"status": "ok"}


@app.get("/api/search", response_model=QueryResponse)
def search_endpoint(query: Optional[str] = None) -> QueryResponse:
    """Answer a question passed as the `query` parameter."""
    return _answer(query)


@app.post("/query", response_model=QueryResponse)
def query_endpoint(request: QueryRequest) -> QueryResponse:
    """Answer a question passed in the request body."""
    return _answer(request.question)


@app.post("/api/init-files", response_model=IngestResponse)
def init_files_endpoint() -> IngestResponse:
    """
    Ingest the corpus if the store is empty.

    Idempotent: when documents already exist the current counts are reported
    and nothing is written.
    """
    try:
        report = ingestion_service.ingest()
    except DimensionMismatchError as e:
        logger.error(f"Ingestion aborted: {e}")
        raise HTTPException(status_code=500, detail={"error": e.to_dict()})
    except ProviderError as e:
        logger.error(f"Ingestion aborted by provider error: {e}")
        raise HTTPException(status_code=502, detail={"error": e.to_dict()})
    except RAGError as e:
        logger.error(f"Ingestion aborted: {e}")
        raise HTTPException(status_code=500, detail={"error": e.to_dict()})
    except httpx.HTTPError as e:
        logger.error(f"Could not download corpus: {e}")
        raise HTTPException(status_code=502, detail="Could not download corpus")

    return IngestResponse(
        message=report.message,
        file_count=report.file_count,
        chunk_count=report.chunk_count,
    )


def _answer(question: Optional[str]) -> QueryResponse:
    if not question or not question.strip():
        raise HTTPException(status_code=400, detail="Query parameter is required")

    try:
        result = rag_service.answer(question)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=e.error.message)
    except ProviderError as e:
        logger.error(f"Provider error: {e.error.message}")
        raise HTTPException(status_code=502, detail={"error": e.to_dict()})
    except RAGError as e:
        logger.error(f"Query failed: {e.error.message}")
        raise HTTPException(status_code=500, detail={"error": e.to_dict()})

    return _to_response(result)


def _to_response(result: QueryResult) -> QueryResponse:
    if isinstance(result, Answered):
        return QueryResponse(
            answer=result.text,
            sources=[
                Source(title=s.title, url=s.url, similarity=s.similarity)
                for s in result.sources
            ],
        )
    return QueryResponse(answer=result.message, sources=[])


if __name__ == "__main__":
    import uvicorn
    logger.info(f"Starting JFK Files RAG Chatbot API on port {settings.port}")
    uvicorn.run(app, host="0.0.0.0", port=settings.port)
