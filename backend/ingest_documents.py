"""
Document Ingestion Script for JFK Files RAG Chatbot.

This script:
1. Checks whether the store already holds documents (if so, reports and stops)
2. Downloads every markdown file from the corpus repository
3. Chunks each document with sentence-aware overlap
4. Generates embeddings with the configured AI provider
5. Commits everything to Supabase pgvector in one transaction

Usage:
    python ingest_documents.py
"""
import sys
import logging

from config import Settings
from errors import RAGError
from logger import setup_logging
from services.factory import build_services

logger = logging.getLogger(__name__)


def main() -> int:
    """Main ingestion process."""
    try:
        settings = Settings.from_env()
        setup_logging(settings.log_level, json_format=settings.log_json)

        logger.info("=" * 60)
        logger.info("Starting JFK Files Document Ingestion")
        logger.info("=" * 60)

        services = build_services(settings)
        report = services.ingestion_service.ingest()

        logger.info("=" * 60)
        logger.info(report.message)
        logger.info(f"Files: {report.file_count}")
        logger.info(f"Chunks: {report.chunk_count}")
        logger.info("=" * 60)
        return 0

    except KeyboardInterrupt:
        logger.warning("Ingestion interrupted by user, nothing was committed")
        return 1
    except RAGError as e:
        logger.error(f"Ingestion failed [{e.error.code}]: {e.error.message}")
        return 1
    except Exception as e:
        logger.error(f"Ingestion failed: {str(e)}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
