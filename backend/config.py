"""Configuration management for JFK Files RAG Chatbot."""
import os
from dataclasses import dataclass, field
from typing import List, Optional

from dotenv import load_dotenv

from errors import ConfigurationError

# Load environment variables
load_dotenv()

# Provider Configuration
SUPPORTED_PROVIDERS = ("openai", "mistral")
DEFAULT_PROVIDER = "mistral"

# Canonical embedding dimension of the chunks.embedding column
EMBEDDING_DIMENSION = 1024

# Chunking Configuration
CHUNK_SIZE = 1000  # characters
CHUNK_OVERLAP = 200  # characters
SENTENCE_SEARCH_BACKTRACK = 50  # characters before the raw boundary
SENTENCE_LOOKAHEAD = 50  # characters after the raw boundary

# Retrieval Configuration
SIMILARITY_THRESHOLD = 0.5
TOP_K = 10
POSITION_DECAY = 0.1
MIN_CHUNK_LENGTH = 100
MAX_CHUNK_LENGTH = 1000
LENGTH_PENALTY = 0.8

# Corpus Configuration
CORPUS_REPO = "amasad/jfk_files"
CORPUS_BRANCH = "main"


def _split_origins(raw: str) -> List[str]:
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


@dataclass(frozen=True)
class Settings:
    """Process-wide configuration, loaded once at startup and passed to constructors."""

    ai_provider: str = DEFAULT_PROVIDER
    openai_api_key: Optional[str] = None
    mistral_api_key: Optional[str] = None
    supabase_url: Optional[str] = None
    supabase_key: Optional[str] = None
    embedding_dimension: int = EMBEDDING_DIMENSION
    chunk_size: int = CHUNK_SIZE
    chunk_overlap: int = CHUNK_OVERLAP
    similarity_threshold: float = SIMILARITY_THRESHOLD
    top_k: int = TOP_K
    corpus_repo: str = CORPUS_REPO
    corpus_branch: str = CORPUS_BRANCH
    github_token: Optional[str] = None
    port: int = 3001
    log_level: str = "INFO"
    log_json: bool = False
    cors_origins: List[str] = field(
        default_factory=lambda: ["http://localhost:3000"]
    )

    def __post_init__(self):
        if self.ai_provider not in SUPPORTED_PROVIDERS:
            raise ConfigurationError(
                f"Unsupported AI provider: {self.ai_provider!r}. "
                f"Expected one of {', '.join(SUPPORTED_PROVIDERS)}",
                details={"ai_provider": self.ai_provider},
            )
        if self.embedding_dimension <= 0:
            raise ConfigurationError("EMBEDDING_DIMENSION must be positive")
        if self.top_k <= 0:
            raise ConfigurationError("TOP_K must be positive", details={"top_k": self.top_k})
        if not 0 <= self.similarity_threshold < 1:
            raise ConfigurationError(
                "SIMILARITY_THRESHOLD must be in [0, 1)",
                details={"similarity_threshold": self.similarity_threshold},
            )
        if self.chunk_size <= 0:
            raise ConfigurationError("CHUNK_SIZE must be positive", details={"chunk_size": self.chunk_size})
        if not 0 <= self.chunk_overlap < self.chunk_size:
            raise ConfigurationError(
                "CHUNK_OVERLAP must be non-negative and smaller than CHUNK_SIZE",
                details={"chunk_size": self.chunk_size, "chunk_overlap": self.chunk_overlap},
            )

    @property
    def api_key(self) -> Optional[str]:
        """API key of the active provider."""
        if self.ai_provider == "mistral":
            return self.mistral_api_key
        return self.openai_api_key

    @classmethod
    def from_env(cls) -> "Settings":
        """
        Build settings from environment variables.

        Raises:
            ConfigurationError: If AI_PROVIDER is not a supported provider or a
                numeric variable cannot be parsed
        """
        try:
            return cls(
                ai_provider=os.getenv("AI_PROVIDER", DEFAULT_PROVIDER).strip().lower(),
                openai_api_key=os.getenv("OPENAI_API_KEY"),
                mistral_api_key=os.getenv("MISTRAL_API_KEY"),
                supabase_url=os.getenv("SUPABASE_URL"),
                supabase_key=os.getenv("SUPABASE_KEY"),
                embedding_dimension=int(os.getenv("EMBEDDING_DIMENSION", str(EMBEDDING_DIMENSION))),
                chunk_size=int(os.getenv("CHUNK_SIZE", str(CHUNK_SIZE))),
                chunk_overlap=int(os.getenv("CHUNK_OVERLAP", str(CHUNK_OVERLAP))),
                similarity_threshold=float(os.getenv("SIMILARITY_THRESHOLD", str(SIMILARITY_THRESHOLD))),
                top_k=int(os.getenv("TOP_K", str(TOP_K))),
                corpus_repo=os.getenv("CORPUS_REPO", CORPUS_REPO),
                corpus_branch=os.getenv("CORPUS_BRANCH", CORPUS_BRANCH),
                github_token=os.getenv("GITHUB_TOKEN"),
                port=int(os.getenv("PORT", "3001")),
                log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
                log_json=os.getenv("LOG_FORMAT", "text").lower() == "json",
                cors_origins=_split_origins(
                    os.getenv("CORS_ORIGINS", "http://localhost:3000")
                ),
            )
        except ValueError as e:
            raise ConfigurationError(f"Invalid numeric configuration value: {e}")

    def describe(self) -> dict:
        """Summary safe for logging (secrets reduced to set/not set)."""
        return {
            "ai_provider": self.ai_provider,
            "api_key": "set" if self.api_key else "not set",
            "supabase_url": "set" if self.supabase_url else "not set",
            "embedding_dimension": self.embedding_dimension,
            "chunk_size": self.chunk_size,
            "chunk_overlap": self.chunk_overlap,
            "similarity_threshold": self.similarity_threshold,
            "top_k": self.top_k,
            "corpus_repo": self.corpus_repo,
        }
