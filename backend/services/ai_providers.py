"""AI provider integrations for embeddings and chat generation."""
import time
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence

import httpx
from openai import OpenAI
from openai import RateLimitError, AuthenticationError, APIError, APITimeoutError, APIConnectionError

from config import Settings
from errors import ConfigurationError, ProviderError, ValidationError
from models.conversation import Turn

logger = logging.getLogger(__name__)

GENERATION_TEMPERATURE = 0.3
GENERATION_MAX_TOKENS = 1000


def _require_text(text: str) -> None:
    if not text or not text.strip():
        raise ValidationError("Text cannot be empty")


class AIProvider(ABC):
    """Embedding and chat backend. One instance is chosen at startup."""

    name: str = ""
    embedding_model: str = ""
    chat_model: str = ""
    dimension: int = 0  # native embedding size

    @abstractmethod
    def embed(self, text: str) -> List[float]:
        """
        Embed a non-empty text.

        Raises:
            ValidationError: If text is empty
            ProviderError: On network/auth failure or when no vector is returned
        """

    @abstractmethod
    def generate(self, turns: Sequence[Turn]) -> str:
        """
        Produce a reply to an ordered conversation.

        Raises:
            ProviderError: On upstream failure or when the reply has no content
        """


class OpenAIProvider(AIProvider):
    """OpenAI embeddings (ada-002) and chat completions."""

    name = "openai"
    embedding_model = "text-embedding-ada-002"
    chat_model = "gpt-4-turbo-preview"
    dimension = 1536

    def __init__(self, api_key: str, timeout: float = 60.0):
        if not api_key:
            raise ConfigurationError("OPENAI_API_KEY is required when AI_PROVIDER=openai")
        self.client = OpenAI(api_key=api_key, timeout=timeout)
        logger.info("Initialized OpenAIProvider")

    def embed(self, text: str) -> List[float]:
        _require_text(text)
        start_time = time.time()
        try:
            response = self.client.embeddings.create(
                input=text,
                model=self.embedding_model,
            )
        except Exception as e:
            raise self._translate(e, self.embedding_model, start_time)

        if not response.data or not response.data[0].embedding:
            raise ProviderError(
                "No embedding in response",
                code="EMPTY_RESPONSE",
                details={"provider": self.name, "model": self.embedding_model},
            )
        embedding = response.data[0].embedding
        logger.debug(f"OpenAI embedding generated with dimension: {len(embedding)}")
        return embedding

    def generate(self, turns: Sequence[Turn]) -> str:
        start_time = time.time()
        try:
            completion = self.client.chat.completions.create(
                model=self.chat_model,
                messages=[turn.to_message() for turn in turns],
                temperature=GENERATION_TEMPERATURE,
                max_tokens=GENERATION_MAX_TOKENS,
            )
        except Exception as e:
            raise self._translate(e, self.chat_model, start_time)

        content = completion.choices[0].message.content if completion.choices else None
        if not content:
            raise ProviderError(
                "No content in response",
                code="EMPTY_RESPONSE",
                details={"provider": self.name, "model": self.chat_model},
            )
        return content

    def _translate(self, error: Exception, model: str, start_time: float) -> ProviderError:
        """Map an OpenAI SDK exception to a ProviderError."""
        latency_ms = int((time.time() - start_time) * 1000)
        details = {
            "provider": self.name,
            "model": model,
            "latency_ms": latency_ms,
            "original_error": str(error),
        }

        # APITimeoutError subclasses APIConnectionError, so order matters
        if isinstance(error, RateLimitError):
            code, message = "RATE_LIMIT_ERROR", "Rate limit exceeded. Please try again in a few moments."
        elif isinstance(error, AuthenticationError):
            code, message = "AUTHENTICATION_ERROR", "Authentication failed. Please check your API key."
        elif isinstance(error, APITimeoutError):
            code, message = "TIMEOUT_ERROR", "Request timed out. Please try again."
        elif isinstance(error, APIConnectionError):
            code, message = "NETWORK_ERROR", f"Could not reach OpenAI: {error}"
        elif isinstance(error, APIError):
            code, message = "API_ERROR", f"OpenAI API error: {error}"
        else:
            code, message = "API_ERROR", f"Unexpected error calling OpenAI: {error}"
            details["error_type"] = type(error).__name__

        logger.error(
            f"{code}: model={model}, latency={latency_ms}ms, error={error}",
            extra={"error_code": code},
        )
        return ProviderError(message, code=code, details=details)


class MistralProvider(AIProvider):
    """Mistral embeddings and chat over the REST API."""

    name = "mistral"
    embedding_model = "mistral-embed"
    chat_model = "mistral-small-latest"
    dimension = 1024
    api_url = "https://api.mistral.ai/v1"

    def __init__(self, api_key: str, timeout: float = 60.0):
        if not api_key:
            raise ConfigurationError("MISTRAL_API_KEY is required when AI_PROVIDER=mistral")
        self.api_key = api_key
        self.timeout = timeout
        logger.info("Initialized MistralProvider")

    def embed(self, text: str) -> List[float]:
        _require_text(text)
        body = self._post("/embeddings", {
            "model": self.embedding_model,
            "input": [text],
        })

        data = body.get("data") or []
        embedding = data[0].get("embedding") if data else None
        if not embedding:
            raise ProviderError(
                "No embedding in response",
                code="EMPTY_RESPONSE",
                details={"provider": self.name, "model": self.embedding_model},
            )
        logger.debug(f"Mistral embedding generated with dimension: {len(embedding)}")
        return embedding

    def generate(self, turns: Sequence[Turn]) -> str:
        body = self._post("/chat/completions", {
            "model": self.chat_model,
            "messages": [turn.to_message() for turn in turns],
            "temperature": GENERATION_TEMPERATURE,
            "max_tokens": GENERATION_MAX_TOKENS,
        })

        choices = body.get("choices") or []
        if not choices:
            raise ProviderError(
                "No choices in response",
                code="EMPTY_RESPONSE",
                details={"provider": self.name, "model": self.chat_model},
            )

        content = self.flatten_content((choices[0].get("message") or {}).get("content"))
        if not content:
            raise ProviderError(
                "No content in response",
                code="EMPTY_RESPONSE",
                details={"provider": self.name, "model": self.chat_model},
            )
        return content

    @staticmethod
    def flatten_content(content: Any) -> Optional[str]:
        """
        Reduce message content to plain text.

        Mistral may return either a string or a list of typed segments; only
        segments of type "text" are kept.
        """
        if isinstance(content, list):
            return "".join(
                segment.get("text", "")
                for segment in content
                if isinstance(segment, dict) and segment.get("type") == "text"
            )
        return content

    def _post(self, path: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        """POST to the Mistral API and return the decoded JSON body."""
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        model = payload.get("model")
        start_time = time.time()

        try:
            with httpx.Client(timeout=self.timeout) as client:
                response = client.post(f"{self.api_url}{path}", headers=headers, json=payload)
        except httpx.TimeoutException as e:
            raise ProviderError(
                "Request timed out. Please try again.",
                code="TIMEOUT_ERROR",
                details={"provider": self.name, "model": model, "original_error": str(e)},
            )
        except httpx.RequestError as e:
            raise ProviderError(
                f"Network error: {e}",
                code="NETWORK_ERROR",
                details={"provider": self.name, "model": model, "original_error": str(e)},
            )

        latency_ms = int((time.time() - start_time) * 1000)
        details = {"provider": self.name, "model": model, "latency_ms": latency_ms}

        if response.status_code == 429:
            logger.error("Rate limit exceeded for Mistral API")
            raise ProviderError(
                "Rate limit exceeded. Please try again in a few moments.",
                code="RATE_LIMIT_ERROR",
                details=details,
            )

        if response.status_code == 401:
            logger.error("Authentication failed for Mistral API")
            raise ProviderError(
                "Authentication failed. Please check your API key.",
                code="AUTHENTICATION_ERROR",
                details=details,
            )

        if response.status_code != 200:
            error_msg = f"Mistral API request failed with status {response.status_code}: {response.text}"
            logger.error(error_msg)
            raise ProviderError(error_msg, code="API_ERROR", details=details)

        logger.debug(f"Mistral {path} answered in {latency_ms}ms")
        try:
            return response.json()
        except ValueError as e:
            raise ProviderError(
                "Malformed JSON in Mistral response",
                code="API_ERROR",
                details={**details, "original_error": str(e)},
            )


PROVIDERS = {
    OpenAIProvider.name: OpenAIProvider,
    MistralProvider.name: MistralProvider,
}


def create_ai_provider(settings: Settings) -> AIProvider:
    """
    Build the provider selected by settings.ai_provider.

    Settings already rejected unknown provider names, so this is the only place
    a provider class is chosen.
    """
    logger.info(f"Creating AI provider: {settings.ai_provider}")
    provider_class = PROVIDERS[settings.ai_provider]
    return provider_class(api_key=settings.api_key)
