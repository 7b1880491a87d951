"""Unit tests for the AI provider variants."""
import sys
from pathlib import Path

# Add backend to path
sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))

import httpx
import pytest
from unittest.mock import Mock, MagicMock, patch

from config import Settings
from errors import ConfigurationError, ProviderError, ValidationError
from models.conversation import Turn
from services.ai_providers import (
    MistralProvider,
    OpenAIProvider,
    create_ai_provider,
)

TURNS = [
    Turn(role="system", content="Answer from context."),
    Turn(role="user", content="Context:\n...\n\nQuestion: Who?"),
]


def _http_response(status_code=200, body=None, text=""):
    response = Mock()
    response.status_code = status_code
    response.json.return_value = body if body is not None else {}
    response.text = text
    return response


@pytest.fixture
def mock_http():
    """Patch httpx.Client and expose the object whose .post is called."""
    with patch("httpx.Client") as mock_client_class:
        mock_client = MagicMock()
        mock_client_class.return_value = mock_client
        yield mock_client.__enter__.return_value


class TestOpenAIProvider:
    """Test suite for OpenAIProvider."""

    def test_requires_api_key(self):
        with pytest.raises(ConfigurationError, match="OPENAI_API_KEY"):
            OpenAIProvider(api_key="")

    @patch("services.ai_providers.OpenAI")
    def test_embed_success(self, mock_openai_class):
        mock_client = Mock()
        mock_client.embeddings.create.return_value = Mock(data=[Mock(embedding=[0.1, 0.2, 0.3])])
        mock_openai_class.return_value = mock_client

        provider = OpenAIProvider(api_key="test_key")
        result = provider.embed("Warren Commission")

        assert result == [0.1, 0.2, 0.3]
        mock_client.embeddings.create.assert_called_once_with(
            input="Warren Commission",
            model="text-embedding-ada-002",
        )

    @patch("services.ai_providers.OpenAI")
    def test_embed_empty_text(self, mock_openai_class):
        provider = OpenAIProvider(api_key="test_key")
        with pytest.raises(ValidationError, match="Text cannot be empty"):
            provider.embed("   ")
        mock_openai_class.return_value.embeddings.create.assert_not_called()

    @patch("services.ai_providers.OpenAI")
    def test_embed_no_vector(self, mock_openai_class):
        mock_client = Mock()
        mock_client.embeddings.create.return_value = Mock(data=[])
        mock_openai_class.return_value = mock_client

        provider = OpenAIProvider(api_key="test_key")
        with pytest.raises(ProviderError) as exc_info:
            provider.embed("text")
        assert exc_info.value.error.code == "EMPTY_RESPONSE"

    @patch("services.ai_providers.OpenAI")
    def test_generate_success(self, mock_openai_class):
        mock_client = Mock()
        mock_client.chat.completions.create.return_value = Mock(
            choices=[Mock(message=Mock(content="Oswald was arrested in the Texas Theatre."))]
        )
        mock_openai_class.return_value = mock_client

        provider = OpenAIProvider(api_key="test_key")
        answer = provider.generate(TURNS)

        assert answer == "Oswald was arrested in the Texas Theatre."
        kwargs = mock_client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "gpt-4-turbo-preview"
        assert kwargs["temperature"] == 0.3
        assert kwargs["max_tokens"] == 1000
        assert kwargs["messages"] == [t.to_message() for t in TURNS]

    @patch("services.ai_providers.OpenAI")
    def test_generate_empty_content(self, mock_openai_class):
        mock_client = Mock()
        mock_client.chat.completions.create.return_value = Mock(
            choices=[Mock(message=Mock(content=None))]
        )
        mock_openai_class.return_value = mock_client

        provider = OpenAIProvider(api_key="test_key")
        with pytest.raises(ProviderError, match="No content"):
            provider.generate(TURNS)

    @patch("services.ai_providers.OpenAI")
    def test_sdk_errors_become_provider_errors(self, mock_openai_class):
        mock_client = Mock()
        mock_client.embeddings.create.side_effect = RuntimeError("socket closed")
        mock_openai_class.return_value = mock_client

        provider = OpenAIProvider(api_key="test_key")
        with pytest.raises(ProviderError) as exc_info:
            provider.embed("text")
        assert exc_info.value.error.code == "API_ERROR"
        assert exc_info.value.error.details["error_type"] == "RuntimeError"

    @patch("services.ai_providers.OpenAI")
    def test_rate_limit_error_code(self, mock_openai_class):
        from openai import RateLimitError

        error = RateLimitError(
            "slow down",
            response=httpx.Response(429, request=httpx.Request("POST", "https://api.openai.com")),
            body=None,
        )
        mock_client = Mock()
        mock_client.chat.completions.create.side_effect = error
        mock_openai_class.return_value = mock_client

        provider = OpenAIProvider(api_key="test_key")
        with pytest.raises(ProviderError) as exc_info:
            provider.generate(TURNS)
        assert exc_info.value.error.code == "RATE_LIMIT_ERROR"


class TestMistralProvider:
    """Test suite for MistralProvider."""

    def test_requires_api_key(self):
        with pytest.raises(ConfigurationError, match="MISTRAL_API_KEY"):
            MistralProvider(api_key=None)

    def test_embed_success(self, mock_http):
        mock_http.post.return_value = _http_response(body={"data": [{"embedding": [0.5] * 4}]})

        provider = MistralProvider(api_key="test_key")
        assert provider.embed("Dallas") == [0.5] * 4

        url = mock_http.post.call_args.args[0]
        payload = mock_http.post.call_args.kwargs["json"]
        assert url == "https://api.mistral.ai/v1/embeddings"
        assert payload == {"model": "mistral-embed", "input": ["Dallas"]}
        assert mock_http.post.call_args.kwargs["headers"]["Authorization"] == "Bearer test_key"

    def test_embed_missing_vector(self, mock_http):
        mock_http.post.return_value = _http_response(body={"data": [{}]})

        provider = MistralProvider(api_key="test_key")
        with pytest.raises(ProviderError, match="No embedding"):
            provider.embed("Dallas")

    def test_generate_string_content(self, mock_http):
        mock_http.post.return_value = _http_response(
            body={"choices": [{"message": {"content": "Plain answer."}}]}
        )

        provider = MistralProvider(api_key="test_key")
        assert provider.generate(TURNS) == "Plain answer."

    def test_generate_flattens_text_segments(self, mock_http):
        mock_http.post.return_value = _http_response(body={"choices": [{"message": {"content": [
            {"type": "text", "text": "First part, "},
            {"type": "reference", "reference_ids": [1]},
            {"type": "text", "text": "second part."},
        ]}}]})

        provider = MistralProvider(api_key="test_key")
        assert provider.generate(TURNS) == "First part, second part."

    def test_generate_no_choices(self, mock_http):
        mock_http.post.return_value = _http_response(body={"choices": []})

        provider = MistralProvider(api_key="test_key")
        with pytest.raises(ProviderError, match="No choices"):
            provider.generate(TURNS)

    def test_generate_only_non_text_segments(self, mock_http):
        mock_http.post.return_value = _http_response(body={"choices": [{"message": {"content": [
            {"type": "image_url", "image_url": "https://example.com/x.png"},
        ]}}]})

        provider = MistralProvider(api_key="test_key")
        with pytest.raises(ProviderError, match="No content"):
            provider.generate(TURNS)

    @pytest.mark.parametrize("status,code", [
        (401, "AUTHENTICATION_ERROR"),
        (429, "RATE_LIMIT_ERROR"),
        (500, "API_ERROR"),
    ])
    def test_http_errors(self, mock_http, status, code):
        mock_http.post.return_value = _http_response(status_code=status, text="error")

        provider = MistralProvider(api_key="test_key")
        with pytest.raises(ProviderError) as exc_info:
            provider.embed("Dallas")
        assert exc_info.value.error.code == code

    def test_timeout(self, mock_http):
        mock_http.post.side_effect = httpx.TimeoutException("timed out")

        provider = MistralProvider(api_key="test_key")
        with pytest.raises(ProviderError) as exc_info:
            provider.generate(TURNS)
        assert exc_info.value.error.code == "TIMEOUT_ERROR"

    def test_network_error(self, mock_http):
        mock_http.post.side_effect = httpx.ConnectError("connection refused")

        provider = MistralProvider(api_key="test_key")
        with pytest.raises(ProviderError) as exc_info:
            provider.embed("Dallas")
        assert exc_info.value.error.code == "NETWORK_ERROR"


class TestCreateAIProvider:
    """Provider selection happens once, from settings."""

    def test_selects_mistral(self):
        provider = create_ai_provider(Settings(ai_provider="mistral", mistral_api_key="m_key"))
        assert isinstance(provider, MistralProvider)
        assert provider.dimension == 1024

    @patch("services.ai_providers.OpenAI")
    def test_selects_openai(self, mock_openai_class):
        provider = create_ai_provider(Settings(ai_provider="openai", openai_api_key="o_key"))
        assert isinstance(provider, OpenAIProvider)
        mock_openai_class.assert_called_once_with(api_key="o_key", timeout=60.0)

    def test_unknown_provider_rejected_by_settings(self):
        with pytest.raises(ConfigurationError, match="Unsupported AI provider"):
            Settings(ai_provider="cohere")
