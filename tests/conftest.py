import httpx
import pytest
from unittest.mock import AsyncMock

from models.api_models import ChatSettings, ModelConfig, SearchSettings


@pytest.fixture
def model_config():
    """Model configuration used across tests."""
    return ModelConfig(
        api_key="test-gemini-key",
        model_name="gemini-test",
        base_url="https://gemini.test",
        temperature=0.2,
        max_output_tokens=256,
        timeout=5.0
    )

@pytest.fixture
def chat_settings():
    """Standard ChatSettings with auto-search on."""
    return ChatSettings(
        system_prompt="You are a helpful trade assistant.",
        search_classification_prompt="Decide if the user wants supplier or product data.",
        response_format_instructions="Answer in plain text.",
        auto_search=True
    )

@pytest.fixture
def search_settings():
    """Standard SearchSettings for query tests."""
    return SearchSettings(table_name="suppliers", search_columns=["name", "product", "city"], max_results=5)

@pytest.fixture
def gemini_client_builder(model_config):
    from tests.fixtures.mock_clients import GeminiClientBuilder
    return GeminiClientBuilder(model_config)

@pytest.fixture
def mock_gemini_client(gemini_client_builder):
    """Mock GeminiClient answering 'default response' to every prompt."""
    return gemini_client_builder.build()

@pytest.fixture
def chat_context(mock_gemini_client, chat_settings):
    """Standard ChatContext for testing."""
    from models.chat_models import ChatContext
    return ChatContext(
        client=mock_gemini_client,
        message="Find rice suppliers",
        settings=chat_settings
    )

@pytest.fixture
def mock_transport_factory():
    """Build an httpx.AsyncClient whose requests are answered by a handler and recorded."""
    def factory(handler):
        requests = []

        def recording_handler(request):
            requests.append(request)
            return handler(request)

        client = httpx.AsyncClient(transport=httpx.MockTransport(recording_handler))
        client.recorded_requests = requests
        return client

    return factory

@pytest.fixture
def mock_reader():
    """Mock ReaderService."""
    reader = AsyncMock()
    reader.fetch = AsyncMock(return_value="Page text")
    return reader

@pytest.fixture
def auth_headers():
    """Authentication headers for bridge requests."""
    return {"X-API-Key": "test-key"}

@pytest.fixture
def bridge_assistant(mock_gemini_client, mock_reader, model_config):
    """GeminiAssistant wired to mock clients."""
    from services.assistant import GeminiAssistant
    assistant = GeminiAssistant(model_config, reader=mock_reader)
    assistant.client = mock_gemini_client
    return assistant

@pytest.fixture
def app_factory(monkeypatch, bridge_assistant):
    """Build a bridge app around the mocked assistant."""
    from fastapi.testclient import TestClient
    from auth import APIKeyMiddleware
    from main import create_app

    monkeypatch.setattr(APIKeyMiddleware, "API_KEY", "test-key")

    def factory(lookup=None, assistant=bridge_assistant):
        return TestClient(create_app(lookup=lookup, assistant=assistant))

    return factory

@pytest.fixture
def configured_app(app_factory):
    """Pre-configured app with all standard mocks."""
    with app_factory() as client:
        yield client
