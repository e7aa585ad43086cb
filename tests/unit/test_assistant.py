import asyncio

import httpx
import pytest

from services.assistant import GeminiAssistant
from services.gemini import GeminiClient
from services.reader import ReaderService
from tests.fixtures.responses import gemini_response


@pytest.fixture
def opened_clients(mocker):
    """Record every client the assistant opens for itself, each answering 'ok'."""
    opened = []

    def open_client():
        client = httpx.AsyncClient(transport=httpx.MockTransport(
            lambda request: httpx.Response(200, json=gemini_response("ok"))
        ))
        opened.append(client)
        return client

    mocker.patch.object(GeminiClient, "_open_client", side_effect=open_client)
    mocker.patch.object(ReaderService, "_open_client", side_effect=open_client)
    return opened


def test_assistant_works_across_separate_event_loops(model_config, opened_clients):
    """Given one assistant, when it is used from two asyncio.run calls, both should succeed with their own client."""
    assistant = GeminiAssistant(model_config)

    assert asyncio.run(assistant.ask("first")) == "ok"
    assert asyncio.run(assistant.ask("second")) == "ok"

    assert len(opened_clients) == 2
    assert all(client.is_closed for client in opened_clients)

@pytest.mark.anyio
async def test_async_with_opens_and_closes_owned_clients(model_config, opened_clients):
    """Given an async with block, the assistant should hold one completion and one reader client and close both on exit."""
    async with GeminiAssistant(model_config) as assistant:
        await assistant.ask("first")
        await assistant.ask("second")
        assert len(opened_clients) == 2
        assert not any(client.is_closed for client in opened_clients)

    assert all(client.is_closed for client in opened_clients)

@pytest.mark.anyio
async def test_aclose_leaves_injected_clients_open(model_config, mock_transport_factory, mock_reader):
    """Given injected clients, when aclose is called, neither the HTTP client nor the reader should be closed."""
    http_client = mock_transport_factory(lambda request: httpx.Response(200, json=gemini_response("ok")))
    assistant = GeminiAssistant(model_config, http_client=http_client, reader=mock_reader)

    await assistant.ask("prompt")
    await assistant.aclose()

    assert not http_client.is_closed
    mock_reader.aclose.assert_not_called()
    await http_client.aclose()
