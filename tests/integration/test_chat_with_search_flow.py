import json

import httpx
import pytest

from models.api_models import ChatSettings, Message
from services.assistant import GeminiAssistant
from services.reader import ReaderService
from utils.errors import TransportError
from tests.fixtures.responses import gemini_response, MOCK_LOOKUP_ROWS, MOCK_PAGE_TEXT


class GeminiEndpoint:
    """Fake completion endpoint answering from a queue and recording prompts."""

    def __init__(self, *answers):
        self.answers = list(answers)
        self.prompts = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        if request.url.host == "r.jina.ai":
            return httpx.Response(200, text=MOCK_PAGE_TEXT)

        assert request.url.path.endswith(":generateContent")
        body = json.loads(request.content)
        self.prompts.append(body["contents"][0]["parts"][0]["text"])

        answer = self.answers.pop(0)
        if isinstance(answer, httpx.Response):
            return answer
        return httpx.Response(200, json=gemini_response(answer))


@pytest.fixture
def settings():
    return ChatSettings(
        system_prompt="You are a sourcing assistant for a spice and grain marketplace.",
        search_classification_prompt="Does the user want supplier or product data from the database?",
    )

@pytest.fixture
def build_assistant(model_config, mock_transport_factory):
    def factory(endpoint):
        http_client = mock_transport_factory(endpoint)
        return GeminiAssistant(model_config, http_client=http_client, reader=ReaderService(http_client))
    return factory


@pytest.mark.anyio
async def test_chat_full_flow_with_lookup(build_assistant, settings):
    """End-to-end: classification, keyword extraction, lookup and final answer over the HTTP layer."""
    endpoint = GeminiEndpoint("SEARCH_NEEDED", '```json\n["rice"]\n```', "Three suppliers sell rice in Colombo and Kandy.")
    assistant = build_assistant(endpoint)
    lookups = []

    def lookup(keywords):
        lookups.append(keywords)
        return {"count": 3, "rows": MOCK_LOOKUP_ROWS}

    response = await assistant.chat(
        "Find rice suppliers",
        settings,
        history=[Message(role="user", content="Hi"), Message(role="assistant", content="Hello! How can I help?")],
        lookup=lookup
    )

    assert response == "Three suppliers sell rice in Colombo and Kandy."
    assert lookups == [["rice"]]
    assert len(endpoint.prompts) == 3

    classification_prompt, keyword_prompt, final_prompt = endpoint.prompts
    assert "SEARCH_NEEDED" in classification_prompt
    assert 'Text: "Find rice suppliers"' in keyword_prompt
    assert '"count": 3' in final_prompt
    assert "Lanka Rice Traders" in final_prompt
    assert "assistant: Hello! How can I help?" in final_prompt
    assert final_prompt.endswith("User: Find rice suppliers\n\nRespond:")

@pytest.mark.anyio
async def test_chat_lookup_failure_never_reaches_final_completion(build_assistant, settings):
    """Given a lookup that raises, when chat is called, the call should fail without a final completion."""
    endpoint = GeminiEndpoint("SEARCH_NEEDED", '["rice"]', "should not be used")
    assistant = build_assistant(endpoint)

    def lookup(keywords):
        raise ConnectionError("database offline")

    with pytest.raises(ConnectionError, match="database offline"):
        await assistant.chat("Find rice suppliers", settings, lookup=lookup)

    assert len(endpoint.prompts) == 2
    assert endpoint.answers == ["should not be used"]

@pytest.mark.anyio
async def test_chat_classification_failure_fails_whole_call(build_assistant, settings):
    """Given a failing classification call, when chat is called, the TransportError should surface with no fallback."""
    endpoint = GeminiEndpoint(httpx.Response(503, json={"error": {"message": "overloaded"}}), "unused")
    assistant = build_assistant(endpoint)

    with pytest.raises(TransportError, match="overloaded"):
        await assistant.chat("Find rice suppliers", settings, lookup=lambda keywords: [])

    assert len(endpoint.prompts) == 1

@pytest.mark.anyio
async def test_chat_without_search_intent_answers_directly(build_assistant, settings):
    """Given a NO_SEARCH classification, when chat is called, the final prompt should carry no lookup data."""
    endpoint = GeminiEndpoint("NO_SEARCH", "Hello! Ask me about suppliers.")
    assistant = build_assistant(endpoint)

    response = await assistant.chat("Hello there", settings, lookup=lambda keywords: {"unused": True})

    assert response == "Hello! Ask me about suppliers."
    assert "Relevant data:" not in endpoint.prompts[-1]

@pytest.mark.anyio
async def test_query_flow_with_async_lookup(build_assistant, search_settings):
    """End-to-end: query extracts keywords, awaits the lookup and answers from the rows."""
    endpoint = GeminiEndpoint('["rice", "colombo"]', "Two suppliers in Colombo sell rice.")
    assistant = build_assistant(endpoint)

    async def lookup(keywords):
        return [row for row in MOCK_LOOKUP_ROWS if row["city"].lower() in keywords]

    outcome = await assistant.query("Rice suppliers in Colombo?", search_settings, lookup)

    assert outcome.keywords == ["rice", "colombo"]
    assert len(outcome.results) == 2
    assert outcome.response == "Two suppliers in Colombo sell rice."
    assert "Golden Grain Ltd" in endpoint.prompts[1]

@pytest.mark.anyio
async def test_scrape_flow_through_reader(build_assistant):
    """End-to-end: scrape fetches via the reader endpoint and summarizes the page."""
    endpoint = GeminiEndpoint("Record cinnamon exports, driven by Mexico and the US.")
    assistant = build_assistant(endpoint)

    summary = await assistant.scrape("https://example.com/cinnamon-exports")

    assert summary == "Record cinnamon exports, driven by Mexico and the US."
    assert "Ceylon Cinnamon Exports Reach Record High" in endpoint.prompts[0]
    assert "Page URL: https://example.com/cinnamon-exports" in endpoint.prompts[0]

@pytest.mark.anyio
async def test_simple_chat_and_ask(build_assistant):
    """Given simple chat and ask, each should make exactly one completion call."""
    endpoint = GeminiEndpoint("Hi!", "Direct answer")
    assistant = build_assistant(endpoint)

    assert await assistant.simple_chat("Hello", "Be friendly.") == "Hi!"
    assert await assistant.ask("Exact prompt") == "Direct answer"
    assert endpoint.prompts == ["Be friendly.\n\nUser: Hello\n\nRespond:", "Exact prompt"]
