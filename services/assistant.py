"""
GeminiAssistant: the public entry point wrapping the completion and reader endpoints.
"""
from typing import List, Optional, Sequence

import httpx

from models.api_models import ChatSettings, Message, ModelConfig, SearchSettings
from models.chat_models import ChatContext, FlowAction, LookupFn, QueryOutcome
from services.chat_service import ChatService
from services.gemini import GeminiClient
from services.keyword_service import KeywordService
from services.reader import ReaderService
from services.scrape_service import ScrapeService
from utils.logger import app_logger
from utils.sanitizer import InputSanitizer


class GeminiAssistant:
    """
    Chat, keyword extraction, page scraping and direct prompting over Gemini.

    Instances hold only immutable configuration and can be shared between
    concurrent callers. Without an injected client every call opens its own
    connection, so separate event loops can use the same instance; wrap a
    batch of calls in `async with assistant:` to share one connection pool.
    """

    def __init__(
        self,
        config: ModelConfig,
        http_client: Optional[httpx.AsyncClient] = None,
        reader: Optional[ReaderService] = None
    ):
        self.config = config
        self.client = GeminiClient(config, http_client)
        self._owns_reader = reader is None
        self.reader = reader or ReaderService()

    async def __aenter__(self) -> "GeminiAssistant":
        await self.client.__aenter__()
        if self._owns_reader:
            await self.reader.__aenter__()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the clients this assistant opened. Injected clients are left open."""
        await self.client.aclose()
        if self._owns_reader:
            await self.reader.aclose()

    @classmethod
    def from_api_key(cls, api_key: str, **options) -> "GeminiAssistant":
        """Build an assistant from an API key and optional ModelConfig fields."""
        return cls(ModelConfig(api_key=api_key, **options))

    async def chat(
        self,
        message: str,
        settings: ChatSettings,
        history: Optional[Sequence[Message]] = None,
        lookup: Optional[LookupFn] = None
    ) -> str:
        """
        Answer a message, enriching the prompt with lookup results when needed.

        With auto_search on and a lookup supplied, the model first decides
        whether a lookup is needed, keywords are extracted and passed to the
        lookup, and its result is added to the final prompt.

        Raises:
            TransportError, ExtractionError, ParseError: From any completion call
            Exception: Whatever the lookup raises, unchanged
        """
        context = ChatContext(
            client=self.client,
            message=message,
            settings=settings,
            history=list(history) if history else None,
            lookup=lookup
        )

        final_prompt = None
        async for step in ChatService.orchestrate_chat_flow(context):
            if step.action == FlowAction.GENERATE:
                final_prompt = step.prompt

        call_num = context.next_call_number()
        app_logger.info(f"LLM Call #{call_num}: Generating final response")
        response = await self.client.generate(final_prompt)
        app_logger.info(f"LLM Call #{call_num} completed: Generated {len(response)} characters")

        return response

    async def simple_chat(self, message: str, system_prompt: str, history: Optional[Sequence[Message]] = None) -> str:
        """Answer a message with only the system prompt and history, no search."""
        prompt = ChatService.build_simple_prompt(system_prompt, message, history)
        return await self.client.generate(prompt)

    async def extract_keywords(self, text: str, prompt: Optional[str] = None) -> List[str]:
        """Extract 1-3 lowercase search keywords from text."""
        return await KeywordService.extract_keywords(self.client, text, prompt)

    async def needs_search(self, message: str, classification_prompt: str) -> bool:
        """Classify whether a message needs a data lookup."""
        return await KeywordService.needs_search(self.client, message, classification_prompt)

    async def query(
        self,
        message: str,
        search_settings: SearchSettings,
        lookup: LookupFn,
        keyword_prompt: Optional[str] = None
    ) -> QueryOutcome:
        """Extract keywords, run the lookup and answer from its results."""
        return await ChatService.run_query(self.client, message, search_settings, lookup, keyword_prompt)

    async def scrape(self, url: str, instruction: Optional[str] = None, max_length: Optional[int] = None) -> str:
        """Fetch a page and summarize it, or apply the given instruction to it."""
        return await ScrapeService.scrape(self.client, self.reader, url, instruction, max_length)

    async def ask(self, prompt: str) -> str:
        """Send a prompt as-is and return the generated text."""
        return await self.client.generate(prompt)

    @staticmethod
    def sanitize_input(text: str) -> str:
        """Trim text and collapse runs of whitespace to single spaces."""
        return InputSanitizer.sanitize_input(text)
