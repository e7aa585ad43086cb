"""
Chat service containing core chat processing logic.
Handles search intent detection, keyword lookup, and chat flow orchestration.
"""
import inspect
from typing import Any, AsyncIterator, List, Optional, Sequence, TYPE_CHECKING

import anyio.to_thread

from models.api_models import Message, SearchSettings
from models.chat_models import ChatContext, LookupFn, LookupResult, QueryOutcome, FlowAction, FlowStep
from services.keyword_service import KeywordService
from utils.constants import QUERY_RESPONSE_PROMPT, Placeholders
from utils.errors import DomainError
from utils.logger import app_logger
from utils.prompt_builder import PromptBuilder

if TYPE_CHECKING:
    from services.gemini import GeminiClient


class ChatService:
    """Service for handling chat logic."""

    @staticmethod
    async def call_lookup(lookup: LookupFn, keywords: List[str]) -> Any:
        """
        Invoke the caller's lookup. Coroutine functions are awaited on the loop;
        plain callables run in a worker thread and an awaitable result is awaited.
        """
        if inspect.iscoroutinefunction(lookup):
            return await lookup(keywords)

        result = await anyio.to_thread.run_sync(lookup, keywords)
        if inspect.isawaitable(result):
            result = await result
        return result

    @staticmethod
    async def perform_lookup(context: ChatContext) -> LookupResult:
        """
        Extract keywords from the user message and run the lookup with them.
        Nothing is looked up when no keyword was extracted.
        """
        call_num = context.next_call_number()
        app_logger.info(f"LLM Call #{call_num}: Extracting keywords")
        keywords = await KeywordService.extract_keywords(context.client, context.message)

        if not keywords:
            app_logger.info("No keywords extracted, skipping lookup")
            return LookupResult(performed=False)

        app_logger.info(f"Running lookup for keywords: {keywords}")
        results = await ChatService.call_lookup(context.lookup, keywords)

        return LookupResult(performed=True, keywords=keywords, results=results)

    @staticmethod
    def build_final_prompt(context: ChatContext, lookup_result: Optional[LookupResult] = None) -> str:
        """Assemble the final prompt, adding lookup results as the context block when present."""
        lookup_context = None
        if lookup_result is not None and lookup_result.performed:
            lookup_context = PromptBuilder.serialize_context(lookup_result.results)

        return PromptBuilder.build_chat_prompt(
            system_prompt=context.settings.system_prompt,
            user_message=context.message,
            history=context.history,
            format_instructions=context.settings.response_format_instructions,
            context=lookup_context
        )

    @staticmethod
    async def orchestrate_chat_flow(context: ChatContext) -> AsyncIterator[FlowStep]:
        """
        Core flow orchestrator that yields decision points.

        Any failure while classifying, extracting keywords or running the
        lookup propagates; the flow never falls back to answering without
        the lookup context.
        """
        lookup_result = None

        if context.search_enabled:
            call_num = context.next_call_number()
            app_logger.info(f"LLM Call #{call_num}: Classifying search intent")
            search_needed = await KeywordService.needs_search(
                context.client,
                context.message,
                context.settings.search_classification_prompt
            )
            yield FlowStep(action=FlowAction.CLASSIFY, search_needed=search_needed)

            if search_needed:
                lookup_result = await ChatService.perform_lookup(context)
                yield FlowStep(action=FlowAction.SEARCH, lookup_result=lookup_result)

        prompt = ChatService.build_final_prompt(context, lookup_result)
        app_logger.debug(f"Final prompt preview: {prompt[:200]}...")

        yield FlowStep(action=FlowAction.GENERATE, prompt=prompt, lookup_result=lookup_result)

    @staticmethod
    def build_query_prompt(message: str, search_settings: SearchSettings, results: Any) -> str:
        """Render the prompt answering a question from lookup results."""
        return PromptBuilder.render_template(QUERY_RESPONSE_PROMPT, [
            (Placeholders.TABLE, search_settings.table_name),
            (Placeholders.COLUMNS, ", ".join(search_settings.search_columns)),
            (Placeholders.MAX_RESULTS, str(search_settings.max_results)),
            (Placeholders.RESULTS, PromptBuilder.serialize_context(results)),
            (Placeholders.MESSAGE, message),
        ])

    @staticmethod
    async def run_query(
        client: 'GeminiClient',
        message: str,
        search_settings: SearchSettings,
        lookup: LookupFn,
        keyword_prompt: Optional[str] = None
    ) -> QueryOutcome:
        """
        Extract keywords, look them up and answer from the results.

        Raises:
            DomainError: If no keyword could be extracted
        """
        keywords = await KeywordService.extract_keywords(client, message, keyword_prompt)
        if not keywords:
            app_logger.warning("Query aborted: no keywords extracted")
            raise DomainError("No keywords could be extracted from the message")

        app_logger.info(f"Query lookup on '{search_settings.table_name}' for keywords: {keywords}")
        results = await ChatService.call_lookup(lookup, keywords)

        prompt = ChatService.build_query_prompt(message, search_settings, results)
        response = await client.generate(prompt)

        return QueryOutcome(keywords=keywords, results=results, response=response)

    @staticmethod
    def build_simple_prompt(system_prompt: str, message: str, history: Optional[Sequence[Message]] = None) -> str:
        """Prompt for chat without search orchestration."""
        return PromptBuilder.build_simple_prompt(system_prompt, message, history)
