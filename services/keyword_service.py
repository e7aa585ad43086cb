"""
Keyword extraction and search intent classification.
Both are single completion calls with no retry on malformed output.
"""
from typing import List, Optional, TYPE_CHECKING

from utils.constants import (
    KEYWORD_EXTRACTION_PROMPT,
    SEARCH_DIRECTIVE,
    SEARCH_LABEL,
    NO_SEARCH_LABEL,
    Placeholders,
    Sections
)
from utils.logger import app_logger
from utils.prompt_builder import PromptBuilder
from utils.response_parser import ResponseParser

if TYPE_CHECKING:
    from services.gemini import GeminiClient


class KeywordService:
    """Service for deriving search keywords and search intent from user text."""

    @staticmethod
    def build_keyword_prompt(text: str, custom_prompt: Optional[str] = None) -> str:
        """Render the keyword extraction prompt for a text."""
        template = custom_prompt or KEYWORD_EXTRACTION_PROMPT
        return PromptBuilder.render_template(template, [(Placeholders.TEXT, text)])

    @staticmethod
    async def extract_keywords(client: 'GeminiClient', text: str, custom_prompt: Optional[str] = None) -> List[str]:
        """
        Extract 1-3 lowercase search keywords from free-form text.

        Args:
            client: Completion client
            text: Text to extract keywords from
            custom_prompt: Optional template replacing the default few-shot prompt

        Returns:
            Keywords in the order the model returned them

        Raises:
            TransportError, ExtractionError: If the completion call fails
            ParseError: If the output is not a JSON array of strings
        """
        prompt = KeywordService.build_keyword_prompt(text, custom_prompt)

        response = await client.generate(prompt)
        app_logger.debug(f"Keyword extraction raw response: {response[:100]}")

        keywords = ResponseParser.parse_string_array(response)
        keywords = [kw.strip().lower() for kw in keywords if kw.strip()]

        app_logger.info(f"Extracted keywords: {keywords}")
        return keywords

    @staticmethod
    def build_classification_prompt(message: str, classification_prompt: str) -> str:
        """Append the user message and the fixed answer directive to the caller's prompt."""
        if Placeholders.MESSAGE in classification_prompt:
            rendered = PromptBuilder.render_template(classification_prompt, [(Placeholders.MESSAGE, message)])
            return f"{rendered}\n\n{SEARCH_DIRECTIVE}"
        return f"{classification_prompt}\n\n{Sections.CLASSIFY_MESSAGE} {message}\n\n{SEARCH_DIRECTIVE}"

    @staticmethod
    def is_search_answer(answer: str) -> bool:
        """
        Interpret a classification answer.

        Loose on purpose: any answer mentioning SEARCH counts, unless it
        contains the explicit NO_SEARCH label.
        """
        normalized = answer.strip().upper()
        if NO_SEARCH_LABEL in normalized:
            return False
        return SEARCH_LABEL in normalized

    @staticmethod
    async def needs_search(client: 'GeminiClient', message: str, classification_prompt: str) -> bool:
        """
        Ask the model whether answering the message needs a data lookup.

        Raises:
            TransportError, ExtractionError: If the completion call fails
        """
        prompt = KeywordService.build_classification_prompt(message, classification_prompt)

        answer = await client.generate(prompt)
        search_needed = KeywordService.is_search_answer(answer)

        app_logger.info(f"Search intent: {'SEARCH_NEEDED' if search_needed else 'NO_SEARCH'} (raw: {answer.strip()[:40]!r})")
        return search_needed
