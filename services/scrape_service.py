"""
Scrape service: fetches page text and asks the model to summarize or analyze it.
"""
from typing import Optional, TYPE_CHECKING

from utils.constants import DEFAULT_SCRAPE_INSTRUCTION, SCRAPE_PROMPT, Placeholders
from utils.logger import app_logger
from utils.prompt_builder import PromptBuilder
from utils.sanitizer import InputSanitizer

if TYPE_CHECKING:
    from services.gemini import GeminiClient
    from services.reader import ReaderService


class ScrapeService:
    """Service for page summarization and analysis."""

    @staticmethod
    def build_scrape_prompt(url: str, content: str, instruction: Optional[str] = None) -> str:
        """Combine the instruction (or the default summary instruction) with page content."""
        return PromptBuilder.render_template(SCRAPE_PROMPT, [
            (Placeholders.INSTRUCTION, instruction or DEFAULT_SCRAPE_INSTRUCTION),
            (Placeholders.URL, url),
            (Placeholders.CONTENT, content),
        ])

    @staticmethod
    async def scrape(
        client: 'GeminiClient',
        reader: 'ReaderService',
        url: str,
        instruction: Optional[str] = None,
        max_length: Optional[int] = None
    ) -> str:
        """
        Fetch a page and run the instruction over its content.

        Args:
            client: Completion client
            reader: Page extraction service
            url: Page to fetch
            instruction: What to do with the page, defaults to a summary
            max_length: Optional character limit for the page content

        Returns:
            Generated text

        Raises:
            TransportError: If fetching the page or the completion call fails
            ExtractionError: If the completion response is malformed
        """
        content = await reader.fetch(url)
        content = InputSanitizer.truncate_content(content, max_length)

        prompt = ScrapeService.build_scrape_prompt(url.strip(), content, instruction)
        app_logger.info(f"Analyzing {len(content)} chars from {url}")

        return await client.generate(prompt)
