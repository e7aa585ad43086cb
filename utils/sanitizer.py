"""
Text sanitization helpers for user input and fetched page content.
"""
import re
from typing import Optional


class InputSanitizer:
    """Normalizes free-form text before it is placed in a prompt."""

    _whitespace_run: re.Pattern = re.compile(r'\s+')

    # Only cut at a sentence boundary when it keeps most of the allowed length
    SENTENCE_CUT_RATIO = 0.7

    @staticmethod
    def sanitize_input(text: str) -> str:
        """Trim and collapse every run of whitespace to a single space."""
        return InputSanitizer._whitespace_run.sub(' ', text.strip())

    @staticmethod
    def truncate_content(content: str, max_length: Optional[int]) -> str:
        """
        Limit fetched page content to max_length characters.

        Prefers ending on the last full sentence if one falls in the final
        stretch of the allowed length.

        Args:
            content: Page text
            max_length: Maximum number of characters, None for no limit

        Returns:
            Possibly truncated content
        """
        if max_length is None or len(content) <= max_length:
            return content

        truncated = content[:max_length]
        last_period = truncated.rfind('.')
        if last_period > max_length * InputSanitizer.SENTENCE_CUT_RATIO:
            truncated = truncated[:last_period + 1]

        return truncated
