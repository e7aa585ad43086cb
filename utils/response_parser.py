"""
Parsing utilities for completion endpoint responses.
Extracts generated text from the response envelope and cleans model output for JSON parsing.
"""
import json
import re
from typing import Any, List

from utils.errors import ExtractionError, ParseError


class ResponseParser:
    """Parser for generateContent responses and structured model output."""

    # Opening fence with an optional language tag, e.g. ```json
    _opening_fence: re.Pattern = re.compile(r'^```[\w+-]*[ \t]*\n?')
    _closing_fence: re.Pattern = re.compile(r'\n?```$')

    @staticmethod
    def extract_text(data: Any) -> str:
        """
        Extract the first generated text fragment.

        Args:
            data: Decoded JSON body of a generateContent call

        Returns:
            Text of the first part of the first candidate

        Raises:
            ExtractionError: If any level of candidates/content/parts is missing
        """
        if not isinstance(data, dict):
            raise ExtractionError(ExtractionError.NO_CANDIDATES, "Response is not a JSON object")

        candidates = data.get("candidates")
        if candidates is None or not isinstance(candidates, list):
            message = "Response contains no candidates"
            feedback = data.get("promptFeedback")
            if isinstance(feedback, dict) and feedback.get("blockReason"):
                message += f" (blocked: {feedback['blockReason']})"
            raise ExtractionError(ExtractionError.NO_CANDIDATES, message)

        if not candidates:
            raise ExtractionError(ExtractionError.EMPTY_CANDIDATES, "Response candidates list is empty")

        candidate = candidates[0]
        content = candidate.get("content") if isinstance(candidate, dict) else None
        parts = content.get("parts") if isinstance(content, dict) else None

        if not isinstance(parts, list) or not parts:
            reason = candidate.get("finishReason") if isinstance(candidate, dict) else None
            message = "First candidate has no content parts"
            if reason:
                message += f" (finish reason: {reason})"
            raise ExtractionError(ExtractionError.NO_CONTENT_PARTS, message)

        part = parts[0]
        text = part.get("text") if isinstance(part, dict) else None
        if not isinstance(text, str):
            raise ExtractionError(ExtractionError.NO_TEXT, "First content part has no text")

        return text

    @staticmethod
    def clean_json_response(text: str) -> str:
        """
        Strip markdown code fences and surrounding whitespace from model output.
        Nested fences are stripped layer by layer until nothing changes.
        """
        cleaned = text.strip()
        while True:
            stripped = ResponseParser._opening_fence.sub('', cleaned, count=1)
            stripped = ResponseParser._closing_fence.sub('', stripped, count=1).strip()
            if stripped == cleaned:
                return cleaned
            cleaned = stripped

    @staticmethod
    def parse_string_array(text: str) -> List[str]:
        """
        Parse cleaned model output as a JSON array of strings.

        Raises:
            ParseError: If the text is not valid JSON or not a list of strings
        """
        cleaned = ResponseParser.clean_json_response(text)

        try:
            value = json.loads(cleaned)
        except json.JSONDecodeError as e:
            raise ParseError(f"Model output is not valid JSON: {e.msg}", raw=text) from e

        if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
            raise ParseError("Model output is not a JSON array of strings", raw=text)

        return value
