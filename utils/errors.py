"""
Error types raised by the assistant services.
Every failure surfaces to the caller as one of these; nothing is retried.
"""
from typing import Optional


class AssistantError(Exception):
    """Base exception for the assistant."""

    kind: str = "assistant_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class TransportError(AssistantError):
    """HTTP call to the completion or reader endpoint failed."""

    kind = "transport_error"

    def __init__(self, endpoint: str, message: str, status_code: Optional[int] = None):
        super().__init__(f"{endpoint} request failed: {message}")
        self.endpoint = endpoint
        self.status_code = status_code


class ExtractionError(AssistantError):
    """Completion response does not have the candidate/content/part shape."""

    kind = "extraction_error"

    NO_CANDIDATES = "no_candidates"
    EMPTY_CANDIDATES = "empty_candidates"
    NO_CONTENT_PARTS = "no_content_parts"
    NO_TEXT = "no_text"

    def __init__(self, reason: str, message: str):
        super().__init__(message)
        self.reason = reason


class ParseError(AssistantError):
    """Model output is not valid JSON or not the expected JSON shape."""

    kind = "parse_error"

    def __init__(self, message: str, raw: Optional[str] = None):
        super().__init__(message)
        self.raw = raw


class DomainError(AssistantError):
    """Caller-level precondition failure."""

    kind = "domain_error"
