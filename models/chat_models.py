"""
Data models for chat processing.
Contains context objects, lookup results, and flow control structures.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, List, Optional, TYPE_CHECKING

from models.api_models import ChatSettings, Message

if TYPE_CHECKING:
    from services.gemini import GeminiClient

# Caller-supplied lookup strategy: keywords in, structured result out.
# The return value may also be an awaitable resolving to the result.
LookupFn = Callable[[List[str]], Any]


@dataclass
class ChatContext:
    """
    Context object containing all chat processing state.
    Provides centralized access to request-scoped data, eliminating parameter chaining.
    """
    client: 'GeminiClient'
    message: str
    settings: ChatSettings
    history: Optional[List[Message]] = None
    lookup: Optional[LookupFn] = None
    call_count: int = 0

    @property
    def model_name(self) -> str:
        """Get model name from the client configuration."""
        return self.client.config.model_name

    @property
    def search_enabled(self) -> bool:
        """Auto-search runs only when enabled and a lookup was supplied."""
        return self.settings.auto_search and self.lookup is not None

    def next_call_number(self) -> int:
        """Increment and return the next LLM call number."""
        self.call_count += 1
        return self.call_count


@dataclass
class LookupResult:
    """Outcome of the auto-search step."""
    performed: bool
    keywords: List[str] = field(default_factory=list)
    results: Any = None


@dataclass
class QueryOutcome:
    """Keywords, lookup results and generated answer of a query call."""
    keywords: List[str]
    results: Any
    response: str


class FlowAction(Enum):
    """Types of actions in the chat flow."""
    CLASSIFY = "classify"
    SEARCH = "search"
    GENERATE = "generate"


@dataclass
class FlowStep:
    """Represents a step in the chat processing flow."""
    action: FlowAction
    search_needed: Optional[bool] = None
    lookup_result: Optional[LookupResult] = None
    prompt: Optional[str] = None
