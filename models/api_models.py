"""
Pydantic data models for settings, model configuration and bridge requests.
"""
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field

from config import Config


class Message(BaseModel):
    """Chat message model."""
    model_config = ConfigDict(frozen=True)

    role: str  # "user", "assistant", ...
    content: str


class ChatSettings(BaseModel):
    """Settings driving a single chat call."""
    model_config = ConfigDict(frozen=True)

    system_prompt: str
    search_classification_prompt: str
    response_format_instructions: Optional[str] = None
    auto_search: bool = True


class SearchSettings(BaseModel):
    """Describes the searched data source; only used when rendering prompts."""
    model_config = ConfigDict(frozen=True)

    table_name: str
    search_columns: List[str]
    max_results: int = Field(Config.DEFAULT_MAX_RESULTS, ge=1)


class ModelConfig(BaseModel):
    """Completion model configuration, fixed for the lifetime of a client."""
    model_config = ConfigDict(frozen=True, protected_namespaces=())

    api_key: str = Field(..., min_length=1, repr=False)
    model_name: str = Config.GEMINI_MODEL
    base_url: str = Config.GEMINI_BASE_URL
    temperature: float = Config.DEFAULT_TEMPERATURE
    max_output_tokens: int = Field(Config.DEFAULT_MAX_OUTPUT_TOKENS, ge=1)
    timeout: float = Field(Config.COMPLETION_TIMEOUT, gt=0, description="Per-call timeout in seconds")

    @classmethod
    def from_env(cls, **overrides) -> "ModelConfig":
        """Build a config from environment defaults, with explicit overrides."""
        values = {"api_key": Config.GEMINI_API_KEY}
        values.update(overrides)
        return cls(**values)


# Bridge request bodies

class ChatRequest(BaseModel):
    """Chat request with search settings and conversation history."""
    message: str
    settings: ChatSettings
    history: Optional[List[Message]] = None


class SimpleChatRequest(BaseModel):
    """Chat request without search orchestration."""
    message: str
    system_prompt: str
    history: Optional[List[Message]] = None


class KeywordsRequest(BaseModel):
    """Keyword extraction request."""
    text: str
    prompt: Optional[str] = Field(None, description="Custom template; {TEXT} is replaced by the text")


class ClassifyRequest(BaseModel):
    """Search intent classification request."""
    message: str
    classification_prompt: str


class QueryRequest(BaseModel):
    """Keyword lookup request."""
    message: str
    search_settings: SearchSettings


class ScrapeRequest(BaseModel):
    """Page scrape and analysis request."""
    url: str = Field(..., min_length=1)
    instruction: Optional[str] = None
    max_length: Optional[int] = Field(None, ge=1)


class AskRequest(BaseModel):
    """Direct prompt request."""
    prompt: str
