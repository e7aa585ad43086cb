"""
Route handlers exposing the assistant over HTTP.
Errors are converted to JSON responses by the handler registered in main.py.
"""
from fastapi import APIRouter, Depends, HTTPException, Request, status

from config import Config
from models.api_models import (
    AskRequest,
    ChatRequest,
    ClassifyRequest,
    KeywordsRequest,
    ModelConfig,
    QueryRequest,
    ScrapeRequest,
    SimpleChatRequest
)
from services.assistant import GeminiAssistant
from services.reader import ReaderService
from utils.errors import DomainError
from utils.http_client import HTTPClientManager
from utils.logger import app_logger

router = APIRouter()


def get_assistant(request: Request) -> GeminiAssistant:
    """
    Return the app's assistant, creating it from the environment on first use.
    The created assistant runs on the pooled clients closed by the app lifespan.
    """
    assistant = getattr(request.app.state, "assistant", None)
    if assistant is None:
        if not Config.GEMINI_API_KEY:
            app_logger.error("CRITICAL: GEMINI_API_KEY not set in .env file!")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Server misconfiguration: GEMINI_API_KEY not set."
            )
        assistant = GeminiAssistant(
            ModelConfig.from_env(),
            http_client=HTTPClientManager.get_completion_client(),
            reader=ReaderService(HTTPClientManager.get_reader_client())
        )
        request.app.state.assistant = assistant
    return assistant


@router.post("/chat")
async def chat(body: ChatRequest, request: Request, assistant: GeminiAssistant = Depends(get_assistant)):
    """Chat with optional auto-search through the app's configured lookup."""
    lookup = getattr(request.app.state, "lookup", None)
    response = await assistant.chat(body.message, body.settings, body.history, lookup=lookup)
    return {"response": response}


@router.post("/chat/simple")
async def simple_chat(body: SimpleChatRequest, assistant: GeminiAssistant = Depends(get_assistant)):
    """Chat without search orchestration."""
    response = await assistant.simple_chat(body.message, body.system_prompt, body.history)
    return {"response": response}


@router.post("/keywords")
async def keywords(body: KeywordsRequest, assistant: GeminiAssistant = Depends(get_assistant)):
    """Extract search keywords from text."""
    return {"keywords": await assistant.extract_keywords(body.text, body.prompt)}


@router.post("/classify")
async def classify(body: ClassifyRequest, assistant: GeminiAssistant = Depends(get_assistant)):
    """Decide whether a message needs a data lookup."""
    return {"search_needed": await assistant.needs_search(body.message, body.classification_prompt)}


@router.post("/query")
async def query(body: QueryRequest, request: Request, assistant: GeminiAssistant = Depends(get_assistant)):
    """Keyword lookup through the app's configured lookup, answered by the model."""
    lookup = getattr(request.app.state, "lookup", None)
    if lookup is None:
        raise DomainError("No lookup is configured for this server")

    outcome = await assistant.query(body.message, body.search_settings, lookup)
    return {
        "keywords": outcome.keywords,
        "results": outcome.results,
        "response": outcome.response
    }


@router.post("/scrape")
async def scrape(body: ScrapeRequest, assistant: GeminiAssistant = Depends(get_assistant)):
    """Summarize or analyze a web page."""
    response = await assistant.scrape(body.url, body.instruction, body.max_length)
    return {"response": response}


@router.post("/ask")
async def ask(body: AskRequest, assistant: GeminiAssistant = Depends(get_assistant)):
    """Send a prompt directly to the model."""
    return {"response": await assistant.ask(body.prompt)}
