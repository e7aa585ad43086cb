"""
Gemini Assist Bridge - optional FastAPI surface over the GeminiAssistant client.
Chat with keyword-driven data lookup, keyword extraction, page summarization and direct prompting.
"""
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from auth import APIKeyMiddleware
from config import Config
from models.chat_models import LookupFn
from routes import assistant as assistant_routes
from services.assistant import GeminiAssistant
from utils.errors import AssistantError, DomainError
from utils.http_client import HTTPClientManager
from utils.logger import app_logger


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager for startup and shutdown events."""
    yield
    await HTTPClientManager.close_all()


async def assistant_exception_handler(request: Request, exc: AssistantError):
    """Convert assistant errors to JSON error responses."""
    if isinstance(exc, DomainError):
        status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    else:
        status_code = status.HTTP_502_BAD_GATEWAY

    app_logger.error(f"{exc.kind} on {request.url.path}: {exc.message}")
    return JSONResponse(
        status_code=status_code,
        content={"error": exc.kind, "message": exc.message},
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle validation errors with user-friendly messages"""
    errors = exc.errors()
    app_logger.error(f"Validation error for {request.url}")
    app_logger.error(f"Errors: {errors}")

    if errors:
        first_error = errors[0]
        error_type = first_error.get('type', '')
        field = first_error.get('loc', [])[-1] if first_error.get('loc') else 'field'
        message = f"{field}: {first_error.get('msg', 'Validation error')}"

        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={
                "detail": [{
                    "msg": message,
                    "type": error_type,
                    "loc": list(first_error.get('loc', []))
                }]
            },
        )

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": errors},
    )


def create_app(lookup: Optional[LookupFn] = None, assistant: Optional[GeminiAssistant] = None) -> FastAPI:
    """
    Build the bridge application.

    Args:
        lookup: Lookup strategy used by /chat auto-search and /query
        assistant: Preconfigured assistant; built from the environment on first request if omitted

    Returns:
        Configured FastAPI app
    """
    app = FastAPI(title=Config.APP_TITLE, lifespan=lifespan)
    app.state.lookup = lookup
    app.state.assistant = assistant

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(APIKeyMiddleware)

    app.add_exception_handler(AssistantError, assistant_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    @app.get("/")
    async def root():
        """Root endpoint - health check."""
        return {"message": f"{Config.APP_TITLE} is running"}

    app.include_router(assistant_routes.router, tags=["assistant"])

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
