"""
Client for the Gemini generateContent completion endpoint.
"""
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Optional

import httpx

from config import Config
from models.api_models import ModelConfig
from utils.constants import Endpoints
from utils.errors import TransportError
from utils.logger import app_logger
from utils.response_parser import ResponseParser


class GeminiClient:
    """
    Turns a prompt into generated text. Holds no per-call state.

    Without an injected client each call opens and closes its own; use
    `async with GeminiClient(...)` to reuse one connection pool for a block.
    """

    def __init__(self, config: ModelConfig, http_client: Optional[httpx.AsyncClient] = None):
        """
        Initialize GeminiClient.

        Args:
            config: Immutable model configuration
            http_client: Optional client owned by the caller, never closed here
        """
        self.config = config
        self._http_client = http_client
        self._owned_client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "GeminiClient":
        if self._http_client is None and self._owned_client is None:
            self._owned_client = self._open_client()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the client opened by __aenter__, if any."""
        if self._owned_client is not None:
            await self._owned_client.aclose()
            self._owned_client = None

    def _open_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.config.timeout, http2=True)

    @asynccontextmanager
    async def _client(self) -> AsyncIterator[httpx.AsyncClient]:
        client = self._http_client or self._owned_client
        if client is not None:
            yield client
            return

        async with self._open_client() as client:
            yield client

    @property
    def url(self) -> str:
        """generateContent URL for the configured model."""
        return Config.completion_url(self.config.base_url, self.config.model_name)

    def build_request_body(self, prompt: str) -> Dict[str, Any]:
        """Build the generateContent JSON body for a prompt."""
        return {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": {
                "temperature": self.config.temperature,
                "topK": Config.TOP_K,
                "topP": Config.TOP_P,
                "maxOutputTokens": self.config.max_output_tokens,
            },
        }

    async def generate_raw(self, prompt: str) -> Dict[str, Any]:
        """
        Call the completion endpoint and return the decoded JSON body.

        Raises:
            TransportError: On connection errors, timeouts, non-2xx status or a non-JSON body
        """
        app_logger.debug(f"Completion request to {self.config.model_name} ({len(prompt)} chars)")

        try:
            async with self._client() as client:
                response = await client.post(
                    self.url,
                    params={"key": self.config.api_key},
                    json=self.build_request_body(prompt),
                    timeout=self.config.timeout
                )
        except httpx.TimeoutException as e:
            app_logger.error(f"Completion request timed out after {self.config.timeout}s")
            raise TransportError(Endpoints.COMPLETION, f"timed out after {self.config.timeout}s") from e
        except httpx.RequestError as e:
            app_logger.error(f"Completion request failed: {type(e).__name__}")
            raise TransportError(Endpoints.COMPLETION, str(e) or type(e).__name__) from e

        if not response.is_success:
            detail = self._error_detail(response)
            app_logger.error(f"Completion API error (status {response.status_code}): {detail}")
            raise TransportError(Endpoints.COMPLETION, f"status {response.status_code}: {detail}", response.status_code)

        try:
            return response.json()
        except ValueError as e:
            app_logger.error("Completion API returned a non-JSON body")
            raise TransportError(Endpoints.COMPLETION, "response body is not valid JSON", response.status_code) from e

    async def generate(self, prompt: str) -> str:
        """
        Generate text for a prompt.

        Raises:
            TransportError: If the HTTP call fails
            ExtractionError: If the response lacks candidate/content/part text
        """
        data = await self.generate_raw(prompt)
        return ResponseParser.extract_text(data)

    @staticmethod
    def _error_detail(response: httpx.Response) -> str:
        """Pull the upstream error message out of an error response."""
        try:
            body = response.json()
        except ValueError:
            body = None

        error = body.get("error") if isinstance(body, dict) else None
        if isinstance(error, dict) and error.get("message"):
            return error["message"]
        return response.reason_phrase or "request failed"
