"""
Authentication middleware for the bridge API.
Callers authenticate with the X-API-Key header; this is unrelated to the Gemini API key.
"""
import os
import secrets
from fastapi import Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from utils.logger import app_logger


class APIKeyMiddleware(BaseHTTPMiddleware):
    """
    Checks X-API-Key header against configured BRIDGE_API_KEY.
    """

    EXCLUDED_PATHS = {"/", "/docs", "/openapi.json", "/redoc"}
    API_KEY: str = os.getenv("BRIDGE_API_KEY", "")

    @staticmethod
    def _client_host(request: Request) -> str:
        return request.client.host if request.client else "unknown"

    async def dispatch(self, request: Request, call_next):
        """
        Verify the API key before passing the request on.

        Args:
            request: Incoming HTTP request
            call_next: Next middleware/handler in chain

        Returns:
            Response from next handler or error response
        """
        if request.url.path in self.EXCLUDED_PATHS:
            return await call_next(request)

        if not self.API_KEY:
            app_logger.error("CRITICAL: BRIDGE_API_KEY not set in .env file!")
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={
                    "detail": "Server misconfiguration: BRIDGE_API_KEY not set.",
                    "error": "server_error"
                },
            )

        api_key = request.headers.get("X-API-Key")

        if not api_key:
            app_logger.warning(f"Unauthorized request from {self._client_host(request)} - Missing API key")
            return JSONResponse(
                status_code=status.HTTP_401_UNAUTHORIZED,
                content={
                    "detail": "Missing API key. Include 'X-API-Key' header in your request.",
                    "error": "unauthorized"
                },
                headers={"WWW-Authenticate": "ApiKey"},
            )

        if not secrets.compare_digest(api_key.encode(), self.API_KEY.encode()):
            app_logger.warning(f"Forbidden request from {self._client_host(request)} - Invalid API key")
            return JSONResponse(
                status_code=status.HTTP_403_FORBIDDEN,
                content={
                    "detail": "Invalid API key",
                    "error": "forbidden"
                },
            )

        return await call_next(request)
