"""
HTTP client utilities with connection pooling for the bridge app.
Provides reusable httpx clients for the completion and page extraction endpoints,
opened lazily on the server event loop and closed by the app lifespan.
"""
import httpx
from config import Config


class HTTPClientManager:
    """Manages shared httpx clients with connection pooling."""

    _completion_client: httpx.AsyncClient | None = None
    _reader_client: httpx.AsyncClient | None = None

    @classmethod
    def get_completion_client(cls) -> httpx.AsyncClient:
        """
        Get or create a shared httpx client for the completion endpoint.

        Per-call timeouts are passed on each request, so the client only
        carries the transport defaults.

        Returns:
            Configured httpx.AsyncClient for generateContent calls
        """
        if cls._completion_client is None:
            limits = httpx.Limits(
                max_connections=Config.MAX_CONNECTIONS,
                max_keepalive_connections=5,
                keepalive_expiry=30.0
            )

            cls._completion_client = httpx.AsyncClient(
                timeout=Config.COMPLETION_TIMEOUT,
                limits=limits,
                http2=True
            )

        return cls._completion_client

    @classmethod
    def get_reader_client(cls) -> httpx.AsyncClient:
        """
        Get or create a shared httpx client for page extraction.

        Features:
        - Connection pooling (reuses TCP connections)
        - Automatic redirect following

        Returns:
            Configured httpx.AsyncClient for reader calls
        """
        if cls._reader_client is None:
            limits = httpx.Limits(
                max_connections=Config.MAX_CONNECTIONS,
                max_keepalive_connections=5,
                keepalive_expiry=60.0
            )

            cls._reader_client = httpx.AsyncClient(
                timeout=Config.READER_TIMEOUT,
                follow_redirects=True,
                max_redirects=Config.MAX_REDIRECTS,
                limits=limits,
                http2=True
            )

        return cls._reader_client

    @classmethod
    async def close_all(cls) -> None:
        """
        Close all managed clients and clean up connections.
        """
        if cls._completion_client is not None:
            await cls._completion_client.aclose()
            cls._completion_client = None

        if cls._reader_client is not None:
            await cls._reader_client.aclose()
            cls._reader_client = None
