"""
HTTP Client for CLI.

Provides async HTTP client for communicating with the sound server.
All requests include the Authorization: Bearer header the server's
token middleware checks.
"""

from typing import Any

import httpx

from sinfonia_request.core.config import get_server_base_url, get_settings
from sinfonia_request.core.logging import get_logger, log_with_source

logger = get_logger(__name__)


class APIClient:
    """
    HTTP client for sound server communication.

    Features:
    - Automatic base URL, timeout and token from settings
    - Bearer token on every request
    - Structured logging of requests/responses
    - httpx errors re-raised unchanged for the caller to map

    Usage:
        client = APIClient(source="cli")
        response = await client.get("/library")
        response = await client.post("/trigger", content=b'{"name": "rain"}')
    """

    def __init__(
        self,
        source: str,
        token: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize the API client.

        Args:
            source: Log source tag for this client (cli, tui).
            token: Bearer token. If None, reads SINFONIA_ACCESS_TOKEN from config/.env.
            base_url: Server base URL. If None, reads from config/settings/application.yaml.
            timeout: Request timeout in seconds. If None, reads from config/settings/application.yaml.
            transport: Optional httpx transport, e.g. httpx.MockTransport in tests.
        """
        if base_url is None or timeout is None:
            config_base_url, config_timeout = get_server_base_url()
            base_url = base_url or config_base_url
            timeout = timeout if timeout is not None else config_timeout

        self.source = source
        self.token = token if token is not None else get_settings().access_token
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                headers={"Authorization": f"Bearer {self.token}"},
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def request(
        self,
        method: str,
        path: str,
        **kwargs: Any,
    ) -> httpx.Response:
        """
        Make an HTTP request to the sound server.

        Args:
            method: HTTP method (GET, POST)
            path: Server path (e.g., /play, /driver/list)
            **kwargs: Additional arguments for httpx

        Returns:
            httpx.Response

        Raises:
            httpx.HTTPError: On request failure
        """
        client = await self._get_client()

        log_with_source(
            logger,
            self.source,
            "debug",
            "API request",
            method=method,
            path=path,
        )

        try:
            response = await client.request(method, path, **kwargs)

            log_with_source(
                logger,
                self.source,
                "debug",
                "API response",
                method=method,
                path=path,
                status_code=response.status_code,
            )

            return response

        except httpx.HTTPError as e:
            log_with_source(
                logger,
                self.source,
                "error",
                "API request failed",
                method=method,
                path=path,
                error=str(e),
            )
            raise

    async def get(self, path: str, **kwargs: Any) -> httpx.Response:
        """Make a GET request."""
        return await self.request("GET", path, **kwargs)

    async def post(self, path: str, **kwargs: Any) -> httpx.Response:
        """Make a POST request."""
        return await self.request("POST", path, **kwargs)


# Module-level client instance
_client: APIClient | None = None


def get_api_client(source: str = "cli", **kwargs: Any) -> APIClient:
    """
    Get or create the API client singleton.

    Keyword arguments (token, base_url, timeout, transport) only apply
    when the singleton is first created.
    """
    global _client
    if _client is None:
        _client = APIClient(source=source, **kwargs)
    return _client


async def close_api_client() -> None:
    """Close the API client."""
    global _client
    if _client:
        await _client.close()
        _client = None
