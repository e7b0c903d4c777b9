"""
Root Pytest Fixtures.

Shared fixtures available to all tests.

Tests run from the project root so that .project_root, config/settings/*.yaml
and config/.env are found the same way the entry scripts find them.
No sound server is needed: HTTP traffic is answered by httpx.MockTransport
or by patching httpx.AsyncClient.send.
"""

import json
from collections.abc import Generator
from typing import Any

import httpx
import pytest

from sinfonia_request.cli.client import APIClient
from sinfonia_request.core.config import get_app_config, get_settings


# =============================================================================
# Config Cache
# =============================================================================


@pytest.fixture(autouse=True)
def _clear_config_cache() -> Generator[None, None, None]:
    """Clear lru_cache between tests so each test gets a fresh load."""
    get_settings.cache_clear()
    get_app_config.cache_clear()
    yield
    get_settings.cache_clear()
    get_app_config.cache_clear()


# =============================================================================
# Fake Sound Server
# =============================================================================


STATUS_PAYLOAD: dict[str, Any] = {
    "playing": True,
    "theme_loaded": True,
    "sounds_playing": ["rain", "wind"],
}


class FakeSoundServer:
    """
    Records every request and answers like the sound server would.

    Usage:
        server = FakeSoundServer()
        client = APIClient(source="cli", base_url="http://test:9090",
                           timeout=5.0, token="t", transport=server.transport)
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.status_code = 200
        self.reachable = True

    def handle(self, request: httpx.Request) -> httpx.Response:
        if not self.reachable:
            raise httpx.ConnectError("Connection refused", request=request)

        self.requests.append(request)

        if self.status_code != 200:
            return httpx.Response(self.status_code, json={"message": "Sound not found"})
        if request.url.path == "/status":
            return httpx.Response(200, json=STATUS_PAYLOAD)
        if request.url.path == "/library":
            return httpx.Response(200, content=json.dumps(["rain", "wind"]).encode())
        return httpx.Response(200)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)


@pytest.fixture
def sound_server() -> FakeSoundServer:
    """Provide a fake sound server that records requests."""
    return FakeSoundServer()


@pytest.fixture
def api_client(sound_server: FakeSoundServer) -> APIClient:
    """API client wired to the fake sound server."""
    return APIClient(
        source="cli",
        token="test-token",
        base_url="http://test:9090",
        timeout=5.0,
        transport=sound_server.transport,
    )
