"""
Pytest configuration and shared fixtures.

This module provides common fixtures for testing:
- Token storage on temporary files
- Stubbed HTTP transport
- Session manager wiring
"""

import json
import sys
import tempfile
from pathlib import Path
from typing import Callable, Generator, List

import pytest
import httpx

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from rustour.config import Config, StorageConfig, TransportConfig
from rustour.transport import HttpTransport
from rustour.auth import TokenStore
from rustour.services import ServiceContext, SessionManager


BASE_URL = "http://rustour.test/api"


# =============================================================================
# Configuration
# =============================================================================

@pytest.fixture(scope="session")
def test_config():
    """Test configuration values."""
    return {
        "base_url": BASE_URL,
        "email": "ann@x.com",
        "password": "pw123",
        "first_name": "Ann",
        "last_name": "Lee",
        "token": "abc",
    }


@pytest.fixture
def user_payload(test_config) -> dict:
    """Registration response body for the test user."""
    return {
        "firstName": test_config["first_name"],
        "lastName": test_config["last_name"],
        "email": test_config["email"],
        "role": "User",
        "notificationsEnabled": False,
    }


# =============================================================================
# Token Store Fixtures
# =============================================================================

@pytest.fixture
def temp_token_file() -> Generator[Path, None, None]:
    """Path to a token file inside a temporary directory (not created yet)."""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield Path(temp_dir) / "session.json"


@pytest.fixture
def token_store(temp_token_file) -> TokenStore:
    """Create a TokenStore with temporary file."""
    return TokenStore(file_path=temp_token_file)


@pytest.fixture
def app_config(temp_token_file) -> Config:
    """Config pointing at the stub API and the temporary token file."""
    return Config(
        transport=TransportConfig(timeout_seconds=5.0),
        storage=StorageConfig(token_file=temp_token_file, token_key="jwtToken"),
        api_base_url=BASE_URL,
    )


# =============================================================================
# Stub Server
# =============================================================================

class StubServer:
    """
    Programmable stand-in for the RusTour API.

    Routes map a path to either a (status, body) tuple or an async handler.
    Every request is recorded with its decoded JSON body.
    """

    def __init__(self):
        self.routes = {}
        self.requests: List[httpx.Request] = []

    def respond(self, path: str, status: int = 200, body=None):
        """Answer ``path`` with a fixed response. dict/list bodies are JSON-encoded."""
        if isinstance(body, (dict, list)):
            content = json.dumps(body).encode()
        elif isinstance(body, str):
            content = body.encode()
        else:
            content = body or b""
        self.routes[path] = (status, content)

    def refuse(self, path: str):
        """Simulate a connection refusal on ``path``."""
        self.routes[path] = httpx.ConnectError("Connection refused")

    def garble(self, path: str):
        """Answer ``path`` with a gzip-declared body that does not decompress."""
        async def handler(request):
            return httpx.Response(
                200,
                headers={"content-encoding": "gzip"},
                stream=httpx.ByteStream(b"not gzip at all")
            )
        self.routes[path] = handler

    def handle(self, path: str, handler: Callable):
        """Route ``path`` to an async handler returning an httpx.Response."""
        self.routes[path] = handler

    def bodies(self, path: str) -> list:
        return [json.loads(r.content) for r in self.requests if r.url.path.endswith(path)]

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        for path, route in self.routes.items():
            if request.url.path.endswith(path):
                if isinstance(route, Exception):
                    raise type(route)(str(route), request=request)
                if callable(route):
                    return await route(request)
                status, content = route
                return httpx.Response(status, content=content)
        return httpx.Response(404)


@pytest.fixture
def server() -> StubServer:
    return StubServer()


@pytest.fixture
def transport(server, app_config) -> HttpTransport:
    """HttpTransport wired to the stub server."""
    return HttpTransport(app_config.transport, transport=httpx.MockTransport(server))


@pytest.fixture
def context(app_config, transport, token_store) -> ServiceContext:
    return ServiceContext.create(app_config, transport=transport, token_store=token_store)


@pytest.fixture
def session(context) -> SessionManager:
    """Logged-out session manager talking to the stub server."""
    return SessionManager(context)


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as integration test"
    )
