"""
Test configuration and fixtures for pytest.

This module provides shared fixtures used across all tests:
- JWT factory (python-jose, HS256 with a throwaway secret)
- Token store in a temporary directory
- A fake guard-tour API built on httpx.MockTransport
- PatrolAPIClient wired to that fake API
"""

import json
import time
from typing import Any, Dict, List, Optional

import httpx
import pytest
import pytest_asyncio
from jose import jwt

from askari.environments.guardtour.auth import RefreshingTokenAuth, StaticTokenAuth, TokenStore
from askari.environments.guardtour.client import PatrolAPIClient


BASE_URL = "https://guardtour.test"
TEST_SECRET = "test-secret"


# ---------------------------------------------------------------------------
# TOKENS
# ---------------------------------------------------------------------------

def make_jwt(expires_in: Optional[float] = 3600, **claims: Any) -> str:
    """Mint a signed JWT; ``expires_in=None`` omits the exp claim."""
    payload: Dict[str, Any] = {"sub": "ops-bot", **claims}
    if expires_in is not None:
        payload["exp"] = int(time.time() + expires_in)
    return jwt.encode(payload, TEST_SECRET, algorithm="HS256")


@pytest.fixture
def token_path(tmp_path):
    return tmp_path / "data" / "auth_token.json"


@pytest.fixture
def token_store(token_path) -> TokenStore:
    return TokenStore(token_path)


# ---------------------------------------------------------------------------
# FAKE GUARD TOUR API
# ---------------------------------------------------------------------------

class FakeGuardTourAPI:
    """
    In-memory stand-in for the guard-tour REST service.

    Routes are keyed by (method, path). Values are either a JSON-able body
    (answered with 200) or an httpx.Response. Every request is recorded.
    """

    def __init__(self):
        self.routes: Dict[tuple, Any] = {}
        self.requests: List[httpx.Request] = []
        self.signin_token = make_jwt()
        self.signin_status = 201

    def add(self, method: str, path: str, body: Any = None, status_code: int = 200):
        if status_code == 200:
            self.routes[(method, path)] = body
        else:
            self.routes[(method, path)] = httpx.Response(status_code, json=body or {})

    def fail(self, method: str, path: str, error: Exception):
        """Make requests to ``path`` raise ``error`` (e.g. httpx.ConnectTimeout)."""
        self.routes[(method, path)] = error

    def requests_to(self, path: str) -> List[httpx.Request]:
        return [r for r in self.requests if r.url.path == path]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)

        if request.method == "POST" and request.url.path == "/auth/signin":
            if self.signin_status >= 400:
                return httpx.Response(self.signin_status, json={"message": "Unauthorized"})
            return httpx.Response(self.signin_status, json={"access_token": self.signin_token})

        route = self.routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(404, json={"message": "Not Found"})
        if isinstance(route, httpx.Response):
            return route
        if isinstance(route, Exception):
            raise route
        return httpx.Response(200, content=json.dumps(route), headers={"content-type": "application/json"})

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def fake_api() -> FakeGuardTourAPI:
    return FakeGuardTourAPI()


@pytest.fixture
def static_token() -> str:
    return make_jwt()


@pytest_asyncio.fixture
async def api_client(fake_api, static_token):
    """PatrolAPIClient using a static bearer token against the fake API."""
    client = PatrolAPIClient(
        base_url=BASE_URL,
        auth=StaticTokenAuth(static_token),
        transport=fake_api.transport,
    )
    yield client
    await client.aclose()


@pytest_asyncio.fixture
async def make_refreshing_client(fake_api, token_store):
    """Factory for clients that sign in through the fake API."""
    created: List[PatrolAPIClient] = []

    def _make() -> PatrolAPIClient:
        client = PatrolAPIClient(
            base_url=BASE_URL,
            auth=RefreshingTokenAuth(token_store, "ops-bot", "secret"),
            transport=fake_api.transport,
        )
        created.append(client)
        return client

    yield _make

    for client in created:
        await client.aclose()


# ---------------------------------------------------------------------------
# SAMPLE DATA
# ---------------------------------------------------------------------------

ATOM_SITE = {
    "id": 7,
    "name": "Atom",
    "address": "Plot 4, Kampala Road",
    "status": "active",
    "description": "Head office",
}

SHERATON_SITE = {"id": 9, "name": "Sheraton Hotel", "isActive": True}


def sample_patrols(count: int) -> List[Dict[str, Any]]:
    return [
        {
            "id": i,
            "guard": {"firstName": "Guard", "lastName": str(i)},
            "createdAt": "2025-01-31T08:30:00.000Z",
            "status": "completed",
        }
        for i in range(1, count + 1)
    ]
