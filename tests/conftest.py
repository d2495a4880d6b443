import asyncio
import json
import os
import sys
from typing import Any, Dict, List, Optional

import pytest
import pytest_asyncio

# Add project root to python path so we can import modules
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from utils.api_clients import PokeAPIClient  # noqa: E402
from utils.cache import ResultCache  # noqa: E402
from utils.loading_state import LoadingStateRegistry  # noqa: E402

BASE_URL = "https://pokeapi.test/api/v2"
JSON_HEADERS = {"Content-Type": "application/json; charset=utf-8"}

PIKACHU = {
    "id": 25,
    "name": "pikachu",
    "sprites": {"front_default": "https://img.test/pikachu.png"},
    "types": [{"type": {"name": "electric"}}],
}

PIKACHU_SPECIES = {
    "id": 25,
    "name": "pikachu",
    "genera": [{"genus": "Mouse Pokémon", "language": {"name": "en"}}],
}

POKEMON_LIST = {
    "count": 1281,
    "next": f"{BASE_URL}/pokemon?offset=3&limit=3",
    "previous": None,
    "results": [
        {"name": "bulbasaur", "url": f"{BASE_URL}/pokemon/1/"},
        {"name": "ivysaur", "url": f"{BASE_URL}/pokemon/2/"},
        {"name": "venusaur", "url": f"{BASE_URL}/pokemon/3/"},
    ],
}


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeResponse:
    """Minimal stand-in for aiohttp.ClientResponse."""

    def __init__(
        self,
        payload: Any = None,
        status: int = 200,
        reason: str = "OK",
        headers: Optional[Dict[str, str]] = None,
        body: Optional[str] = None,
    ):
        self.status = status
        self.reason = reason
        self.headers = dict(JSON_HEADERS) if headers is None else headers
        self._body = json.dumps(payload) if body is None else body

    async def json(self, content_type: Optional[str] = "application/json") -> Any:
        stripped = self._body.strip()
        if not stripped:
            return None
        return json.loads(stripped)


class _FakeRequest:
    def __init__(self, session: "FakeSession", url: str):
        self._session = session
        self._url = url

    async def __aenter__(self):
        gate = self._session.gates.get(self._url)
        if gate is not None:
            await gate.wait()

        route = self._session.routes.get(self._url)
        if route is None:
            return FakeResponse({"detail": "Not found."}, status=404, reason="Not Found")
        if isinstance(route, BaseException):
            raise route
        return route

    async def __aexit__(self, *exc_info) -> bool:
        return False


class FakeSession:
    """
    In-memory replacement for aiohttp.ClientSession.

    Unknown URLs answer 404. A URL with a gate blocks until the gate's event
    is set, which keeps a request in flight for loading-state assertions.
    """

    def __init__(self):
        self.routes: Dict[str, Any] = {}
        self.gates: Dict[str, asyncio.Event] = {}
        self.calls: List[str] = []
        self.closed = False

    def add(self, url: str, response: Any) -> None:
        self.routes[url] = response

    def add_json(self, url: str, payload: Any, status: int = 200, reason: str = "OK") -> None:
        self.routes[url] = FakeResponse(payload, status=status, reason=reason)

    def hold(self, url: str) -> asyncio.Event:
        gate = asyncio.Event()
        self.gates[url] = gate
        return gate

    def get(self, url: str, **kwargs) -> _FakeRequest:
        self.calls.append(url)
        return _FakeRequest(self, url)

    async def close(self) -> None:
        self.closed = True


async def settle(rounds: int = 5) -> None:
    """Let pending tasks run up to their next suspension point."""
    for _ in range(rounds):
        await asyncio.sleep(0)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def fake_session():
    return FakeSession()


@pytest_asyncio.fixture
async def client(fake_session, clock):
    """Client with isolated cache/registry state and a fake transport."""
    client = PokeAPIClient(
        base_url=BASE_URL,
        cache=ResultCache(cache_duration=300, clock=clock),
        loading_state=LoadingStateRegistry(),
        session=fake_session,
    )
    yield client
    await client.close()
