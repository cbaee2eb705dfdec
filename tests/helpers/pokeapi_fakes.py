"""In-memory stand-ins for PokéAPI and the cries host.

`FakeSession` replaces `requests.Session` inside an HttpClient, so the whole
connector/tooling stack runs unchanged without touching the network.
"""

from __future__ import annotations

import copy
import json
from typing import Any

import requests

from pokemon_config.settings import DEFAULT_API_BASE_URL, DEFAULT_CRIES_BASE_URL
from pokemon_mcp.core_infrastructure.http_client import HttpClient, HttpClientConfig


_SPRITE_BASE = "https://raw.githubusercontent.com/PokeAPI/sprites/master/sprites/pokemon"

PIKACHU: dict[str, Any] = {
    "id": 25,
    "name": "pikachu",
    "height": 4,
    "weight": 60,
    "base_experience": 112,
    "order": 35,
    "is_default": True,
    "stats": [
        {"base_stat": 35, "effort": 0, "stat": {"name": "hp", "url": "https://pokeapi.co/api/v2/stat/1/"}},
        {"base_stat": 55, "effort": 0, "stat": {"name": "attack", "url": "https://pokeapi.co/api/v2/stat/2/"}},
        {"base_stat": 40, "effort": 0, "stat": {"name": "defense", "url": "https://pokeapi.co/api/v2/stat/3/"}},
        {"base_stat": 50, "effort": 0, "stat": {"name": "special-attack", "url": "https://pokeapi.co/api/v2/stat/4/"}},
        {"base_stat": 50, "effort": 0, "stat": {"name": "special-defense", "url": "https://pokeapi.co/api/v2/stat/5/"}},
        {"base_stat": 90, "effort": 2, "stat": {"name": "speed", "url": "https://pokeapi.co/api/v2/stat/6/"}},
    ],
    "types": [
        {"slot": 1, "type": {"name": "electric", "url": "https://pokeapi.co/api/v2/type/13/"}},
    ],
    "sprites": {
        "front_default": f"{_SPRITE_BASE}/25.png",
        "front_shiny": f"{_SPRITE_BASE}/shiny/25.png",
        "back_default": f"{_SPRITE_BASE}/back/25.png",
        "back_shiny": f"{_SPRITE_BASE}/back/shiny/25.png",
        "front_female": None,
        "other": {
            "official-artwork": {
                "front_default": f"{_SPRITE_BASE}/other/official-artwork/25.png",
                "front_shiny": f"{_SPRITE_BASE}/other/official-artwork/shiny/25.png",
            },
            "home": {"front_default": None},
        },
    },
}

CRY_BYTES = b"OggS\x00\x02fake-vorbis-payload" * 64


def pikachu() -> dict[str, Any]:
    return copy.deepcopy(PIKACHU)


def pokemon_url(key: str) -> str:
    return f"{DEFAULT_API_BASE_URL}/pokemon/{key}"


def cry_asset_url(pokemon_id: int) -> str:
    return f"{DEFAULT_CRIES_BASE_URL}/{pokemon_id}.ogg"


class FakeResponse:
    def __init__(self, status_code: int = 200, payload: Any = None, content: bytes = b""):
        self.status_code = status_code
        self._payload = payload
        self.content = content
        self.closed = False

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Client Error", response=self)

    def json(self) -> Any:
        if self._payload is None:
            raise requests.JSONDecodeError("Expecting value", "", 0)
        return self._payload

    def iter_content(self, chunk_size: int = 1):
        for i in range(0, len(self.content), chunk_size):
            yield self.content[i: i + chunk_size]

    def __enter__(self) -> "FakeResponse":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.closed = True


class FakeSession:
    """
    Routes (METHOD, url) to canned responses; unknown routes answer 404.
    A route value may also be an exception instance, which is raised.
    """

    def __init__(self, routes: dict[tuple[str, str], Any] | None = None):
        self.routes: dict[tuple[str, str], Any] = dict(routes or {})
        self.headers: dict[str, str] = {}
        self.calls: list[tuple[str, str]] = []

    def request(self, method: str, url: str, **kwargs: Any) -> FakeResponse:
        self.calls.append((method.upper(), url))
        hit = self.routes.get((method.upper(), url))
        if isinstance(hit, BaseException):
            raise hit
        if hit is None:
            return FakeResponse(404, payload={"detail": "Not found."})
        return hit

    def mount(self, prefix: str, adapter: Any) -> None:
        pass


def pokeapi_session(*, with_cry: bool = True) -> FakeSession:
    """Pikachu reachable as 'pikachu' and '25'; its cry answers HEAD and GET."""
    data = pikachu()
    routes: dict[tuple[str, str], Any] = {
        ("GET", pokemon_url("pikachu")): FakeResponse(200, payload=data),
        ("GET", pokemon_url("25")): FakeResponse(200, payload=data),
    }
    if with_cry:
        routes[("HEAD", cry_asset_url(25))] = FakeResponse(200)
        routes[("GET", cry_asset_url(25))] = FakeResponse(200, content=CRY_BYTES)
    return FakeSession(routes)


def fake_client(session: FakeSession) -> HttpClient:
    return HttpClient(config=HttpClientConfig(timeout=(1.0, 1.0), retries=0), session=session)  # type: ignore[arg-type]


def parse_text(text: str) -> Any:
    return json.loads(text)
