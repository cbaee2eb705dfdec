from __future__ import annotations

import pytest

from pokemon_config.settings import get_settings
from tests.helpers.mcp_runtime import build_test_env, mcp_stdio_session
from tests.helpers.pokeapi_fakes import fake_client, pokeapi_session


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch, tmp_path):
    """Default settings per test, with the cry temp dir under tmp_path and telemetry off."""
    for name in (
        "POKEMON_MCP_API_BASE_URL",
        "POKEMON_MCP_CRIES_BASE_URL",
        "POKEMON_MCP_PLAYER_TIMEOUT",
        "POKEMON_MCP_TELEMETRY_DIR",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("POKEMON_MCP_TEMP_DIR", str(tmp_path / "temp"))
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture()
def session():
    """Fake PokéAPI + cries host, see tests/helpers/pokeapi_fakes.py."""
    return pokeapi_session()


@pytest.fixture()
def client(session):
    return fake_client(session)


@pytest.fixture()
async def pokemon_session(tmp_path):
    """Initialized session for the Pokémon MCP server (stdio transport)."""
    env = build_test_env(tmp_path)
    async with mcp_stdio_session("pokemon_mcp.server", env=env) as s:
        yield s


@pytest.fixture()
def anyio_backend():
    """Run anyio-marked tests on asyncio only (the stdio helpers use asyncio)."""
    return "asyncio"
