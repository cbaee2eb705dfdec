import logging

import pytest
import requests

from pokemon_mcp.core_infrastructure.http_client import HttpClient, HttpClientConfig
from tests.helpers.pokeapi_fakes import FakeResponse, FakeSession


def test_sets_user_agent_and_no_retry_adapter_by_default():
    mounted = []
    session = FakeSession()
    session.mount = lambda prefix, adapter: mounted.append(prefix)  # type: ignore[method-assign]
    HttpClient(config=HttpClientConfig(retries=0, user_agent="ua/1"), session=session)  # type: ignore[arg-type]
    assert session.headers["User-Agent"] == "ua/1"
    assert mounted == []


def test_retry_adapter_mounted_when_enabled():
    mounted = []
    session = FakeSession()
    session.mount = lambda prefix, adapter: mounted.append(prefix)  # type: ignore[method-assign]
    HttpClient(config=HttpClientConfig(retries=2), session=session)  # type: ignore[arg-type]
    assert sorted(mounted) == ["http://", "https://"]


def test_retries_default_to_zero(monkeypatch):
    monkeypatch.delenv("POKEMON_MCP_HTTP_RETRIES", raising=False)
    assert HttpClientConfig().retries == 0


def test_head_without_raise_returns_error_status():
    session = FakeSession({("HEAD", "https://h/x"): FakeResponse(404)})
    client = HttpClient(config=HttpClientConfig(retries=0), session=session)  # type: ignore[arg-type]
    assert client.head("https://h/x", raise_for_status=False).status_code == 404


def test_get_raises_and_logs(caplog):
    session = FakeSession()
    client = HttpClient(config=HttpClientConfig(retries=0), session=session)  # type: ignore[arg-type]
    with caplog.at_level(logging.WARNING):
        with pytest.raises(requests.HTTPError):
            client.get_json("https://h/missing")
    assert "HTTP GET https://h/missing failed (status=404" in caplog.text
