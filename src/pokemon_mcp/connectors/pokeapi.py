from __future__ import annotations

import logging

import requests

from pokemon_common.errors import CryNotFoundError, FetchError, PokemonNotFoundError
from pokemon_config.settings import get_settings
from pokemon_mcp.core_infrastructure.http_client import HttpClient, default_http_client
from pokemon_mcp.models import PokemonRecord


logger = logging.getLogger(__name__)

CRY_FORMAT = "ogg"


def pokemon_endpoint(identifier: str, *, base_url: str | None = None) -> str:
    base = (base_url or get_settings().api_base_url).rstrip("/")
    return f"{base}/pokemon/{identifier.lower()}"


def fetch_pokemon(
    identifier: str,
    *,
    client: HttpClient | None = None,
    base_url: str | None = None,
) -> PokemonRecord:
    """Fetch one Pokémon by name or numeric id.

    Args:
        identifier: name or id as typed by the caller; lowercased for the URL,
            reported verbatim in errors.
        client: HTTP client override (tests); defaults to the shared client.
        base_url: PokéAPI base override; defaults to settings.

    Raises:
        PokemonNotFoundError: upstream answered 404.
        FetchError: any other transport, HTTP, JSON or shape failure.
    """
    endpoint = pokemon_endpoint(identifier, base_url=base_url)
    http = client or default_http_client()

    try:
        payload = http.get_json(endpoint)
        record = PokemonRecord.model_validate(payload)
    except requests.HTTPError as e:
        status = getattr(e.response, "status_code", None)
        if status == 404:
            raise PokemonNotFoundError(identifier) from e
        raise FetchError(e) from e
    except (requests.RequestException, ValueError) as e:
        # ValueError covers both JSON decoding and pydantic validation errors
        raise FetchError(e) from e

    logger.debug("Fetched pokemon %s (id=%s) from %s", record.name, record.id, endpoint)
    return record


def cry_url(pokemon_id: int, *, base_url: str | None = None) -> str:
    base = (base_url or get_settings().cries_base_url).rstrip("/")
    return f"{base}/{pokemon_id}.{CRY_FORMAT}"


def check_cry(
    record: PokemonRecord,
    *,
    client: HttpClient | None = None,
    base_url: str | None = None,
) -> str:
    """HEAD the cry asset for `record` and return its URL when it answers 200."""
    url = cry_url(record.id, base_url=base_url)
    http = client or default_http_client()

    try:
        resp = http.head(url, raise_for_status=False)
    except requests.RequestException as e:
        raise FetchError(e) from e

    if resp.status_code != 200:
        raise CryNotFoundError(record.name, record.id, resp.status_code)
    return url
