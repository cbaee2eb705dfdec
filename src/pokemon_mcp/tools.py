"""
Tool registry and dispatcher.

The registry is an immutable name -> ToolSpec mapping built once at startup
and handed to the Dispatcher. Handlers are closed boundaries (see
`pokemon_common.tooling.instrument_tool`): they always return a ToolResponse.
Only the two dispatch-level checks, missing arguments and unknown tool
names, raise.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Any, Callable, Mapping

from pokemon_common.errors import MissingArgumentsError, ToolResponse, UnknownToolError
from pokemon_common.tooling import InstrumentConfig, instrument_tool
from pokemon_mcp import audio, shapers
from pokemon_mcp.connectors.pokeapi import CRY_FORMAT, check_cry, fetch_pokemon
from pokemon_mcp.core_infrastructure.http_client import HttpClient


logger = logging.getLogger(__name__)

ARGUMENT = "pokemon"

INPUT_SCHEMA: Mapping[str, Any] = MappingProxyType({
    "type": "object",
    "properties": {
        ARGUMENT: {
            "type": "string",
            "description": "Pokémon name or ID number",
        },
    },
    "required": [ARGUMENT],
})


@dataclass(frozen=True)
class ToolSpec:
    name: str
    description: str
    handler: Callable[[str], ToolResponse]

    @property
    def input_schema(self) -> dict[str, Any]:
        return {
            "type": INPUT_SCHEMA["type"],
            "properties": {k: dict(v) for k, v in INPUT_SCHEMA["properties"].items()},
            "required": list(INPUT_SCHEMA["required"]),
        }


def build_registry(
    *,
    client: HttpClient | None = None,
    temp_dir: Path | str | None = None,
    platform: str | None = None,
    player_timeout: float | None = None,
) -> Mapping[str, ToolSpec]:
    """Create the five Pokémon tools. Overrides are for tests and embedding."""

    def tool(name: str):
        return instrument_tool(InstrumentConfig(name=name))

    @tool("get_pokemon_stats")
    def get_pokemon_stats(pokemon: str) -> dict:
        return shapers.shape_stats(fetch_pokemon(pokemon, client=client))

    @tool("get_pokemon_images")
    def get_pokemon_images(pokemon: str) -> dict:
        return shapers.shape_images(fetch_pokemon(pokemon, client=client))

    @tool("get_pokemon_info")
    def get_pokemon_info(pokemon: str) -> dict:
        return shapers.shape_info(fetch_pokemon(pokemon, client=client))

    @tool("get_pokemon_cry")
    def get_pokemon_cry(pokemon: str) -> dict:
        record = fetch_pokemon(pokemon, client=client)
        url = check_cry(record, client=client)
        return shapers.shape_cry(record, url, fmt=CRY_FORMAT)

    @tool("play_pokemon_cry")
    def play_pokemon_cry(pokemon: str) -> dict:
        record = fetch_pokemon(pokemon, client=client)
        return audio.play_cry(
            record,
            client=client,
            temp_dir=temp_dir,
            platform=platform,
            timeout=player_timeout,
        )

    specs = [
        ToolSpec(
            "get_pokemon_stats",
            "Get Pokémon base stats (HP, Attack, Defense, Special Attack, Special Defense, Speed)",
            get_pokemon_stats,
        ),
        ToolSpec(
            "get_pokemon_images",
            "Get Pokémon sprite images (front, back, shiny variants, and official artwork)",
            get_pokemon_images,
        ),
        ToolSpec(
            "get_pokemon_info",
            "Get complete Pokémon information including stats, images, and basic info",
            get_pokemon_info,
        ),
        ToolSpec(
            "get_pokemon_cry",
            "Get the URL of a Pokémon's cry sound (OGG audio), checked for availability",
            get_pokemon_cry,
        ),
        ToolSpec(
            "play_pokemon_cry",
            "Download a Pokémon's cry and play it on this machine's speakers",
            play_pokemon_cry,
        ),
    ]
    return MappingProxyType({s.name: s for s in specs})


def require_pokemon(arguments: Mapping[str, Any] | None) -> str:
    if not isinstance(arguments, Mapping):
        raise MissingArgumentsError("Missing arguments")
    value = arguments.get(ARGUMENT)
    if not isinstance(value, str) or not value.strip():
        raise MissingArgumentsError(f"Missing required argument: {ARGUMENT}")
    return value


class Dispatcher:
    """Routes a tool call by exact name to one registered handler."""

    def __init__(self, registry: Mapping[str, ToolSpec]) -> None:
        self._registry = registry

    def list_tools(self) -> list[ToolSpec]:
        return list(self._registry.values())

    def call(self, name: str, arguments: Mapping[str, Any] | None) -> ToolResponse:
        pokemon = require_pokemon(arguments)
        spec = self._registry.get(name)
        if spec is None:
            raise UnknownToolError(name)
        logger.debug("Dispatching %s(%s=%r)", name, ARGUMENT, pokemon)
        return spec.handler(pokemon)
