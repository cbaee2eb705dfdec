from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

REDACT_TOKEN = "***redacted***"


class PokemonMCPError(Exception):
    """Base class for every failure the adapter knows how to describe."""

    code = "internal"


class MissingArgumentsError(PokemonMCPError):
    code = "missing_arguments"


class UnknownToolError(PokemonMCPError):
    code = "unknown_tool"

    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown tool: {name}")
        self.name = name


class PokemonNotFoundError(PokemonMCPError):
    code = "not_found"

    def __init__(self, identifier: str) -> None:
        super().__init__(f'Pokémon "{identifier}" not found')
        self.identifier = identifier


class FetchError(PokemonMCPError):
    code = "fetch_failed"

    def __init__(self, cause: object) -> None:
        super().__init__(f"Failed to fetch Pokémon data: {cause}")
        self.cause = cause


class CryNotFoundError(PokemonMCPError):
    code = "cry_not_found"

    def __init__(self, name: str, pokemon_id: int, status: int | None = None) -> None:
        msg = f'Cry audio not found for Pokémon "{name}" (id {pokemon_id})'
        if status is not None:
            msg += f" [HTTP {status}]"
        super().__init__(msg)
        self.status = status


class PlaybackError(PokemonMCPError):
    """Player missing, failed or timed out. Reported as a degraded success."""

    code = "playback_failed"


@dataclass(frozen=True)
class ToolResponse:
    """
    Envelope returned by every recognised tool:
      success -> one text block with a pretty-printed JSON document
      error   -> one text block "Error: <message>" and is_error=True
    """

    text: str
    is_error: bool = False

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"content": [{"type": "text", "text": self.text}]}
        if self.is_error:
            out["isError"] = True
        return out


def success_response(payload: dict[str, Any]) -> ToolResponse:
    return ToolResponse(text=json.dumps(payload, indent=2, ensure_ascii=False))


def error_response(message: str) -> ToolResponse:
    return ToolResponse(text=f"Error: {message}", is_error=True)
