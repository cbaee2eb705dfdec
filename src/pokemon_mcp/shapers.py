"""
Pure transformations from a PokemonRecord to the public tool payloads.

No I/O happens here; every function is deterministic in its input.
"""

from __future__ import annotations

from typing import Any

from pokemon_mcp.models import PokemonRecord

STAT_NAMES = ("hp", "attack", "defense", "special-attack", "special-defense", "speed")

CRY_SOURCE = "PokeAPI cries repository"


def stat_mapping(record: PokemonRecord) -> dict[str, int]:
    """Exactly the six base stats; missing ones stay 0, unknown names are ignored."""
    stats = dict.fromkeys(STAT_NAMES, 0)
    for entry in record.stats:
        if entry.stat.name in stats:
            stats[entry.stat.name] = entry.base_stat
    return stats


def type_names(record: PokemonRecord) -> list[str]:
    return [t.type.name for t in record.types]


def shape_sprites(record: PokemonRecord) -> dict[str, str | None]:
    s = record.sprites
    return {
        "front_default": s.front_default,
        "front_shiny": s.front_shiny,
        "back_default": s.back_default,
        "back_shiny": s.back_shiny,
        "official_artwork": s.official_artwork,
    }


def shape_stats(record: PokemonRecord) -> dict[str, Any]:
    return {
        "name": record.name,
        "id": record.id,
        "stats": stat_mapping(record),
        "types": type_names(record),
        "base_experience": record.base_experience,
    }


def shape_images(record: PokemonRecord) -> dict[str, Any]:
    return {
        "name": record.name,
        "id": record.id,
        "sprites": shape_sprites(record),
    }


def shape_info(record: PokemonRecord) -> dict[str, Any]:
    """Superset view: stats, types, sprites plus height and weight."""
    return {
        "id": record.id,
        "name": record.name,
        "height": record.height,
        "weight": record.weight,
        "base_experience": record.base_experience,
        "types": type_names(record),
        "stats": stat_mapping(record),
        "images": shape_sprites(record),
    }


def shape_cry(record: PokemonRecord, url: str, *, fmt: str = "ogg") -> dict[str, Any]:
    return {
        "name": record.name,
        "id": record.id,
        "cry_url": url,
        "format": fmt,
        "source": CRY_SOURCE,
    }
