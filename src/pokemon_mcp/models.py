from __future__ import annotations
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field


class NamedRef(BaseModel):
    name: str


class StatEntry(BaseModel):
    base_stat: int = 0
    stat: NamedRef


class TypeEntry(BaseModel):
    type: NamedRef


class Artwork(BaseModel):
    front_default: Optional[str] = None


class OtherSprites(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    official_artwork: Optional[Artwork] = Field(default=None, alias="official-artwork")


class Sprites(BaseModel):
    front_default: Optional[str] = None
    front_shiny: Optional[str] = None
    back_default: Optional[str] = None
    back_shiny: Optional[str] = None
    other: Optional[OtherSprites] = None

    @property
    def official_artwork(self) -> Optional[str]:
        if self.other is None or self.other.official_artwork is None:
            return None
        return self.other.official_artwork.front_default


class PokemonRecord(BaseModel):
    """Subset of a PokéAPI /pokemon/{id or name} document; extra fields are ignored."""

    id: int
    name: str
    height: int = 0
    weight: int = 0
    base_experience: Optional[int] = None  # null upstream for some forms
    stats: List[StatEntry] = Field(default_factory=list)
    types: List[TypeEntry] = Field(default_factory=list)
    sprites: Sprites = Field(default_factory=Sprites)
