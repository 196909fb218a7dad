"""
Models for responses from the creature API and the in-memory feed.

Includes:
- CreatureRaw: detail record from /<resource>/{id}/ (TypedDict, only the fields we read)
- CreatureRecord: normalized, immutable entity shown in the feed
- FetchStatus / FetchResult: typed outcome of fetching one id

"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Optional, TypedDict

from .errors import MappingError
from .utils import capitalize_first, pick_image_url, extract_stats, first_type

# GET /<resource>/{id}/ (sprites)
class OfficialArtwork(TypedDict, total=False):
    front_default: Optional[str]

class Sprites(TypedDict, total=False):
    front_default: Optional[str]
    other: dict[str, OfficialArtwork]   # keyed by "official-artwork"

class NamedRef(TypedDict, total=False):
    name: str
    url: str

class StatEntry(TypedDict, total=False):
    stat: NamedRef
    base_stat: int

class TypeEntry(TypedDict, total=False):
    slot: int
    type: NamedRef

# GET /<resource>/{id}/
class CreatureRaw(TypedDict, total=False):
    id: int
    name: str
    sprites: Sprites
    stats: List[StatEntry]
    types: List[TypeEntry]


@dataclass(frozen=True)
class CreatureRecord:
    id: int
    name: str
    image_url: str
    attack: int
    defense: int
    hp: int
    type: str

    @classmethod
    def from_api(cls, raw: Any, creature_id: int) -> "CreatureRecord":
        """
        Map one raw API record to a CreatureRecord:
            • name → first letter uppercased
            • image → official artwork, else default sprite, else ""
            • attack/defense/hp from the stat list, 0 when missing
            • type → first listed type only, capitalized
        The id is the one used to request the record, not the body's own.
        """
        if not isinstance(raw, dict):
            raise MappingError(f"id {creature_id}: expected JSON object, got {type(raw).__name__}")

        name = raw.get("name")
        if name is not None and not isinstance(name, str):
            raise MappingError(f"id {creature_id}: name is {type(name).__name__}, not str")

        stats = extract_stats(raw.get("stats"))
        return cls(
            id=int(creature_id),
            name=capitalize_first(name),
            image_url=pick_image_url(raw.get("sprites")),
            attack=stats["attack"],
            defense=stats["defense"],
            hp=stats["hp"],
            type=first_type(raw.get("types")),
        )


class FetchStatus(str, Enum):
    OK = "ok"
    ABSENT = "absent"    # API has no record for this id (404)
    ERROR = "error"      # network, timeout, unexpected status, bad body


@dataclass(frozen=True)
class FetchResult:
    creature_id: int
    status: FetchStatus
    record: Optional[CreatureRecord] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status is FetchStatus.OK

    @classmethod
    def success(cls, record: CreatureRecord) -> "FetchResult":
        return cls(record.id, FetchStatus.OK, record=record)

    @classmethod
    def absent(cls, creature_id: int, error: Optional[str] = None) -> "FetchResult":
        return cls(creature_id, FetchStatus.ABSENT, error=error)

    @classmethod
    def failed(cls, creature_id: int, error: str) -> "FetchResult":
        return cls(creature_id, FetchStatus.ERROR, error=error)
