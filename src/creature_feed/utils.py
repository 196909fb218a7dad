from __future__ import annotations
from typing import Any, Dict, Iterable, Mapping, Optional

from .errors import MappingError

TRACKED_STATS = ("attack", "defense", "hp")
OFFICIAL_ARTWORK = "official-artwork"

def capitalize_first(s: Optional[str]) -> str:
    """Uppercase only the first character; tolerates None/empty."""
    if not s:
        return ""
    return s[0].upper() + s[1:]

def _obj(value: Any, what: str) -> Mapping[str, Any]:
    # Missing/null nested objects read as empty, anything else must be a JSON object
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise MappingError(f"{what}: expected object, got {type(value).__name__}")
    return value

def _list(value: Any, what: str) -> list:
    if value is None:
        return []
    if not isinstance(value, list):
        raise MappingError(f"{what}: expected list, got {type(value).__name__}")
    return value

def pick_image_url(sprites: Optional[Mapping[str, Any]]) -> str:
    """
    Image fallback chain, first non-null wins:
        1. sprites.other["official-artwork"].front_default
        2. sprites.front_default
        3. ""
    """
    sprites = _obj(sprites, "sprites")
    other = _obj(sprites.get("other"), "sprites.other")
    artwork = _obj(other.get(OFFICIAL_ARTWORK), f"sprites.other.{OFFICIAL_ARTWORK}")

    if artwork.get("front_default") is not None:
        return str(artwork["front_default"])
    if sprites.get("front_default") is not None:
        return str(sprites["front_default"])
    return ""

def extract_stats(stats: Optional[Iterable[Any]]) -> Dict[str, int]:
    """
    Pick attack/defense/hp out of [{stat: {name}, base_stat}, ...].
    Unknown names are ignored, missing ones stay 0, negatives clamp to 0.
    """
    out = {name: 0 for name in TRACKED_STATS}
    for entry in _list(stats, "stats"):
        entry = _obj(entry, "stats[]")
        name = _obj(entry.get("stat"), "stats[].stat").get("name")
        if name not in out:
            continue
        value = entry.get("base_stat")
        if value is None:
            continue
        # bool is an int subclass, and floats would be truncated silently
        if isinstance(value, bool) or not isinstance(value, int):
            raise MappingError(f"stat {name!r}: base_stat {value!r} is not an integer")
        out[name] = max(0, value)
    return out

def first_type(types: Optional[Iterable[Any]]) -> str:
    """Name of the first listed type, capitalized; "" when there is none. Secondary types are dropped."""
    types = _list(types, "types")
    if not types:
        return ""
    first = _obj(types[0], "types[0]")
    return capitalize_first(_obj(first.get("type"), "types[0].type").get("name"))
