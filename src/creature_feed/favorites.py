"""
Favorites persistence.

KeyValueStore keeps named slots in one JSON file::

    {"favorite_ids": ["1", "4", "25"]}

FavoritesStore maps the "favorite_ids" slot to a set of ints. Every save
rewrites the whole slot; there are no partial updates.
"""
from __future__ import annotations
import asyncio, json, os
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Set

from .errors import FavoritesCorruptError, StoreError

FAVORITES_KEY = "favorite_ids"

class KeyValueStore:
    """Named string-list slots persisted to a JSON file."""

    def __init__(self, path: str | os.PathLike):
        self.path = Path(path).expanduser()

    def _read(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with self.path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except OSError as e:
            raise StoreError(f"{self.path}: cannot read ({e})") from e
        except ValueError as e:
            raise StoreError(f"{self.path}: not valid JSON ({e})") from e
        if not isinstance(data, dict):
            raise StoreError(f"{self.path}: expected a JSON object, got {type(data).__name__}")
        return data

    def get_string_list(self, key: str) -> Optional[List[str]]:
        value = self._read().get(key)
        if value is None:
            return None
        if not isinstance(value, list):
            raise StoreError(f"{self.path}: slot {key!r} is not a list")
        return [str(v) for v in value]

    def set_string_list(self, key: str, values: Iterable[str]) -> None:
        data = self._read()
        data[key] = [str(v) for v in values]
        # write to a sibling file then swap it in so readers never see half a file
        tmp = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tmp.open("w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
            os.replace(tmp, self.path)
        except OSError as e:
            raise StoreError(f"{self.path}: cannot write ({e})") from e
        finally:
            if tmp.exists():
                tmp.unlink()


class FavoritesStore:

    def __init__(self, store: KeyValueStore, key: str = FAVORITES_KEY):
        self.store = store
        self.key = key

    async def load(self) -> Set[int]:
        """Read the slot; absent → empty set. A non-integer entry raises FavoritesCorruptError."""
        raw = await asyncio.to_thread(self.store.get_string_list, self.key)
        ids: Set[int] = set()
        for s in raw or []:
            try:
                ids.add(int(s))
            except ValueError:
                raise FavoritesCorruptError(self.key, s) from None
        return ids

    async def save(self, ids: Iterable[int]) -> None:
        """Overwrite the slot with the full set."""
        values = [str(i) for i in sorted(set(ids))]
        await asyncio.to_thread(self.store.set_string_list, self.key, values)
