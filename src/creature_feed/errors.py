"""Exceptions raised by the creature feed."""
from __future__ import annotations


class MappingError(ValueError):
    """Raw API payload could not be turned into a CreatureRecord."""


class StoreError(RuntimeError):
    """Local key-value store could not be read or written."""


class FavoritesCorruptError(StoreError):
    """Favorites slot holds a value that is not a decimal integer."""

    def __init__(self, key: str, value: str):
        super().__init__(f"slot {key!r} holds non-integer value {value!r}")
        self.key = key
        self.value = value
