from __future__ import annotations
import asyncio, sys
from typing import FrozenSet, List, Optional, Protocol, Set, Tuple

from .config import FeedSettings
from .models import CreatureRecord, FetchResult, FetchStatus

class CreatureSource(Protocol):
    async def fetch_one(self, creature_id: int) -> FetchResult: ...

class FavoritesBackend(Protocol):
    async def load(self) -> Set[int]: ...
    async def save(self, ids: Set[int]) -> None: ...


class FeedController:
    """
    Owns the feed state for one session:
        • append-only list of fetched records
        • cursor = last id requested, only ever moves forward
        • favorite id set, written through to the store on every toggle
        • loading flag, at most one batch in flight

    Fetches inside a batch run one at a time, so feed order is cursor order.
    """

    def __init__(self, api: CreatureSource, favorites: FavoritesBackend, settings: Optional[FeedSettings] = None):
        self.api = api
        self.favorites_store = favorites
        self.settings = settings or FeedSettings()
        self._feed: List[CreatureRecord] = []
        self._cursor = self.settings.start_id - 1
        self._favorites: Set[int] = set()
        self._loading = False
        self._fav_lock = asyncio.Lock()
        self.absent_count = 0
        self.error_count = 0

    @property
    def cursor(self) -> int:
        return self._cursor

    def current_feed(self) -> Tuple[CreatureRecord, ...]:
        return tuple(self._feed)

    def is_loading(self) -> bool:
        return self._loading

    def is_favorite(self, creature_id: int) -> bool:
        return creature_id in self._favorites

    def favorite_ids(self) -> FrozenSet[int]:
        return frozenset(self._favorites)

    def list_favorites(self) -> List[CreatureRecord]:
        """Loaded records that are favorites, in feed order. Favorites not yet fetched are not listed."""
        return [r for r in self._feed if r.id in self._favorites]

    async def load_favorites(self) -> None:
        self._favorites = set(await self.favorites_store.load())

    async def start(self) -> None:
        await self.load_favorites()
        await self.load_more()

    async def load_more(self) -> int:
        """
        Fetch the next batch_size ids sequentially and append what comes back.
        No-op (returns 0) while another batch is running. The cursor advances
        once per attempt whether or not the fetch produced a record.
        Returns the number of records appended.
        """
        if self._loading:
            return 0
        self._loading = True
        added = 0
        try:
            for _ in range(self.settings.batch_size):
                self._cursor += 1
                result = await self.api.fetch_one(self._cursor)
                if result.status is FetchStatus.OK and result.record is not None:
                    self._feed.append(result.record)
                    added += 1
                elif result.status is FetchStatus.ABSENT:
                    self.absent_count += 1
                else:
                    self.error_count += 1
        finally:
            self._loading = False

        skipped = self.settings.batch_size - added
        if skipped:
            print(f"[warn] batch ending at id {self._cursor}: {skipped} id(s) produced no record", file=sys.stderr)
        print(f"Loaded {added}/{self.settings.batch_size} (feed={len(self._feed)}, cursor={self._cursor})")
        return added

    async def on_position_changed(self, index: int) -> int:
        """Presentation hook: the user is now looking at position `index`."""
        if index >= len(self._feed) - 1 - self.settings.prefetch_threshold:
            return await self.load_more()
        return 0

    async def toggle_favorite(self, creature_id: int) -> bool:
        """
        Flip favorite membership and persist the full set.
        The in-memory set only changes after the save succeeds; a failed save
        leaves membership as it was and re-raises.
        Returns the new membership.
        """
        async with self._fav_lock:
            updated = set(self._favorites)
            if creature_id in updated:
                updated.discard(creature_id)
            else:
                updated.add(creature_id)
            try:
                await self.favorites_store.save(updated)
            except Exception as e:
                print(f"[warn] saving favorites failed, {creature_id} left unchanged: {e}", file=sys.stderr)
                raise
            self._favorites = updated
            return creature_id in updated
