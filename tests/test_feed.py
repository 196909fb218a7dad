import asyncio
import pytest
from creature_feed.config import FeedSettings
from creature_feed.feed import FeedController
from creature_feed.models import CreatureRecord, FetchResult

def record(_id: int) -> CreatureRecord:
    return CreatureRecord(id=_id, name=f"Mon{_id}", image_url="", attack=1, defense=1, hp=1, type="Normal")

class FakeAPI:
    """Ids in `missing` come back ABSENT, ids in `broken` come back ERROR, the rest OK."""
    def __init__(self, missing=(), broken=()):
        self.missing = set(missing)
        self.broken = set(broken)
        self.requested = []
        self.gate = None

    async def fetch_one(self, creature_id: int) -> FetchResult:
        self.requested.append(creature_id)
        if self.gate is not None:
            await self.gate.wait()
        if creature_id in self.missing:
            return FetchResult.absent(creature_id, "HTTP 404")
        if creature_id in self.broken:
            return FetchResult.failed(creature_id, "ConnectError")
        return FetchResult.success(record(creature_id))

class FakeFavorites:
    def __init__(self, initial=(), fail_save=False):
        self.saved = [set(initial)]
        self.fail_save = fail_save

    async def load(self):
        return set(self.saved[-1])

    async def save(self, ids):
        if self.fail_save:
            raise OSError("disk full")
        self.saved.append(set(ids))

def make_feed(api=None, favorites=None, **settings):
    return FeedController(api or FakeAPI(), favorites or FakeFavorites(), FeedSettings(**settings))

@pytest.mark.asyncio
async def test_load_more_fetches_batch_in_cursor_order():
    api = FakeAPI()
    feed = make_feed(api)
    added = await feed.load_more()
    assert added == 5
    assert api.requested == [1, 2, 3, 4, 5]
    assert [r.id for r in feed.current_feed()] == [1, 2, 3, 4, 5]
    assert feed.cursor == 5
    assert not feed.is_loading()

@pytest.mark.asyncio
async def test_cursor_advances_past_failures():
    api = FakeAPI(missing={2}, broken={4})
    feed = make_feed(api, batch_size=5)
    await feed.load_more()
    assert [r.id for r in feed.current_feed()] == [1, 3, 5]
    assert feed.cursor == 5
    assert (feed.absent_count, feed.error_count) == (1, 1)

    await feed.load_more()
    assert api.requested == list(range(1, 11))
    assert feed.cursor == 10

@pytest.mark.asyncio
async def test_404_id_appends_nothing_but_cursor_moves_on():
    feed = make_feed(FakeAPI(missing={9999}), batch_size=1, start_id=9999)
    assert await feed.load_more() == 0
    assert feed.current_feed() == ()
    assert feed.cursor == 9999
    await feed.load_more()
    assert feed.cursor == 10000
    assert [r.id for r in feed.current_feed()] == [10000]

@pytest.mark.asyncio
async def test_feed_growth_bounded_and_non_decreasing():
    feed = make_feed(FakeAPI(missing={3, 7, 8}, broken={12}), batch_size=4)
    lengths = [0]
    for calls in range(1, 6):
        before = feed.cursor
        await feed.load_more()
        assert feed.cursor == before + 4
        lengths.append(len(feed.current_feed()))
        assert lengths[-1] <= calls * 4
    assert lengths == sorted(lengths)

@pytest.mark.asyncio
async def test_existing_positions_never_move():
    feed = make_feed(FakeAPI(missing={6}))
    await feed.load_more()
    first = feed.current_feed()
    await feed.load_more()
    assert feed.current_feed()[:len(first)] == first

@pytest.mark.asyncio
async def test_load_more_while_loading_is_noop():
    api = FakeAPI()
    api.gate = asyncio.Event()
    feed = make_feed(api, batch_size=3)

    first = asyncio.create_task(feed.load_more())
    while not api.requested:
        await asyncio.sleep(0)
    assert feed.is_loading()
    assert await feed.load_more() == 0

    api.gate.set()
    assert await first == 3
    assert api.requested == [1, 2, 3]
    assert len(feed.current_feed()) == 3
    assert not feed.is_loading()

@pytest.mark.asyncio
async def test_loading_flag_cleared_when_fetch_raises():
    class Exploding(FakeAPI):
        async def fetch_one(self, creature_id):
            raise RuntimeError("boom")
    feed = make_feed(Exploding())
    with pytest.raises(RuntimeError):
        await feed.load_more()
    assert not feed.is_loading()
    assert feed.cursor == 1

@pytest.mark.asyncio
async def test_position_trigger_and_prefetch_threshold():
    feed = make_feed(batch_size=5)
    await feed.load_more()
    assert await feed.on_position_changed(3) == 0
    assert await feed.on_position_changed(4) == 5
    assert len(feed.current_feed()) == 10

    eager = make_feed(batch_size=5, prefetch_threshold=2)
    await eager.load_more()
    assert await eager.on_position_changed(1) == 0
    assert await eager.on_position_changed(2) == 5

@pytest.mark.asyncio
async def test_start_loads_favorites_then_first_batch():
    feed = make_feed(favorites=FakeFavorites({2, 40}))
    await feed.start()
    assert feed.favorite_ids() == frozenset({2, 40})
    assert [r.id for r in feed.list_favorites()] == [2]
    assert feed.is_favorite(40)

@pytest.mark.asyncio
async def test_toggle_twice_restores_membership_and_writes_through():
    favs = FakeFavorites({1})
    feed = make_feed(favorites=favs)
    await feed.load_favorites()

    assert await feed.toggle_favorite(3) is True
    assert favs.saved[-1] == {1, 3}
    assert await feed.toggle_favorite(3) is False
    assert favs.saved[-1] == {1}
    assert feed.favorite_ids() == frozenset({1})

    assert await feed.toggle_favorite(1) is False
    assert favs.saved[-1] == set()

@pytest.mark.asyncio
async def test_failed_save_leaves_membership_unchanged():
    favs = FakeFavorites({1}, fail_save=True)
    feed = make_feed(favorites=favs)
    await feed.load_favorites()
    with pytest.raises(OSError):
        await feed.toggle_favorite(2)
    assert not feed.is_favorite(2)
    assert feed.favorite_ids() == frozenset({1})

@pytest.mark.asyncio
async def test_list_favorites_in_feed_order():
    feed = make_feed()
    await feed.load_more()
    for _id in (4, 2, 77):
        await feed.toggle_favorite(_id)
    assert [r.id for r in feed.list_favorites()] == [2, 4]

def test_settings_validation():
    with pytest.raises(ValueError):
        FeedSettings(batch_size=0)
    with pytest.raises(ValueError):
        FeedSettings(prefetch_threshold=-1)
    with pytest.raises(ValueError):
        FeedSettings(start_id=0)
