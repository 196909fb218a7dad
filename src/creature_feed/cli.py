"""
Command-line front end for the creature feed.

- Parses CLI args and config
- Initializes HttpClient, CreatureAPI and the favorites store
- Drives the FeedController like a scrolling user:
    1. Load favorites and the first batch
    2. Visit positions 0..pages-1, loading more when the end is reached
    3. Apply --toggle ids
    4. Print the feed (and the favorites list with --favorites)

A corrupt favorites slot exits with status 2; KeyboardInterrupt exits cleanly.
"""
from __future__ import annotations
import asyncio, sys

from http_client import HttpClient

from .api import CreatureAPI
from .config import parse_args, feed_settings
from .errors import StoreError
from .favorites import FavoritesStore, KeyValueStore
from .feed import FeedController
from .models import CreatureRecord

USER_AGENT = "creature-feed/0.1"

def render_card(record: CreatureRecord, favorite: bool) -> str:
    label = "Already favorite" if favorite else "I choose you!!"
    return "\n".join([
        f"#{record.id} {record.name}",
        f"  Attack {record.attack} | Defense {record.defense} | HP {record.hp}",
        f"  Type: {record.type or '-'}",
        f"  Image: {record.image_url or '(none)'}",
        f"  [{label}]",
    ])

def render_favorites(records: list[CreatureRecord]) -> str:
    if not records:
        return "You don't have any favorites yet."
    return "\n".join(f"{r.name}  ID: {r.id} | Type: {r.type}" for r in records)

async def scroll(feed: FeedController, pages: int) -> None:
    index = 0
    while index < pages and index < len(feed.current_feed()):
        await feed.on_position_changed(index)
        index += 1

async def run(args):
    settings = feed_settings(args)
    async with HttpClient(
        base_url=args.base_url,
        connect_timeout=args.connect_timeout,
        read_timeout=args.read_timeout,
        default_headers={"User-Agent": USER_AGENT},
    ) as http:
        api = CreatureAPI(http, resource=args.resource)
        feed = FeedController(api, FavoritesStore(KeyValueStore(args.store)), settings)
        print(f"""
            ====== Creature feed ======
            Base URL       : {args.base_url}/{args.resource}
            Batch size     : {settings.batch_size}
            Prefetch       : {settings.prefetch_threshold}
            Start id       : {settings.start_id}
            Favorites      : {args.store}
            ===========================
        """)
        await feed.start()
        await scroll(feed, args.pages)

        for creature_id in args.toggle:
            try:
                now = await feed.toggle_favorite(creature_id)
            except StoreError as e:
                print(f"[warn] favorite {creature_id} not toggled: {e}", file=sys.stderr)
                continue
            print(f"{'Added' if now else 'Removed'} favorite {creature_id}.")

        for record in feed.current_feed():
            print(render_card(record, feed.is_favorite(record.id)))
        print(f"Feed has {len(feed.current_feed())} record(s); cursor at {feed.cursor}.")

        if args.favorites:
            print("My favorites")
            print(render_favorites(feed.list_favorites()))

def main() -> None:
    args = parse_args()
    try:
        asyncio.run(run(args))
    except StoreError as e:
        print(f"Favorites store unreadable: {e}", file=sys.stderr)
        sys.exit(2)
    except ValueError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        sys.exit(2)
    except KeyboardInterrupt:
        print("Aborted.", file=sys.stderr)
