from __future__ import annotations
import argparse, os
from dataclasses import dataclass

from .api import DEFAULT_RESOURCE

DEFAULT_STORE = os.path.join("~", ".creature_feed.json")

@dataclass(frozen=True)
class FeedSettings:
    batch_size: int = 5
    prefetch_threshold: int = 0
    start_id: int = 1

    def __post_init__(self):
        if self.batch_size < 1:
            raise ValueError(f"batch_size must be >= 1, got {self.batch_size}")
        if self.prefetch_threshold < 0:
            raise ValueError(f"prefetch_threshold must be >= 0, got {self.prefetch_threshold}")
        if self.start_id < 1:
            raise ValueError(f"start_id must be >= 1, got {self.start_id}")

def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Incremental creature feed with local favorites")
    p.add_argument("--base-url", default=os.getenv("API_BASE_URL", "https://pokeapi.co/api/v2"))
    p.add_argument("--resource", default=os.getenv("API_RESOURCE", DEFAULT_RESOURCE))
    p.add_argument("--batch-size", type=int, default=int(os.getenv("BATCH_SIZE", "5")))
    p.add_argument("--prefetch", type=int, default=int(os.getenv("PREFETCH_THRESHOLD", "0")),
                   help="load more when this many items (or fewer) remain after the current one")
    p.add_argument("--start-id", type=int, default=int(os.getenv("START_ID", "1")))
    p.add_argument("--store", default=os.getenv("FAVORITES_STORE", DEFAULT_STORE),
                   help="JSON file holding the favorites slot")
    p.add_argument("--connect-timeout", type=float, default=float(os.getenv("CONNECT_TIMEOUT", "5")))
    p.add_argument("--read-timeout", type=float, default=float(os.getenv("READ_TIMEOUT", "30")))
    p.add_argument("--pages", type=int, default=5, help="number of feed positions to scroll through")
    p.add_argument("--toggle", type=int, action="append", default=[], metavar="ID",
                   help="toggle favorite membership for ID (repeatable)")
    p.add_argument("--favorites", action="store_true", help="print the favorites list")
    return p

def parse_args(argv=None) -> argparse.Namespace:
    return build_parser().parse_args(argv)

def feed_settings(args: argparse.Namespace) -> FeedSettings:
    return FeedSettings(
        batch_size=args.batch_size,
        prefetch_threshold=args.prefetch,
        start_id=args.start_id,
    )
