"""
Async API wrapper around the creature detail endpoint.

Provides a typed interface for:
- Building the detail path for an id (`resource_path`)
- Fetching one record as a typed outcome (`fetch_one`)
- Fetching one record or nothing (`get_creature`)

Failures never propagate out of this module: network errors, unexpected
statuses and unreadable bodies come back as FetchResult(ERROR), a 404 as
FetchResult(ABSENT), each with a stderr warning. Nothing is retried.
"""
from __future__ import annotations
import sys
from typing import Optional

import httpx

from http_client import HttpClient

from .errors import MappingError
from .models import CreatureRecord, FetchResult

DEFAULT_RESOURCE = "pokemon"

class CreatureAPI:

    def __init__(self, http: HttpClient, resource: str = DEFAULT_RESOURCE):
        self.http = http
        self.resource = resource.strip("/")

    def resource_path(self, creature_id: int) -> str:
        return f"/{self.resource}/{creature_id}/"

    async def fetch_one(self, creature_id: int) -> FetchResult:
        try:
            resp = await self.http.request("GET", self.resource_path(creature_id))
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            if status == 404:
                print(f"[warn] no record for id {creature_id} (404)", file=sys.stderr)
                return FetchResult.absent(creature_id, "HTTP 404")
            print(f"[warn] get {creature_id} failed: HTTP {status}", file=sys.stderr)
            return FetchResult.failed(creature_id, f"HTTP {status}")
        except httpx.HTTPError as e:
            print(f"[warn] get {creature_id} failed: {type(e).__name__}: {e}", file=sys.stderr)
            return FetchResult.failed(creature_id, f"{type(e).__name__}: {e}")

        try:
            raw = resp.json()
        except ValueError:
            print(f"[warn] non-JSON response for id {creature_id}: {resp.text[:200]}", file=sys.stderr)
            return FetchResult.failed(creature_id, "non-JSON body")

        try:
            record = CreatureRecord.from_api(raw, creature_id)
        except MappingError as e:
            print(f"[warn] unreadable record for id {creature_id}: {e}", file=sys.stderr)
            return FetchResult.failed(creature_id, str(e))
        return FetchResult.success(record)

    async def get_creature(self, creature_id: int) -> Optional[CreatureRecord]:
        result = await self.fetch_one(creature_id)
        return result.record
