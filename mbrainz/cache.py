"""Clients that cache entity lookups on disk or in memory."""

from __future__ import annotations

import json
import math
import os
import threading
from collections.abc import Callable
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, TypeVar

from cachetools import LRUCache, TTLCache

from .client import Client
from .models import (
    Artist,
    Record,
    Release,
    ReleaseGroup,
    SearchReleaseGroupRequest,
    SearchReleaseGroupResult,
    SearchReleaseRequest,
    SearchReleaseResult,
)

T = TypeVar("T")


class FSCacheClient(Client):
    """Stores looked-up entities as JSON files below ``base_dir``."""

    def __init__(self, client: Client, base_dir: str | os.PathLike[str]) -> None:
        self.client = client
        self.base_dir = Path(base_dir)

    def _get(
        self,
        name: str,
        mbid: str,
        model: type[T],
        fetch: Callable[[str], Record[T]],
    ) -> Record[T]:
        path = self.base_dir / name / f"{mbid}.json"
        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            record = fetch(mbid)
            record.date = datetime.now(timezone.utc)
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(json.dumps(record.to_dict(), indent=2), encoding="utf-8")
            return record
        return Record.from_dict(json.loads(text), model)

    def artist(self, mbid: str) -> Record[Artist]:
        return self._get("artist", mbid, Artist, self.client.artist)

    def release(self, mbid: str) -> Record[Release]:
        return self._get("release", mbid, Release, self.client.release)

    def release_group(self, mbid: str) -> Record[ReleaseGroup]:
        return self._get("releasegroup", mbid, ReleaseGroup, self.client.release_group)

    def search_release(self, request: SearchReleaseRequest) -> SearchReleaseResult:
        return self.client.search_release(request)

    def search_release_group(
        self, request: SearchReleaseGroupRequest
    ) -> SearchReleaseGroupResult:
        return self.client.search_release_group(request)


class InMemoryCacheClient(Client):
    """Keeps looked-up entities in a bounded, expiring in-memory cache.

    A ``size`` of 0 or less means no bound; a ``ttl`` of 0 or less means no expiry.
    """

    def __init__(self, client: Client, size: int, ttl: float) -> None:
        self.client = client
        maxsize = size if size > 0 else math.inf
        self._cache: Any = TTLCache(maxsize, ttl) if ttl > 0 else LRUCache(maxsize)
        self._lock = threading.Lock()

    def _get(
        self, entity: str, mbid: str, fetch: Callable[[str], Record[T]]
    ) -> Record[T]:
        key = f"{entity}_{mbid}"
        with self._lock:
            cached = self._cache.get(key)
        if cached is not None:
            return cached
        record = fetch(mbid)
        with self._lock:
            self._cache[key] = record
        return record

    def artist(self, mbid: str) -> Record[Artist]:
        return self._get("artist", mbid, self.client.artist)

    def release(self, mbid: str) -> Record[Release]:
        return self._get("release", mbid, self.client.release)

    def release_group(self, mbid: str) -> Record[ReleaseGroup]:
        return self._get("releasegroup", mbid, self.client.release_group)

    def search_release(self, request: SearchReleaseRequest) -> SearchReleaseResult:
        return self.client.search_release(request)

    def search_release_group(
        self, request: SearchReleaseGroupRequest
    ) -> SearchReleaseGroupResult:
        return self.client.search_release_group(request)