"""Assembly of a client from a configuration."""

from __future__ import annotations

import os

from .cache import FSCacheClient, InMemoryCacheClient
from .client import APIClient, Client
from .config import Config
from .requester import HTTPRequester, LimitedRequester, RateLimiter


def new_client(config: Config) -> Client:
    """Build a rate-limited client, wrapped in the caches the config enables."""
    http = HTTPRequester(
        config.base_url,
        user_agent=config.user_agent,
        timeout=config.timeout,
        retry_count=config.retry_count,
        retry_wait_time=config.retry_wait_time,
        retry_max_wait_time=config.retry_max_wait_time,
    )
    client: Client = APIClient(
        LimitedRequester(http, RateLimiter(config.rate_limit, config.rate_burst))
    )
    if config.fs_cache.base_dir:
        client = FSCacheClient(
            client, os.path.join(config.fs_cache.base_dir, "musicbrainz")
        )
    if config.lru_cache.size > 0:
        client = InMemoryCacheClient(client, config.lru_cache.size, config.lru_cache.ttl)
    return client