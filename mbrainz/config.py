"""Client configuration."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class FSCacheConfig:
    """On-disk cache settings; an empty ``base_dir`` disables it."""

    base_dir: str = ""


@dataclass
class LRUCacheConfig:
    """In-memory cache settings; ``ttl`` is in seconds, ``size`` 0 disables it."""

    size: int = 0
    ttl: float = 0.0


@dataclass
class Config:
    """Settings for building a client. Durations are in seconds, ``rate_limit`` in requests per second."""

    fs_cache: FSCacheConfig = field(default_factory=FSCacheConfig)
    lru_cache: LRUCacheConfig = field(default_factory=LRUCacheConfig)
    base_url: str = ""
    user_agent: str = ""
    retry_count: int = 0
    retry_wait_time: float = 0.0
    retry_max_wait_time: float = 0.0
    rate_limit: float = 0.0
    rate_burst: int = 0
    timeout: float = 0.0


def default_config() -> Config:
    """The configuration used when nothing else is specified."""
    return Config(
        lru_cache=LRUCacheConfig(size=1000, ttl=10 * 60.0),
        base_url="https://musicbrainz.org/ws/2",
        user_agent="mbrainz-client",
        retry_count=20,
        retry_wait_time=5.0,
        retry_max_wait_time=60.0,
        rate_limit=1.0,
        rate_burst=3,
        timeout=30.0,
    )