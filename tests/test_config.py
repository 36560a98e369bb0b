from mbrainz.config import Config, FSCacheConfig, LRUCacheConfig, default_config


def test_default_config_values():
    config = default_config()
    assert config.base_url == "https://musicbrainz.org/ws/2"
    assert config.user_agent == "mbrainz-client"
    assert config.retry_count == 20
    assert config.retry_wait_time == 5
    assert config.retry_max_wait_time == 60
    assert config.rate_limit == 1
    assert config.rate_burst == 3
    assert config.timeout == 30


def test_default_config_caches():
    config = default_config()
    assert config.lru_cache.size == 1000
    assert config.lru_cache.ttl == 10 * 60
    assert config.fs_cache.base_dir == ""


def test_zero_config_disables_caches():
    config = Config()
    assert config.lru_cache == LRUCacheConfig()
    assert config.lru_cache.size == 0
    assert config.fs_cache == FSCacheConfig()
    assert config.base_url == ""


def test_default_config_returns_independent_instances():
    first = default_config()
    second = default_config()
    first.lru_cache.size = 1
    first.fs_cache.base_dir = "/tmp/x"
    assert second.lru_cache.size == 1000
    assert second.fs_cache.base_dir == ""