# mbrainz

mbrainz is a client library for the MusicBrainz web service (`/ws/2`). It can
fetch artists, releases and release groups by MBID, and it can search releases
and release groups. It rate limits its requests and retries on connection
failures. It can also cache lookups in memory and on disk.

## Installation

```
pip install .
```

## Usage

```python
from mbrainz.config import default_config
from mbrainz.factory import new_client
from mbrainz.models import SearchReleaseRequest

config = default_config()
config.user_agent = "my-app/1.0 (contact@example.com)"
client = new_client(config)

record = client.release_group("f5093c06-23e3-404f-aeaa-40f72885ee3a")
print(record.date, record.data)

result = client.search_release(
    SearchReleaseRequest(artist_name="Radiohead", release_name="OK Computer")
)
for release in result.releases:
    print(release.id, release.title, release.discogs_release_ids())
```

Lookups (`artist`, `release`, `release_group`) return a `mbrainz.models.Record`.
The record's `data` holds the entity and its `date` holds the time it was
fetched. Searches (`search_release`, `search_release_group`) return a
`SearchReleaseResult` or a `SearchReleaseGroupResult`. Searches are never
cached.

`SearchReleaseRequest.query()` and `SearchReleaseGroupRequest.query()` show the
Lucene query that is sent. The model also has these helpers:

- `Release.discogs_release_ids()`
- `Relation.is_parent_label()`
- `Label.parent_labels()`

`mbrainz.models.decode` and `encode` convert between model objects and JSON
data.

## Modules

- `mbrainz.config`: `Config`, `FSCacheConfig`, `LRUCacheConfig` and `default_config()`
- `mbrainz.factory`: `new_client(config)`
- `mbrainz.client`: the abstract `Client` and `APIClient`, which sends every call to the service
- `mbrainz.cache`: `FSCacheClient` and `InMemoryCacheClient`, which wrap another client
- `mbrainz.requester`: `HTTPRequester`, `RateLimiter` (a token bucket) and `LimitedRequester`
- `mbrainz.models`: the entity dataclasses and search requests
- `mbrainz.errors`: `MusicBrainzError` and `NotFoundError`

## Configuration

`default_config()` returns a `Config` with these settings:

- base URL `https://musicbrainz.org/ws/2` and user agent `mbrainz-client`
- a 30 second timeout
- up to 20 retries after connection errors or timeouts. The wait starts at 5 seconds, doubles each time, and is capped at 60 seconds.
- one request per second, with bursts of up to 3
- an in-memory cache of 1000 entries that expire after 10 minutes

All durations are given in seconds.

If `lru_cache.size` is 0, `new_client` leaves out the in-memory cache.

If `fs_cache.base_dir` is set, lookups are also stored as JSON files. They go in
`<base_dir>/musicbrainz/<artist|release|releasegroup>/<mbid>.json` and are read
back on later lookups. These files never expire.

## Errors

- A 404 response raises `mbrainz.errors.NotFoundError`.
- Any other non-2xx status raises `mbrainz.errors.MusicBrainzError`.
- A body that is not valid JSON also raises `mbrainz.errors.MusicBrainzError`.
- A connection error or timeout that persists after all retries raises the exception from `requests`.

## What it does not do

mbrainz is a library only. It has no command-line tool. It covers only the
lookups and searches listed above, and it never sends anything to the service.

## Running the tests

```
pip install ".[test]"
pytest
```