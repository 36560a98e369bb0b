from urllib.parse import parse_qs, urlsplit

import pytest
import requests
import responses

from mbrainz.errors import MusicBrainzError, NotFoundError
from mbrainz.requester import HTTPRequester, LimitedRequester, RateLimiter, Requester

BASE = "https://mb.example.com/ws/2"


def test_request_decodes_json_and_sends_params_and_agent():
    with responses.RequestsMock() as rsps:
        rsps.add(responses.GET, f"{BASE}/artist/abc", json={"id": "abc"}, status=200)
        requester = HTTPRequester(BASE, user_agent="mbrainz-tests")
        result = requester.request("/artist/abc", {"inc": "tags+url-rels", "fmt": "json"})
        sent = rsps.calls[0].request
    assert result == {"id": "abc"}
    assert parse_qs(urlsplit(sent.url).query) == {
        "inc": ["tags+url-rels"],
        "fmt": ["json"],
    }
    assert sent.headers["User-Agent"] == "mbrainz-tests"


def test_not_found_raises_not_found_error():
    with responses.RequestsMock() as rsps:
        rsps.add(responses.GET, f"{BASE}/release/missing", status=404)
        requester = HTTPRequester(BASE)
        with pytest.raises(NotFoundError) as info:
            requester.request("/release/missing", {"fmt": "json"})
    assert isinstance(info.value, MusicBrainzError)
    assert str(info.value) == "musicbrainz client: not found"


def test_other_failure_status_raises_with_status_text():
    with responses.RequestsMock() as rsps:
        rsps.add(responses.GET, f"{BASE}/release/x", status=503)
        requester = HTTPRequester(BASE)
        with pytest.raises(MusicBrainzError) as info:
            requester.request("/release/x", {})
    assert not isinstance(info.value, NotFoundError)
    assert str(info.value) == "musicbrainz client: 503 Service Unavailable"


def test_empty_body_gives_none():
    with responses.RequestsMock() as rsps:
        rsps.add(responses.GET, f"{BASE}/release/x", body="", status=200)
        result = HTTPRequester(BASE).request("/release/x", {})
    assert result is None


def test_invalid_json_raises():
    with responses.RequestsMock() as rsps:
        rsps.add(responses.GET, f"{BASE}/release/x", body="{not json", status=200)
        with pytest.raises(MusicBrainzError) as info:
            HTTPRequester(BASE).request("/release/x", {})
    assert str(info.value).startswith("musicbrainz client")


def test_transport_error_is_retried():
    url = f"{BASE}/artist/a"
    with responses.RequestsMock() as rsps:
        rsps.add(responses.GET, url, body=requests.ConnectionError("boom"))
        rsps.add(responses.GET, url, json={"id": "a"}, status=200)
        requester = HTTPRequester(
            BASE, retry_count=2, retry_wait_time=0.0, retry_max_wait_time=0.0
        )
        result = requester.request("/artist/a", {})
        call_count = len(rsps.calls)
    assert result == {"id": "a"}
    assert call_count == 2


def test_retries_exhausted_raises_transport_error():
    url = f"{BASE}/artist/a"
    with responses.RequestsMock() as rsps:
        rsps.add(responses.GET, url, body=requests.ConnectionError("boom"))
        requester = HTTPRequester(
            BASE, retry_count=1, retry_wait_time=0.0, retry_max_wait_time=0.0
        )
        with pytest.raises(requests.ConnectionError):
            requester.request("/artist/a", {})
        call_count = len(rsps.calls)
    assert call_count == 2


class _Clock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


def test_rate_limiter_allows_burst_then_sleeps():
    clock = _Clock()
    sleeps = []
    limiter = RateLimiter(1.0, 3, clock=clock, sleep=sleeps.append)
    for _ in range(3):
        limiter.wait()
    assert sleeps == []
    limiter.wait()
    limiter.wait()
    assert sleeps == [pytest.approx(1.0), pytest.approx(2.0)]


def test_rate_limiter_refills_over_time_up_to_burst():
    clock = _Clock()
    sleeps = []
    limiter = RateLimiter(1.0, 2, clock=clock, sleep=sleeps.append)
    limiter.wait()
    limiter.wait()
    clock.now += 100.0
    limiter.wait()
    limiter.wait()
    assert sleeps == []
    limiter.wait()
    assert len(sleeps) == 1


def test_rate_limiter_zero_burst_raises():
    limiter = RateLimiter(1.0, 0, clock=_Clock(), sleep=lambda _: None)
    with pytest.raises(ValueError):
        limiter.wait()


def test_rate_limiter_zero_rate_consumes_burst_only():
    limiter = RateLimiter(0.0, 1, clock=_Clock(), sleep=lambda _: None)
    limiter.wait()
    with pytest.raises(ValueError):
        limiter.wait()


class _RecordingRequester(Requester):
    def __init__(self):
        self.calls = []

    def request(self, path, params):
        self.calls.append((path, dict(params)))
        return {"path": path}


def test_limited_requester_waits_and_delegates():
    sleeps = []
    inner = _RecordingRequester()
    limited = LimitedRequester(inner, RateLimiter(1.0, 1, clock=_Clock(), sleep=sleeps.append))
    assert limited.request("/a", {"fmt": "json"}) == {"path": "/a"}
    assert limited.request("/b", {}) == {"path": "/b"}
    assert inner.calls == [("/a", {"fmt": "json"}), ("/b", {})]
    assert len(sleeps) == 1


def test_limited_requester_does_not_call_inner_when_limiter_fails():
    inner = _RecordingRequester()
    limited = LimitedRequester(inner, RateLimiter(1.0, 0, clock=_Clock(), sleep=lambda _: None))
    with pytest.raises(ValueError):
        limited.request("/a", {})
    assert inner.calls == []