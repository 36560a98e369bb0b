"""HTTP access to the web service, with retries and rate limiting."""

from __future__ import annotations

import math
import threading
import time
from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
from typing import Any

import requests

from .errors import MusicBrainzError, NotFoundError


class Requester(ABC):
    """Something that performs GET requests against the web service."""

    @abstractmethod
    def request(self, path: str, params: Mapping[str, str]) -> Any:
        """GET ``path`` with query ``params`` and return the decoded JSON body."""


class HTTPRequester(Requester):
    """Performs requests over HTTP, retrying on transport failures."""

    def __init__(
        self,
        base_url: str,
        user_agent: str = "",
        timeout: float = 30.0,
        retry_count: int = 0,
        retry_wait_time: float = 0.1,
        retry_max_wait_time: float = 2.0,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url
        self.user_agent = user_agent
        self.timeout = timeout
        self.retry_count = retry_count
        self.retry_wait_time = retry_wait_time
        self.retry_max_wait_time = retry_max_wait_time
        self.session = session or requests.Session()

    def request(self, path: str, params: Mapping[str, str]) -> Any:
        url = self.base_url.rstrip("/") + "/" + path.lstrip("/")
        headers = {"User-Agent": self.user_agent} if self.user_agent else {}
        for attempt in range(self.retry_count + 1):
            try:
                response = self.session.get(
                    url, params=dict(params), headers=headers, timeout=self.timeout or None
                )
                break
            except (requests.ConnectionError, requests.Timeout):
                if attempt == self.retry_count:
                    raise
                time.sleep(min(self.retry_max_wait_time, self.retry_wait_time * 2**attempt))

        if response.status_code == 404:
            raise NotFoundError()
        if not 200 <= response.status_code < 300:
            raise MusicBrainzError(f"{response.status_code} {response.reason}")
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise MusicBrainzError(f"invalid response body: {exc}") from exc


class RateLimiter:
    """Token bucket allowing ``rate`` events per second with bursts of ``burst``."""

    def __init__(
        self,
        rate: float,
        burst: int,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.rate = rate
        self.burst = burst
        self._clock = clock
        self._sleep = sleep
        self._tokens = float(burst)
        self._last = clock()
        self._lock = threading.Lock()

    def wait(self) -> None:
        """Block until one event is allowed."""
        if math.isinf(self.rate) and self.rate > 0:
            return
        with self._lock:
            if self.burst < 1:
                raise ValueError(f"wait exceeds limiter's burst {self.burst}")
            if self.rate <= 0:
                if self._tokens < 1:
                    raise ValueError("rate limiter exhausted: no refill rate")
                self._tokens -= 1
                return
            now = self._clock()
            elapsed = max(0.0, now - self._last)
            self._tokens = min(float(self.burst), self._tokens + elapsed * self.rate) - 1
            self._last = now
            delay = -self._tokens / self.rate
        if delay > 0:
            self._sleep(delay)


class LimitedRequester(Requester):
    """Waits on a rate limiter before passing each request on."""

    def __init__(self, requester: Requester, limiter: RateLimiter) -> None:
        self.requester = requester
        self.limiter = limiter

    def request(self, path: str, params: Mapping[str, str]) -> Any:
        self.limiter.wait()
        return self.requester.request(path, params)