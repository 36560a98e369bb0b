"""Client interface and the client that talks to the web service."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from datetime import datetime, timezone
from typing import TypeVar

from .models import (
    Artist,
    Record,
    Release,
    ReleaseGroup,
    SearchReleaseGroupRequest,
    SearchReleaseGroupResult,
    SearchReleaseRequest,
    SearchReleaseResult,
    decode,
)
from .requester import Requester

T = TypeVar("T")


class Client(ABC):
    """Lookup and search operations on MusicBrainz entities."""

    @abstractmethod
    def artist(self, mbid: str) -> Record[Artist]:
        """Fetch an artist by id."""

    @abstractmethod
    def release(self, mbid: str) -> Record[Release]:
        """Fetch a release by id."""

    @abstractmethod
    def release_group(self, mbid: str) -> Record[ReleaseGroup]:
        """Fetch a release group by id."""

    @abstractmethod
    def search_release(self, request: SearchReleaseRequest) -> SearchReleaseResult:
        """Search for releases."""

    @abstractmethod
    def search_release_group(
        self, request: SearchReleaseGroupRequest
    ) -> SearchReleaseGroupResult:
        """Search for release groups."""


class APIClient(Client):
    """Client that sends every call to the web service."""

    def __init__(self, requester: Requester) -> None:
        self.requester = requester

    def _by_id(
        self, entity: str, mbid: str, inc: Sequence[str], model: type[T]
    ) -> Record[T]:
        payload = self.requester.request(
            f"/{entity}/{mbid}", {"inc": "+".join(inc), "fmt": "json"}
        )
        return Record(date=datetime.now(timezone.utc), data=decode(model, payload))

    def artist(self, mbid: str) -> Record[Artist]:
        return self._by_id("artist", mbid, ("tags", "url-rels"), Artist)

    def release(self, mbid: str) -> Record[Release]:
        return self._by_id(
            "release",
            mbid,
            ("artists", "labels", "recordings", "release-groups", "url-rels"),
            Release,
        )

    def release_group(self, mbid: str) -> Record[ReleaseGroup]:
        return self._by_id(
            "release-group", mbid, ("artists", "genres", "url-rels"), ReleaseGroup
        )

    def search_release(self, request: SearchReleaseRequest) -> SearchReleaseResult:
        payload = self.requester.request(
            "/release", {"query": request.query(), "fmt": "json"}
        )
        return decode(SearchReleaseResult, payload)

    def search_release_group(
        self, request: SearchReleaseGroupRequest
    ) -> SearchReleaseGroupResult:
        payload = self.requester.request(
            "/release-group", {"query": request.query(), "fmt": "json"}
        )
        return decode(SearchReleaseGroupResult, payload)