"""Exceptions raised by the MusicBrainz client."""

from __future__ import annotations


class MusicBrainzError(Exception):
    """Base error for every failure reported by the client."""

    def __init__(self, detail: str | None = None) -> None:
        self.detail = detail
        super().__init__("musicbrainz client" + (f": {detail}" if detail else ""))


class NotFoundError(MusicBrainzError):
    """The requested entity does not exist."""

    def __init__(self, detail: str = "not found") -> None:
        super().__init__(detail)