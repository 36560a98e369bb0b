"""Data model of the MusicBrainz web service and search query builders."""

from __future__ import annotations

import dataclasses
import functools
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Generic, TypeVar

T = TypeVar("T")

_ZERO_TIME = datetime(1, 1, 1, tzinfo=timezone.utc)
_TIME_RE = re.compile(r"^(.*?T\d{2}:\d{2}:\d{2})(?:\.(\d+))?(.*)$")
_DISCOGS_ID_RE = re.compile(r"discogs\.com/release/(\d+)", re.ASCII)

_PARENT_LABEL_RELATION_TYPES = frozenset({"label ownership"})
_PARENT_LABEL_TYPES = frozenset({"Imprint", "Original Production"})

_SCALARS: dict[str, type] = {"str": str, "int": int, "bool": bool, "datetime": datetime}


def _json_name(f: dataclasses.Field) -> str:
    return f.metadata.get("json", f.name.replace("_", "-"))


def _renamed(json_name: str, **kwargs: Any) -> Any:
    return field(metadata={"json": json_name}, **kwargs)


def _parse_time(value: Any) -> datetime:
    if not isinstance(value, str):
        raise TypeError(f"expected a timestamp string, got {type(value).__name__}")
    match = _TIME_RE.match(value)
    if match:
        head, fraction, tail = match.groups()
        if tail in ("Z", "z"):
            tail = "+00:00"
        text = head + ("." + (fraction + "000000")[:6] if fraction else "") + tail
    else:
        text = value
    return datetime.fromisoformat(text)


def _format_time(value: datetime) -> str:
    text = value.isoformat()
    if value.utcoffset() is not None and value.utcoffset().total_seconds() == 0:
        text = text[: -len("+00:00")] + "Z"
    return text


def _resolve(annotation: Any) -> Any:
    """Turn a field annotation into a type descriptor used by the decoder."""
    if not isinstance(annotation, str):
        return annotation
    text = annotation.strip()
    if "|" in text:
        parts = [part.strip() for part in text.split("|")]
        others = [part for part in parts if part != "None"]
        if len(others) == 1:
            return ("optional", _resolve(others[0]))
        return None
    if text.startswith("list[") and text.endswith("]"):
        return ("list", _resolve(text[len("list[") : -1]))
    if text.startswith("dict[") and text.endswith("]"):
        _, _, value_text = text[len("dict[") : -1].partition(",")
        return ("dict", _resolve(value_text))
    if text in _SCALARS:
        return _SCALARS[text]
    return _MODELS.get(text)


@functools.lru_cache(maxsize=None)
def _hints(cls: type) -> dict[str, Any]:
    return {f.name: _resolve(f.type) for f in dataclasses.fields(cls)}


def _zero(tp: Any) -> Any:
    if isinstance(tp, tuple):
        kind = tp[0]
        if kind == "list":
            return []
        if kind == "dict":
            return {}
        return None
    if dataclasses.is_dataclass(tp):
        return tp()
    if tp is str:
        return ""
    if tp is int:
        return 0
    if tp is bool:
        return False
    return None


def _decode_value(tp: Any, value: Any, where: str) -> Any:
    kind, inner = tp if isinstance(tp, tuple) else (None, None)
    if kind == "optional":
        return None if value is None else _decode_value(inner, value, where)
    if value is None:
        return _zero(tp)
    if kind == "list":
        if not isinstance(value, list):
            raise TypeError(f"{where}: expected an array")
        return [_decode_value(inner, item, where) for item in value]
    if kind == "dict":
        if not isinstance(value, Mapping):
            raise TypeError(f"{where}: expected an object")
        return {str(k): _decode_value(inner, v, where) for k, v in value.items()}
    if dataclasses.is_dataclass(tp):
        return decode(tp, value)
    if tp is datetime:
        return _parse_time(value)
    if tp is bool:
        if not isinstance(value, bool):
            raise TypeError(f"{where}: expected a boolean")
        return value
    if tp is int:
        if isinstance(value, bool):
            raise TypeError(f"{where}: expected an integer")
        if isinstance(value, int):
            return value
        if isinstance(value, float) and value.is_integer():
            return int(value)
        raise TypeError(f"{where}: expected an integer")
    if tp is str:
        if not isinstance(value, str):
            raise TypeError(f"{where}: expected a string")
        return value
    return value


def decode(cls: type[T], data: Any) -> T:
    """Build a model instance of ``cls`` from decoded JSON data."""
    if data is None:
        return cls()
    if not isinstance(data, Mapping):
        raise TypeError(f"expected an object for {cls.__name__}, got {type(data).__name__}")
    hints = _hints(cls)
    kwargs = {}
    for f in dataclasses.fields(cls):
        if not f.init:
            continue
        key = _json_name(f)
        if key in data:
            kwargs[f.name] = _decode_value(hints[f.name], data[key], f"{cls.__name__}.{key}")
    return cls(**kwargs)


def encode(obj: Any) -> Any:
    """Turn a model instance into JSON-compatible data."""
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return {_json_name(f): encode(getattr(obj, f.name)) for f in dataclasses.fields(obj)}
    if isinstance(obj, datetime):
        return _format_time(obj)
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, (list, tuple)):
        return [encode(item) for item in obj]
    if isinstance(obj, Mapping):
        return {str(k): encode(v) for k, v in obj.items()}
    return obj


def query_part(field: str, value: str) -> str:
    """Render a quoted ``field:"value"`` search term."""
    escaped = value.replace('"', '\\"')
    return f'{field}:"{escaped}"'


@dataclass
class Area:
    id: str = ""
    name: str = ""
    disambiguation: str = ""


@dataclass
class Tag:
    name: str = ""
    count: int = 0


@dataclass
class LifeSpan:
    begin: str = ""
    end: str = ""
    ended: bool = False


@dataclass
class Artist:
    id: str = ""
    name: str = ""
    disambiguation: str = ""
    area: Area = field(default_factory=Area)
    type: str = ""
    type_id: str = ""
    begin_area: Area = field(default_factory=Area)
    end_area: Area = field(default_factory=Area)
    gender: str = ""
    country: str = ""
    life_span: LifeSpan = field(default_factory=LifeSpan)
    tags: list[Tag] = field(default_factory=list)
    releases: list[Release] = field(default_factory=list)
    release_groups: list[ReleaseGroup] = field(default_factory=list)


@dataclass
class Genre:
    id: str = ""
    name: str = ""
    disambiguation: str = ""
    count: int = 0


@dataclass
class TextRepresentation:
    language: str = ""
    script: str = ""


@dataclass
class ArtistCredit:
    artist: Artist = field(default_factory=Artist)
    join_phrase: str = ""
    name: str = ""


@dataclass
class ReleaseGroup:
    id: str = ""
    title: str = ""
    first_release_date: str = ""
    primary_type: str = ""
    primary_type_id: str = ""
    secondary_types: list[str] = field(default_factory=list)
    disambiguation: str = ""
    score: int = 0
    tags: list[Tag] = field(default_factory=list)
    releases: list[Release] = field(default_factory=list)
    artist_credit: list[ArtistCredit] = field(default_factory=list)
    genres: list[Genre] = field(default_factory=list)

    def __str__(self) -> str:
        artists = "; ".join(credit.name for credit in self.artist_credit)
        return f"[{self.id}] {artists} - {self.title} ({self.first_release_date})"


@dataclass
class Recording:
    id: str = ""
    disambiguation: str = ""
    artist_credit: list[ArtistCredit] = field(default_factory=list)
    length: int = 0
    title: str = ""
    first_release_date: str = ""
    video: bool = False


@dataclass
class Track:
    id: str = ""
    position: int = 0
    length: int = 0
    title: str = ""
    artist_credit: list[ArtistCredit] = field(default_factory=list)
    recording: Recording = field(default_factory=Recording)


@dataclass
class Media:
    format: str = ""
    title: str = ""
    position: int = 0
    disc_count: int = 0
    track_count: int = 0
    track_offset: int = 0
    format_id: str = ""
    pregap: Track = field(default_factory=Track)
    tracks: list[Track] = field(default_factory=list)


@dataclass
class LabelAlias:
    name: str = ""


@dataclass
class RelationDetail:
    id: str = ""
    name: str = ""
    type_id: str = ""
    type: str = _renamed("type_name", default="")
    resource: str = ""
    disambiguation: str = ""


@dataclass
class Relation:
    label: RelationDetail = field(default_factory=RelationDetail)
    series: RelationDetail = field(default_factory=RelationDetail)
    url: RelationDetail = field(default_factory=RelationDetail)
    target_type: str = ""
    type: str = ""
    type_id: str = ""
    direction: str = ""
    target_credit: str = ""
    source_credit: str = ""
    ordering_key: int = 0
    attribute_ids: dict[str, str] = field(default_factory=dict)
    attributes: list[str] = field(default_factory=list)

    def is_parent_label(self) -> bool:
        """Whether this relation points backward to an owning label."""
        return (
            self.label.id != ""
            and self.direction == "backward"
            and self.type in _PARENT_LABEL_RELATION_TYPES
            and self.label.type in _PARENT_LABEL_TYPES
        )


@dataclass
class Label:
    id: str = ""
    name: str = ""
    country: str = ""
    life_span: LifeSpan = field(default_factory=LifeSpan)
    type_id: str = ""
    relations: list[Relation] = field(default_factory=list)
    area: Area = field(default_factory=Area)

    def parent_labels(self) -> list[Relation]:
        """Relations of this label that point to a parent label."""
        return [rel for rel in self.relations if rel.is_parent_label()]


@dataclass
class LabelInfo:
    catalog_number: str = ""
    label: Label = field(default_factory=Label)


@dataclass
class Release:
    id: str = ""
    title: str = ""
    status: str = ""
    disambiguation: str = ""
    text_representation: TextRepresentation = field(default_factory=TextRepresentation)
    date: str = ""
    packaging: str = ""
    packaging_id: str = ""
    barcode: str = ""
    quality: str = ""
    country: str = ""
    track_count: int = 0
    count: int = 0
    score: int = 0
    release_group: ReleaseGroup = field(default_factory=ReleaseGroup)
    artist_credit: list[ArtistCredit] = field(default_factory=list)
    media: list[Media] = field(default_factory=list)
    label_info: list[LabelInfo] = field(default_factory=list)
    relations: list[Relation] = field(default_factory=list)

    def discogs_release_ids(self) -> list[int]:
        """Discogs release ids found among this release's URL relations."""
        ids = []
        for rel in self.relations:
            if rel.target_type == "url" and rel.type == "discogs":
                match = _DISCOGS_ID_RE.search(rel.url.resource)
                if match:
                    ids.append(int(match.group(1)))
        return ids


class ReleaseType(str, Enum):
    ALBUM = "Album"
    SINGLE = "Single"
    EP = "EP"
    BROADCAST = "Broadcast"
    OTHER = "Other"


class SecondaryReleaseType(str, Enum):
    COMPILATION = "Compilation"
    SOUNDTRACK = "Soundtrack"
    SPOKENWORD = "Spokenword"
    INTERVIEW = "Interview"
    AUDIOBOOK = "Audiobook"
    AUDIO_DRAMA = "Audio drama"
    LIVE = "Live"
    REMIX = "Remix"
    DJ_MIX = "DJ-mix"
    MIXTAPE_STREET = "Mixtape/Street"
    DEMO = "Demo"
    FIELD_RECORDING = "Field recording"


@dataclass
class Record(Generic[T]):
    """An entity together with the time it was fetched."""

    date: datetime
    data: T

    def to_dict(self) -> dict[str, Any]:
        return encode(self)

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any], data_type: type[T]) -> Record[T]:
        if not isinstance(payload, Mapping):
            raise TypeError(f"expected an object, got {type(payload).__name__}")
        raw_date = payload.get("date")
        date = _parse_time(raw_date) if raw_date is not None else _ZERO_TIME
        return cls(date=date, data=decode(data_type, payload.get("data")))


@dataclass
class SearchReleaseGroupRequest:
    raw: str = ""
    artist_name: str = ""
    release_name: str = ""
    first_release_date: str = ""
    reid: str = ""
    rgid: str = ""

    def query(self) -> str:
        """The Lucene query string for this search."""
        or_parts = []
        if self.artist_name:
            or_parts.append(query_part("artistname", self.artist_name) + "~")
        if self.release_name:
            or_parts.append(query_part("release", self.release_name) + "~")
        if self.first_release_date:
            or_parts.append(query_part("firstreleasedate", self.first_release_date))
        and_parts = []
        if self.raw:
            and_parts.append(self.raw)
        if or_parts:
            and_parts.append("(" + " OR ".join(or_parts) + ")")
        if self.rgid:
            and_parts.append(query_part("rgid", self.rgid))
        return " AND ".join(and_parts)


@dataclass
class SearchReleaseRequest:
    raw: str = ""
    artist_name: str = ""
    release_name: str = ""
    release_date: str = ""
    format: str = ""
    catalog_number: str = ""
    tracks: int = 0
    reid: str = ""
    rgid: str = ""

    def query(self) -> str:
        """The Lucene query string for this search."""
        or_parts = []
        if self.artist_name:
            or_parts.append(query_part("artistname", self.artist_name) + "~")
        if self.release_name:
            or_parts.append(query_part("release", self.release_name) + "~")
        if self.release_date:
            or_parts.append(query_part("date", self.release_date))
        if self.format:
            or_parts.append(query_part("format", self.format))
        if self.catalog_number:
            or_parts.append(query_part("catno", self.catalog_number))
        if self.tracks > 0:
            or_parts.append(query_part("tracks", str(self.tracks)))
        and_parts = []
        if or_parts:
            and_parts.append("(" + " OR ".join(or_parts) + ")")
        if self.raw:
            and_parts.append(self.raw)
        if self.reid:
            and_parts.append(query_part("reid", self.reid))
        if self.rgid:
            and_parts.append(query_part("rgid", self.rgid))
        return " AND ".join(and_parts)


@dataclass
class SearchReleaseResult:
    created: datetime | None = None
    count: int = 0
    offset: int = 0
    releases: list[Release] = field(default_factory=list)


@dataclass
class SearchReleaseGroupResult:
    created: datetime | None = None
    count: int = 0
    offset: int = 0
    release_groups: list[ReleaseGroup] = field(default_factory=list)


@dataclass
class IDName:
    id: str = ""
    name: str = ""


_MODELS: dict[str, type] = {
    cls.__name__: cls
    for cls in (
        Area,
        Tag,
        LifeSpan,
        Artist,
        Genre,
        TextRepresentation,
        ArtistCredit,
        ReleaseGroup,
        Recording,
        Track,
        Media,
        LabelAlias,
        RelationDetail,
        Relation,
        Label,
        LabelInfo,
        Release,
        SearchReleaseGroupRequest,
        SearchReleaseRequest,
        SearchReleaseResult,
        SearchReleaseGroupResult,
        IDName,
    )
}