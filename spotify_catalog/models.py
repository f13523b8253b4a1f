"""Typed records for Spotify Web API catalogue objects.

Every record is a frozen dataclass built with ``from_dict``. Decoding is
lenient about absence and strict about shape: a missing key or a JSON
``null`` yields the field default, while a value of the wrong JSON type
raises ``DecodeError`` naming the offending field.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Generic, List, Optional, TypeVar

from .exceptions import DecodeError

T = TypeVar("T")
R = TypeVar("R")

_JSON_TYPE_NAMES = {
    dict: "object",
    list: "array",
    str: "string",
    bool: "boolean",
    int: "number",
    float: "number",
    type(None): "null",
}


def _json_type(value: Any) -> str:
    return _JSON_TYPE_NAMES.get(type(value), type(value).__name__)


class _Reader:
    """Typed accessors over one JSON object, reporting errors with a field path."""

    def __init__(self, payload: Any, path: str):
        if not isinstance(payload, dict):
            raise DecodeError(f"{path}: expected object, got {_json_type(payload)}")
        self.payload = payload
        self.path = path

    def _get(self, key: str, expected: type, label: str) -> Any:
        value = self.payload.get(key)
        if value is None:
            return None
        # bool is a subclass of int; never accept it as a number.
        if isinstance(value, bool) and expected is not bool:
            raise DecodeError(f"{self.path}.{key}: expected {label}, got boolean")
        if not isinstance(value, expected):
            raise DecodeError(f"{self.path}.{key}: expected {label}, got {_json_type(value)}")
        return value

    def string(self, key: str) -> str:
        value = self._get(key, str, "string")
        return "" if value is None else value

    def opt_string(self, key: str) -> Optional[str]:
        return self._get(key, str, "string")

    def integer(self, key: str) -> int:
        value = self._get(key, int, "integer")
        return 0 if value is None else value

    def opt_integer(self, key: str) -> Optional[int]:
        return self._get(key, int, "integer")

    def boolean(self, key: str) -> bool:
        value = self._get(key, bool, "boolean")
        return False if value is None else value

    def opt_boolean(self, key: str) -> Optional[bool]:
        return self._get(key, bool, "boolean")

    def string_list(self, key: str) -> List[str]:
        values = self._get(key, list, "array") or []
        for i, v in enumerate(values):
            if not isinstance(v, str):
                raise DecodeError(f"{self.path}.{key}[{i}]: expected string, got {_json_type(v)}")
        return list(values)

    def string_map(self, key: str) -> Dict[str, str]:
        values = self._get(key, dict, "object") or {}
        for k, v in values.items():
            if not isinstance(v, str):
                raise DecodeError(f"{self.path}.{key}.{k}: expected string, got {_json_type(v)}")
        return dict(values)

    def record(self, key: str, parser: Callable[..., R]) -> Optional[R]:
        value = self.payload.get(key)
        if value is None:
            return None
        return parser(value, path=f"{self.path}.{key}")

    def records(self, key: str, parser: Callable[..., R]) -> List[R]:
        values = self._get(key, list, "array") or []
        return [parser(v, path=f"{self.path}.{key}[{i}]") for i, v in enumerate(values)]

    def paging(self, key: str, parser: Callable[..., R], *, skip_null_items: bool = False) -> "Paging[R]":
        value = self.payload.get(key)
        if value is None:
            return Paging()
        return Paging.from_dict(value, parser, path=f"{self.path}.{key}", skip_null_items=skip_null_items)


# -----------------
# Shared value types
# -----------------


@dataclass(frozen=True)
class Image:
    url: str = ""
    height: Optional[int] = None
    width: Optional[int] = None

    @classmethod
    def from_dict(cls, payload: Any, *, path: str = "Image") -> "Image":
        r = _Reader(payload, path)
        return cls(url=r.string("url"), height=r.opt_integer("height"), width=r.opt_integer("width"))


@dataclass(frozen=True)
class Followers:
    href: Optional[str] = None
    total: int = 0

    @classmethod
    def from_dict(cls, payload: Any, *, path: str = "Followers") -> "Followers":
        r = _Reader(payload, path)
        return cls(href=r.opt_string("href"), total=r.integer("total"))


@dataclass(frozen=True)
class Restrictions:
    reason: str = ""

    @classmethod
    def from_dict(cls, payload: Any, *, path: str = "Restrictions") -> "Restrictions":
        return cls(reason=_Reader(payload, path).string("reason"))


@dataclass(frozen=True)
class Copyright:
    text: str = ""
    type: str = ""

    @classmethod
    def from_dict(cls, payload: Any, *, path: str = "Copyright") -> "Copyright":
        r = _Reader(payload, path)
        return cls(text=r.string("text"), type=r.string("type"))


@dataclass(frozen=True)
class ExternalIds:
    isrc: str = ""
    ean: str = ""
    upc: str = ""

    @classmethod
    def from_dict(cls, payload: Any, *, path: str = "ExternalIds") -> "ExternalIds":
        r = _Reader(payload, path)
        return cls(isrc=r.string("isrc"), ean=r.string("ean"), upc=r.string("upc"))


@dataclass(frozen=True)
class LinkedFrom:
    """The originally requested track when track relinking substituted another."""

    external_urls: Dict[str, str] = field(default_factory=dict)
    href: str = ""
    id: str = ""
    type: str = ""
    uri: str = ""

    @classmethod
    def from_dict(cls, payload: Any, *, path: str = "LinkedFrom") -> "LinkedFrom":
        r = _Reader(payload, path)
        return cls(
            external_urls=r.string_map("external_urls"),
            href=r.string("href"),
            id=r.string("id"),
            type=r.string("type"),
            uri=r.string("uri"),
        )


@dataclass(frozen=True)
class Paging(Generic[T]):
    """One page of a paged collection (``tracks`` on albums/playlists, search slices)."""

    href: str = ""
    limit: int = 0
    next: Optional[str] = None
    offset: int = 0
    previous: Optional[str] = None
    total: int = 0
    items: List[T] = field(default_factory=list)

    @classmethod
    def from_dict(
        cls,
        payload: Any,
        item_parser: Callable[..., T],
        *,
        path: str = "Paging",
        skip_null_items: bool = False,
    ) -> "Paging[T]":
        r = _Reader(payload, path)
        raw_items = r._get("items", list, "array") or []
        items: List[T] = []
        for i, raw in enumerate(raw_items):
            if raw is None and skip_null_items:
                continue
            items.append(item_parser(raw, path=f"{path}.items[{i}]"))

        return cls(
            href=r.string("href"),
            limit=r.integer("limit"),
            next=r.opt_string("next"),
            offset=r.integer("offset"),
            previous=r.opt_string("previous"),
            total=r.integer("total"),
            items=items,
        )

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self):
        return iter(self.items)


# -----------------
# Catalogue records
# -----------------


@dataclass(frozen=True)
class Artist:
    external_urls: Dict[str, str] = field(default_factory=dict)
    followers: Optional[Followers] = None
    genres: List[str] = field(default_factory=list)
    href: str = ""
    id: str = ""
    images: List[Image] = field(default_factory=list)
    name: str = ""
    popularity: int = 0
    type: str = ""
    uri: str = ""

    @classmethod
    def from_dict(cls, payload: Any, *, path: str = "Artist") -> "Artist":
        r = _Reader(payload, path)
        return cls(
            external_urls=r.string_map("external_urls"),
            followers=r.record("followers", Followers.from_dict),
            genres=r.string_list("genres"),
            href=r.string("href"),
            id=r.string("id"),
            images=r.records("images", Image.from_dict),
            name=r.string("name"),
            popularity=r.integer("popularity"),
            type=r.string("type"),
            uri=r.string("uri"),
        )


@dataclass(frozen=True)
class User:
    display_name: Optional[str] = None
    external_urls: Dict[str, str] = field(default_factory=dict)
    followers: Optional[Followers] = None
    href: str = ""
    id: str = ""
    images: List[Image] = field(default_factory=list)
    type: str = ""
    uri: str = ""

    @classmethod
    def from_dict(cls, payload: Any, *, path: str = "User") -> "User":
        r = _Reader(payload, path)
        return cls(
            display_name=r.opt_string("display_name"),
            external_urls=r.string_map("external_urls"),
            followers=r.record("followers", Followers.from_dict),
            href=r.string("href"),
            id=r.string("id"),
            images=r.records("images", Image.from_dict),
            type=r.string("type"),
            uri=r.string("uri"),
        )


@dataclass(frozen=True)
class SimplifiedTrack:
    """Track as listed inside an album's ``tracks`` page."""

    artists: List[Artist] = field(default_factory=list)
    available_markets: List[str] = field(default_factory=list)
    disc_number: int = 0
    duration_ms: int = 0
    explicit: bool = False
    external_urls: Dict[str, str] = field(default_factory=dict)
    href: str = ""
    id: str = ""
    is_playable: bool = False
    linked_from: Optional[LinkedFrom] = None
    restrictions: Optional[Restrictions] = None
    name: str = ""
    preview_url: Optional[str] = None
    track_number: int = 0
    type: str = ""
    uri: str = ""
    is_local: bool = False

    @staticmethod
    def _fields(r: _Reader) -> Dict[str, Any]:
        return {
            "artists": r.records("artists", Artist.from_dict),
            "available_markets": r.string_list("available_markets"),
            "disc_number": r.integer("disc_number"),
            "duration_ms": r.integer("duration_ms"),
            "explicit": r.boolean("explicit"),
            "external_urls": r.string_map("external_urls"),
            "href": r.string("href"),
            "id": r.string("id"),
            "is_playable": r.boolean("is_playable"),
            "linked_from": r.record("linked_from", LinkedFrom.from_dict),
            "restrictions": r.record("restrictions", Restrictions.from_dict),
            "name": r.string("name"),
            "preview_url": r.opt_string("preview_url"),
            "track_number": r.integer("track_number"),
            "type": r.string("type"),
            "uri": r.string("uri"),
            "is_local": r.boolean("is_local"),
        }

    @classmethod
    def from_dict(cls, payload: Any, *, path: str = "SimplifiedTrack") -> "SimplifiedTrack":
        return cls(**SimplifiedTrack._fields(_Reader(payload, path)))


@dataclass(frozen=True)
class SimplifiedAlbum:
    """Album as nested in a track or returned by album search."""

    album_type: str = ""
    total_tracks: int = 0
    available_markets: List[str] = field(default_factory=list)
    external_urls: Dict[str, str] = field(default_factory=dict)
    href: str = ""
    id: str = ""
    images: List[Image] = field(default_factory=list)
    name: str = ""
    release_date: str = ""
    release_date_precision: str = ""
    restrictions: Optional[Restrictions] = None
    type: str = ""
    uri: str = ""
    artists: List[Artist] = field(default_factory=list)

    @staticmethod
    def _fields(r: _Reader) -> Dict[str, Any]:
        return {
            "album_type": r.string("album_type"),
            "total_tracks": r.integer("total_tracks"),
            "available_markets": r.string_list("available_markets"),
            "external_urls": r.string_map("external_urls"),
            "href": r.string("href"),
            "id": r.string("id"),
            "images": r.records("images", Image.from_dict),
            "name": r.string("name"),
            "release_date": r.string("release_date"),
            "release_date_precision": r.string("release_date_precision"),
            "restrictions": r.record("restrictions", Restrictions.from_dict),
            "type": r.string("type"),
            "uri": r.string("uri"),
            "artists": r.records("artists", Artist.from_dict),
        }

    @classmethod
    def from_dict(cls, payload: Any, *, path: str = "SimplifiedAlbum") -> "SimplifiedAlbum":
        return cls(**SimplifiedAlbum._fields(_Reader(payload, path)))


@dataclass(frozen=True)
class Album(SimplifiedAlbum):
    tracks: Paging[SimplifiedTrack] = field(default_factory=Paging)
    copyrights: List[Copyright] = field(default_factory=list)
    external_ids: Optional[ExternalIds] = None
    genres: List[str] = field(default_factory=list)
    label: str = ""
    popularity: int = 0

    @classmethod
    def from_dict(cls, payload: Any, *, path: str = "Album") -> "Album":
        r = _Reader(payload, path)
        return cls(
            **SimplifiedAlbum._fields(r),
            tracks=r.paging("tracks", SimplifiedTrack.from_dict),
            copyrights=r.records("copyrights", Copyright.from_dict),
            external_ids=r.record("external_ids", ExternalIds.from_dict),
            genres=r.string_list("genres"),
            label=r.string("label"),
            popularity=r.integer("popularity"),
        )

    def get_items(self) -> List[SimplifiedTrack]:
        return self.tracks.items


@dataclass(frozen=True)
class Track(SimplifiedTrack):
    album: Optional[SimplifiedAlbum] = None
    external_ids: Optional[ExternalIds] = None
    popularity: int = 0

    @classmethod
    def from_dict(cls, payload: Any, *, path: str = "Track") -> "Track":
        r = _Reader(payload, path)
        return cls(
            **SimplifiedTrack._fields(r),
            album=r.record("album", SimplifiedAlbum.from_dict),
            external_ids=r.record("external_ids", ExternalIds.from_dict),
            popularity=r.integer("popularity"),
        )


@dataclass(frozen=True)
class PlaylistItem:
    added_at: Optional[str] = None
    added_by: Optional[User] = None
    is_local: bool = False
    track: Optional[Track] = None

    @classmethod
    def from_dict(cls, payload: Any, *, path: str = "PlaylistItem") -> "PlaylistItem":
        r = _Reader(payload, path)
        return cls(
            added_at=r.opt_string("added_at"),
            added_by=r.record("added_by", User.from_dict),
            is_local=r.boolean("is_local"),
            track=r.record("track", Track.from_dict),
        )


@dataclass(frozen=True)
class Playlist:
    collaborative: bool = False
    description: Optional[str] = None
    external_urls: Dict[str, str] = field(default_factory=dict)
    followers: Optional[Followers] = None
    href: str = ""
    id: str = ""
    images: List[Image] = field(default_factory=list)
    name: str = ""
    owner: Optional[User] = None
    public: Optional[bool] = None
    snapshot_id: str = ""
    tracks: Paging[PlaylistItem] = field(default_factory=Paging)
    type: str = ""
    uri: str = ""

    @classmethod
    def from_dict(cls, payload: Any, *, path: str = "Playlist") -> "Playlist":
        r = _Reader(payload, path)
        return cls(
            collaborative=r.boolean("collaborative"),
            description=r.opt_string("description"),
            external_urls=r.string_map("external_urls"),
            followers=r.record("followers", Followers.from_dict),
            href=r.string("href"),
            id=r.string("id"),
            images=r.records("images", Image.from_dict),
            name=r.string("name"),
            owner=r.record("owner", User.from_dict),
            public=r.opt_boolean("public"),
            snapshot_id=r.string("snapshot_id"),
            tracks=r.paging("tracks", PlaylistItem.from_dict),
            type=r.string("type"),
            uri=r.string("uri"),
        )

    def get_items(self) -> List[PlaylistItem]:
        return self.tracks.items


@dataclass(frozen=True)
class SearchResult:
    """Envelope returned by ``/search``; only the requested slices are populated."""

    tracks: Paging[Track] = field(default_factory=Paging)
    artists: Paging[Artist] = field(default_factory=Paging)
    albums: Paging[SimplifiedAlbum] = field(default_factory=Paging)
    playlists: Paging[Playlist] = field(default_factory=Paging)

    @classmethod
    def from_dict(cls, payload: Any, *, path: str = "SearchResult") -> "SearchResult":
        r = _Reader(payload, path)
        # The API returns null entries for playlists it can no longer serve.
        return cls(
            tracks=r.paging("tracks", Track.from_dict, skip_null_items=True),
            artists=r.paging("artists", Artist.from_dict, skip_null_items=True),
            albums=r.paging("albums", SimplifiedAlbum.from_dict, skip_null_items=True),
            playlists=r.paging("playlists", Playlist.from_dict, skip_null_items=True),
        )
