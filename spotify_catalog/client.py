import json
import logging
import urllib.parse
from typing import Any, Callable, Dict, Optional, TypeVar

import httpx

from .auth import SPOTIFY_TOKEN_URL, ClientCredentialsAuth, error_message
from .exceptions import DecodeError, HTTPStatusError, TransportError
from .models import Album, Artist, Paging, Playlist, SearchResult, SimplifiedAlbum, Track, User
from .token_manager import Clock, TokenInfo, TokenManager

logger = logging.getLogger(__name__)

SPOTIFY_API_BASE_URL = "https://api.spotify.com/v1"
DEFAULT_TIMEOUT = 30.0

SEARCH_TYPES = ("track", "artist", "album", "playlist")
SEARCH_LIMIT_MIN = 1
SEARCH_LIMIT_MAX = 50

R = TypeVar("R")


class SpotifyClient:
    """Typed Spotify Web API catalogue client (client-credentials grant).

    Every accessor goes through ``authenticated_get``, which makes sure a
    valid token is held before sending the request. The client starts with no
    token; the first call acquires one and later calls reuse it until it
    expires.

    ``timeout`` only configures the ``httpx.Client`` built here. An injected
    ``http_client`` is used as-is, with its own timeout, and is left open by
    ``close()``.

    Usage::

        with SpotifyClient(client_id, client_secret) as sp:
            artist = sp.get_artist("0OdUWJ0sBjDrqHygGUXeCF")
            hits = sp.search_tracks("daft punk", 5)
    """

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        token_url: str = SPOTIFY_TOKEN_URL,
        api_base_url: str = SPOTIFY_API_BASE_URL,
        expiry_margin: float = 0.0,
        http_client: Optional[httpx.Client] = None,
        clock: Optional[Clock] = None,
    ):
        self._owns_http_client = http_client is None
        self.http_client = http_client or httpx.Client(timeout=timeout, follow_redirects=False)
        self.api_base_url = api_base_url.rstrip("/")

        try:
            auth = ClientCredentialsAuth(
                client_id,
                client_secret,
                http_client=self.http_client,
                token_url=token_url,
            )
            self.token_manager = TokenManager(auth, clock=clock, expiry_margin=expiry_margin)
        except ValueError:
            # No instance is returned, so nothing else can close it.
            self.close()
            raise

    @classmethod
    def from_config(cls, config: Dict[str, Any], **kwargs: Any) -> "SpotifyClient":
        """Build a client from the settings dict produced by ``config.load_config``."""

        config = config or {}
        return cls(
            str(config.get("spotify_client_id", "")),
            str(config.get("spotify_client_secret", "")),
            timeout=float(config.get("request_timeout", DEFAULT_TIMEOUT)),
            token_url=str(config.get("spotify_token_url") or SPOTIFY_TOKEN_URL),
            api_base_url=str(config.get("spotify_api_base_url") or SPOTIFY_API_BASE_URL),
            expiry_margin=float(config.get("token_expiry_margin", 0.0)),
            **kwargs,
        )

    # -----------------
    # Lifecycle
    # -----------------

    def close(self) -> None:
        if self._owns_http_client:
            self.http_client.close()

    def __enter__(self) -> "SpotifyClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # -----------------
    # Token management
    # -----------------

    @property
    def token(self) -> Optional[TokenInfo]:
        return self.token_manager.token

    def ensure_valid(self) -> TokenInfo:
        return self.token_manager.ensure_valid()

    # -----------------
    # HTTP helpers
    # -----------------

    def authenticated_get(self, url: str) -> bytes:
        """GET ``url`` with the current bearer token and return the raw body.

        Raises the token manager's AuthenticationError unchanged, TransportError
        when no response arrives, and HTTPStatusError on any non-200 status.
        """

        token = self.ensure_valid()

        logger.debug("GET %s", url)
        try:
            resp = self.http_client.get(
                url,
                headers={
                    "Authorization": token.authorization_header(),
                    "Accept": "application/json",
                },
            )
        except httpx.HTTPError as e:
            raise TransportError(f"Spotify API request failed: {e}") from e

        if resp.status_code != 200:
            raise HTTPStatusError(resp.status_code, error_message(resp))

        return resp.content

    def request_json(self, url: str) -> Dict[str, Any]:
        body = self.authenticated_get(url)
        try:
            payload = json.loads(body)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise DecodeError(f"Spotify API response was not JSON: {e}") from e

        if not isinstance(payload, dict):
            raise DecodeError(f"Spotify API response was not an object: {payload!r}")
        return payload

    def _get_resource(self, kind: str, resource_id: str, parser: Callable[[Any], R]) -> R:
        resource_id = str(resource_id or "").strip()
        if not resource_id:
            raise ValueError(f"A Spotify {kind[:-1]} id is required")

        url = f"{self.api_base_url}/{kind}/{urllib.parse.quote(resource_id, safe='')}"
        return parser(self.request_json(url))

    # -----------------
    # Resource accessors
    # -----------------

    def get_artist(self, artist_id: str) -> Artist:
        return self._get_resource("artists", artist_id, Artist.from_dict)

    def get_user(self, user_id: str) -> User:
        return self._get_resource("users", user_id, User.from_dict)

    def get_album(self, album_id: str) -> Album:
        return self._get_resource("albums", album_id, Album.from_dict)

    def get_track(self, track_id: str) -> Track:
        return self._get_resource("tracks", track_id, Track.from_dict)

    def get_playlist(self, playlist_id: str) -> Playlist:
        return self._get_resource("playlists", playlist_id, Playlist.from_dict)

    # -----------------
    # Search
    # -----------------

    def search_url(self, query: str, kind: str, limit: int) -> str:
        """Build the ``/search`` URL; the query is percent-encoded, not stripped."""

        query = str(query or "").strip()
        if not query:
            raise ValueError("Search query must not be empty")
        if kind not in SEARCH_TYPES:
            raise ValueError(f"Unknown search type {kind!r}; expected one of {', '.join(SEARCH_TYPES)}")
        if isinstance(limit, bool) or not isinstance(limit, int):
            raise ValueError(f"Search limit must be an integer, got {limit!r}")
        if not SEARCH_LIMIT_MIN <= limit <= SEARCH_LIMIT_MAX:
            raise ValueError(f"Search limit must be between {SEARCH_LIMIT_MIN} and {SEARCH_LIMIT_MAX}, got {limit}")

        params = urllib.parse.urlencode({"q": query, "type": kind, "limit": limit}, quote_via=urllib.parse.quote)
        return f"{self.api_base_url}/search?{params}"

    def search(self, query: str, kind: str, limit: int) -> SearchResult:
        return SearchResult.from_dict(self.request_json(self.search_url(query, kind, limit)))

    def search_tracks(self, query: str, limit: int) -> Paging[Track]:
        return self.search(query, "track", limit).tracks

    def search_artists(self, query: str, limit: int) -> Paging[Artist]:
        return self.search(query, "artist", limit).artists

    def search_albums(self, query: str, limit: int) -> Paging[SimplifiedAlbum]:
        return self.search(query, "album", limit).albums

    def search_playlists(self, query: str, limit: int) -> Paging[Playlist]:
        return self.search(query, "playlist", limit).playlists

    def __repr__(self) -> str:
        return f"SpotifyClient(api_base_url={self.api_base_url!r}, auth={self.token_manager.auth!r})"
