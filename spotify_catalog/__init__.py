"""Typed Spotify Web API catalogue client (OAuth client-credentials).

The client looks up artists, albums, tracks, playlists and users by id and
runs catalogue searches, decoding each response into frozen dataclasses.
"""

from .auth import ClientCredentialsAuth
from .client import SpotifyClient
from .exceptions import (
    AuthenticationError,
    DecodeError,
    HTTPStatusError,
    SpotifyError,
    TokenDecodeError,
    TokenStatusError,
    TokenTransportError,
    TransportError,
)
from .models import (
    Album,
    Artist,
    Copyright,
    ExternalIds,
    Followers,
    Image,
    LinkedFrom,
    Paging,
    Playlist,
    PlaylistItem,
    Restrictions,
    SearchResult,
    SimplifiedAlbum,
    SimplifiedTrack,
    Track,
    User,
)
from .token_manager import TokenInfo, TokenManager

__all__ = [
    "ClientCredentialsAuth",
    "SpotifyClient",
    "TokenInfo",
    "TokenManager",
    "SpotifyError",
    "TransportError",
    "HTTPStatusError",
    "DecodeError",
    "AuthenticationError",
    "TokenTransportError",
    "TokenStatusError",
    "TokenDecodeError",
    "Album",
    "Artist",
    "Copyright",
    "ExternalIds",
    "Followers",
    "Image",
    "LinkedFrom",
    "Paging",
    "Playlist",
    "PlaylistItem",
    "Restrictions",
    "SearchResult",
    "SimplifiedAlbum",
    "SimplifiedTrack",
    "Track",
    "User",
]
