"""Exception hierarchy for the Spotify catalogue client.

Every failure raised by this package derives from ``SpotifyError``. Token
endpoint failures additionally derive from ``AuthenticationError`` so callers
can catch them either by layer or by cause.
"""

from typing import Optional


class SpotifyError(Exception):
    """Base exception for all Spotify client errors."""


class TransportError(SpotifyError):
    """Raised when a request never produced an HTTP response (DNS, connect, timeout)."""


class HTTPStatusError(SpotifyError):
    """Raised when the API answers with a non-200 status."""

    def __init__(self, status_code: int, message: str = ""):
        self.status_code = int(status_code)
        self.message = message
        text = f"Spotify returned HTTP {self.status_code}"
        if message:
            text = f"{text}: {message}"
        super().__init__(text)


class DecodeError(SpotifyError):
    """Raised when a response body is not JSON or does not have the expected shape."""


class AuthenticationError(SpotifyError):
    """Raised when the client-credentials grant fails.

    ``kind`` names the cause: ``"transport"``, ``"http_status"`` or ``"decode"``.
    """

    kind: Optional[str] = None


class TokenTransportError(AuthenticationError, TransportError):
    kind = "transport"


class TokenStatusError(AuthenticationError, HTTPStatusError):
    kind = "http_status"


class TokenDecodeError(AuthenticationError, DecodeError):
    kind = "decode"
