import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from .auth import ClientCredentialsAuth
from .exceptions import TokenDecodeError

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


@dataclass(frozen=True)
class TokenInfo:
    """Access token issued by the client-credentials grant."""

    access_token: str
    token_type: str
    expires_in: int
    issued_at: float

    @staticmethod
    def from_spotify_token_response(payload: Dict[str, Any], *, now: Optional[float] = None) -> "TokenInfo":
        """Convert Spotify token response JSON into TokenInfo.

        Spotify returns:
        - access_token
        - token_type
        - expires_in (seconds)

        Raises TokenDecodeError when the payload does not carry a usable token.
        """

        access_token = payload.get("access_token")
        if not isinstance(access_token, str) or not access_token:
            raise TokenDecodeError(f"Spotify token response has no access_token: {payload}")

        token_type = payload.get("token_type", "Bearer")
        if not isinstance(token_type, str):
            raise TokenDecodeError(f"Spotify token response has a non-string token_type: {token_type!r}")

        expires_in = payload.get("expires_in")
        # bool is an int subclass; reject it explicitly.
        if isinstance(expires_in, bool) or not isinstance(expires_in, int):
            raise TokenDecodeError(f"Spotify token response has an invalid expires_in: {expires_in!r}")

        return TokenInfo(
            access_token=access_token,
            token_type=token_type or "Bearer",
            expires_in=expires_in,
            issued_at=float(time.time() if now is None else now),
        )

    @property
    def expires_at(self) -> float:
        return self.issued_at + self.expires_in

    def is_valid(self, now: float, *, margin: float = 0.0) -> bool:
        return bool(self.access_token) and (now - self.issued_at) < (self.expires_in - margin)

    def authorization_header(self) -> str:
        return f"{self.token_type} {self.access_token}"


class TokenManager:
    """Owns the client's single token slot and keeps it fresh.

    ``ensure_valid`` is the only path callers need: it acquires a token when
    none is held or the held one has expired. The check and the refresh run
    under one lock, so concurrent callers wait on a single in-flight refresh
    instead of starting their own.
    """

    def __init__(
        self,
        auth: ClientCredentialsAuth,
        *,
        clock: Optional[Clock] = None,
        expiry_margin: float = 0.0,
    ):
        if expiry_margin < 0:
            raise ValueError("expiry_margin must be >= 0")

        self.auth = auth
        self.clock: Clock = clock or time.time
        self.expiry_margin = float(expiry_margin)
        self._token: Optional[TokenInfo] = None
        self._lock = threading.RLock()

    @property
    def token(self) -> Optional[TokenInfo]:
        return self._token

    def is_valid(self) -> bool:
        token = self._token
        return token is not None and token.is_valid(self.clock(), margin=self.expiry_margin)

    def ensure_valid(self) -> TokenInfo:
        """Return a non-expired token, acquiring a new one if needed."""

        with self._lock:
            token = self._token
            if token is not None and token.is_valid(self.clock(), margin=self.expiry_margin):
                return token

            if token is None:
                logger.debug("No Spotify token held; acquiring one")
            else:
                logger.debug("Spotify token expired; refreshing")
            return self.acquire_token()

    def acquire_token(self) -> TokenInfo:
        """Run the client-credentials grant and replace the stored token.

        On failure the previously stored token (if any) is left untouched.
        """

        with self._lock:
            payload = self.auth.request_token()
            token = TokenInfo.from_spotify_token_response(payload, now=self.clock())
            self._token = token
            logger.debug("Acquired Spotify %s token valid for %ss", token.token_type, token.expires_in)
            return token

    def invalidate(self) -> None:
        """Drop the stored token; the next request acquires a fresh one."""

        with self._lock:
            self._token = None
