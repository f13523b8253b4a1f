import json
import logging
from typing import Any, Dict

import httpx

from .exceptions import TokenDecodeError, TokenStatusError, TokenTransportError

logger = logging.getLogger(__name__)

SPOTIFY_ACCOUNTS_BASE_URL = "https://accounts.spotify.com"
SPOTIFY_TOKEN_URL = f"{SPOTIFY_ACCOUNTS_BASE_URL}/api/token"


def error_message(resp: httpx.Response) -> str:
    """Best-effort extraction of the error text Spotify puts in failure bodies."""

    try:
        payload = resp.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return resp.text.strip()

    if isinstance(payload, dict):
        # Accounts service: {"error": "invalid_client", "error_description": "..."}
        # Web API: {"error": {"status": 404, "message": "..."}}
        err = payload.get("error")
        if isinstance(err, dict):
            return str(err.get("message") or "")
        desc = payload.get("error_description")
        if desc:
            return f"{err}: {desc}" if err else str(desc)
        if err:
            return str(err)
    return resp.text.strip()


class ClientCredentialsAuth:
    """Spotify OAuth client-credentials grant.

    Holds the application's credentials and exchanges them for an access token.
    It does not store tokens; ``TokenManager`` owns the token slot.
    """

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        *,
        http_client: httpx.Client,
        token_url: str = SPOTIFY_TOKEN_URL,
    ):
        client_id = str(client_id or "").strip()
        client_secret = str(client_secret or "").strip()
        if not client_id or not client_secret:
            raise ValueError("Spotify client credentials require client_id and client_secret")

        self._client_id = client_id
        self._client_secret = client_secret
        self.http_client = http_client
        self.token_url = token_url

    @property
    def client_id(self) -> str:
        return self._client_id

    def request_token(self) -> Dict[str, Any]:
        """POST the grant and return the decoded token payload.

        Raises TokenTransportError, TokenStatusError or TokenDecodeError.
        """

        form = {
            "grant_type": "client_credentials",
            "client_id": self._client_id,
            "client_secret": self._client_secret,
        }

        logger.debug("Requesting Spotify access token from %s", self.token_url)
        try:
            resp = self.http_client.post(
                self.token_url,
                data=form,
                headers={"Content-Type": "application/x-www-form-urlencoded"},
            )
        except httpx.HTTPError as e:
            raise TokenTransportError(f"Spotify token request failed: {e}") from e

        if resp.status_code != 200:
            raise TokenStatusError(resp.status_code, error_message(resp))

        try:
            payload = resp.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise TokenDecodeError(f"Spotify token response was not JSON: {resp.text}") from e

        if not isinstance(payload, dict):
            raise TokenDecodeError(f"Spotify token response was not an object: {payload}")

        return payload

    def __repr__(self) -> str:
        return f"ClientCredentialsAuth(client_id={self._client_id!r}, token_url={self.token_url!r})"
