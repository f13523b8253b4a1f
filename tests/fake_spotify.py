"""In-process fakes for the Spotify accounts service and Web API.

``FakeSpotify`` answers requests through ``httpx.MockTransport`` so the real
client code runs end to end without touching the network.
"""

import json
import os
import threading
import urllib.parse
from typing import Any, Dict, List, Optional, Tuple

import httpx

FIXTURES_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "fixtures")

TOKEN_URL = "https://accounts.spotify.com/api/token"
API_BASE_URL = "https://api.spotify.com/v1"


def load_fixture(name: str) -> Dict[str, Any]:
    with open(os.path.join(FIXTURES_DIR, name), "r", encoding="utf-8") as f:
        return json.load(f)


def _response(status: int, body: Any) -> httpx.Response:
    if isinstance(body, (bytes, str)):
        return httpx.Response(status, content=body)
    return httpx.Response(status, json=body)


class FakeClock:
    """Injectable wall clock for deterministic expiry tests."""

    def __init__(self, now: float = 1_700_000_000.0):
        self.now = float(now)

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += float(seconds)


class FakeSpotify:
    """Fake token endpoint plus a path-routed fake Web API.

    Token responses are served from ``token_responses`` while it is non-empty,
    then fall back to a fresh ``{"access_token": "token-N", ...}`` payload.
    """

    def __init__(self, *, expires_in: int = 3600, token_delay: float = 0.0):
        self.expires_in = expires_in
        self.token_delay = token_delay
        self.token_requests: List[httpx.Request] = []
        self.api_requests: List[httpx.Request] = []
        self.token_responses: List[Tuple[int, Any]] = []
        self.routes: Dict[str, Tuple[int, Any]] = {}
        self.fail_api_with: Optional[Exception] = None
        self.fail_token_with: Optional[Exception] = None
        self._lock = threading.Lock()

    # -----------------
    # Setup
    # -----------------

    def add_route(self, path: str, body: Any, *, status: int = 200) -> None:
        self.routes[path] = (status, body)

    def queue_token_response(self, status: int, body: Any) -> None:
        self.token_responses.append((status, body))

    def http_client(self) -> httpx.Client:
        return httpx.Client(transport=httpx.MockTransport(self.handler))

    # -----------------
    # Inspection
    # -----------------

    @property
    def token_calls(self) -> int:
        return len(self.token_requests)

    def token_form(self, index: int = -1) -> Dict[str, str]:
        raw = self.token_requests[index].content.decode("utf-8")
        return {k: v[0] for k, v in urllib.parse.parse_qs(raw).items()}

    # -----------------
    # Transport
    # -----------------

    def handler(self, request: httpx.Request) -> httpx.Response:
        if str(request.url) == TOKEN_URL:
            return self._handle_token(request)
        return self._handle_api(request)

    def _handle_token(self, request: httpx.Request) -> httpx.Response:
        if self.token_delay:
            threading.Event().wait(self.token_delay)

        with self._lock:
            self.token_requests.append(request)
            n = len(self.token_requests)
            if self.fail_token_with is not None:
                raise self.fail_token_with
            if self.token_responses:
                status, body = self.token_responses.pop(0)
                return _response(status, body)

        return _response(
            200,
            {"access_token": f"token-{n}", "token_type": "Bearer", "expires_in": self.expires_in},
        )

    def _handle_api(self, request: httpx.Request) -> httpx.Response:
        with self._lock:
            self.api_requests.append(request)

        if self.fail_api_with is not None:
            raise self.fail_api_with

        route = self.routes.get(request.url.path)
        if route is None:
            return _response(404, {"error": {"status": 404, "message": "Resource not found"}})
        status, body = route
        return _response(status, body)
