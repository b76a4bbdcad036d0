"""Thin Strava HTTP client.

Only two calls are needed: exchanging an OAuth code for a token and
fetching an activity's heart rate and time streams. No retries.
"""
import logging
from dataclasses import dataclass, field
from typing import Optional
from urllib.parse import urlencode

import httpx

from hrdrift.core.config import Settings, settings as default_settings
from hrdrift.core.constants import (
    STRAVA_AUTHORIZE_PATH,
    STRAVA_SCOPE,
    STRAVA_STREAM_KEYS,
    STRAVA_STREAMS_PATH,
    STRAVA_TOKEN_PATH,
)
from hrdrift.errors import StravaError, StravaNotLinked

logger = logging.getLogger(__name__)


@dataclass
class StravaSession:
    """Authentication state for one linked athlete.

    Created once per app and handed to whatever needs an authenticated call.
    """

    tokens: dict = field(default_factory=dict)

    def is_authenticated(self) -> bool:
        return bool(self.tokens.get("access_token"))

    def get_token(self) -> str:
        if not self.is_authenticated():
            raise StravaNotLinked()
        return self.tokens["access_token"]

    def store(self, tok: dict):
        self.tokens = dict(tok)

    def clear(self):
        self.tokens = {}


class StravaClient:
    def __init__(
        self,
        cfg: Settings = default_settings,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.cfg = cfg
        self.base_url = cfg.strava_base_url.rstrip("/")
        self._transport = transport

    def _client(self, **kwargs) -> httpx.Client:
        return httpx.Client(
            base_url=self.base_url,
            timeout=self.cfg.strava_timeout,
            transport=self._transport,
            **kwargs,
        )

    def auth_url(self) -> str:
        params = {
            "client_id": self.cfg.strava_client_id,
            "redirect_uri": self.cfg.strava_redirect_uri,
            "response_type": "code",
            "approval_prompt": "auto",
            "scope": STRAVA_SCOPE,
        }
        return f"{self.base_url}{STRAVA_AUTHORIZE_PATH}?{urlencode(params)}"

    def exchange_code(self, code: str) -> dict:
        data = {
            "code": code,
            "client_id": self.cfg.strava_client_id,
            "client_secret": self.cfg.strava_client_secret,
            "grant_type": "authorization_code",
        }
        try:
            with self._client() as client:
                r = client.post(STRAVA_TOKEN_PATH, data=data)
        except httpx.HTTPError as e:
            raise StravaError(f"Strava token exchange failed: {e}") from e
        if r.status_code != 200:
            raise StravaError(f"Strava auth failed: {r.text}")
        try:
            return r.json()
        except ValueError as e:
            raise StravaError("Strava token response is not JSON") from e

    def get_activity_streams(self, session: StravaSession, activity_id: int) -> str:
        """Return the raw streams body for an activity, keyed by type."""
        hdrs = {"Authorization": f"Bearer {session.get_token()}"}
        params = {"keys": ",".join(STRAVA_STREAM_KEYS), "key_by_type": "true"}
        path = STRAVA_STREAMS_PATH.format(activity_id=activity_id)
        try:
            with self._client(headers=hdrs) as client:
                r = client.get(path, params=params)
        except httpx.HTTPError as e:
            raise StravaError(f"Strava streams request failed: {e}") from e
        if r.status_code == 401:
            session.clear()
            raise StravaNotLinked()
        if r.status_code != 200:
            raise StravaError(f"Strava streams failed ({r.status_code}): {r.text}")
        logger.debug("Fetched %d bytes of streams for activity %s", len(r.content), activity_id)
        return r.text
