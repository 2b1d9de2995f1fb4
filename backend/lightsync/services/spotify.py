"""
Spotify Web API Client
OAuth authorization-code flow, token refresh, and currently-playing lookup.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
from urllib.parse import urlencode

import requests
from loguru import logger

from lightsync.config import config
from lightsync.errors import SpotifyAPIError, SpotifyAuthError
from lightsync.services.session import SyncSession

AUTHORIZE_URL = "https://accounts.spotify.com/authorize"
TOKEN_URL = "https://accounts.spotify.com/api/token"
API_BASE = "https://api.spotify.com"


@dataclass
class NowPlaying:
    """The track Spotify reports as currently playing."""
    track_id: str
    name: str
    artists: List[str] = field(default_factory=list)
    image_url: Optional[str] = None
    is_playing: bool = True

    @property
    def display_name(self) -> str:
        return f"{self.name} - {', '.join(self.artists)}"


def largest_image_url(images: Optional[List[Dict[str, Any]]]) -> Optional[str]:
    """
    Pick the widest album image.

    Args:
        images: Spotify image objects ({"url", "width", "height"})

    Returns:
        URL of the widest image, or None if there are no images
    """
    if not images:
        return None
    ranked = sorted(images, key=lambda img: img.get("width") or 0, reverse=True)
    return ranked[0].get("url")


def parse_now_playing(payload: Optional[Dict[str, Any]]) -> Optional[NowPlaying]:
    """Turn a currently-playing payload into NowPlaying; None when nothing is playing."""
    if not payload or not payload.get("item") or payload.get("is_playing") is False:
        return None

    track = payload["item"]
    album = track.get("album") or {}
    return NowPlaying(
        track_id=track.get("id"),
        name=track.get("name", ""),
        artists=[a.get("name", "") for a in track.get("artists", [])],
        image_url=largest_image_url(album.get("images")),
        is_playing=payload.get("is_playing", True),
    )


class SpotifyClient:
    """Thin wrapper around the Spotify accounts and Web API endpoints."""

    def __init__(self, session: SyncSession,
                 client_id: Optional[str] = None,
                 client_secret: Optional[str] = None,
                 redirect_uri: Optional[str] = None,
                 http: Optional[requests.Session] = None,
                 timeout: Optional[int] = None):
        self.session = session
        self.client_id = client_id or config.SPOTIFY_CLIENT_ID
        self.client_secret = client_secret or config.SPOTIFY_CLIENT_SECRET
        self.redirect_uri = redirect_uri or config.SPOTIFY_REDIRECT_URI
        self.http = http or requests.Session()
        self.timeout = timeout or config.HTTP_TIMEOUT

    def authorize_url(self, state: str) -> str:
        """Build the user-facing authorization URL."""
        params = {
            "response_type": "code",
            "client_id": self.client_id,
            "scope": config.SPOTIFY_SCOPES,
            "redirect_uri": self.redirect_uri,
            "state": state,
        }
        return f"{AUTHORIZE_URL}?{urlencode(params)}"

    def _token_request(self, form: Dict[str, str]) -> Dict[str, Any]:
        form = dict(form, client_id=self.client_id, client_secret=self.client_secret)
        response = self.http.post(
            TOKEN_URL,
            data=form,
            headers={"Content-Type": "application/x-www-form-urlencoded"},
            timeout=self.timeout,
        )
        if not response.ok:
            raise SpotifyAuthError(response.text)
        return response.json()

    def exchange_code(self, code: str) -> Dict[str, Any]:
        """
        Exchange an authorization code for tokens and store them on the session.

        Raises:
            SpotifyAuthError: If Spotify rejects the code
        """
        tokens = self._token_request({
            "grant_type": "authorization_code",
            "code": code,
            "redirect_uri": self.redirect_uri,
        })
        self.session.access_token = tokens["access_token"]
        self.session.refresh_token = tokens.get("refresh_token")
        logger.info("Spotify authorization complete")
        return tokens

    def refresh(self) -> None:
        """Refresh the access token; keeps the old refresh token unless a new one is issued."""
        tokens = self._token_request({
            "grant_type": "refresh_token",
            "refresh_token": self.session.refresh_token,
        })
        self.session.access_token = tokens["access_token"]
        if tokens.get("refresh_token"):
            self.session.refresh_token = tokens["refresh_token"]
        logger.debug("Spotify access token refreshed")

    def _get(self, endpoint: str) -> requests.Response:
        return self.http.get(
            f"{API_BASE}/{endpoint}",
            headers={"Authorization": f"Bearer {self.session.access_token}"},
            timeout=self.timeout,
        )

    def get_json(self, endpoint: str) -> Optional[Dict[str, Any]]:
        """
        GET a Web API endpoint, refreshing once on 401.

        Returns:
            Parsed JSON, or None for 204 No Content

        Raises:
            SpotifyAPIError: For any other non-success status
        """
        response = self._get(endpoint)
        if response.status_code == 401 and self.session.refresh_token:
            self.refresh()
            response = self._get(endpoint)

        if response.status_code == 204:
            return None
        if not response.ok:
            raise SpotifyAPIError(response.status_code, response.text)
        return response.json()

    def currently_playing(self) -> Optional[NowPlaying]:
        """The playing track, or None when idle or paused."""
        return parse_now_playing(self.get_json("v1/me/player/currently-playing"))

    def fetch_image(self, url: str) -> bytes:
        """Download album art bytes."""
        response = self.http.get(url, timeout=self.timeout)
        response.raise_for_status()
        return response.content
