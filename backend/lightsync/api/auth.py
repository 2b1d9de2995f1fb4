"""
LightSync Spotify Authorization Routes
/login redirects to Spotify; /callback stores tokens and starts polling.
"""
import asyncio
from typing import Optional

import requests
from fastapi import APIRouter, Query, Request
from fastapi.responses import PlainTextResponse, RedirectResponse
from loguru import logger

from lightsync.errors import LightSyncError
from lightsync.utils.ids import generate_oauth_state

router = APIRouter(tags=["Spotify Authorization"])


@router.get("/login")
def login(request: Request):
    """Redirect the browser to the Spotify consent page."""
    spotify = request.app.state.spotify
    url = spotify.authorize_url(generate_oauth_state())
    logger.info("Redirecting to Spotify login")
    return RedirectResponse(url)


@router.get("/callback", response_class=PlainTextResponse)
async def callback(
    request: Request,
    code: Optional[str] = Query(None),
    error: Optional[str] = Query(None),
):
    """Finish the OAuth flow and begin watching playback."""
    spotify = request.app.state.spotify
    watcher = request.app.state.watcher
    try:
        if error:
            raise LightSyncError(str(error))
        if not code:
            raise LightSyncError("Missing authorization code")
        await asyncio.to_thread(spotify.exchange_code, code)
    except (LightSyncError, requests.RequestException) as e:
        logger.error(f"Callback error: {e}")
        return PlainTextResponse("Error during callback. Check terminal.", status_code=500)

    if not watcher.start():
        logger.info("Polling already running")

    return "Authorized! You can close this tab and play a track."
