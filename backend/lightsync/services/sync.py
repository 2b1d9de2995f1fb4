"""
Track Watcher
Polls Spotify and pushes a new accent color to the light on every track change.
"""
import asyncio
from typing import Callable, Optional

from loguru import logger

from lightsync.config import config
from lightsync.services.colors import RGB
from lightsync.services.colors.accent import pick_accent_color
from lightsync.services.colors.conversion import rgb_to_hex
from lightsync.services.govee import GoveeClient
from lightsync.services.session import SyncSession
from lightsync.services.spotify import SpotifyClient
from lightsync.utils.logging import log_event
from lightsync.utils.metrics import get_metrics


class TrackWatcher:
    """Connects Spotify playback to the Govee light for one session."""

    def __init__(self, session: SyncSession,
                 spotify: SpotifyClient,
                 govee: GoveeClient,
                 accent_picker: Callable[[bytes], RGB] = pick_accent_color):
        self.session = session
        self.spotify = spotify
        self.govee = govee
        self.accent_picker = accent_picker
        self._task: Optional[asyncio.Task] = None

    def update_if_changed(self) -> Optional[RGB]:
        """
        Apply the current track's accent color if the track changed.

        Returns:
            The color sent to the light, or None if nothing was done
        """
        now_playing = self.spotify.currently_playing()
        if now_playing is None:
            return None
        if now_playing.track_id == self.session.last_track_id:
            return None
        if not now_playing.image_url:
            logger.debug(f"No album art for {now_playing.track_id}")
            return None

        image_bytes = self.spotify.fetch_image(now_playing.image_url)
        color = self.accent_picker(image_bytes)
        logger.info(f"Now playing: {now_playing.display_name}")
        logger.info(f"Chosen album color: [{', '.join(str(c) for c in color)}] {rgb_to_hex(color)}")

        self.govee.set_solid_color(color)
        log_event("Govee color updated.", extra={"track_id": now_playing.track_id, "hex": rgb_to_hex(color)})

        self.session.last_track_id = now_playing.track_id
        self.session.last_color = color
        get_metrics().increment_track_change()
        return color

    async def poll_forever(self, interval: Optional[float] = None) -> None:
        """Run update_if_changed every interval seconds until cancelled."""
        if interval is None:
            interval = config.POLL_INTERVAL

        logger.info(f"Polling Spotify every {interval:g}s…")
        self.session.polling = True
        try:
            while True:
                try:
                    await asyncio.to_thread(self.update_if_changed)
                except Exception as e:
                    logger.error(f"Update error: {e}")
                await asyncio.sleep(interval)
        finally:
            self.session.polling = False

    def start(self, interval: Optional[float] = None) -> bool:
        """
        Schedule polling on the running event loop.

        Returns:
            False if a polling task is already running
        """
        if self._task is not None and not self._task.done():
            return False
        self._task = asyncio.get_running_loop().create_task(self.poll_forever(interval))
        return True

    async def stop(self) -> None:
        """Cancel the polling task and wait for it to finish."""
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
