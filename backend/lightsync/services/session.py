"""
LightSync Session State
Per-process context shared by the Spotify client, Govee client, and track watcher.
"""
from dataclasses import dataclass
from typing import Optional


@dataclass
class SyncSession:
    """Mutable state for one running sync: tokens, last track, and device backoff."""
    access_token: Optional[str] = None
    refresh_token: Optional[str] = None
    last_track_id: Optional[str] = None
    last_color: Optional[tuple] = None
    # Epoch seconds; Govee commands are skipped until this passes
    backoff_until: float = 0.0
    polling: bool = False

    @property
    def authorized(self) -> bool:
        return self.access_token is not None

    def backoff_remaining(self, now: float) -> float:
        """Seconds left before Govee commands resume."""
        return max(0.0, self.backoff_until - now)
