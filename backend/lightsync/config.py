"""
LightSync Configuration
Manages environment variables and defaults for the color pipeline and its collaborators.
"""
import os
from typing import Optional


class Config:
    """Configuration class for LightSync services."""

    # Spotify OAuth
    SPOTIFY_CLIENT_ID: Optional[str] = os.environ.get("SPOTIFY_CLIENT_ID")
    SPOTIFY_CLIENT_SECRET: Optional[str] = os.environ.get("SPOTIFY_CLIENT_SECRET")
    SPOTIFY_REDIRECT_URI: str = os.environ.get("SPOTIFY_REDIRECT_URI", "http://127.0.0.1:8080/callback")
    SPOTIFY_SCOPES: str = "user-read-currently-playing user-read-playback-state"

    # Govee cloud
    GOVEE_API_KEY: Optional[str] = os.environ.get("GOVEE_API_KEY")
    GOVEE_DEVICE: Optional[str] = os.environ.get("GOVEE_DEVICE")
    GOVEE_MODEL: Optional[str] = os.environ.get("GOVEE_MODEL")

    # Color pipeline
    COLOR_COUNT: int = int(os.environ.get("LIGHTSYNC_COLOR_COUNT", "8"))
    TARGET_LUMA: float = float(os.environ.get("LIGHTSYNC_TARGET_LUMA", "0.55"))
    MAX_EDGE: int = int(os.environ.get("LIGHTSYNC_MAX_EDGE", "256"))
    MAX_SAMPLES: int = int(os.environ.get("LIGHTSYNC_MAX_SAMPLES", "20000"))
    MIN_COLOR_COUNT: int = 1
    MAX_COLOR_COUNT: int = 16

    # Polling and HTTP
    POLL_INTERVAL: float = float(os.environ.get("LIGHTSYNC_POLL_INTERVAL", "5.0"))
    HTTP_TIMEOUT: int = int(os.environ.get("LIGHTSYNC_HTTP_TIMEOUT", "10"))
    MAX_FILE_MB: int = int(os.environ.get("LIGHTSYNC_MAX_FILE_MB", "10"))

    # Backoff after Govee rejects a command (seconds)
    GOVEE_DEFAULT_RETRY_AFTER: int = 60
    GOVEE_BAD_REQUEST_PAUSE: int = 30

    # Logging
    LOG_LEVEL: str = os.environ.get("LIGHTSYNC_LOG_LEVEL", "INFO")

    @classmethod
    def validate_target_luma(cls, target_luma: float) -> bool:
        """Validate target luminance parameter."""
        return 0.0 < target_luma <= 1.0

    @classmethod
    def validate_color_count(cls, color_count: int) -> bool:
        """Validate palette size parameter."""
        return cls.MIN_COLOR_COUNT <= color_count <= cls.MAX_COLOR_COUNT

    @classmethod
    def spotify_configured(cls) -> bool:
        """Whether Spotify OAuth credentials are present."""
        return bool(cls.SPOTIFY_CLIENT_ID and cls.SPOTIFY_CLIENT_SECRET)

    @classmethod
    def govee_configured(cls) -> bool:
        """Whether the Govee device is fully configured."""
        return bool(cls.GOVEE_API_KEY and cls.GOVEE_DEVICE and cls.GOVEE_MODEL)


# Global config instance
config = Config()
