"""
LightSync Errors
Exception hierarchy shared by the color pipeline and the service clients.
"""


class LightSyncError(Exception):
    """Base class for LightSync failures."""
    pass


class PaletteExtractionError(LightSyncError, ValueError):
    """Image bytes could not be decoded or quantized into a palette."""
    pass


class SpotifyAuthError(LightSyncError):
    """Token exchange or refresh was rejected by Spotify."""
    pass


class SpotifyAPIError(LightSyncError):
    """Non-success response from the Spotify Web API."""

    def __init__(self, status_code: int, body: str = ""):
        self.status_code = status_code
        self.body = body
        super().__init__(f"Spotify {status_code}: {body}")
