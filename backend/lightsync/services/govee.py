"""
Govee Cloud Client
Sends device control commands with rate-limit backoff.
"""
import time
from typing import Any, Callable, Dict, Optional, Sequence

import requests
from loguru import logger

from lightsync.config import config
from lightsync.services.colors.conversion import clamp8
from lightsync.services.session import SyncSession
from lightsync.utils.metrics import get_metrics

CONTROL_URL = "https://developer-api.govee.com/v1/devices/control"


def parse_retry_after(value: Optional[str], default: int) -> int:
    """Seconds from a Retry-After header; falls back to default when missing or not an integer."""
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        return default


class GoveeClient:
    """Controls a single Govee device through the developer cloud API."""

    def __init__(self, session: SyncSession,
                 api_key: Optional[str] = None,
                 device: Optional[str] = None,
                 model: Optional[str] = None,
                 http: Optional[requests.Session] = None,
                 clock: Callable[[], float] = time.time,
                 timeout: Optional[int] = None):
        self.session = session
        self.api_key = api_key or config.GOVEE_API_KEY
        self.device = device or config.GOVEE_DEVICE
        self.model = model or config.GOVEE_MODEL
        self.http = http or requests.Session()
        self.clock = clock
        self.timeout = timeout or config.HTTP_TIMEOUT

    def _back_off(self, seconds: int, status_code: int) -> None:
        self.session.backoff_until = self.clock() + seconds
        get_metrics().increment_govee_backoff(status_code)

    def control(self, cmd: Dict[str, Any]) -> bool:
        """
        Send one control command.

        Commands are dropped while a backoff is active. A 429 pauses for the
        Retry-After interval (60s if absent); a 400 pauses for 30s.

        Args:
            cmd: Govee command object, e.g. {"name": "turn", "value": "on"}

        Returns:
            True if the device accepted the command
        """
        if self.clock() < self.session.backoff_until:
            logger.debug(f"Skipping Govee command {cmd['name']} during backoff")
            return False

        response = self.http.put(
            CONTROL_URL,
            headers={
                "Govee-API-Key": self.api_key or "",
                "Content-Type": "application/json",
            },
            json={"device": self.device, "model": self.model, "cmd": cmd},
            timeout=self.timeout,
        )
        get_metrics().increment_govee_command()

        if response.status_code == 429:
            retry = parse_retry_after(response.headers.get("retry-after"),
                                      config.GOVEE_DEFAULT_RETRY_AFTER)
            self._back_off(retry, 429)
            logger.warning(f"Backing off for {retry}s (429)")
            return False

        if response.status_code == 400:
            self._back_off(config.GOVEE_BAD_REQUEST_PAUSE, 400)
            logger.warning(f"400 from Govee; pausing {config.GOVEE_BAD_REQUEST_PAUSE}s. "
                           f"Body: {response.text}")
            return False

        if not response.ok:
            logger.error(f"Govee error: {response.status_code} {response.text}")
            return False

        return True

    def turn_on(self) -> bool:
        return self.control({"name": "turn", "value": "on"})

    def set_color(self, rgb: Sequence[float]) -> bool:
        r, g, b = rgb
        return self.control({
            "name": "color",
            "value": {"r": clamp8(r), "g": clamp8(g), "b": clamp8(b)},
        })

    def set_solid_color(self, rgb: Sequence[float]) -> bool:
        """Turn the light on, then set its color."""
        self.turn_on()
        return self.set_color(rgb)
