"""
LightSync Request ID Utilities
Generate unique IDs for tracing accent computations and OAuth state.
"""
import uuid
from datetime import datetime


def generate_request_id(prefix: str = "sync") -> str:
    """
    Generate a unique request ID for tracking.

    Args:
        prefix: Short tag naming the kind of work (e.g. "sync", "accent")

    Returns:
        Unique request ID string
    """
    timestamp = datetime.now().strftime("%Y%m%d%H%M%S")
    short_uuid = str(uuid.uuid4())[:8]
    return f"{prefix}-{timestamp}-{short_uuid}"


def generate_oauth_state() -> str:
    """Random opaque state value for the OAuth authorize redirect."""
    return str(uuid.uuid4())
