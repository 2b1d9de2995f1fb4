"""
Test configuration and fixtures for LightSync tests.
"""
import io
from typing import Optional
from unittest.mock import Mock

import numpy as np
import pytest
from fastapi.testclient import TestClient
from PIL import Image

# Import the main app
from main import app


@pytest.fixture
def test_client():
    """Create test client for the FastAPI app."""
    return TestClient(app)


@pytest.fixture(autouse=True)
def reset_metrics():
    """Reset metrics before each test."""
    from lightsync.utils.metrics import reset_metrics
    reset_metrics()


def encode_image(array: np.ndarray, fmt: str = "PNG") -> bytes:
    """Encode an RGB or RGBA uint8 array to image bytes in memory."""
    buffer = io.BytesIO()
    Image.fromarray(array.astype(np.uint8)).save(buffer, format=fmt)
    return buffer.getvalue()


def blocks_image(colors, weights, size: int = 100) -> np.ndarray:
    """Vertical color bands, each as wide as its weight share of the image."""
    img = np.zeros((size, size, 3), dtype=np.uint8)
    x = 0
    for color, weight in zip(colors, weights):
        width = int(round(size * weight))
        img[:, x:x + width] = color
        x += width
    img[:, x:] = colors[-1]
    return img


def make_response(status_code: int = 200, json_data=None, text: str = "",
                  headers: Optional[dict] = None, content: bytes = b"") -> Mock:
    """Stand-in for requests.Response."""
    response = Mock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 400
    response.json.return_value = json_data
    response.text = text
    response.headers = headers or {}
    response.content = content
    return response


@pytest.fixture
def red_gray_png():
    """40% saturated red, 60% mid gray."""
    return encode_image(blocks_image([(120, 120, 120), (200, 30, 30)], [0.6, 0.4]))


@pytest.fixture
def gradient_png():
    """Smooth two-axis gradient with thousands of distinct colors."""
    xs = np.linspace(0, 255, 120)
    ys = np.linspace(0, 255, 80)
    xx, yy = np.meshgrid(xs, ys)
    img = np.stack([xx, yy, 255 - xx], axis=-1).astype(np.uint8)
    return encode_image(img)


def half_transparent_image(opaque=(110, 100, 95), hidden=(0, 220, 0), size: int = 40) -> np.ndarray:
    """RGBA array: left half opaque, right half fully transparent but colored."""
    img = np.zeros((size, size, 4), dtype=np.uint8)
    img[:, :size // 2] = (*opaque, 255)
    img[:, size // 2:] = (*hidden, 0)
    return img
