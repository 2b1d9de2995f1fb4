"""
Palette extraction for album artwork.

Decodes in-memory image bytes, downsamples the pixels, and quantizes them
into a small palette with MiniBatchKMeans. Transparent pixels (alpha <= 127)
are masked out before sampling. No temporary files are written.
"""

import io
from collections import Counter
from typing import List, Optional, Tuple

import cv2
import numpy as np
from PIL import Image
from loguru import logger
from sklearn.cluster import MiniBatchKMeans

from lightsync.config import config
from lightsync.errors import PaletteExtractionError

from . import RGB
from .conversion import rgb_to_hex


# Alpha at or below this is treated as transparent
ALPHA_THRESHOLD = 127

# 16/32-bit integer grayscale modes Pillow reports for deep PNGs and TIFFs
_WIDE_GRAY_MODES = ('I', 'I;16', 'I;16B', 'I;16L', 'I;16N')


def _has_alpha(pil_image: Image.Image) -> bool:
    return pil_image.mode in ('RGBA', 'LA', 'PA') or 'transparency' in pil_image.info


def _wide_gray_to_rgb(pil_image: Image.Image) -> np.ndarray:
    """Scale 16-bit grayscale down to 8 bits instead of clipping at 255."""
    gray = np.asarray(pil_image, dtype=np.float64) / 257.0
    gray = np.clip(np.rint(gray), 0, 255).astype(np.uint8)
    return np.repeat(gray[:, :, np.newaxis], 3, axis=2)


def decode_image_bytes(image_bytes: bytes) -> Tuple[np.ndarray, Optional[np.ndarray]]:
    """
    Decode raw image bytes into an RGB uint8 array and an opacity mask.

    Args:
        image_bytes: Encoded image (JPEG, PNG, WebP, ...)

    Returns:
        Tuple of (rgb, mask): rgb is (H, W, 3) in RGB order; mask is a binary
        (H, W) uint8 array (255 = opaque) for images with transparency, else None

    Raises:
        PaletteExtractionError: If the bytes are empty, not a decodable image,
            or fully transparent
    """
    if not image_bytes:
        raise PaletteExtractionError("Empty image data")

    try:
        pil_image = Image.open(io.BytesIO(image_bytes))
        pil_image.load()
    except Exception as e:
        raise PaletteExtractionError(f"Failed to decode image: {str(e)}")

    mask = None
    if pil_image.mode in _WIDE_GRAY_MODES:
        rgb_array = _wide_gray_to_rgb(pil_image)
    elif _has_alpha(pil_image):
        rgba_array = np.asarray(pil_image.convert('RGBA'), dtype=np.uint8)
        rgb_array = np.ascontiguousarray(rgba_array[:, :, :3])
        mask = np.where(rgba_array[:, :, 3] > ALPHA_THRESHOLD, 255, 0).astype(np.uint8)
    else:
        if pil_image.mode != 'RGB':
            pil_image = pil_image.convert('RGB')
        rgb_array = np.asarray(pil_image, dtype=np.uint8)

    if rgb_array.ndim != 3 or rgb_array.shape[0] == 0 or rgb_array.shape[1] == 0:
        raise PaletteExtractionError(f"Unexpected image shape: {rgb_array.shape}")

    if mask is not None and not mask.any():
        raise PaletteExtractionError("Image has no opaque pixels")

    return rgb_array, mask


def resize_long_edge(img: np.ndarray, max_edge: Optional[int] = None,
                     interpolation: int = cv2.INTER_AREA) -> np.ndarray:
    """
    Resize image so the longest edge is at most max_edge pixels.

    Args:
        img: Input image (H, W, 3) or mask (H, W)
        max_edge: Maximum edge size (default from config)
        interpolation: cv2 interpolation flag; masks use INTER_NEAREST

    Returns:
        Resized image, or the input when already small enough
    """
    if max_edge is None:
        max_edge = config.MAX_EDGE

    height, width = img.shape[:2]
    current_max = max(height, width)

    if current_max <= max_edge:
        return img

    scale = max_edge / current_max
    new_width = max(1, int(width * scale))
    new_height = max(1, int(height * scale))

    return cv2.resize(img, (new_width, new_height), interpolation=interpolation)


def sample_pixels(img_rgb: np.ndarray, max_samples: Optional[int] = None,
                  rng_seed: int = 42, mask: Optional[np.ndarray] = None) -> np.ndarray:
    """
    Flatten an image to pixels and deterministically subsample.

    Args:
        img_rgb: Image (H, W, 3) uint8
        max_samples: Maximum number of pixels to keep (default from config)
        rng_seed: Random seed for deterministic sampling
        mask: Optional binary (H, W) mask; only nonzero pixels are kept

    Returns:
        Pixel array (N, 3) uint8
    """
    if max_samples is None:
        max_samples = config.MAX_SAMPLES

    pixels = img_rgb.reshape(-1, 3)
    if mask is not None:
        pixels = pixels[mask.reshape(-1) > 0]
        logger.debug(f"Kept {len(pixels)} opaque pixels")

    if len(pixels) > max_samples:
        rng = np.random.default_rng(rng_seed)
        indices = rng.choice(len(pixels), size=max_samples, replace=False)
        pixels = pixels[np.sort(indices)]
        logger.debug(f"Downsampled to {max_samples} pixels")

    return pixels


def cluster_palette(pixels_rgb_u8: np.ndarray, k: int = 8,
                    rng_seed: int = 42) -> Tuple[List[RGB], List[float]]:
    """
    Quantize pixels into at most k colors using MiniBatchKMeans.

    Args:
        pixels_rgb_u8: RGB pixels (N, 3) uint8
        k: Requested palette size
        rng_seed: Random seed for deterministic clustering

    Returns:
        Tuple of (colors, ratios) ordered by cluster population, descending

    Raises:
        PaletteExtractionError: If there are no pixels or clustering fails
    """
    if len(pixels_rgb_u8) == 0:
        raise PaletteExtractionError("No pixels to cluster")

    unique_colors = np.unique(pixels_rgb_u8, axis=0)
    n_clusters = min(k, len(unique_colors))
    logger.debug(f"Clustering {len(pixels_rgb_u8)} pixels "
                 f"({len(unique_colors)} unique) into {n_clusters} colors")

    # Fewer unique colors than requested: the palette is the colors themselves
    if n_clusters == len(unique_colors):
        counts = Counter(map(tuple, pixels_rgb_u8.tolist()))
        ordered = counts.most_common()
        total = len(pixels_rgb_u8)
        colors = [tuple(int(c) for c in color) for color, _ in ordered]
        ratios = [count / total for _, count in ordered]
        return colors, ratios

    try:
        kmeans = MiniBatchKMeans(
            n_clusters=n_clusters,
            random_state=rng_seed,
            batch_size=min(2048, len(pixels_rgb_u8)),
            n_init="auto",
            max_iter=100
        )
        labels = kmeans.fit_predict(pixels_rgb_u8.astype(np.float32))
    except ValueError as e:
        logger.error(f"Clustering failed: {str(e)}")
        raise PaletteExtractionError(f"K-means clustering failed: {str(e)}")

    centers = np.clip(np.rint(kmeans.cluster_centers_), 0, 255).astype(np.uint8)
    label_counts = Counter(labels.tolist())
    total = len(labels)

    # Sort by population descending; cluster index breaks ties
    stats = sorted(
        ((label_counts.get(i, 0) / total, i) for i in range(n_clusters)),
        key=lambda x: (-x[0], x[1])
    )

    colors = []
    ratios = []
    for ratio, index in stats:
        if ratio == 0:
            continue
        colors.append(tuple(int(c) for c in centers[index]))
        ratios.append(float(ratio))

    return colors, ratios


def extract_palette_with_ratios(image_bytes: bytes, color_count: Optional[int] = None,
                                max_edge: Optional[int] = None,
                                max_samples: Optional[int] = None) -> Tuple[List[RGB], List[float]]:
    """Decode, downsample, and cluster; returns colors with their pixel shares."""
    if color_count is None:
        color_count = config.COLOR_COUNT
    if not config.validate_color_count(color_count):
        raise ValueError(
            f"color_count must be in [{config.MIN_COLOR_COUNT}, {config.MAX_COLOR_COUNT}], "
            f"got {color_count}"
        )

    img_rgb, mask = decode_image_bytes(image_bytes)
    logger.debug(f"Decoded image {img_rgb.shape[1]}x{img_rgb.shape[0]}"
                 f"{' with alpha' if mask is not None else ''}")

    img_rgb = resize_long_edge(img_rgb, max_edge)
    if mask is not None:
        mask = resize_long_edge(mask, max_edge, interpolation=cv2.INTER_NEAREST)
    pixels = sample_pixels(img_rgb, max_samples, mask=mask)
    colors, ratios = cluster_palette(pixels, k=color_count)

    ratios_str = [f"{rgb_to_hex(c)}:{r:.3f}" for c, r in zip(colors, ratios)]
    logger.debug(f"Palette: {ratios_str}")

    return colors, ratios


def extract_palette(image_bytes: bytes, color_count: Optional[int] = None) -> List[RGB]:
    """
    Extract up to color_count representative colors from an image.

    Args:
        image_bytes: Encoded image bytes
        color_count: Requested palette size (default from config, 8)

    Returns:
        List of RGB tuples; order is by cluster population and carries no
        meaning for accent selection

    Raises:
        PaletteExtractionError: If the image cannot be decoded or clustered
    """
    colors, _ = extract_palette_with_ratios(image_bytes, color_count)
    return colors
