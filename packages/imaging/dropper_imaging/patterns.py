"""Deterministic test images for manual checks and tests."""

from __future__ import annotations

import numpy as np
from PIL import Image

PATTERN_NAMES = (
    "black",
    "white",
    "red",
    "green",
    "blue",
    "quadrants",
    "h-gradient",
    "v-gradient",
    "checkerboard",
)

_SOLID = {
    "black": (0, 0, 0),
    "white": (255, 255, 255),
    "red": (255, 0, 0),
    "green": (0, 255, 0),
    "blue": (0, 0, 255),
}


def build_test_pattern(name: str, width: int, height: int, cell: int = 24) -> Image.Image:
    if width < 1 or height < 1:
        raise ValueError(f"Pattern size must be positive, got {width}x{height}")

    arr = np.zeros((height, width, 3), dtype=np.uint8)
    if name in _SOLID:
        arr[:, :] = _SOLID[name]
    elif name == "quadrants":
        # red | green
        # blue | white
        half_w, half_h = width // 2, height // 2
        arr[:half_h, :half_w] = (255, 0, 0)
        arr[:half_h, half_w:] = (0, 255, 0)
        arr[half_h:, :half_w] = (0, 0, 255)
        arr[half_h:, half_w:] = (255, 255, 255)
    elif name == "h-gradient":
        ramp = (255 * np.arange(width) / max(width - 1, 1)).astype(np.uint8)
        arr[:, :, :] = ramp[np.newaxis, :, np.newaxis]
    elif name == "v-gradient":
        ramp = (255 * np.arange(height) / max(height - 1, 1)).astype(np.uint8)
        arr[:, :, :] = ramp[:, np.newaxis, np.newaxis]
    elif name == "checkerboard":
        ys, xs = np.indices((height, width))
        arr[((xs // cell + ys // cell) % 2) == 0] = (255, 255, 255)
    else:
        raise ValueError(f"Unknown pattern: {name}")
    return Image.fromarray(arr)
