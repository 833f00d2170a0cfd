"""Windowed neighborhood sampling for the magnifier grid."""

from __future__ import annotations

import numpy as np

from .color import rgb_to_hex
from .models import ColorMatrix, HexColor, PixelRegion

SENTINEL_COLOR: HexColor = "#ffffff"
DEFAULT_WINDOW_SIZE = 17


def center_index(size: int) -> int:
    if size < 1:
        raise ValueError(f"Window size must be positive, got {size}")
    return (size - 1) // 2


def center_color(matrix: ColorMatrix) -> HexColor:
    idx = center_index(len(matrix))
    return matrix[idx][idx]


def sample_neighborhood(
    region: PixelRegion,
    origin_x: int,
    origin_y: int,
    region_width: int,
    region_height: int,
    buffer_width: int,
    buffer_height: int,
) -> ColorMatrix:
    """Build a ``region_height x region_width`` grid of hex colors.

    ``origin_x``/``origin_y`` is the unclamped top-left of the conceptual
    window in buffer coordinates; ``region`` holds only the part of that
    window that lies inside the buffer. Cells outside
    ``[0, buffer_width) x [0, buffer_height)`` get ``SENTINEL_COLOR``, so the
    grid is always full size however much of it was clipped.
    """
    if region_width < 1 or region_height < 1:
        raise ValueError(f"Window must be at least 1x1, got {region_width}x{region_height}")

    pixels = np.frombuffer(region.data, dtype=np.uint8).reshape((region.height, region.width, 4))

    rows: list[tuple[HexColor, ...]] = []
    for i in range(region_height):
        y = origin_y + i
        row: list[HexColor] = []
        for j in range(region_width):
            x = origin_x + j
            if x < 0 or y < 0 or x >= buffer_width or y >= buffer_height:
                row.append(SENTINEL_COLOR)
                continue

            rx = x - region.x
            ry = y - region.y
            if not (0 <= rx < region.width and 0 <= ry < region.height):
                raise ValueError(
                    f"Pixel ({x}, {y}) is inside the buffer but outside the fetched region "
                    f"{region.width}x{region.height}+{region.x}+{region.y}"
                )
            r, g, b = pixels[ry, rx, :3]
            row.append(rgb_to_hex(r, g, b))
        rows.append(tuple(row))
    return tuple(rows)
