"""Aspect-ratio fitting of an image into a bounded viewport."""

from __future__ import annotations

from enum import Enum

from .errors import GeometryError
from .models import Dimensions


class FitMode(str, Enum):
    CONTAINED = "contained"
    NATURAL = "natural"


def fit_dimensions(
    image_width: float,
    image_height: float,
    container_width: float,
    container_height: float,
    padding: float = 0,
    mode: FitMode = FitMode.CONTAINED,
) -> Dimensions:
    """Size at which to render an image inside a container.

    ``CONTAINED`` returns the largest rectangle with the image's aspect ratio
    that fits the container, then shrinks both sides by ``padding``.
    ``NATURAL`` returns the image's own size and ignores container and padding.
    """
    if image_width <= 0 or image_height <= 0:
        raise GeometryError(f"Image dimensions must be positive, got {image_width}x{image_height}")
    mode = FitMode(mode)
    if mode is FitMode.NATURAL:
        return Dimensions(width=image_width, height=image_height)

    if container_width < 0 or container_height < 0:
        raise ValueError(f"Container dimensions must be non-negative, got {container_width}x{container_height}")
    if padding < 0:
        raise ValueError(f"Padding must be non-negative, got {padding}")

    aspect_ratio = image_width / image_height

    new_width = container_width
    new_height = new_width / aspect_ratio

    if new_height > container_height:
        new_height = container_height
        new_width = new_height * aspect_ratio

    # Height-driven branch can overshoot the width by a rounding error.
    if new_width > container_width:
        new_width = container_width
        new_height = new_width / aspect_ratio

    width = new_width - padding
    height = new_height - padding
    if width < 0 or height < 0:
        raise GeometryError(
            f"Padding {padding} exceeds fitted size {new_width:.2f}x{new_height:.2f}"
        )
    return Dimensions(width=width, height=height)
