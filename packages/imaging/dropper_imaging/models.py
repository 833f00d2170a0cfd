"""Typed imaging models."""

from __future__ import annotations

from dataclasses import dataclass

HexColor = str
ColorMatrix = tuple[tuple[HexColor, ...], ...]


@dataclass(frozen=True)
class Dimensions:
    width: float
    height: float


@dataclass(frozen=True)
class Point:
    x: float
    y: float


@dataclass(frozen=True)
class PixelBuffer:
    """RGBA pixels, row-major, origin top-left."""

    width: int
    height: int
    data: bytes

    def __post_init__(self) -> None:
        if len(self.data) != self.width * self.height * 4:
            raise ValueError("RGBA data length must equal width * height * 4")


@dataclass(frozen=True)
class PixelRegion:
    """RGBA sub-rectangle read back from a surface at surface offset (x, y)."""

    x: int
    y: int
    width: int
    height: int
    data: bytes

    def __post_init__(self) -> None:
        if len(self.data) != self.width * self.height * 4:
            raise ValueError("RGBA data length must equal width * height * 4")


@dataclass(frozen=True)
class PointerSample:
    position: Point
    matrix: ColorMatrix
    center_color: HexColor
