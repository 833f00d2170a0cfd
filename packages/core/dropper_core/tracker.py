"""Pointer-driven color tracking over a rendered surface."""

from __future__ import annotations

import math
from enum import Enum
from typing import Protocol

from dropper_imaging import (
    DEFAULT_WINDOW_SIZE,
    PixelRegion,
    Point,
    PointerSample,
    SurfaceUnavailableError,
    center_color,
    center_index,
    sample_neighborhood,
)

from .logging_setup import get_logger
from .rate_limit import Throttle

DEFAULT_THROTTLE_S = 0.2


class TrackerState(str, Enum):
    IDLE = "idle"
    TRACKING = "tracking"


class SampleSource(Protocol):
    @property
    def has_frame(self) -> bool: ...

    @property
    def width(self) -> int: ...

    @property
    def height(self) -> int: ...

    def read_region(self, x: int, y: int, width: int, height: int) -> PixelRegion: ...


class PointerColorTracker:
    def __init__(self, window_size: int = DEFAULT_WINDOW_SIZE, throttle: Throttle | None = None) -> None:
        if window_size < 1 or window_size % 2 == 0:
            raise ValueError(f"Window size must be a positive odd number, got {window_size}")
        self.window_size = window_size
        self.throttle = throttle or Throttle(DEFAULT_THROTTLE_S)
        self._source: SampleSource | None = None
        self._last_sample: PointerSample | None = None
        self._logger = get_logger("tracker")

    @property
    def state(self) -> TrackerState:
        return TrackerState.IDLE if self._source is None else TrackerState.TRACKING

    @property
    def last_sample(self) -> PointerSample | None:
        return self._last_sample

    def attach(self, source: SampleSource) -> None:
        self._source = source
        self._last_sample = None
        self.throttle.cancel()

    def detach(self) -> None:
        self._source = None
        self._last_sample = None
        self.throttle.cancel()

    def handle_move(self, position: Point | None, active: bool = True) -> PointerSample | None:
        """Throttled entry point for pointer-move events.

        Returns the new sample, or ``None`` when the event was dropped by the
        throttle, fell outside the surface, or the surface could not be read.
        An inactive dropper does no work and leaves the throttle untouched.
        """
        if self._source is None or not active:
            return None
        if not self.throttle.trigger():
            return None
        if position is None:
            self._logger.warning("pointer position unavailable, skipping sample", extra={"event": "surface_unavailable"})
            return None
        return self.sample_at(position)

    def sample_at(self, position: Point) -> PointerSample | None:
        source = self._source
        if source is None:
            return None
        if not source.has_frame:
            self._logger.warning("surface has no frame, skipping sample", extra={"event": "surface_unavailable"})
            return None

        width, height = source.width, source.height
        if position.x < 0 or position.y < 0 or position.x > width or position.y > height:
            self._logger.debug("pointer outside surface", extra={"event": "pointer_outside", "x": position.x, "y": position.y})
            return None

        size = self.window_size
        half = center_index(size)
        origin_x = math.floor(position.x) - half
        origin_y = math.floor(position.y) - half

        fetch_x = max(0, origin_x)
        fetch_y = max(0, origin_y)
        fetch_w = max(0, min(width, origin_x + size) - fetch_x)
        fetch_h = max(0, min(height, origin_y + size) - fetch_y)

        try:
            region = source.read_region(fetch_x, fetch_y, fetch_w, fetch_h)
        except SurfaceUnavailableError as exc:
            self._logger.warning(f"pixel readback failed: {exc}", extra={"event": "surface_unavailable"})
            return None

        matrix = sample_neighborhood(region, origin_x, origin_y, size, size, width, height)
        sample = PointerSample(position=position, matrix=matrix, center_color=center_color(matrix))
        self._last_sample = sample
        return sample
