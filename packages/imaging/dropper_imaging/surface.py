"""In-memory render surface the sampler reads pixels back from."""

from __future__ import annotations

import numpy as np
from PIL import Image

from .decode import buffer_to_image
from .errors import SurfaceUnavailableError
from .models import PixelBuffer, PixelRegion


class ImageSurface:
    """Holds the currently drawn frame as an ``(height, width, 4)`` uint8 array.

    Frame sizes are truncated to whole pixels, the same way a canvas element
    truncates fractional width/height attributes.
    """

    def __init__(self, resample: Image.Resampling = Image.Resampling.BILINEAR) -> None:
        self.resample = resample
        self._frame: np.ndarray | None = None

    @property
    def has_frame(self) -> bool:
        return self._frame is not None

    @property
    def width(self) -> int:
        return 0 if self._frame is None else int(self._frame.shape[1])

    @property
    def height(self) -> int:
        return 0 if self._frame is None else int(self._frame.shape[0])

    def draw(self, buffer: PixelBuffer, width: float, height: float) -> tuple[int, int]:
        frame_w = int(width)
        frame_h = int(height)
        if frame_w < 1 or frame_h < 1:
            self._frame = None
            return (0, 0)

        image = buffer_to_image(buffer)
        if image.size != (frame_w, frame_h):
            image = image.resize((frame_w, frame_h), self.resample)
        self._frame = np.asarray(image, dtype=np.uint8)
        return (frame_w, frame_h)

    def clear(self) -> None:
        self._frame = None

    def read_region(self, x: int, y: int, width: int, height: int) -> PixelRegion:
        frame = self._frame
        if frame is None:
            raise SurfaceUnavailableError("No frame has been drawn")

        frame_h, frame_w = frame.shape[:2]
        x0 = max(0, x)
        y0 = max(0, y)
        x1 = max(x0, min(frame_w, x + width))
        y1 = max(y0, min(frame_h, y + height))
        block = frame[y0:y1, x0:x1]
        return PixelRegion(x=x0, y=y0, width=x1 - x0, height=y1 - y0, data=block.tobytes())

    def to_image(self) -> Image.Image:
        frame = self._frame
        if frame is None:
            raise SurfaceUnavailableError("No frame has been drawn")
        return Image.fromarray(frame)
