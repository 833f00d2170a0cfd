"""Exception types shared by the imaging and core packages."""

from __future__ import annotations


class InvalidInputError(ValueError):
    """Input is not an image (declared media type outside ``image/*``)."""


class DecodeFailureError(ValueError):
    """Image bytes could not be decoded, or decoded to a zero-sized image."""


class GeometryError(ValueError):
    """Fit invoked with a zero-sized image, or padding exceeds the fitted size."""


class SurfaceUnavailableError(RuntimeError):
    """Render surface cannot supply a pointer position or a pixel readback."""
