"""Pillow-backed decoding of image bytes into RGBA pixel buffers."""

from __future__ import annotations

from io import BytesIO

from PIL import Image, UnidentifiedImageError

from .errors import DecodeFailureError, InvalidInputError
from .models import PixelBuffer

IMAGE_MEDIA_TYPE_PREFIX = "image/"


def is_image_media_type(media_type: str | None) -> bool:
    return bool(media_type) and media_type.strip().lower().startswith(IMAGE_MEDIA_TYPE_PREFIX)


def require_image_media_type(media_type: str | None) -> None:
    if not is_image_media_type(media_type):
        raise InvalidInputError(f"Unsupported media type {media_type!r}, expected {IMAGE_MEDIA_TYPE_PREFIX}*")


def image_to_buffer(image: Image.Image) -> PixelBuffer:
    if image.mode != "RGBA":
        image = image.convert("RGBA")
    width, height = image.size
    return PixelBuffer(width=width, height=height, data=image.tobytes())


def buffer_to_image(buffer: PixelBuffer) -> Image.Image:
    return Image.frombytes("RGBA", (buffer.width, buffer.height), buffer.data)


def decode_image(data: bytes) -> PixelBuffer:
    try:
        with Image.open(BytesIO(data)) as image:
            image.load()
            buffer = image_to_buffer(image)
    # Some plugins report malformed headers as ValueError or SyntaxError.
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, SyntaxError, ValueError) as exc:
        raise DecodeFailureError(f"Cannot decode image: {exc}") from exc

    if buffer.width == 0 or buffer.height == 0:
        raise DecodeFailureError("Cannot load image: unable to determine image dimensions")
    return buffer
