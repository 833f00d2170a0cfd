"""Imaging package: color codec, aspect fitting, sampling, decoding and surfaces."""

from .color import hex_to_rgb, relative_luminance, rgb_to_hex
from .decode import decode_image, image_to_buffer, is_image_media_type, require_image_media_type
from .errors import DecodeFailureError, GeometryError, InvalidInputError, SurfaceUnavailableError
from .fit import FitMode, fit_dimensions
from .models import ColorMatrix, Dimensions, HexColor, PixelBuffer, PixelRegion, Point, PointerSample
from .patterns import PATTERN_NAMES, build_test_pattern
from .sampler import DEFAULT_WINDOW_SIZE, SENTINEL_COLOR, center_color, center_index, sample_neighborhood
from .surface import ImageSurface

__all__ = [
    "ColorMatrix",
    "DEFAULT_WINDOW_SIZE",
    "DecodeFailureError",
    "Dimensions",
    "FitMode",
    "GeometryError",
    "HexColor",
    "ImageSurface",
    "InvalidInputError",
    "PATTERN_NAMES",
    "PixelBuffer",
    "PixelRegion",
    "Point",
    "PointerSample",
    "SENTINEL_COLOR",
    "SurfaceUnavailableError",
    "build_test_pattern",
    "center_color",
    "center_index",
    "decode_image",
    "fit_dimensions",
    "hex_to_rgb",
    "image_to_buffer",
    "is_image_media_type",
    "relative_luminance",
    "require_image_media_type",
    "rgb_to_hex",
    "sample_neighborhood",
]
