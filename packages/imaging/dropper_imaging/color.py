"""RGB <-> hex color helpers."""

from __future__ import annotations

import re

from .models import HexColor

_HEX_RE = re.compile(r"^[0-9a-fA-F]{6}$")


def _channel(value) -> int:
    return max(0, min(255, int(value)))


def rgb_to_hex(r, g, b) -> HexColor:
    """Encode a channel triple as ``#rrggbb``.

    Values are truncated to int and clamped to 0..255, so numpy scalars and
    out-of-range inputs still produce a well-formed 7-character string.
    """
    return "#{:02x}{:02x}{:02x}".format(_channel(r), _channel(g), _channel(b))


def hex_to_rgb(value: str) -> tuple[int, int, int]:
    cleaned = value.strip().lstrip("#")
    if not _HEX_RE.match(cleaned):
        raise ValueError(f"Invalid hex color: {value!r}")
    return tuple(int(cleaned[i : i + 2], 16) for i in (0, 2, 4))  # type: ignore[return-value]


def relative_luminance(rgb: tuple[int, int, int]) -> float:
    r, g, b = (c / 255 for c in rgb)
    return 0.2126 * r + 0.7152 * g + 0.0722 * b
