"""Deterministic colors for authors, commits, and other identifiers.

Colors are derived from a string hash, so any caller can compute the same
color for the same identifier without shared state.
"""

from __future__ import annotations

import math
import re
from collections.abc import Iterable
from typing import Literal

GOLDEN_ANGLE = 137.508

_HASH_SEED = 5381

# Hand-picked (hue, saturation, lightness) for small sets.
DISTINCT_PALETTE: tuple[tuple[int, int, int], ...] = (
    (210, 60, 50),  # steel blue
    (175, 55, 45),  # teal
    (145, 50, 42),  # sea green
    (195, 65, 48),  # sky blue
    (260, 45, 55),  # lavender
    (190, 70, 42),  # cyan
    (230, 50, 55),  # periwinkle
    (160, 45, 45),  # aquamarine
    (280, 40, 50),  # soft purple
    (220, 55, 52),  # cornflower
)

RGBA_RE = re.compile(r"rgba?\((\d+),\s*(\d+),\s*(\d+)")


def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value


def hash_identifier(identifier: str) -> int:
    """djb2 hash folded to signed 32 bits, returned as a non-negative int."""
    value = _HASH_SEED
    for ch in identifier:
        value = _to_int32(value * 33 + ord(ch))
    return abs(value)


def hue_for(identifier: str) -> float:
    return (hash_identifier(identifier) * GOLDEN_ANGLE) % 360


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def hsl_to_rgba(hue: float, saturation: float, lightness: float, alpha: float) -> str:
    """Convert HSL (degrees, percent, percent) plus alpha to an ``rgba(...)`` string."""
    hue = hue % 360
    sat = saturation / 100
    light = lightness / 100

    chroma = (1 - abs(2 * light - 1)) * sat
    x = chroma * (1 - abs((hue / 60) % 2 - 1))
    m = light - chroma / 2

    if hue < 60:
        r, g, b = chroma, x, 0.0
    elif hue < 120:
        r, g, b = x, chroma, 0.0
    elif hue < 180:
        r, g, b = 0.0, chroma, x
    elif hue < 240:
        r, g, b = 0.0, x, chroma
    elif hue < 300:
        r, g, b = x, 0.0, chroma
    else:
        r, g, b = chroma, 0.0, x

    red = _round_half_up((r + m) * 255)
    green = _round_half_up((g + m) * 255)
    blue = _round_half_up((b + m) * 255)
    return f"rgba({red}, {green}, {blue}, {alpha:g})"


def color_for(
    identifier: str,
    saturation: float = 65,
    lightness: float = 40,
    opacity: float = 0.25,
) -> str:
    """Return a stable color for ``identifier``.

    Args:
        identifier: Author name, commit id, or any other key.
        saturation: Saturation in ``[0, 100]``.
        lightness: Lightness in ``[0, 100]``.
        opacity: Alpha in ``[0, 1]``.

    Returns:
        An ``rgba(r, g, b, a)`` string; identical inputs give identical output.
    """
    return hsl_to_rgba(hue_for(identifier), saturation, lightness, opacity)


def _unique(identifiers: Iterable[str]) -> list[str]:
    return list(dict.fromkeys(identifiers))


def color_map(
    identifiers: Iterable[str],
    saturation: float = 65,
    lightness: float = 40,
    opacity: float = 0.25,
) -> dict[str, str]:
    return {
        identifier: color_for(identifier, saturation, lightness, opacity)
        for identifier in _unique(identifiers)
    }


def distinct_colors_for(identifiers: Iterable[str], opacity: float = 0.25) -> dict[str, str]:
    """Palette colors for up to ten identifiers, hashed colors beyond that.

    Palette slots follow first-seen order, so the same list yields the same
    assignment.
    """
    unique = _unique(identifiers)
    if len(unique) > len(DISTINCT_PALETTE):
        return color_map(unique, 65, 40, opacity)
    return {
        identifier: hsl_to_rgba(hue, saturation, lightness, opacity)
        for identifier, (hue, saturation, lightness) in zip(unique, DISTINCT_PALETTE)
    }


def contrasting_text_color(background: str) -> Literal["black", "white"]:
    match = RGBA_RE.match(background.strip())
    if not match:
        return "white"
    red, green, blue = (int(part) for part in match.groups())
    luminance = (0.299 * red + 0.587 * green + 0.114 * blue) / 255
    return "black" if luminance > 0.5 else "white"
