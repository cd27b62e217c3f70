"""
Colour maths for the matrix background and point swatches.

Hex ↔ RGB conversion and per-channel linear interpolation. Colours are
6-digit hex strings, with or without a leading '#'. Anything that does not
parse is treated as black so a single bad setting never blanks the chart.
"""

from __future__ import annotations

import math
import re

BLACK = "#000000"

_HEX_RE = re.compile(r"^#?([0-9a-fA-F]{6})$")


def hex_to_rgb(value: str) -> tuple[int, int, int]:
    """Parse '#RRGGBB' (or 'RRGGBB') into integer channels.

    Malformed input returns (0, 0, 0).
    """
    match = _HEX_RE.match(value.strip()) if isinstance(value, str) else None
    if match is None:
        return (0, 0, 0)
    digits = match.group(1)
    return (int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16))


def rgb_to_hex(r: int, g: int, b: int) -> str:
    """Encode channels as '#RRGGBB'. Channels are clipped to 0..255."""
    channels = [max(0, min(255, int(c))) for c in (r, g, b)]
    return "#" + "".join(f"{c:02X}" for c in channels)


def normalise_hex(value: str) -> str:
    """Return the canonical upper-case '#RRGGBB' form, or black if malformed."""
    return rgb_to_hex(*hex_to_rgb(value))


def _round_channel(value: float) -> int:
    # Half-up, so 127.5 -> 128 regardless of parity
    return math.floor(value + 0.5)


def interpolate_colour(colour_a: str, colour_b: str, factor: float) -> str:
    """Linearly interpolate between two hex colours.

    Args:
        colour_a: Colour returned at factor 0.
        colour_b: Colour returned at factor 1.
        factor: Position between the two; clamped to [0, 1].

    Returns:
        Upper-case '#RRGGBB' string.
    """
    factor = max(0.0, min(1.0, float(factor)))
    a = hex_to_rgb(colour_a)
    b = hex_to_rgb(colour_b)
    mixed = [_round_channel(ca + (cb - ca) * factor) for ca, cb in zip(a, b)]
    return rgb_to_hex(*mixed)


def gradient_colour(first: str, middle: str, last: str, normalised: float) -> str:
    """Three-stop gradient: first → middle over [0, 0.5], middle → last over (0.5, 1]."""
    normalised = max(0.0, min(1.0, normalised))
    if normalised <= 0.5:
        return interpolate_colour(first, middle, normalised * 2)
    return interpolate_colour(middle, last, (normalised - 0.5) * 2)
