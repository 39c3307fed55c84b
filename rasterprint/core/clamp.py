"""Byte-range clamping for diffused channel values."""

from __future__ import annotations

import math


def clamp(value: float) -> int:
    """Clamp a real number into [0, 255] and round it to an int.

    Ties round up (127.5 -> 128), which inside the byte range is the same
    as rounding half away from zero.
    """
    if value > 255:
        return 255
    if value < 0:
        return 0
    return int(math.floor(value + 0.5))
