"""Luminance thresholding of RGBA pixels to pure black or white."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from numbers import Real
from typing import Sequence

from rasterprint.core.clamp import clamp

logger = logging.getLogger(__name__)

DEFAULT_THRESHOLD = 128

Pixel = tuple[int, int, int, int]


def luminance(r: float, g: float, b: float) -> float:
    """Perceived brightness of an RGB triple (ITU-R BT.601 weights)."""
    return 0.299 * r + 0.587 * g + 0.114 * b


def coerce_threshold(threshold: Real) -> int:
    value = clamp(threshold)
    if value != threshold:
        logger.debug("Threshold %r coerced to %d", threshold, value)
    return value


@dataclass(frozen=True)
class LuminanceThresholder:
    """Maps a pixel to black when its luminance is strictly below `threshold`."""

    threshold: int = DEFAULT_THRESHOLD

    @classmethod
    def create(cls, threshold: Real = DEFAULT_THRESHOLD) -> LuminanceThresholder:
        return cls(threshold=coerce_threshold(threshold))

    def is_dark(self, pixel: Sequence[float]) -> bool:
        return luminance(pixel[0], pixel[1], pixel[2]) < self.threshold

    def threshold_pixel(self, pixel: Sequence[float]) -> Pixel:
        """Return (0, 0, 0, A) or (255, 255, 255, A); alpha is passed through."""
        level = 0 if self.is_dark(pixel) else 255
        return (level, level, level, int(pixel[3]))
