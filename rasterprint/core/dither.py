"""Single-pass error diffusion dithering to pure black and white."""

from __future__ import annotations

import numpy as np

from rasterprint.core.diffuse import ErrorDiffuser
from rasterprint.core.threshold import LuminanceThresholder
from rasterprint.utils.buffer import ImageData, to_pixel_array


class DitherEngine:
    """Thresholds each pixel in raster order, pushing its error forward.

    Every pixel's decision depends on the error written by all pixels before
    it, so the scan is strictly sequential: top to bottom, left to right.
    """

    def __init__(
        self, thresholder: LuminanceThresholder, diffuser: ErrorDiffuser
    ) -> None:
        self.thresholder = thresholder
        self.diffuser = diffuser

    def dither(self, image_data: ImageData, width: int, height: int) -> np.ndarray:
        """Dither a flat RGBA buffer.

        Returns:
            A new (height, width, 4) int32 array holding only black or white
            RGB values; the input is left untouched.
        """
        pixels = to_pixel_array(image_data, width, height)

        for y in range(height):
            for x in range(width):
                original = tuple(int(v) for v in pixels[y, x])
                quantized = self.thresholder.threshold_pixel(original)
                self.diffuser.diffuse(
                    pixels, original, quantized, x, y, width, height
                )
                pixels[y, x] = quantized

        return pixels
