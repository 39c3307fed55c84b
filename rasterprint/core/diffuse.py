"""Forward error diffusion into not-yet-visited pixels."""

from __future__ import annotations

import numpy as np

from rasterprint.core.clamp import clamp
from rasterprint.core.kernels import Kernel


class ErrorDiffuser:
    """Spreads one pixel's quantization error over its neighbours.

    Targets in the first image row or first image column are skipped along
    with out-of-bounds ones (`<= 0` rather than `< 0`), so those edges never
    receive error.
    """

    def __init__(self, kernel: Kernel) -> None:
        self.kernel = kernel
        self._cells = kernel.cells()

    def diffuse(
        self,
        buffer: np.ndarray,
        original: tuple[int, ...],
        quantized: tuple[int, ...],
        x: int,
        y: int,
        width: int,
        height: int,
    ) -> None:
        """Add weighted RGB error to the buffer in place; alpha is untouched.

        Args:
            buffer: working array of shape (height, width, 4).
            original: pixel color before thresholding.
            quantized: thresholded pixel color.
            x, y: position of the pixel that was just quantized.
        """
        errors = [original[c] - quantized[c] for c in range(3)]
        divisor = self.kernel.divisor

        for row, shift, weight in self._cells:
            ty = y + row
            tx = x + shift
            if tx <= 0 or tx >= width or ty <= 0 or ty >= height:
                continue

            target = buffer[ty, tx]
            for c in range(3):
                target[c] = clamp(target[c] + errors[c] * weight / divisor)
