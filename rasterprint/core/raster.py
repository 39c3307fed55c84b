"""RGBA to 1bpp raster pipeline.

Dither (threshold + error diffusion) → pack into row-aligned bits.
"""

from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass, field
from numbers import Real

from rasterprint.core.diffuse import ErrorDiffuser
from rasterprint.core.dither import DitherEngine
from rasterprint.core.kernels import (
    DEFAULT_DIVISOR,
    Kernel,
    KernelName,
    MatrixPattern,
)
from rasterprint.core.pack import BitPacker
from rasterprint.core.threshold import DEFAULT_THRESHOLD, LuminanceThresholder
from rasterprint.utils.buffer import ImageData

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Settings:
    """Raster settings that affect output."""

    matrix_pattern: MatrixPattern = KernelName.JARVIS_JUDICE_NINKE
    divisor: Real = DEFAULT_DIVISOR
    threshold: Real = DEFAULT_THRESHOLD

    def hash(self) -> str:
        """Deterministic hash for cache keying."""
        helper = RasterHelper.from_settings(self)
        data = (
            f"{helper.kernel.matrix}:{helper.kernel.divisor}:"
            f"{helper.thresholder.threshold}"
        )
        return hashlib.md5(data.encode()).hexdigest()[:12]


@dataclass(frozen=True)
class RasterHelper:
    """Converts RGBA buffers to packed 1bpp bitmaps for dot printers.

    Threshold and divisor are coerced into range at construction instead of
    being rejected; the kernel is validated and its anchor offset derived
    once. Instances hold no per-call state and can be reused freely.
    """

    kernel: Kernel
    thresholder: LuminanceThresholder
    _engine: DitherEngine = field(repr=False, compare=False)
    _packer: BitPacker = field(repr=False, compare=False)

    @classmethod
    def create(
        cls,
        matrix_pattern: MatrixPattern = KernelName.JARVIS_JUDICE_NINKE,
        divisor: Real = DEFAULT_DIVISOR,
        threshold: Real = DEFAULT_THRESHOLD,
    ) -> RasterHelper:
        kernel = Kernel.create(matrix_pattern, divisor)
        thresholder = LuminanceThresholder.create(threshold)
        logger.debug(
            "Raster helper: %dx%d kernel, divisor %d, anchor offset %d, threshold %d",
            kernel.rows,
            kernel.cols,
            kernel.divisor,
            kernel.anchor_offset,
            thresholder.threshold,
        )
        return cls(
            kernel=kernel,
            thresholder=thresholder,
            _engine=DitherEngine(thresholder, ErrorDiffuser(kernel)),
            _packer=BitPacker(thresholder),
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> RasterHelper:
        return cls.create(settings.matrix_pattern, settings.divisor, settings.threshold)

    def dither(self, image_data: ImageData, width: int, height: int):
        """Dithered (height, width, 4) copy of the image, before packing."""
        return self._engine.dither(image_data, width, height)

    def raster(self, image_data: ImageData, width: int, height: int) -> bytes:
        """Dither an RGBA buffer and pack it to 1bpp.

        Args:
            image_data: flat RGBA values, length width * height * 4.
            width: image width in pixels.
            height: image height in pixels.

        Returns:
            ceil(width / 8) * height bytes, MSB-first, 1 = dark dot.
        """
        dithered = self._engine.dither(image_data, width, height)
        packed = self._packer.pack(dithered, width, height)
        logger.debug("Rastered %dx%d image to %d bytes", width, height, len(packed))
        return packed


def raster(
    image_data: ImageData,
    width: int,
    height: int,
    settings: Settings | None = None,
) -> bytes:
    """Raster an RGBA buffer with `settings` (defaults when omitted)."""
    return RasterHelper.from_settings(settings or Settings()).raster(
        image_data, width, height
    )
