"""Conversion between in-memory Pillow images and raster buffers."""

from __future__ import annotations

import numpy as np
from PIL import Image

from rasterprint.core.raster import RasterHelper, Settings
from rasterprint.utils.buffer import packed_size, row_bytes, validate_dimensions


def image_to_rgba(img: Image.Image) -> tuple[bytes, int, int]:
    """Flatten an image of any mode to RGBA bytes.

    Returns (data, width, height).
    """
    if img.mode != "RGBA":
        img = img.convert("RGBA")
    return img.tobytes(), img.width, img.height


def raster_image(img: Image.Image, settings: Settings | None = None) -> bytes:
    """Dither and pack a Pillow image to 1bpp bytes."""
    data, width, height = image_to_rgba(img)
    return RasterHelper.from_settings(settings or Settings()).raster(
        data, width, height
    )


def packed_to_image(packed: bytes, width: int, height: int) -> Image.Image:
    """Unpack 1bpp rows into a mode "1" image for previewing.

    Set bits (dark dots) become black pixels.
    """
    validate_dimensions(width, height)
    expected = packed_size(width, height)
    if len(packed) != expected:
        raise ValueError(
            f"Packed data has {len(packed)} bytes, expected {expected} "
            f"for {width}x{height}"
        )

    rows = np.frombuffer(bytes(packed), dtype=np.uint8).reshape(height, row_bytes(width))
    bits = np.unpackbits(rows, axis=1)[:, :width]
    # Mode "1" stores white as 255, so invert the dark bits
    gray = Image.fromarray(((1 - bits) * 255).astype(np.uint8))
    return gray.convert("1", dither=Image.Dither.NONE)
