"""Packing of dithered pixels into row-aligned 1bpp bytes."""

from __future__ import annotations

import numpy as np

from rasterprint.core.threshold import LuminanceThresholder
from rasterprint.utils.buffer import packed_size, row_bytes


class BitPacker:
    """Turns a dithered buffer into MSB-first 1-bit-per-pixel rows.

    A set bit marks a dark pixel (a dot to print). Each row starts on a fresh
    byte; the unused low bits of a row's last byte stay zero.
    """

    def __init__(self, thresholder: LuminanceThresholder) -> None:
        self.thresholder = thresholder

    def pack(self, dithered: np.ndarray, width: int, height: int) -> bytes:
        pixels = dithered.reshape(height, width, -1)
        out = bytearray(packed_size(width, height))
        stride = row_bytes(width)

        for y in range(height):
            byte_idx = y * stride
            value = 0
            bit = 7
            for x in range(width):
                if self.thresholder.is_dark(pixels[y, x]):
                    value |= 1 << bit
                if bit == 0:
                    out[byte_idx] = value
                    byte_idx += 1
                    value = 0
                    bit = 7
                else:
                    bit -= 1
            # Flush a partial final byte
            if bit != 7:
                out[byte_idx] = value

        return bytes(out)
