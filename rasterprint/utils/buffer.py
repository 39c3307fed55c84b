"""RGBA buffer validation and sizing helpers."""

from __future__ import annotations

from numbers import Integral
from typing import Sequence, Union

import numpy as np

CHANNELS = 4

ImageData = Union[bytes, bytearray, memoryview, Sequence[int], np.ndarray]


def validate_dimensions(width: int, height: int) -> None:
    for name, value in (("width", width), ("height", height)):
        if isinstance(value, bool) or not isinstance(value, Integral):
            raise ValueError(f"Image {name} must be an integer, got {value!r}")
        if value <= 0:
            raise ValueError(f"Image {name} must be greater than zero, got {value}")


def row_bytes(width: int) -> int:
    """Packed bytes per row: ceil(width / 8)."""
    return (width + 7) // 8


def packed_size(width: int, height: int) -> int:
    return row_bytes(width) * height


def to_pixel_array(image_data: ImageData, width: int, height: int) -> np.ndarray:
    """Copy a flat RGBA buffer into a fresh (height, width, 4) int32 array.

    The returned array never shares memory with `image_data`.
    """
    validate_dimensions(width, height)
    if isinstance(image_data, (bytes, bytearray, memoryview)):
        flat = np.frombuffer(image_data, dtype=np.uint8).astype(np.int32)
    else:
        flat = np.array(image_data, dtype=np.int32).reshape(-1)

    expected = width * height * CHANNELS
    if flat.size != expected:
        raise ValueError(
            f"Image data has {flat.size} values, expected {expected} "
            f"for {width}x{height} RGBA"
        )
    return flat.reshape(height, width, CHANNELS)
