"""Error-diffusion kernel presets.

A kernel is a matrix of integer weights plus a divisor. Row 0 is aligned with
the pixel being quantized; the column just before its first nonzero weight
sits on that pixel, so weights only ever reach pixels not yet visited.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum
from numbers import Integral, Real
from typing import Sequence, Union

logger = logging.getLogger(__name__)

Matrix = tuple[tuple[int, ...], ...]


class KernelName(str, Enum):
    JARVIS_JUDICE_NINKE = "jarvis-judice-ninke"
    ATKINSON = "atkinson"


JARVIS_JUDICE_NINKE: Matrix = (
    (0, 0, 0, 7, 5),
    (3, 5, 7, 5, 3),
    (1, 3, 5, 3, 1),
)

ATKINSON: Matrix = (
    (0, 0, 1, 1),
    (1, 1, 1, 0),
    (0, 1, 0, 0),
)

KERNELS: dict[KernelName, Matrix] = {
    KernelName.JARVIS_JUDICE_NINKE: JARVIS_JUDICE_NINKE,
    KernelName.ATKINSON: ATKINSON,
}

DEFAULT_DIVISOR = 48

MatrixPattern = Union[KernelName, str, Sequence[Sequence[int]]]


def resolve_matrix(pattern: MatrixPattern) -> Matrix:
    """Look up a preset by name or validate a custom weight matrix."""
    if isinstance(pattern, KernelName):
        return KERNELS[pattern]
    if isinstance(pattern, str):
        try:
            return KERNELS[KernelName(pattern)]
        except ValueError:
            known = ", ".join(k.value for k in KernelName)
            raise ValueError(
                f"Unknown kernel preset: {pattern!r} (expected one of {known})"
            ) from None

    rows = [tuple(row) for row in pattern]
    if not rows:
        raise ValueError("Kernel matrix must have at least one row")
    width = len(rows[0])
    if width == 0:
        raise ValueError("Kernel rows must not be empty")
    for i, row in enumerate(rows):
        if len(row) != width:
            raise ValueError(
                f"Kernel row {i} has {len(row)} weights, expected {width}"
            )
        for w in row:
            if isinstance(w, bool) or not isinstance(w, Integral):
                raise ValueError(f"Kernel weights must be integers, got {w!r}")
    return tuple(tuple(int(w) for w in row) for row in rows)


def anchor_offset(matrix: Matrix) -> int:
    """Column index of the first nonzero weight in row 0, minus one."""
    for col, weight in enumerate(matrix[0]):
        if weight != 0:
            return col - 1
    raise ValueError("Kernel row 0 must contain at least one nonzero weight")


def coerce_divisor(divisor: Real) -> int:
    """Round the divisor and raise it to at least 1."""
    value = max(1, int(math.floor(divisor + 0.5)))
    if value != divisor:
        logger.debug("Divisor %r coerced to %d", divisor, value)
    return value


@dataclass(frozen=True)
class Kernel:
    """Immutable diffusion kernel with its derived alignment fields."""

    matrix: Matrix
    divisor: int
    anchor_offset: int

    @classmethod
    def create(
        cls,
        pattern: MatrixPattern = KernelName.JARVIS_JUDICE_NINKE,
        divisor: Real = DEFAULT_DIVISOR,
    ) -> Kernel:
        matrix = resolve_matrix(pattern)
        return cls(
            matrix=matrix,
            divisor=coerce_divisor(divisor),
            anchor_offset=anchor_offset(matrix),
        )

    @property
    def rows(self) -> int:
        return len(self.matrix)

    @property
    def cols(self) -> int:
        return len(self.matrix[0])

    def cells(self) -> list[tuple[int, int, int]]:
        """Nonzero (row, column shift, weight) triples.

        The column shift is already corrected by the anchor offset, so a cell
        targets pixel (x + shift, y + row).
        """
        return [
            (row, col - self.anchor_offset, weight)
            for row, weights in enumerate(self.matrix)
            for col, weight in enumerate(weights)
            if weight != 0
        ]
