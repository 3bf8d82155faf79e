"""Dithering methods with their diffusion kernels and Bayer threshold matrices.

Every :class:`DitherMethod` member carries its own parameters: error-diffusion
members resolve to a :class:`DiffusionKernel`, ordered members to the side
length of their Bayer matrix.

Weights are stored as float32 so that the diffusion arithmetic reproduces the
reference output bit for bit.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

import numpy as np


class DitherMethod(str, Enum):
    """Available dithering methods (CLI names as values)."""

    NONE = "none"
    FLOYD_STEINBERG = "floyd-steinberg"
    SIMPLE_2D = "simple2-d"
    JARVIS = "jarvis"
    ATKINSON = "atkinson"
    STUCKI = "stucki"
    BURKES = "burkes"
    SIERRA = "sierra"
    TWO_ROW_SIERRA = "two-row-sierra"
    SIERRA_LITE = "sierra-lite"
    BAYER_2X2 = "bayer2x2"
    BAYER_4X4 = "bayer4x4"
    BAYER_8X8 = "bayer8x8"

    @property
    def is_ordered(self) -> bool:
        return self in BAYER_SIZES

    @property
    def is_error_diffusion(self) -> bool:
        return self in KERNELS

    @property
    def kernel(self) -> DiffusionKernel:
        """Diffusion kernel for an error-diffusion method."""
        try:
            return KERNELS[self]
        except KeyError:
            msg = f"{self.value!r} is not an error-diffusion method"
            raise ValueError(msg) from None

    @property
    def bayer_size(self) -> int:
        """Side length of the threshold matrix for an ordered method."""
        try:
            return BAYER_SIZES[self]
        except KeyError:
            msg = f"{self.value!r} is not an ordered dithering method"
            raise ValueError(msg) from None

    @property
    def threshold_matrix(self) -> np.ndarray:
        """Flat float32 Bayer matrix for an ordered method."""
        return BAYER_MATRICES[self.bayer_size]


@dataclass(frozen=True, eq=False)
class DiffusionKernel:
    """A row-major weight grid plus the column of the current pixel.

    Attributes:
        weights:  Flat (width * height,) float32 weights.
        width:    Grid columns.
        height:   Grid rows; row 0 is the current row.
        x_offset: Column of the current pixel within row 0.
    """

    weights: np.ndarray
    width: int
    height: int
    x_offset: int

    def cells(self) -> list[tuple[int, int, np.float32]]:
        """Non-zero cells as ``(dx, dy, weight)`` relative to the current pixel.

        The current pixel's own cell is never returned.
        """
        out = []
        for ky in range(self.height):
            for kx in range(self.width):
                w = self.weights[ky * self.width + kx]
                if w == 0.0:
                    continue
                dx = kx - self.x_offset
                if dx == 0 and ky == 0:
                    continue
                out.append((dx, ky, w))
        return out


def _readonly(a: np.ndarray) -> np.ndarray:
    a.setflags(write=False)
    return a


def _kernel(
    numerators: list[int], divisor: int, width: int, height: int, x_offset: int,
) -> DiffusionKernel:
    weights = np.array(numerators, dtype=np.float32) / np.float32(divisor)
    return DiffusionKernel(_readonly(weights), width, height, x_offset)


# fmt: off
KERNELS: dict[DitherMethod, DiffusionKernel] = {
    DitherMethod.FLOYD_STEINBERG: _kernel([
        0, 0, 7,
        3, 5, 1,
    ], 16, 3, 2, 1),
    DitherMethod.SIMPLE_2D: _kernel([
        0, 1,
        1, 0,
    ], 2, 2, 2, 0),
    DitherMethod.JARVIS: _kernel([
        0, 0, 0, 7, 5,
        3, 5, 7, 5, 3,
        1, 3, 5, 3, 1,
    ], 48, 5, 3, 2),
    DitherMethod.ATKINSON: _kernel([
        0, 0, 1, 1,
        1, 1, 1, 0,
        0, 1, 0, 0,
    ], 8, 4, 3, 1),
    DitherMethod.STUCKI: _kernel([
        0, 0, 0, 8, 4,
        2, 4, 8, 4, 2,
        1, 2, 4, 2, 1,
    ], 42, 5, 3, 2),
    DitherMethod.BURKES: _kernel([
        0, 0, 0, 8, 4,
        2, 4, 8, 4, 2,
    ], 32, 5, 2, 2),
    DitherMethod.SIERRA: _kernel([
        0, 0, 0, 5, 3,
        2, 4, 5, 4, 2,
        0, 2, 3, 2, 0,
    ], 32, 5, 3, 2),
    DitherMethod.TWO_ROW_SIERRA: _kernel([
        0, 0, 0, 4, 3,
        1, 2, 3, 2, 1,
    ], 16, 5, 2, 2),
    DitherMethod.SIERRA_LITE: _kernel([
        0, 0, 2,
        1, 1, 0,
    ], 4, 3, 2, 1),
}
# fmt: on


def bayer_matrix(size: int) -> np.ndarray:
    """Normalised (size, size) Bayer threshold matrix, values in [0, 1).

    Built recursively: ``B(n) = [[4B, 4B+2], [4B+3, 4B+1]]`` starting from
    ``B(0) = [0]``, then divided by ``size ** 2``.

    Args:
        size: Side length, a power of two >= 1.
    """
    if size < 1 or size & (size - 1):
        msg = f"Bayer matrix size must be a power of two, got {size}"
        raise ValueError(msg)

    m = np.zeros((1, 1), dtype=np.int64)
    while m.shape[0] < size:
        m = np.block([[4 * m, 4 * m + 2], [4 * m + 3, 4 * m + 1]])
    return (m / (size * size)).astype(np.float32)


BAYER_SIZES: dict[DitherMethod, int] = {
    DitherMethod.BAYER_2X2: 2,
    DitherMethod.BAYER_4X4: 4,
    DitherMethod.BAYER_8X8: 8,
}

BAYER_MATRICES: dict[int, np.ndarray] = {
    n: _readonly(bayer_matrix(n).ravel()) for n in BAYER_SIZES.values()
}
