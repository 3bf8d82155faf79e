"""Fixed colour palettes and nearest-colour mapping."""

from __future__ import annotations

from collections.abc import Sequence
from enum import Enum
from typing import NamedTuple

import numpy as np


class ColorPalette(str, Enum):
    """Selectable built-in palettes."""

    MONOCHROME = "monochrome"
    COLOR8 = "color8"
    COLOR16 = "color16"


class Color(NamedTuple):
    """An RGB colour, each channel 0-255."""

    r: int
    g: int
    b: int

    @classmethod
    def from_int(cls, value: int) -> Color:
        """Unpack a 24-bit ``0xRRGGBB`` integer."""
        return cls((value >> 16) & 0xFF, (value >> 8) & 0xFF, value & 0xFF)

    @classmethod
    def from_channels(cls, channels: Sequence[int]) -> Color:
        """Build from the first three items of an ``R, G, B`` sequence."""
        return cls(int(channels[0]), int(channels[1]), int(channels[2]))

    def to_hex(self) -> str:
        return f"#{self.r:02x}{self.g:02x}{self.b:02x}"


class QuantizationError(NamedTuple):
    """Signed per-channel residual: original minus chosen palette colour."""

    r: float
    g: float
    b: float


PALETTE_MONOCHROME: tuple[Color, ...] = tuple(
    Color.from_int(v) for v in (0x000000, 0xFFFFFF)
)

PALETTE_8C: tuple[Color, ...] = tuple(
    Color.from_int(v)
    for v in (
        0x000000, 0xCC3500, 0x5EC809, 0x1D286F,
        0x00C4FF, 0x8E8E8E, 0xFFE052, 0xFFFFFF,
    )
)

PALETTE_16C: tuple[Color, ...] = tuple(
    Color.from_int(v)
    for v in (
        0x000000, 0x9D9D9D, 0xFFFFFF, 0xBE2633,
        0xE06F8B, 0x493C2B, 0xA46422, 0xEB8931,
        0xF7E26B, 0x2F484E, 0x44891A, 0xA3CE27,
        0x1B2632, 0x005784, 0x31A2F2, 0xB2DCEF,
    )
)

PALETTES: dict[ColorPalette, tuple[Color, ...]] = {
    ColorPalette.MONOCHROME: PALETTE_MONOCHROME,
    ColorPalette.COLOR8: PALETTE_8C,
    ColorPalette.COLOR16: PALETTE_16C,
}


def resolve_palette(selector: ColorPalette | str) -> tuple[Color, ...]:
    """Look up the colour table for a palette selector.

    Raises:
        ValueError: If *selector* is not a known palette name.
    """
    return PALETTES[ColorPalette(selector)]


def palette_to_array(palette: Sequence[Color]) -> np.ndarray:
    """Palette as a (K, 3) uint8 array, entry order preserved."""
    if not palette:
        msg = "Palette must contain at least one colour"
        raise ValueError(msg)
    return np.array(palette, dtype=np.uint8).reshape(-1, 3)


def map_to_palette(
    color: Color | Sequence[int],
    palette: Sequence[Color],
) -> tuple[int, QuantizationError]:
    """Find the palette entry closest to *color*.

    Distance is the squared Euclidean distance in RGB (the square root is
    skipped since only the ordering matters).  On a tie the earliest entry
    wins.

    Args:
        color:   The colour to quantise.
        palette: Non-empty sequence of candidate colours.

    Returns:
        ``(index, error)`` - the index of the chosen entry in *palette* and
        the quantisation error ``color - palette[index]`` per channel.
    """
    if not palette:
        msg = "Palette must contain at least one colour"
        raise ValueError(msg)

    r, g, b = int(color[0]), int(color[1]), int(color[2])
    best = 0
    best_dist = None
    for i, c in enumerate(palette):
        dist = (r - c[0]) ** 2 + (g - c[1]) ** 2 + (b - c[2]) ** 2
        if best_dist is None or dist < best_dist:
            best = i
            best_dist = dist

    chosen = palette[best]
    error = QuantizationError(
        float(r - chosen[0]), float(g - chosen[1]), float(b - chosen[2]),
    )
    return best, error
