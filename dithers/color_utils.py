"""Vectorised nearest-colour search."""

from __future__ import annotations

import numpy as np


def nearest_palette_indices(
    pixels: np.ndarray,
    palette: np.ndarray,
    chunk_size: int = 65_536,
) -> np.ndarray:
    """Index of the closest palette colour for every pixel.

    Uses the same metric as :func:`dithers.palette.map_to_palette`
    (squared RGB distance, lowest index on ties).

    Args:
        pixels:  (N, 3) uint8 RGB.
        palette: (K, 3) uint8 RGB, K >= 1.
        chunk_size: Rows computed per batch (controls peak RAM).

    Returns:
        (N,) intp array of palette indices.
    """
    p = palette.astype(np.int32)
    t = pixels.reshape(-1, 3).astype(np.int32)

    n = len(t)
    out = np.empty(n, dtype=np.intp)
    for i in range(0, n, chunk_size):
        j = min(i + chunk_size, n)
        diff = t[i:j, np.newaxis, :] - p[np.newaxis, :, :]
        # argmin returns the first minimum, matching the scalar mapper
        out[i:j] = np.argmin(np.sum(diff ** 2, axis=2), axis=1)
    return out
