"""Dithering engine: direct quantisation, error diffusion and ordered dithering.

All entry points work **in place** on a flat RGB24 buffer (``(y * width + x)
* 3`` addressing, channel order R, G, B) and never change its length.

Error diffusion is inherently sequential: each pixel is quantised after the
error of every earlier neighbour has been written back into the buffer as an
8-bit value, so small rounding effects compound exactly as in the reference
output.  The ``none`` and Bayer paths have no cross-pixel dependency and are
vectorised over the whole image.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Sequence

import numpy as np
from numba import njit

from dithers.color_utils import nearest_palette_indices
from dithers.kernels import DiffusionKernel, DitherMethod
from dithers.palette import (
    Color,
    ColorPalette,
    palette_to_array,
    resolve_palette,
)

logger = logging.getLogger(__name__)

PixelBuffer = np.ndarray | bytearray | memoryview


def _as_pixels(buffer: PixelBuffer, width: int, height: int) -> np.ndarray:
    """Writable (height, width, 3) uint8 view onto *buffer*.

    Raises:
        ValueError: On non-positive dimensions, a length that is not
            ``width * height * 3``, or an ndarray that cannot be viewed
            in place.
    """
    if width <= 0 or height <= 0:
        msg = f"Image dimensions must be positive, got {width}x{height}"
        raise ValueError(msg)

    if isinstance(buffer, np.ndarray):
        if buffer.dtype != np.uint8:
            msg = f"Pixel buffer must be uint8, got {buffer.dtype}"
            raise ValueError(msg)
        if not buffer.flags.c_contiguous:
            msg = "Pixel buffer must be a C-contiguous array"
            raise ValueError(msg)
        flat = buffer.reshape(-1)
    else:
        flat = np.frombuffer(buffer, dtype=np.uint8)

    if not flat.flags.writeable:
        msg = "Pixel buffer is read-only"
        raise ValueError(msg)

    expected = width * height * 3
    if flat.size != expected:
        msg = (
            f"Pixel buffer holds {flat.size} bytes, expected "
            f"{expected} for {width}x{height} RGB"
        )
        raise ValueError(msg)
    return flat.reshape(height, width, 3)


def round_half_away(values: np.ndarray) -> np.ndarray:
    """Round to the nearest integer, ties away from zero.

    Unlike :func:`numpy.round` (ties to even), ``2.5 -> 3`` and
    ``-0.5 -> -1``.
    """
    v = np.asarray(values, dtype=np.float64)
    return np.copysign(np.floor(np.abs(v) + 0.5), v)


def quantize(
    buffer: PixelBuffer,
    palette: Sequence[Color],
    width: int,
    height: int,
) -> None:
    """Replace every pixel with its nearest palette colour, no dithering."""
    pixels = _as_pixels(buffer, width, height)
    pal = palette_to_array(palette)
    idx = nearest_palette_indices(pixels.reshape(-1, 3), pal)
    pixels[...] = pal[idx].reshape(pixels.shape)


def apply_error_diffusion(
    buffer: PixelBuffer,
    method: DitherMethod | str,
    palette: Sequence[Color],
    width: int,
    height: int,
) -> None:
    """Kernel-based error diffusion, scanning rows top to bottom, left to right.

    Each pixel is mapped to the palette and its quantisation error is spread
    to the not-yet-visited neighbours named by the method's kernel.  A
    neighbour receives ``round(stored + error * weight)`` clamped to 0-255;
    contributions that fall outside the image are dropped.

    Args:
        buffer:  Flat RGB24 pixels, modified in place.
        method:  An error-diffusion :class:`DitherMethod`.
        palette: Target colours.
        width:   Image width in pixels.
        height:  Image height in pixels.
    """
    kernel = DitherMethod(method).kernel
    pixels = _as_pixels(buffer, width, height)
    pal = palette_to_array(palette).astype(np.int64)

    cells = kernel.cells()
    dxs = np.array([c[0] for c in cells], dtype=np.int64)
    dys = np.array([c[1] for c in cells], dtype=np.int64)

    _diffuse_jit(pixels, pal, dxs, dys, diffusion_table(kernel))


def diffusion_table(kernel: DiffusionKernel) -> np.ndarray:
    """Precomputed neighbour updates for every non-zero kernel cell.

    Channel errors are integers in [-255, 255] and stored samples are
    integers in [0, 255], so every possible update
    ``clip(round_half_away(stored + error * weight), 0, 255)`` fits in a
    table.  The sum is evaluated in float32.

    Returns:
        (cells, 511, 256) uint8 indexed by ``[cell, error + 255, stored]``.
    """
    weights = np.array([c[2] for c in kernel.cells()], dtype=np.float32)
    err = np.arange(-255, 256, dtype=np.float32)
    stored = np.arange(256, dtype=np.float32)
    spread = err[np.newaxis, :] * weights[:, np.newaxis]
    acc = stored[np.newaxis, np.newaxis, :] + spread[:, :, np.newaxis]
    return np.clip(round_half_away(acc), 0, 255).astype(np.uint8)


@njit(cache=True, nogil=True)
def _diffuse_jit(
    pixels: np.ndarray,
    pal: np.ndarray,
    dxs: np.ndarray,
    dys: np.ndarray,
    table: np.ndarray,
) -> None:
    """Raster-order scan; integer-only, all float work lives in *table*."""
    height, width, _ = pixels.shape
    n_colors = pal.shape[0]
    n_cells = dxs.shape[0]

    for y in range(height):
        for x in range(width):
            r = np.int64(pixels[y, x, 0])
            g = np.int64(pixels[y, x, 1])
            b = np.int64(pixels[y, x, 2])

            # Strict < keeps the first of equally distant entries
            best = 0
            best_dist = -1
            for i in range(n_colors):
                dr = r - pal[i, 0]
                dg = g - pal[i, 1]
                db = b - pal[i, 2]
                dist = dr * dr + dg * dg + db * db
                if best_dist < 0 or dist < best_dist:
                    best = i
                    best_dist = dist

            pixels[y, x, 0] = pal[best, 0]
            pixels[y, x, 1] = pal[best, 1]
            pixels[y, x, 2] = pal[best, 2]
            er = r - pal[best, 0] + 255
            eg = g - pal[best, 1] + 255
            eb = b - pal[best, 2] + 255

            for c in range(n_cells):
                nx = x + dxs[c]
                ny = y + dys[c]
                if nx < 0 or nx >= width or ny >= height:
                    continue
                pixels[ny, nx, 0] = table[c, er, pixels[ny, nx, 0]]
                pixels[ny, nx, 1] = table[c, eg, pixels[ny, nx, 1]]
                pixels[ny, nx, 2] = table[c, eb, pixels[ny, nx, 2]]


def apply_bayer_dithering(
    buffer: PixelBuffer,
    method: DitherMethod | str,
    palette: Sequence[Color],
    width: int,
    height: int,
) -> None:
    """Ordered dithering with a tiled Bayer threshold matrix.

    Each channel becomes ``trunc(clip(c / 255 + t - 0.5, 0, 1) * 255)`` where
    ``t`` is the matrix entry at ``(y mod N, x mod N)``; the perturbed colour
    is then mapped to the palette.  No error is propagated.
    """
    method = DitherMethod(method)
    n = method.bayer_size
    matrix = method.threshold_matrix.reshape(n, n)
    pixels = _as_pixels(buffer, width, height)
    pal = palette_to_array(palette)

    ys = np.arange(height) % n
    xs = np.arange(width) % n
    thresholds = matrix[ys[:, np.newaxis], xs[np.newaxis, :]][..., np.newaxis]

    c = pixels.astype(np.float32) / np.float32(255.0)
    c = (c + thresholds) - np.float32(0.5)
    c = np.clip(c, np.float32(0.0), np.float32(1.0)) * np.float32(255.0)
    perturbed = c.astype(np.uint8)

    idx = nearest_palette_indices(perturbed.reshape(-1, 3), pal)
    pixels[...] = pal[idx].reshape(pixels.shape)


def dither(
    buffer: PixelBuffer,
    method: DitherMethod | str,
    palette: ColorPalette | str,
    width: int,
    height: int,
) -> None:
    """Restrict *buffer* to *palette* using *method*, in place.

    Args:
        buffer:  Flat RGB24 pixels (uint8 ndarray or bytearray) of length
            ``width * height * 3``.
        method:  Dithering method or its name, e.g. ``"floyd-steinberg"``.
        palette: Palette selector or its name, e.g. ``"color8"``.
        width:   Image width in pixels.
        height:  Image height in pixels.

    Raises:
        ValueError: On an unknown method or palette, or a buffer that does
            not match the dimensions.  Nothing is modified in that case.
    """
    method = DitherMethod(method)
    selector = ColorPalette(palette)
    colors = resolve_palette(selector)
    _as_pixels(buffer, width, height)

    logger.info(
        "Dithering %dx%d with %s (%s, %d colours)",
        width, height, method.value, selector.value, len(colors),
    )
    t0 = time.perf_counter()

    if method is DitherMethod.NONE:
        quantize(buffer, colors, width, height)
    elif method.is_ordered:
        apply_bayer_dithering(buffer, method, colors, width, height)
    else:
        apply_error_diffusion(buffer, method, colors, width, height)

    logger.debug("Dithering done  (%.2f s)", time.perf_counter() - t0)
