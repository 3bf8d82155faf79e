"""Image loading and saving as raw RGB24 buffers."""

from __future__ import annotations

from pathlib import Path

import numpy as np
from PIL import Image


def open_image(path: str | Path) -> tuple[np.ndarray, int, int]:
    """Decode any Pillow-readable image to a flat RGB24 buffer.

    Alpha and palette modes are flattened by ``convert("RGB")``.

    Returns:
        ``(buffer, width, height)`` where *buffer* is a C-contiguous uint8
        array of length ``width * height * 3``.
    """
    with Image.open(path) as img:
        rgb = img.convert("RGB")
    buffer = np.array(rgb, dtype=np.uint8).reshape(-1)
    return buffer, rgb.width, rgb.height


def save_image(
    buffer: np.ndarray | bytes | bytearray,
    path: str | Path,
    width: int,
    height: int,
) -> None:
    """Encode a flat RGB24 buffer; the format follows the file suffix."""
    path = Path(path)
    if not isinstance(buffer, np.ndarray):
        buffer = np.frombuffer(buffer, dtype=np.uint8)
    img = Image.fromarray(buffer.reshape(height, width, 3).astype(np.uint8))
    path.parent.mkdir(parents=True, exist_ok=True)
    img.save(path)


def default_output_path(input_path: str | Path) -> Path:
    """``photo.jpg`` -> ``photo_out.jpg`` in the same folder."""
    p = Path(input_path)
    return p.with_name(f"{p.stem}_out{p.suffix}")
