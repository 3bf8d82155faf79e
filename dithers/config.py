"""Centralised configuration via a frozen dataclass."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from dithers.kernels import DitherMethod
from dithers.palette import ColorPalette


@dataclass(frozen=True)
class DitherConfig:
    """Defaults for a dithering run.

    Attributes:
        method:        Dithering algorithm.
        palette:       Target colour palette.
        output:        Output file for a single run.
        samples_dir:   Folder for ``samples`` renders.
        output_format: Image format (file suffix) for sample renders.
    """

    method: DitherMethod = DitherMethod.FLOYD_STEINBERG
    palette: ColorPalette = ColorPalette.MONOCHROME

    # Output
    output: Path = field(default_factory=lambda: Path("out.png"))
    samples_dir: Path = field(default_factory=lambda: Path("samples"))
    output_format: str = "png"

    SUPPORTED_EXTENSIONS: frozenset[str] = frozenset(
        {".jpg", ".jpeg", ".png", ".bmp", ".tiff", ".tif", ".webp", ".gif"}
    )
