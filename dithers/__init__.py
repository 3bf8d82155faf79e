"""
Dithers
=======

Restrict full-colour images to a small fixed palette with dithering.
Ships three families:

- **None** (plain nearest-colour quantisation)
- **Error diffusion** (Floyd-Steinberg, Jarvis, Atkinson, Stucki, Burkes,
  Sierra and friends)
- **Ordered** (2x2, 4x4 and 8x8 Bayer matrices)
"""

__version__ = "0.1.0"

from dithers.config import DitherConfig
from dithers.dithering import (
    apply_bayer_dithering,
    apply_error_diffusion,
    dither,
    quantize,
)
from dithers.image_io import default_output_path, open_image, save_image
from dithers.kernels import DiffusionKernel, DitherMethod, bayer_matrix
from dithers.palette import (
    PALETTE_8C,
    PALETTE_16C,
    PALETTE_MONOCHROME,
    Color,
    ColorPalette,
    QuantizationError,
    map_to_palette,
    resolve_palette,
)

__all__ = [
    "PALETTE_8C",
    "PALETTE_16C",
    "PALETTE_MONOCHROME",
    "Color",
    "ColorPalette",
    "DiffusionKernel",
    "DitherConfig",
    "DitherMethod",
    "QuantizationError",
    "apply_bayer_dithering",
    "apply_error_diffusion",
    "bayer_matrix",
    "default_output_path",
    "dither",
    "map_to_palette",
    "open_image",
    "quantize",
    "resolve_palette",
    "save_image",
]
