"""Rich command-line interface powered by Typer."""

from __future__ import annotations

import logging
import time
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel

from dithers.config import DitherConfig
from dithers.dithering import dither
from dithers.image_io import default_output_path, open_image, save_image
from dithers.kernels import DitherMethod
from dithers.palette import ColorPalette, resolve_palette

app = typer.Typer(
    name="dithers",
    help="Dither images down to a small fixed colour palette.",
    add_completion=False,
    rich_markup_mode="rich",
)
console = Console()


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False, markup=True)],
    )


# Defaults come from DitherConfig - single source of truth
_DEFAULTS = DitherConfig()


# -- run command -------------------------------------------------------

@app.command()
def run(
    input_path: Path = typer.Option(
        ..., "--in", "-i", exists=True, dir_okay=False, help="Input image file",
    ),
    output: Path = typer.Option(
        _DEFAULTS.output, "--out", "-o", help="Output image file",
    ),
    keep_name: bool = typer.Option(
        False, "--keep-name",
        help="Write next to the input as <name>_out.<ext> (ignores --out)",
    ),
    method: DitherMethod = typer.Option(
        _DEFAULTS.method, "--dither", "-d", help="Dithering algorithm",
    ),
    palette: ColorPalette = typer.Option(
        _DEFAULTS.palette, "--color", "-c", help="Colour palette",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Dither a single image."""
    _setup_logging(verbose)
    logger = logging.getLogger("dithers")

    buffer, width, height = open_image(input_path)
    logger.info("Loaded %s: %dx%d", input_path, width, height)
    logger.debug(
        "Palette %s: %s",
        palette.value, " ".join(c.to_hex() for c in resolve_palette(palette)),
    )

    dither(buffer, method, palette, width, height)

    out_path = default_output_path(input_path) if keep_name else output
    save_image(buffer, out_path, width, height)
    console.print(
        f"[green]✓[/green] Saved to {out_path}  "
        f"[dim]{method.value} / {palette.value}[/dim]"
    )


# -- samples command ---------------------------------------------------

@app.command()
def samples(
    input_path: Path = typer.Option(
        ..., "--in", "-i", exists=True, dir_okay=False, help="Input image file",
    ),
    output_dir: Path = typer.Option(
        _DEFAULTS.samples_dir, "--out", "-o", help="Folder for sample renders",
    ),
    methods: list[DitherMethod] | None = typer.Option(
        None, "--dither", "-d", help="Algorithm(s) to render (default: all)",
    ),
    palettes: list[ColorPalette] | None = typer.Option(
        None, "--color", "-c", help="Palette(s) to render (default: all)",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Render one image through every requested method / palette pair."""
    _setup_logging(verbose)
    logger = logging.getLogger("dithers")

    if input_path.suffix.lower() not in _DEFAULTS.SUPPORTED_EXTENSIONS:
        logger.warning("Unrecognised extension %s, trying anyway", input_path.suffix)

    methods = methods or list(DitherMethod)
    palettes = palettes or list(ColorPalette)
    output_dir.mkdir(parents=True, exist_ok=True)

    original, width, height = open_image(input_path)
    combos = [(m, p) for m in methods for p in palettes]

    console.print(Panel.fit(
        f"[bold]DITHER SAMPLES[/bold]\n"
        f"Input: {input_path.name}  |  {width}x{height}\n"
        f"Methods: {len(methods)}  |  Palettes: {len(palettes)}",
        border_style="cyan",
    ))

    for idx, (method, palette) in enumerate(combos, 1):
        t0 = time.perf_counter()
        buffer = original.copy()
        dither(buffer, method, palette, width, height)

        name = f"sample-{method.value}-{palette.value}.{_DEFAULTS.output_format}"
        out_path = output_dir / name
        save_image(buffer, out_path, width, height)
        console.print(
            f"  [green]✓[/green] [{idx}/{len(combos)}] {out_path.name}  "
            f"[dim]time={time.perf_counter() - t0:.1f}s[/dim]"
        )

    console.print(Panel.fit(
        f"[bold green]ALL DONE[/bold green] - {len(combos)} samples in [bold]{output_dir}/[/bold]",
        border_style="green",
    ))


if __name__ == "__main__":
    app()
