#!/usr/bin/env python3
"""
main.py — Quick-start entry point.

    python main.py run -i photo.jpg -o out.png -d atkinson -c color16

Or render every algorithm / palette pair for one image:

    python -m dithers.cli samples -i photo.jpg -o samples
"""

from dithers.cli import app

if __name__ == "__main__":
    app()
