"""
Test helper utilities for creating test fixtures and sample data.

This module provides utilities for creating test images and grids
used across multiple test files.
"""

from PIL import Image
from typing import Tuple, Dict, List, Optional
import tempfile
import os

from region_mesher.grid import Grid

WHITE = (255, 255, 255, 255)
BLACK = (0, 0, 0, 255)


def grid_from_rows(rows: List[str]) -> Grid:
    """
    Build a grid from ASCII rows, '#' = active, anything else inactive.

    rows[0] is grid row y=0, so the picture reads upside down compared to
    the lattice. That's deliberate: it keeps (x, y) == (column, list index).
    """
    return Grid.from_mask([[c == '#' for c in row] for row in rows])


def solid_grid(width: int, height: int) -> Grid:
    """Grid with every cell active."""
    return Grid(width, height, [True] * (width * height))


def create_test_image(
    width: int,
    height: int,
    colors: Dict[Tuple[int, ...], list],
    background: Tuple[int, ...] = BLACK,
    filepath: Optional[str] = None,
    mode: str = 'RGBA'
) -> str:
    """
    Create a test image with specified colors at specified positions.

    Positions are image coordinates (row 0 is the top of the image).

    Args:
        width: Image width in pixels
        height: Image height in pixels
        colors: Dictionary mapping color tuples to lists of (x, y) coordinates
        background: Fill color for every other pixel
        filepath: Optional path to save image (defaults to temp file)
        mode: PIL image mode ('RGBA' or 'RGB')

    Returns:
        Path to the created image file
    """
    img = Image.new(mode, (width, height), background[:len(mode)])
    pixels = img.load()
    for color, positions in colors.items():
        for x, y in positions:
            pixels[x, y] = color[:len(mode)]

    if filepath is None:
        fd, filepath = tempfile.mkstemp(suffix='.png')
        os.close(fd)

    img.save(filepath)
    return filepath


def create_block_and_dot_image(filepath: Optional[str] = None) -> str:
    """
    6x6 image with a white 3x3 block in the top-left corner and a single
    white pixel in the bottom-right corner, black elsewhere.

    With the default Y flip the dot is grid cell (5, 0) and is discovered
    first; the block covers grid x 0-2, y 3-5.
    """
    block = [(x, y) for x in range(3) for y in range(3)]
    return create_test_image(6, 6, {WHITE: block + [(5, 5)]}, filepath=filepath)


def cleanup_test_file(filepath: str) -> None:
    """Remove a test file if it exists."""
    if filepath and os.path.exists(filepath):
        os.remove(filepath)
