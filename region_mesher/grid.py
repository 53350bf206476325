"""
Grid module for bitmap region meshing.

This module handles:
- Holding the binary (active / inactive) classification of every pixel
- Loading an image file and classifying its pixels against a target color
- Bounds checks used by the flood fill

A Grid owns one flat buffer of W*H booleans. Cell (x, y) lives at
offset y*W + x. The buffer never grows and is never written after
construction.
"""

from pathlib import Path
from typing import Tuple

import numpy as np
from PIL import Image

from .constants import TARGET_COLOR, FLIP_Y


class Grid:
    """
    Immutable 2D grid of active/inactive cells.

    Think of it as the parsed bitmap: every cell either matches the target
    color or it doesn't, and that's all the later stages need to know.
    """

    def __init__(self, width: int, height: int, cells):
        """
        Initialize a grid.

        Args:
            width: Grid width in cells
            height: Grid height in cells
            cells: Flat sequence of W*H truthy values, row-major (offset = y*W + x)

        Raises:
            ValueError: If dimensions are negative or don't match the buffer size
        """
        if width < 0 or height < 0:
            raise ValueError(f"Grid dimensions must be non-negative, got {width}x{height}")

        buffer = np.asarray(cells, dtype=bool).reshape(-1)
        if buffer.size != width * height:
            raise ValueError(
                f"Grid buffer has {buffer.size} cells, expected {width}x{height} = {width * height}"
            )

        self.width = width
        self.height = height
        self._cells = buffer.copy()
        self._cells.flags.writeable = False

    @classmethod
    def from_mask(cls, mask) -> "Grid":
        """
        Build a grid from a 2D array-like indexed as mask[y][x].

        Args:
            mask: Nested sequence or numpy array of shape (height, width)

        Returns:
            Grid with the same cells
        """
        arr = np.asarray(mask, dtype=bool)
        if arr.ndim > 2:
            raise ValueError(f"Grid mask must be 2-dimensional, got shape {arr.shape}")
        if arr.size == 0:
            # np.asarray([]) is 1D, so recover the intended dimensions by hand
            if arr.ndim == 2:
                return cls(arr.shape[1], arr.shape[0], [])
            return cls(0, 0, [])
        if arr.ndim != 2:
            raise ValueError(f"Grid mask must be 2-dimensional, got shape {arr.shape}")

        height, width = arr.shape
        return cls(width, height, arr.reshape(-1))

    def offset(self, x: int, y: int) -> int:
        """Flat buffer offset of cell (x, y). No bounds check."""
        return y * self.width + x

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def sample(self, x: int, y: int) -> bool:
        """
        Return True if cell (x, y) is active.

        Raises:
            IndexError: If (x, y) lies outside the grid
        """
        if not self.in_bounds(x, y):
            raise IndexError(f"Cell ({x}, {y}) is outside the {self.width}x{self.height} grid")
        return bool(self._cells[y * self.width + x])

    def active_count(self) -> int:
        return int(self._cells.sum())

    def __repr__(self) -> str:
        return f"Grid({self.width}x{self.height}, {self.active_count()} active cells)"


def load_grid(
    image_path: str,
    target_color: Tuple[int, int, int, int] = TARGET_COLOR,
    flip_y: bool = FLIP_Y
) -> Grid:
    """
    Load an image file and classify each pixel against the target color.

    A pixel is active only when its RGBA value equals target_color exactly.
    Images without an alpha channel are treated as fully opaque.

    Args:
        image_path: Path to the image file (PNG, BMP, etc.)
        target_color: RGBA tuple (an RGB tuple means fully opaque)
        flip_y: If True, image row 0 (top) becomes grid row height-1, so
                grid (0, 0) is the bottom-left pixel

    Returns:
        Grid with one cell per pixel

    Raises:
        FileNotFoundError: If the image doesn't exist
        IOError: If the image can't be decoded
    """
    path = Path(image_path)
    if not path.exists():
        raise FileNotFoundError(f"Input image not found: {image_path}")

    if len(target_color) == 3:
        target_color = (*target_color, 255)

    with Image.open(path) as img:
        # Shape is (height, width, 4), row 0 is the top of the image
        pixel_array = np.array(img.convert('RGBA'))

    mask = np.all(pixel_array == np.array(target_color, dtype=np.uint8), axis=-1)

    if flip_y:
        # Image coordinates: Y=0 is TOP, lattice coordinates: Y=0 is BOTTOM
        mask = mask[::-1]

    return Grid.from_mask(mask)
