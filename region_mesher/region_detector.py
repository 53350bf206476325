"""
Region detection module using a stack-based flood fill.

We scan the grid once, row by row, and every time we hit an active cell
that no region has claimed yet we flood outward from it. Everything the
flood reaches through edge-sharing neighbors becomes one Region.

Think of it like the paint bucket tool with diagonal leaks turned off:
two cells that only touch at a corner end up in different regions.
"""

import logging
from typing import Iterable, List, Tuple

import numpy as np

from .grid import Grid

logger = logging.getLogger(__name__)


class Region:
    """
    A maximal 4-connected group of active cells.

    Cells are kept in the order the flood fill committed them. A region is
    never empty and never changes after detection.
    """

    def __init__(self, index: int, cells: Iterable[Tuple[int, int]]):
        """
        Initialize a region.

        Args:
            index: Position of this region in discovery order (0-based)
            cells: Ordered (x, y) coordinates that make up this region
        """
        self._index = index
        self._cells: Tuple[Tuple[int, int], ...] = tuple(cells)

    @property
    def index(self) -> int:
        return self._index

    @property
    def cells(self) -> Tuple[Tuple[int, int], ...]:
        return self._cells

    def __len__(self) -> int:
        return len(self.cells)

    def __iter__(self):
        return iter(self.cells)

    def __repr__(self) -> str:
        return f"Region(index={self.index}, cells={len(self.cells)})"


def flood_fill(
    grid: Grid,
    start_x: int,
    start_y: int,
    visited: np.ndarray
) -> List[Tuple[int, int]]:
    """
    Collect every active cell 4-connected to (start_x, start_y).

    We use an explicit stack rather than recursion: a region can easily
    have 100,000+ cells and Python's recursion limit is around 1000.

    Neighbors are pushed left, right, down, up. With last-in-first-out
    popping that fixes the order cells are committed in, so the same grid
    always yields the same cell ordering.

    Args:
        grid: The grid being scanned
        start_x, start_y: Seed cell
        visited: Flat W*H boolean buffer, updated in place

    Returns:
        List of (x, y) coordinates in commit order (empty if the seed is
        out of bounds, already visited or inactive)
    """
    region_cells: List[Tuple[int, int]] = []
    stack: List[Tuple[int, int]] = [(start_x, start_y)]

    while stack:
        x, y = stack.pop()

        # Out-of-bounds probes are expected at the grid border, just skip them
        if not grid.in_bounds(x, y):
            continue

        offset = grid.offset(x, y)
        if visited[offset] or not grid.sample(x, y):
            continue

        visited[offset] = True
        region_cells.append((x, y))

        stack.append((x - 1, y))
        stack.append((x + 1, y))
        stack.append((x, y - 1))
        stack.append((x, y + 1))

    return region_cells


def detect_regions(grid: Grid) -> List[Region]:
    """
    Segment the grid into maximal 4-connected regions of active cells.

    The algorithm:
    1. Allocate a visited marker per cell (all False)
    2. Scan rows bottom to top (y ascending), cells left to right
    3. Every unvisited active cell seeds a new flood fill
    4. Append the resulting region in discovery order

    Args:
        grid: The grid to segment (never modified)

    Returns:
        List of Region objects in discovery order. Empty for grids with no
        active cells, including 0x0 grids.
    """
    visited = np.zeros(grid.width * grid.height, dtype=bool)
    regions: List[Region] = []

    for y in range(grid.height):
        for x in range(grid.width):
            if visited[grid.offset(x, y)] or not grid.sample(x, y):
                continue

            cells = flood_fill(grid, x, y, visited)
            regions.append(Region(index=len(regions), cells=cells))

    logger.debug(f"Detected {len(regions)} regions in {grid.width}x{grid.height} grid")
    return regions


def get_region_bounds(region: Region) -> Tuple[int, int, int, int]:
    """
    Get the bounding box of a region in cell coordinates.

    Returns:
        Tuple of (min_x, max_x, min_y, max_y)
    """
    if not region.cells:
        return (0, 0, 0, 0)

    xs = [x for x, y in region.cells]
    ys = [y for x, y in region.cells]

    return (min(xs), max(xs), min(ys), max(ys))
