"""
Preview rendering for region meshes.

Draws every region mesh to a PNG, looking straight down at the lattice
plane, with a different color per region. Handy for eyeballing a
segmentation without loading the export into a 3D package.
"""

import matplotlib
matplotlib.use('Agg')  # Non-interactive backend for headless operation

import matplotlib.pyplot as plt
from matplotlib.collections import PolyCollection
import numpy as np
from typing import List
from pathlib import Path

from .mesh_builder import Mesh


def render_meshes_to_file(
    meshes: List[Mesh],
    output_path: str,
    grid_width: int,
    grid_height: int
) -> None:
    """
    Render meshes to a PNG file.

    Empty meshes have nothing to draw and are skipped, but they still use
    up their color so region N keeps the same color across runs.

    Args:
        meshes: Meshes in region order
        output_path: Path where the PNG should be saved
        grid_width: Grid width in cells (for the view bounds)
        grid_height: Grid height in cells (for the view bounds)

    Raises:
        IOError: If the output file cannot be written
    """
    fig, ax = plt.subplots(figsize=(10, 10), dpi=120)
    cmap = plt.get_cmap('tab20')

    for i, mesh in enumerate(meshes):
        if mesh.is_empty:
            continue

        # Drop z, we're looking straight down the plane normal
        xy = np.asarray(mesh.vertices, dtype=float)[:, :2]
        faces = xy[np.asarray(mesh.triangles, dtype=int)]

        poly = PolyCollection(
            faces,
            facecolor=cmap(i % cmap.N),
            edgecolor='black',
            linewidths=0.1
        )
        ax.add_collection(poly)

    margin = max(grid_width, grid_height, 1) * 0.05
    ax.set_xlim(-margin, grid_width + margin)
    ax.set_ylim(-margin, grid_height + margin)
    ax.set_aspect('equal')
    ax.set_xlabel('X (cells)')
    ax.set_ylabel('Y (cells)')
    ax.set_title(f'{len(meshes)} regions', fontsize=14, fontweight='bold')

    fig.savefig(output_path, bbox_inches='tight')
    plt.close(fig)


def generate_render_path(output_path: str) -> str:
    """
    Generate the render file path from the mesh output path.

    Example:
        >>> generate_render_path("output/map_regions.json")
        'output/map_regions_render.png'
    """
    output_file = Path(output_path)
    return str(output_file.parent / f"{output_file.stem}_render.png")
