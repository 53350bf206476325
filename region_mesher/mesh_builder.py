"""
Mesh building module for turning regions into flat lattice meshes.

Every cell of a region becomes one lattice vertex at (x, y, 0). A quad
(two triangles) is drawn wherever a full 2x2 block of lattice points
belongs to the region. Because each lattice point maps to exactly one
vertex, neighboring quads always share their corner vertices: no
coincident duplicates, ready for smooth normals and collision use.

The price is a footprint about one cell smaller than the region along
its boundary, and regions with no 2x2 block produce an empty mesh.
"""

import logging
from typing import Dict, List, Optional, Tuple

import numpy as np

from .constants import MESH_PLANE_Z
from .region_detector import Region

logger = logging.getLogger(__name__)

Vertex = Tuple[float, float, float]
Triangle = Tuple[int, int, int]
Bounds = Tuple[Vertex, Vertex]


class Mesh:
    """
    A flat mesh defined by vertices and triangles.

    - vertices: list of (x, y, z) positions
    - triangles: list of (v0, v1, v2) vertex indices
    - normals: one unit vector per vertex, (0, 0, 0) for vertices no
      triangle uses
    - bounds: ((min_x, min_y, min_z), (max_x, max_y, max_z))

    Triangle winding is significant: it decides which side faces outward
    for whoever renders the mesh.
    """

    def __init__(
        self,
        vertices: List[Vertex],
        triangles: List[Triangle],
        normals: Optional[List[Vertex]] = None,
        bounds: Optional[Bounds] = None
    ):
        self.vertices = vertices
        self.triangles = triangles
        self.normals = normals if normals is not None else compute_vertex_normals(vertices, triangles)
        self.bounds = bounds if bounds is not None else compute_bounds(vertices)

    @property
    def is_empty(self) -> bool:
        """True when the mesh has nothing to draw."""
        return not self.triangles

    @property
    def quad_count(self) -> int:
        return len(self.triangles) // 2

    def __repr__(self) -> str:
        return f"Mesh(vertices={len(self.vertices)}, triangles={len(self.triangles)})"


def compute_bounds(vertices: List[Vertex]) -> Bounds:
    """
    Axis-aligned bounding box of the vertex positions.

    An empty vertex list yields a zero-size box at the origin.
    """
    if not vertices:
        return ((0.0, 0.0, 0.0), (0.0, 0.0, 0.0))

    arr = np.asarray(vertices, dtype=float)
    lo = arr.min(axis=0)
    hi = arr.max(axis=0)
    return (
        (float(lo[0]), float(lo[1]), float(lo[2])),
        (float(hi[0]), float(hi[1]), float(hi[2]))
    )


def compute_vertex_normals(vertices: List[Vertex], triangles: List[Triangle]) -> List[Vertex]:
    """
    Per-vertex normals from the triangle set.

    Each triangle's cross product (area-weighted face normal) is added to
    its three vertices, then every sum is normalized. For our flat meshes
    this comes out as the plane normal everywhere, but it stays correct if
    positions ever leave the plane.

    Returns:
        One (nx, ny, nz) per vertex; vertices without triangles get (0, 0, 0)
    """
    if not vertices:
        return []

    positions = np.asarray(vertices, dtype=float)
    accum = np.zeros_like(positions)

    if triangles:
        faces = np.asarray(triangles, dtype=int)
        v0 = positions[faces[:, 0]]
        v1 = positions[faces[:, 1]]
        v2 = positions[faces[:, 2]]
        face_normals = np.cross(v1 - v0, v2 - v0)

        # np.add.at accumulates correctly when a vertex repeats in the index array
        for corner in range(3):
            np.add.at(accum, faces[:, corner], face_normals)

    lengths = np.linalg.norm(accum, axis=1)
    nonzero = lengths > 0
    accum[nonzero] /= lengths[nonzero][:, None]

    return [(float(nx), float(ny), float(nz)) for nx, ny, nz in accum]


def build_region_mesh(region: Region) -> Mesh:
    """
    Build the lattice mesh for one region.

    Three passes:
    1. Vertices: each cell gets the next index the first time we see it
    2. Faces: each cell that is the lower-left corner of a full 2x2 block
       of region cells emits two triangles
    3. Finalize: normals and bounds from the emitted triangles

    The corner labels for a block anchored at p = (x, y):
        i0 = (x, y)      i1 = (x+1, y)
        i2 = (x, y+1)    i3 = (x+1, y+1)
    emitted as (i0, i2, i1) then (i2, i3, i1).

    The vertex map is local to this call, so building regions in any order
    (or only some of them) gives the same result for each one.

    Args:
        region: A region from detect_regions()

    Returns:
        Mesh for this region, possibly with no triangles
    """
    vertices: List[Vertex] = []
    triangles: List[Triangle] = []

    # ========================================================================
    # Pass 1: Lattice vertices
    # ========================================================================
    vertex_map: Dict[Tuple[int, int], int] = {}

    for x, y in region.cells:
        # A repeated coordinate must never create a second vertex
        if (x, y) in vertex_map:
            continue
        vertex_map[(x, y)] = len(vertices)
        vertices.append((float(x), float(y), MESH_PLANE_Z))

    # ========================================================================
    # Pass 2: 2x2 faces
    # ========================================================================
    # Walk the map rather than region.cells so a repeated cell can't emit a quad twice
    for (x, y), i0 in vertex_map.items():
        i1 = vertex_map.get((x + 1, y))
        i2 = vertex_map.get((x, y + 1))
        i3 = vertex_map.get((x + 1, y + 1))
        if i1 is None or i2 is None or i3 is None:
            continue

        triangles.append((i0, i2, i1))
        triangles.append((i2, i3, i1))

    # ========================================================================
    # Pass 3: Finalize
    # ========================================================================
    mesh = Mesh(vertices=vertices, triangles=triangles)

    logger.debug(
        f"Region {region.index}: {len(region)} cells -> "
        f"{len(mesh.vertices)} vertices, {len(mesh.triangles)} triangles"
    )
    return mesh
