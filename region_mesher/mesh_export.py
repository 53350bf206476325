"""
Mesh export module.

Writes the region meshes out for whatever tool instantiates them:
- JSON: one record per mesh with vertices, triangles and bounds
- OBJ: one named object per mesh, readable by any 3D package

Meshes are written in region discovery order and triangle winding is
kept exactly as built. Empty meshes are still written, so the Nth record
always belongs to the Nth region.
"""

from pathlib import Path
from typing import List, Tuple

from .constants import COORDINATE_PRECISION
from .json_utils import dumps_compact_arrays
from .mesh_builder import Mesh


def mesh_name(index: int) -> str:
    """Object name for the mesh of region number index (0-based)."""
    return f"region_{index + 1}"


def _round_vertex(vertex: Tuple[float, float, float]) -> List[float]:
    return [round(float(c), COORDINATE_PRECISION) for c in vertex]


def meshes_to_dict(meshes: List[Mesh]) -> dict:
    """Plain-data representation of the meshes, as written by write_json()."""
    records = []
    for i, mesh in enumerate(meshes):
        lo, hi = mesh.bounds
        records.append({
            "name": mesh_name(i),
            "vertices": [_round_vertex(v) for v in mesh.vertices],
            "triangles": [list(t) for t in mesh.triangles],
            "bounds": {"min": _round_vertex(lo), "max": _round_vertex(hi)},
        })
    return {"meshes": records}


def write_json(output_path: str, meshes: List[Mesh]) -> None:
    """Write meshes as a JSON document."""
    Path(output_path).write_text(dumps_compact_arrays(meshes_to_dict(meshes)) + "\n", encoding="utf-8")


def write_obj(output_path: str, meshes: List[Mesh]) -> None:
    """
    Write meshes as a Wavefront OBJ file.

    OBJ indices are 1-based and global to the file, so each object's
    face indices are offset by the number of vertices written before it.
    """
    lines = ["# region_mesher export", f"# {len(meshes)} meshes"]
    offset = 1

    for i, mesh in enumerate(meshes):
        lines.append(f"o {mesh_name(i)}")
        for vertex in mesh.vertices:
            x, y, z = _round_vertex(vertex)
            lines.append(f"v {x} {y} {z}")
        for nx, ny, nz in mesh.normals:
            lines.append(f"vn {nx} {ny} {nz}")
        for a, b, c in mesh.triangles:
            a, b, c = a + offset, b + offset, c + offset
            lines.append(f"f {a}//{a} {b}//{b} {c}//{c}")
        offset += len(mesh.vertices)

    Path(output_path).write_text("\n".join(lines) + "\n", encoding="utf-8")


def write_meshes(output_path: str, meshes: List[Mesh], output_format: str) -> None:
    """
    Write meshes in the given format.

    Raises:
        ValueError: If output_format is not "json" or "obj"
    """
    if output_format == "json":
        write_json(output_path, meshes)
    elif output_format == "obj":
        write_obj(output_path, meshes)
    else:
        raise ValueError(f"Unsupported output format: {output_format}")
