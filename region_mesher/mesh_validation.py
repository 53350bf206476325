"""
Mesh validation module using trimesh for quality checks.

Region meshes are flat, open surfaces, so the closed-solid checks
(watertight, volume) don't apply. What we do check:
- Every triangle index points at a real vertex
- No two vertices share a position (lattice dedup held)
- Triangle winding is consistent across shared edges
- No edge is shared by 3+ triangles
- All faces point the same way
- No zero-area triangles

An empty mesh (no triangles) is valid.
"""

import logging
from typing import Any, Dict, List

import numpy as np
import trimesh

from .mesh_builder import Mesh

logger = logging.getLogger(__name__)


class ValidationResult:
    """
    Result of mesh validation containing issues found and statistics.
    """

    def __init__(self):
        self.is_valid = True
        self.errors: List[str] = []
        self.warnings: List[str] = []
        self.stats: Dict[str, Any] = {}

    def add_error(self, message: str) -> None:
        """Add a critical error that makes the mesh invalid."""
        self.is_valid = False
        self.errors.append(message)

    def add_warning(self, message: str) -> None:
        self.warnings.append(message)

    def add_stat(self, key: str, value: Any) -> None:
        self.stats[key] = value

    def __repr__(self) -> str:
        status = "VALID" if self.is_valid else "INVALID"
        return f"ValidationResult({status}, errors={len(self.errors)}, warnings={len(self.warnings)})"


def _edge_face_counts(triangles) -> Dict[tuple, int]:
    counts: Dict[tuple, int] = {}
    for a, b, c in triangles:
        for edge in ((a, b), (b, c), (c, a)):
            key = (min(edge), max(edge))
            counts[key] = counts.get(key, 0) + 1
    return counts


def validate_mesh(mesh: Mesh, mesh_name: str = "mesh") -> ValidationResult:
    """
    Validate a region mesh.

    Args:
        mesh: Mesh object to validate
        mesh_name: Name for messages (e.g., "region_3")

    Returns:
        ValidationResult with detailed findings
    """
    result = ValidationResult()
    result.add_stat("vertices", len(mesh.vertices))
    result.add_stat("triangles", len(mesh.triangles))

    # Index range check first: trimesh can't even be built otherwise
    num_vertices = len(mesh.vertices)
    bad = [t for t in mesh.triangles if any(i < 0 or i >= num_vertices for i in t)]
    if bad:
        result.add_error(f"{mesh_name} has {len(bad)} triangles referencing missing vertices")
        return result

    # Lattice dedup: one vertex per position
    if num_vertices:
        unique = np.unique(np.asarray(mesh.vertices, dtype=float), axis=0)
        duplicates = num_vertices - len(unique)
        if duplicates:
            result.add_error(f"{mesh_name} has {duplicates} duplicate vertex positions")
        result.add_stat("duplicate_vertices", duplicates)

    if mesh.is_empty:
        result.add_stat("empty", True)
        return result

    try:
        tmesh = trimesh.Trimesh(
            vertices=np.asarray(mesh.vertices, dtype=float),
            faces=np.asarray(mesh.triangles, dtype=np.int64),
            process=False  # Don't merge or reorder, we want to see the mesh as built
        )
    except Exception as e:
        result.add_error(f"{mesh_name}: Failed to create trimesh object: {e}")
        return result

    # Winding consistency across shared edges
    try:
        if not tmesh.is_winding_consistent:
            result.add_error(f"{mesh_name} has inconsistent triangle winding")
        else:
            result.add_stat("winding_consistent", True)
    except Exception as e:
        result.add_warning(f"Could not check winding consistency: {e}")

    # Non-manifold edges (shared by 3+ faces)
    nonmanifold = [e for e, count in _edge_face_counts(mesh.triangles).items() if count > 2]
    result.add_stat("nonmanifold_edges", len(nonmanifold))
    if nonmanifold:
        result.add_error(f"{mesh_name} has {len(nonmanifold)} non-manifold edges")

    # Degenerate faces
    degenerate = int((tmesh.area_faces < 1e-12).sum())
    if degenerate:
        result.add_warning(f"{mesh_name} has {degenerate} degenerate (zero-area) triangles")
        result.add_stat("degenerate_faces", degenerate)

    # Facing direction: every face normal should agree
    normals = tmesh.face_normals
    if len(normals) and np.allclose(normals, normals[0], atol=1e-9):
        result.add_stat("facing", [float(c) for c in normals[0]])
    else:
        result.add_warning(f"{mesh_name} faces do not all point the same way")

    result.add_stat("surface_area", float(tmesh.area))
    result.add_stat("bounds_min", [float(c) for c in tmesh.bounds[0]])
    result.add_stat("bounds_max", [float(c) for c in tmesh.bounds[1]])

    logger.debug(f"{mesh_name}: {result!r}")
    return result


def get_mesh_report(mesh: Mesh, mesh_name: str = "mesh") -> str:
    """
    Generate a human-readable mesh quality report.

    Args:
        mesh: Mesh to analyze
        mesh_name: Name for the report

    Returns:
        Formatted report string
    """
    result = validate_mesh(mesh, mesh_name)

    lines = []
    lines.append(f"=== Mesh Quality Report: {mesh_name} ===")
    lines.append("")
    lines.append("Basic Statistics:")
    lines.append(f"  Vertices: {result.stats.get('vertices', 0):,}")
    lines.append(f"  Triangles: {result.stats.get('triangles', 0):,}")
    lines.append("")

    lines.append("Validation Status:")
    if result.is_valid:
        lines.append("  ✅ VALID - Mesh passed all critical checks")
    else:
        lines.append("  ❌ INVALID - Mesh has critical issues")
    if result.stats.get('empty'):
        lines.append("  Empty: no 2x2 block, nothing to draw")
    else:
        lines.append(f"  Winding Consistent: {'✅ Yes' if result.stats.get('winding_consistent') else '❌ No'}")
        if 'facing' in result.stats:
            nx, ny, nz = result.stats['facing']
            lines.append(f"  Facing: ({nx:.0f}, {ny:.0f}, {nz:.0f})")
        if 'surface_area' in result.stats:
            lines.append(f"  Surface Area: {result.stats['surface_area']:.2f}")
    lines.append("")

    if result.errors:
        lines.append("Errors:")
        for error in result.errors:
            lines.append(f"  ❌ {error}")
        lines.append("")

    if result.warnings:
        lines.append("Warnings:")
        for warning in result.warnings:
            lines.append(f"  ⚠️ {warning}")
        lines.append("")

    return "\n".join(lines)
