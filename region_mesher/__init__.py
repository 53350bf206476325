"""
Bitmap Region Mesher Package

Split a binary bitmap into maximal 4-connected regions of active pixels
and build one flat, vertex-deduplicated lattice mesh per region.
"""

from .constants import __version__

# Make the CLI main function easily accessible
from .cli import main

# Core pipeline
from .grid import Grid, load_grid
from .region_detector import Region, detect_regions
from .mesh_builder import Mesh, build_region_mesh
from .scheduler import MeshBuildSchedule, MeshStep, iter_region_meshes, run_paced
from .mesher import convert_bitmap, process_grid
from .config import MesherConfig

__all__ = [
    "__version__",
    "main",
    "Grid",
    "load_grid",
    "Region",
    "detect_regions",
    "Mesh",
    "build_region_mesh",
    "MeshBuildSchedule",
    "MeshStep",
    "iter_region_meshes",
    "run_paced",
    "convert_bitmap",
    "process_grid",
    "MesherConfig",
]
