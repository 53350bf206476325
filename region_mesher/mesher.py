"""
Core conversion logic for bitmap region meshing.

This module contains the pipeline itself, separate from the CLI layer,
so it can be used programmatically or tested without a terminal.

grid -> detect_regions -> one build step per region -> export
"""

import logging
import math
import os
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple

from .config import MesherConfig
from .grid import Grid, load_grid
from .mesh_builder import Mesh
from .mesh_export import mesh_name, write_meshes
from .region_detector import Region, detect_regions
from .scheduler import MeshBuildSchedule, MeshStep, run_paced

logger = logging.getLogger(__name__)


def format_filesize(size_bytes: int) -> str:
    """
    Convert a file size in bytes to a human-readable format.

    Examples:
        >>> format_filesize(0)
        '0B'
        >>> format_filesize(1536)
        '1.5 KB'
    """
    if size_bytes == 0:
        return "0B"
    size_units = ("B", "KB", "MB", "GB", "TB")
    i = min(int(math.floor(math.log(size_bytes, 1024))), len(size_units) - 1)
    s = round(size_bytes / math.pow(1024, i), 2)
    return f"{s:g} {size_units[i]}"


def process_grid(
    grid: Grid,
    progress_callback: Optional[Callable[[str, str], None]] = None
) -> Tuple[List[Region], List[Mesh]]:
    """
    Run detection and mesh building on an in-memory grid.

    No pacing, no files: the pure core, start to finish.

    Args:
        grid: The grid to process
        progress_callback: Optional callback(stage, message)

    Returns:
        Tuple of (regions, meshes), both in discovery order
    """
    def _progress(stage: str, message: str):
        if progress_callback:
            progress_callback(stage, message)

    _progress("detect", "Detecting regions...")
    regions = detect_regions(grid)
    _progress("detect", f"Found {len(regions)} regions")

    schedule = MeshBuildSchedule(regions)
    for result in schedule:
        _progress("mesh", f"Region {result.index + 1}/{len(regions)}: {len(result.region)} cells")

    return regions, schedule.built


def convert_bitmap(
    input_path: str,
    output_path: str,
    config: Optional[MesherConfig] = None,
    progress_callback: Optional[Callable[[str, str], None]] = None,
    step_callback: Optional[Callable[[MeshStep, MeshBuildSchedule], None]] = None
) -> Dict[str, Any]:
    """
    Convert a bitmap into one mesh per region and write them to a file.

    The process:
    1. Load the image and classify pixels against the target color
    2. Detect regions (one uninterrupted pass)
    3. Build meshes one region per step, pausing config.step_delay_s between
       steps and stopping after config.max_regions if set
    4. Optionally validate each mesh
    5. Export, and optionally render a preview

    Args:
        input_path: Path to input image file
        output_path: Path where the mesh file should be written
        config: MesherConfig (uses defaults if None)
        progress_callback: Optional callback(stage, message)
        step_callback: Optional callback(step, schedule) after each region is
                       built; it may call schedule.cancel() to stop early

    Returns:
        Dictionary with conversion statistics:
        {
            'image_width': int,
            'image_height': int,
            'num_active_cells': int,
            'num_regions': int,
            'num_meshes': int,
            'num_empty_meshes': int,
            'num_vertices': int,
            'num_triangles': int,
            'cancelled': bool,
            'output_path': str,
            'file_size': str
        }

    Raises:
        FileNotFoundError: If input image doesn't exist
        IOError: If the image can't be loaded or the output can't be written
    """

    def _progress(stage: str, message: str):
        if progress_callback:
            progress_callback(stage, message)

    if config is None:
        config = MesherConfig()

    input_file = Path(input_path)
    if not input_file.exists():
        raise FileNotFoundError(f"Input image not found: {input_path}")

    # Step 1: Load grid
    _progress("load", f"Loading image: {input_file.name}")
    grid = load_grid(str(input_path), config.target_color, config.flip_y)
    _progress("load", f"Image loaded: {grid.width}x{grid.height}px, {grid.active_count()} active")
    logger.info(f"Loaded {input_file.name}: {grid!r}")

    # Step 2: Detect regions - must finish before any mesh is built
    _progress("detect", "Detecting regions...")
    regions = detect_regions(grid)
    _progress("detect", f"Found {len(regions)} regions")

    # Step 3: Build meshes, one region per step
    _progress("mesh", "Building meshes...")
    schedule = MeshBuildSchedule(regions)

    def _on_step(step: MeshStep):
        _progress("mesh", f"Region {step.index + 1}/{len(regions)}: {len(step.region)} cells")
        if step_callback:
            step_callback(step, schedule)
        if config.max_regions is not None and step.index + 1 >= config.max_regions:
            schedule.cancel()

    if config.max_regions == 0:
        schedule.cancel()

    meshes = run_paced(schedule, config.step_delay_s, on_step=_on_step)
    if schedule.cancelled:
        logger.info(f"Mesh building cancelled after {len(meshes)}/{len(regions)} regions")

    # Step 4: Validate
    validation_results = []
    if config.validate_mesh:
        from .mesh_validation import validate_mesh

        _progress("validate", "Validating meshes...")
        for i, mesh in enumerate(meshes):
            name = mesh_name(i)
            result = validate_mesh(mesh, name)
            validation_results.append({'name': name, 'result': result})
            if not result.is_valid:
                logger.warning(f"{name} failed validation: {'; '.join(result.errors)}")

    # Step 5: Export
    _progress("export", f"Writing {config.output_format.upper()} file...")
    write_meshes(output_path, meshes, config.output_format)
    _progress("export", "Complete!")

    render_path = None
    if config.render_model:
        from .render_model import render_meshes_to_file, generate_render_path

        _progress("render", "Rendering preview...")
        render_path = generate_render_path(output_path)
        render_meshes_to_file(meshes, render_path, grid.width, grid.height)
        _progress("render", f"Render saved to: {render_path}")

    stats = {
        'image_width': grid.width,
        'image_height': grid.height,
        'num_active_cells': grid.active_count(),
        'num_regions': len(regions),
        'num_meshes': len(meshes),
        'num_empty_meshes': sum(1 for mesh in meshes if mesh.is_empty),
        'num_vertices': sum(len(mesh.vertices) for mesh in meshes),
        'num_triangles': sum(len(mesh.triangles) for mesh in meshes),
        'cancelled': schedule.cancelled,
        'output_path': output_path,
        'file_size': format_filesize(os.path.getsize(output_path)),
    }

    if validation_results:
        stats['validation_results'] = validation_results

    if render_path:
        stats['render_path'] = render_path

    return stats
