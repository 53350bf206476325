#!/usr/bin/env python3
"""
Command-line interface for the bitmap region mesher.

This module handles all the CLI-specific stuff: argument parsing, pretty
printing, progress display and pacing. The actual pipeline lives in
mesher.py and can be imported/used programmatically.
"""

import argparse
import logging
import sys
from pathlib import Path
from datetime import datetime
from typing import Dict, List, Any, Tuple

from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn, BarColumn, TaskProgressColumn
from rich.panel import Panel
from rich.table import Table
from rich import box

from .constants import (
    TARGET_COLOR,
    STEP_DELAY_S,
    OUTPUT_FORMATS,
    DEFAULT_OUTPUT_FORMAT,
    DEFAULT_OUTPUT_SUFFIX,
    SUPPORTED_IMAGE_EXTENSIONS,
    __version__
)
from .config import MesherConfig
from .mesher import convert_bitmap

# Create Rich consoles for output and errors
console = Console()
error_console = Console(stderr=True)


def is_image_file(filepath: Path) -> bool:
    """Check if a file is a supported image format."""
    return filepath.suffix.lower() in SUPPORTED_IMAGE_EXTENSIONS


def parse_color(value: str) -> Tuple[int, ...]:
    """
    Parse "R,G,B" or "R,G,B,A" into a tuple.

    Raises:
        ValueError: If the value has the wrong number of parts or a part is out of range
    """
    parts = [p.strip() for p in value.split(',')]
    if len(parts) not in (3, 4):
        raise ValueError("Must have 3 or 4 values (R,G,B or R,G,B,A)")
    color = tuple(int(p) for p in parts)
    if not all(0 <= c <= 255 for c in color):
        raise ValueError("Color values must be 0-255")
    return color


def default_output_path(input_path: Path, output_format: str) -> Path:
    """{input_name}_regions.{format} next to the input."""
    return input_path.with_name(input_path.stem + DEFAULT_OUTPUT_SUFFIX + '.' + output_format)


def configure_logging(verbose: bool) -> None:
    """Route region_mesher log records to stderr when verbose."""
    package_logger = logging.getLogger('region_mesher')
    package_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)

    # Add handler only if one doesn't exist
    if not package_logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter('   [%(name)s] %(message)s'))
        package_logger.addHandler(handler)


def generate_batch_summary(
    results: Dict[str, List[Dict[str, Any]]],
    output_folder: Path,
    start_time: datetime,
    end_time: datetime
) -> str:
    """
    Write a Markdown summary of batch processing results.

    Returns:
        Path to the generated summary file
    """
    timestamp = start_time.strftime("%Y%m%d%H%M%S")
    summary_path = output_folder / f"batch_summary_{timestamp}.md"

    duration = end_time - start_time

    lines = []
    lines.append("# Batch Region Meshing Summary")
    lines.append(f"**Date:** {start_time.strftime('%Y-%m-%d %H:%M:%S')}")
    lines.append(f"**Duration:** {duration.total_seconds():.1f} seconds")
    lines.append("")

    lines.append("## Results Overview")
    lines.append(f"- ✅ **Successful:** {len(results['success'])} files")
    lines.append(f"- ❌ **Failed:** {len(results['failed'])} files")
    lines.append(f"- 📁 **Total processed:** {len(results['success']) + len(results['failed'])} files")
    lines.append("")

    if results['success']:
        lines.append("## ✅ Successful Conversions")
        lines.append("")
        lines.append("| Input File | Output File | Regions | Empty Meshes | Triangles | File Size |")
        lines.append("|------------|-------------|---------|--------------|-----------|-----------|")

        for item in results['success']:
            lines.append(
                f"| {item['input_file']} | {item['output_file']} | "
                f"{item['num_regions']} | {item['num_empty_meshes']} | "
                f"{item['num_triangles']} | {item['file_size']} |"
            )
        lines.append("")

    if results['failed']:
        lines.append("## ❌ Failed Files")
        lines.append("")

        for item in results['failed']:
            lines.append(f"### {item['input_file']}")
            lines.append(f"**Error:** {item['error']}")
            lines.append("")

    summary_path.write_text('\n'.join(lines), encoding='utf-8')

    return str(summary_path)


def process_batch(
    input_folder: Path,
    output_folder: Path,
    config: MesherConfig,
    recurse: bool = False
) -> Dict[str, List[Dict[str, Any]]]:
    """
    Process all images in a folder.

    One failing file never stops the batch: it is recorded and we move on.

    Args:
        input_folder: Folder containing input images
        output_folder: Folder where output files should be written
        config: MesherConfig used for every file
        recurse: If True, process subfolders and mirror the folder structure

    Returns:
        Dictionary with 'success' and 'failed' result lists
    """
    results = {
        'success': [],
        'failed': []
    }

    output_folder.mkdir(parents=True, exist_ok=True)

    if recurse:
        image_files = [f for f in input_folder.rglob('*') if f.is_file() and is_image_file(f)]
    else:
        image_files = [f for f in input_folder.iterdir() if f.is_file() and is_image_file(f)]

    if not image_files:
        console.print(f"[yellow]⚠️  No image files found in {input_folder}[/yellow]")
        return results

    console.print(f"[cyan]📁 Found {len(image_files)} image(s) to process[/cyan]")
    console.print()

    for i, input_path in enumerate(sorted(image_files), start=1):
        console.print(f"[cyan][{i}/{len(image_files)}] Processing: {input_path.name}[/cyan]")

        relative_path = input_path.relative_to(input_folder) if recurse else Path(input_path.name)
        output_file_path = output_folder / default_output_path(relative_path, config.output_format)
        output_file_path.parent.mkdir(parents=True, exist_ok=True)

        input_display = str(relative_path)

        try:
            stats = convert_bitmap(
                input_path=str(input_path),
                output_path=str(output_file_path),
                config=config
            )

            results['success'].append({
                'input_file': input_display,
                'output_file': str(output_file_path.relative_to(output_folder)),
                'num_regions': stats['num_regions'],
                'num_empty_meshes': stats['num_empty_meshes'],
                'num_triangles': stats['num_triangles'],
                'file_size': stats['file_size']
            })
            console.print(f"[green]   ✅ Success: {stats['num_regions']} regions, {stats['file_size']}[/green]")

        except Exception as e:
            results['failed'].append({
                'input_file': input_display,
                'error': str(e)
            })
            error_console.print(f"[red]   ❌ Failed: {e}[/red]")

        console.print()

    return results


def build_parser() -> argparse.ArgumentParser:
    """Set up the command-line argument parser."""
    parser = argparse.ArgumentParser(
        description="Split a bitmap into 4-connected regions and build one flat mesh per region",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Single file
  %(prog)s provinces.png
  %(prog)s provinces.png --format obj -o provinces.obj
  %(prog)s map.png --target-color 0,0,0 --step-delay 0.05 --render

  # Batch mode
  %(prog)s --batch --batch-input maps/ --batch-output meshes/ --recurse

The program will:
  1. Load the bitmap and mark pixels matching the target color as active
  2. Find every 4-connected region of active pixels
  3. Build one lattice mesh per region, one region per step
  4. Export the meshes (JSON or OBJ)
        """
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}"
    )

    parser.add_argument(
        "image_file",
        type=str,
        nargs='?',
        help="Input bitmap (PNG, BMP, etc.) - not used in batch mode"
    )

    # Batch mode arguments
    parser.add_argument(
        "--batch",
        action="store_true",
        help="Process every image in a folder"
    )

    parser.add_argument(
        "--batch-input",
        type=str,
        default="batch/input",
        help="Input folder for batch mode (default: batch/input)"
    )

    parser.add_argument(
        "--batch-output",
        type=str,
        default="batch/output",
        help="Output folder for batch mode (default: batch/output)"
    )

    parser.add_argument(
        "--recurse",
        action="store_true",
        help="Process subfolders recursively in batch mode, mirroring folder structure in output"
    )

    # Conversion options
    parser.add_argument(
        "-o", "--output",
        type=str,
        default=None,
        help=f"Output file path (default: {{input_name}}{DEFAULT_OUTPUT_SUFFIX}.{{format}})"
    )

    parser.add_argument(
        "--format",
        type=str,
        choices=list(OUTPUT_FORMATS),
        default=DEFAULT_OUTPUT_FORMAT,
        help=f"Output format (default: {DEFAULT_OUTPUT_FORMAT})"
    )

    parser.add_argument(
        "--target-color",
        type=str,
        default=None,
        help=f"Active pixel color as R,G,B or R,G,B,A (default: {','.join(str(c) for c in TARGET_COLOR)})"
    )

    parser.add_argument(
        "--no-flip-y",
        action="store_true",
        help="Keep image row 0 as grid row 0 (default flips so the origin is bottom-left)"
    )

    parser.add_argument(
        "--step-delay",
        type=float,
        default=STEP_DELAY_S,
        help=f"Pause between region build steps in seconds (default: {STEP_DELAY_S})"
    )

    parser.add_argument(
        "--max-regions",
        type=int,
        default=None,
        help="Stop after building this many regions"
    )

    parser.add_argument(
        "--validate",
        action="store_true",
        help="Validate every mesh (index range, dedup, winding, manifold edges)"
    )

    parser.add_argument(
        "--render",
        action="store_true",
        help="Render a PNG preview next to the output file"
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Print debug logging"
    )

    return parser


def main():
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args()

    configure_logging(args.verbose)

    if args.batch:
        if args.image_file:
            error_console.print("[red]❌ Error: Don't specify an image file when using --batch mode[/red]")
            error_console.print("[red]   Use --batch-input to specify the input folder instead[/red]")
            sys.exit(1)
    elif not args.image_file:
        error_console.print("[red]❌ Error: Image file is required (or use --batch mode)[/red]")
        parser.print_help()
        sys.exit(1)

    target_color = TARGET_COLOR
    if args.target_color:
        try:
            target_color = parse_color(args.target_color)
        except ValueError as e:
            error_console.print(f"[red]❌ Error: Invalid target color '{args.target_color}': {e}[/red]")
            error_console.print("[red]   Format: R,G,B or R,G,B,A (e.g., '255,255,255')[/red]")
            sys.exit(1)

    try:
        config = MesherConfig(
            target_color=target_color,
            flip_y=not args.no_flip_y,
            step_delay_s=args.step_delay,
            output_format=args.format,
            max_regions=args.max_regions,
            validate_mesh=args.validate,
            render_model=args.render
        )
    except ValueError as e:
        error_console.print(f"[red]❌ Error: Invalid configuration: {e}[/red]")
        sys.exit(1)

    # =========================================================================
    # BATCH MODE
    # =========================================================================
    if args.batch:
        console.print(Panel.fit(
            "[bold cyan]🗺️  Bitmap Region Mesher - BATCH MODE[/bold cyan]",
            border_style="cyan"
        ))
        console.print()

        input_folder = Path(args.batch_input)
        output_folder = Path(args.batch_output)

        if not input_folder.is_dir():
            error_console.print(f"[red]❌ Error: Input folder not found: {input_folder}[/red]")
            sys.exit(1)

        start_time = datetime.now()
        results = process_batch(input_folder, output_folder, config, recurse=args.recurse)
        end_time = datetime.now()

        summary_path = generate_batch_summary(results, output_folder, start_time, end_time)

        console.print(Panel.fit(
            "[bold green]✅ Batch processing complete![/bold green]",
            border_style="green"
        ))
        console.print(f"   [green]✅ Successful: {len(results['success'])} files[/green]")
        console.print(f"   [red]❌ Failed:     {len(results['failed'])} files[/red]")
        console.print(f"[cyan]📄 Summary: {summary_path}[/cyan]")
        console.print()

        if results['failed']:
            sys.exit(1)

        return

    # =========================================================================
    # SINGLE-FILE MODE
    # =========================================================================
    input_path = Path(args.image_file)
    if not input_path.exists():
        error_console.print(f"[red]❌ Error: Input file not found: {args.image_file}[/red]")
        sys.exit(1)

    output_path = args.output or str(default_output_path(input_path, config.output_format))

    console.print(Panel.fit(
        "[bold cyan]🗺️  Bitmap Region Mesher[/bold cyan]",
        border_style="cyan"
    ))
    console.print()

    config_table = Table(title="Configuration", box=box.ROUNDED, show_header=True, header_style="bold cyan")
    config_table.add_column("Parameter", style="bold yellow")
    config_table.add_column("Value", style="white")
    config_table.add_row("Input File", str(input_path))
    config_table.add_row("Output File", output_path)
    config_table.add_row("Target Color", f"RGBA{config.target_color}")
    config_table.add_row("Origin", "bottom-left" if config.flip_y else "top-left")
    config_table.add_row("Step Delay", f"{config.step_delay_s}s")
    config_table.add_row("Max Regions", "All" if config.max_regions is None else str(config.max_regions))
    config_table.add_row("Validation", "Enabled" if config.validate_mesh else "Disabled")
    config_table.add_row("Preview Render", "Enabled" if config.render_model else "Disabled")
    console.print(config_table)
    console.print()

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        console=console,
        transient=False
    ) as progress:

        load_task = progress.add_task("[cyan]📁 Loading image...", total=None)
        tasks = {'load': load_task}
        labels = {
            'load': "[cyan]📁 Loading image...",
            'detect': "[magenta]🧩 Detecting regions...",
            'mesh': "[blue]🔷 Building meshes...",
            'validate': "[yellow]🔍 Validating meshes...",
            'export': "[green]📦 Writing output...",
            'render': "[green]🖼️  Rendering preview...",
        }
        current_stage = 'load'
        total_regions = None

        def progress_callback(stage: str, message: str):
            nonlocal current_stage, total_regions

            if stage == 'detect' and message.startswith("Found"):
                total_regions = int(message.split()[1])

            if stage != current_stage:
                # Finished stages show as full bars
                progress.update(tasks[current_stage], completed=1, total=1)
                total = total_regions if stage == 'mesh' else None
                tasks[stage] = progress.add_task(labels[stage], total=total)
                current_stage = stage

            if stage == 'mesh' and message.startswith("Region"):
                done = int(message.split()[1].split("/")[0])
                progress.update(tasks[stage], completed=done, description=f"{labels[stage]} {message}")
            else:
                progress.update(tasks[stage], description=f"{labels[stage]} {message}")

        try:
            stats = convert_bitmap(
                input_path=str(input_path),
                output_path=output_path,
                config=config,
                progress_callback=progress_callback
            )
            progress.update(tasks[current_stage], completed=1, total=1)
        except KeyboardInterrupt:
            error_console.print("\n[yellow]Cancelled.[/yellow]")
            sys.exit(130)
        except FileNotFoundError as e:
            error_console.print(f"\n[red]❌ Error: {e}[/red]")
            sys.exit(1)
        except ValueError as e:
            error_console.print(f"\n[red]❌ Invalid input: {e}[/red]")
            sys.exit(1)
        except Exception as e:
            error_console.print(f"\n[red]❌ Unexpected error: {e}[/red]")
            import traceback
            traceback.print_exc()
            sys.exit(1)

    console.print()
    console.print(Panel.fit(
        "[bold green]✅ Conversion complete![/bold green]",
        border_style="green"
    ))

    stats_table = Table(show_header=False, box=box.SIMPLE, padding=(0, 1))
    stats_table.add_column("Label", style="bold cyan")
    stats_table.add_column("Value", style="white")
    stats_table.add_row("Image:", f"{stats['image_width']} x {stats['image_height']} pixels")
    stats_table.add_row("Active cells:", str(stats['num_active_cells']))
    stats_table.add_row("Regions:", f"{stats['num_regions']} ({stats['num_empty_meshes']} with empty meshes)")
    if stats['cancelled']:
        stats_table.add_row("Built:", f"{stats['num_meshes']} of {stats['num_regions']} (stopped early)")
    stats_table.add_row("Geometry:", f"{stats['num_vertices']} vertices, {stats['num_triangles']} triangles")
    stats_table.add_row("Output:", f"{stats['output_path']} ({stats['file_size']})")
    if 'render_path' in stats:
        stats_table.add_row("Preview:", stats['render_path'])
    console.print(stats_table)

    if 'validation_results' in stats:
        invalid = [v['name'] for v in stats['validation_results'] if not v['result'].is_valid]
        if invalid:
            console.print(f"[yellow]⚠️  {len(invalid)} meshes failed validation: {', '.join(invalid[:10])}[/yellow]")
        else:
            console.print("[green]✓ All meshes passed validation[/green]")
    console.print()


if __name__ == "__main__":
    main()
