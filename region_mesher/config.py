"""
Configuration dataclass for bitmap region meshing.

This module defines the MesherConfig dataclass that holds all the
parameters for a conversion run. Keeping them in one object keeps the
function signatures clean and lets new options land without breaking
the API.
"""

from dataclasses import dataclass
from typing import Optional, Tuple
from .constants import (
    TARGET_COLOR,
    FLIP_Y,
    STEP_DELAY_S,
    OUTPUT_FORMATS,
    DEFAULT_OUTPUT_FORMAT
)


@dataclass
class MesherConfig:
    """
    Configuration for bitmap to region mesh conversion.

    Attributes:
        target_color: RGBA value a pixel must match exactly to be active
        flip_y: If True, image row 0 maps to the top grid row (origin bottom-left)
        step_delay_s: Pause between mesh build steps in seconds
        output_format: Export format - "json" or "obj"
        max_regions: Build at most this many regions, then cancel the rest (None = all)
        validate_mesh: If True, run mesh validation on every built mesh
        render_model: If True, render a PNG preview next to the output file
    """

    target_color: Tuple[int, int, int, int] = TARGET_COLOR
    flip_y: bool = FLIP_Y
    step_delay_s: float = STEP_DELAY_S
    output_format: str = DEFAULT_OUTPUT_FORMAT

    # Stop building after this many regions (None = build all)
    max_regions: Optional[int] = None

    # Post-processing options
    validate_mesh: bool = False
    render_model: bool = False

    def __post_init__(self):
        """Validate configuration parameters."""
        if not isinstance(self.target_color, tuple) or len(self.target_color) not in (3, 4):
            raise ValueError(f"target_color must be an RGB or RGBA tuple, got {self.target_color}")
        if not all(isinstance(c, int) and 0 <= c <= 255 for c in self.target_color):
            raise ValueError(f"target_color values must be 0-255, got {self.target_color}")

        # RGB shorthand means fully opaque
        if len(self.target_color) == 3:
            self.target_color = (*self.target_color, 255)

        if self.step_delay_s < 0:
            raise ValueError(f"step_delay_s must be non-negative, got {self.step_delay_s}")

        if self.output_format not in OUTPUT_FORMATS:
            raise ValueError(f"output_format must be one of {OUTPUT_FORMATS}, got {self.output_format}")

        if self.max_regions is not None and self.max_regions < 0:
            raise ValueError(f"max_regions must be non-negative, got {self.max_regions}")
