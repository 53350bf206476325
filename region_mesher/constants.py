"""
Configuration constants for bitmap region meshing.

All the magic numbers live here! Want to change your defaults?
Just edit these values and every conversion picks them up.
"""

__version__ = "1.0.0"

# ============================================================================
# Cell Classification
# ============================================================================

# A pixel is "active" when its RGBA value matches this exactly.
# Opaque white is what map painters use for land by default.
TARGET_COLOR = (255, 255, 255, 255)

# Image rows run top-to-bottom, lattice rows run bottom-to-top.
# When enabled, image row 0 becomes grid row (height - 1).
FLIP_Y = True

# ============================================================================
# Mesh Geometry
# ============================================================================

# Every lattice vertex sits on this plane
MESH_PLANE_Z = 0.0

# ============================================================================
# Scheduling
# ============================================================================

# Pause between two mesh build steps in seconds (0 = no pause)
STEP_DELAY_S = 0.0

# ============================================================================
# Batch Processing
# ============================================================================

# Supported image file extensions for batch processing
SUPPORTED_IMAGE_EXTENSIONS = {'.png', '.jpg', '.jpeg', '.gif', '.bmp', '.webp'}

# ============================================================================
# Output
# ============================================================================

# Supported mesh export formats
OUTPUT_FORMATS = ("json", "obj")
DEFAULT_OUTPUT_FORMAT = "json"

# If no output file is specified, we'll use: {input_name}_regions.{format}
DEFAULT_OUTPUT_SUFFIX = "_regions"

# Decimal places for vertex coordinates in exported files
COORDINATE_PRECISION = 4
