"""
Tests for mesh preview rendering.
"""

import unittest
import sys
import tempfile
import shutil
from pathlib import Path

# Add parent directory to path to import the package
sys.path.insert(0, str(Path(__file__).parent.parent))

from PIL import Image

from region_mesher.mesh_builder import build_region_mesh
from region_mesher.region_detector import Region, detect_regions
from region_mesher.render_model import render_meshes_to_file, generate_render_path
from tests.helpers import solid_grid


class TestRenderModel(unittest.TestCase):
    """Test PNG preview output."""

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.temp_dir)

    def test_generate_render_path(self):
        """Test the preview lands next to the mesh file."""
        path = generate_render_path(str(Path("output") / "map_regions.json"))
        self.assertEqual(Path(path), Path("output") / "map_regions_render.png")

    def test_render_writes_png(self):
        """Test rendering a mix of empty and non-empty meshes."""
        meshes = [
            build_region_mesh(detect_regions(solid_grid(3, 3))[0]),
            build_region_mesh(Region(1, [(5, 5)])),
        ]
        output_path = str(Path(self.temp_dir) / "preview.png")

        render_meshes_to_file(meshes, output_path, 6, 6)

        with Image.open(output_path) as img:
            self.assertEqual(img.format, "PNG")
            self.assertGreater(img.width, 0)

    def test_render_nothing(self):
        """Test an empty mesh list still produces an image."""
        output_path = str(Path(self.temp_dir) / "empty.png")

        render_meshes_to_file([], output_path, 0, 0)

        self.assertTrue(Path(output_path).exists())


if __name__ == '__main__':
    unittest.main()
