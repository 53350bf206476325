"""
Unit tests for mesh export and JSON formatting.
"""

import unittest
import sys
import json
import tempfile
import shutil
from pathlib import Path

# Add parent directory to path to import the package
sys.path.insert(0, str(Path(__file__).parent.parent))

from region_mesher.json_utils import dumps_compact_arrays
from region_mesher.mesh_builder import build_region_mesh
from region_mesher.mesh_export import (
    mesh_name,
    meshes_to_dict,
    write_json,
    write_obj,
    write_meshes
)
from region_mesher.region_detector import Region, detect_regions
from tests.helpers import grid_from_rows, solid_grid


def sample_meshes():
    """A 2x2 quad mesh followed by an empty single-cell mesh."""
    quad = build_region_mesh(Region(0, [(0, 0), (1, 0), (0, 1), (1, 1)]))
    dot = build_region_mesh(Region(1, [(5, 5)]))
    return [quad, dot]


class TestDumpsCompactArrays(unittest.TestCase):
    """Test compact JSON output."""

    def test_numeric_arrays_on_one_line(self):
        """Test leaf arrays of numbers are folded onto one line."""
        data = {"a": [1, 2, 3], "b": [[1.5, -2.0], [3e-05, 4.0]]}

        text = dumps_compact_arrays(data)

        self.assertIn('"a": [1, 2, 3]', text)
        self.assertIn('[1.5, -2.0]', text)
        self.assertIn('[3e-05, 4.0]', text)
        self.assertEqual(json.loads(text), data)

    def test_structure_stays_indented(self):
        """Test objects and arrays of arrays keep their line breaks."""
        text = dumps_compact_arrays({"outer": [[0, 1]]})
        self.assertEqual(text, '{\n  "outer": [\n    [0, 1]\n  ]\n}')

    def test_strings_not_folded(self):
        """Test arrays of strings are left alone."""
        data = {"names": ["a", "b"]}
        text = dumps_compact_arrays(data)
        self.assertIn('"a",\n', text)
        self.assertEqual(json.loads(text), data)


class TestMeshExport(unittest.TestCase):
    """Test JSON and OBJ writers."""

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.temp_dir)

    def test_mesh_name(self):
        """Test mesh names are 1-based."""
        self.assertEqual(mesh_name(0), "region_1")
        self.assertEqual(mesh_name(9), "region_10")

    def test_meshes_to_dict(self):
        """Test the plain-data layout of one mesh."""
        data = meshes_to_dict(sample_meshes())

        self.assertEqual(len(data["meshes"]), 2)
        quad = data["meshes"][0]
        self.assertEqual(quad["name"], "region_1")
        self.assertEqual(quad["vertices"][3], [1.0, 1.0, 0.0])
        self.assertEqual(quad["triangles"], [[0, 2, 1], [2, 3, 1]])
        self.assertEqual(quad["bounds"], {"min": [0.0, 0.0, 0.0], "max": [1.0, 1.0, 0.0]})

    def test_write_json_keeps_empty_meshes(self):
        """Test every region gets a record, even with nothing to draw."""
        path = str(Path(self.temp_dir) / "out.json")

        write_json(path, sample_meshes())

        with open(path, encoding="utf-8") as f:
            data = json.load(f)
        self.assertEqual([m["name"] for m in data["meshes"]], ["region_1", "region_2"])
        self.assertEqual(data["meshes"][1]["vertices"], [[5.0, 5.0, 0.0]])
        self.assertEqual(data["meshes"][1]["triangles"], [])

    def test_write_json_counts(self):
        """Test a larger region round-trips its counts."""
        mesh = build_region_mesh(detect_regions(solid_grid(4, 4))[0])
        path = str(Path(self.temp_dir) / "out.json")

        write_json(path, [mesh])

        with open(path, encoding="utf-8") as f:
            record = json.load(f)["meshes"][0]
        self.assertEqual(len(record["vertices"]), 16)
        self.assertEqual(len(record["triangles"]), 18)

    def test_write_obj(self):
        """Test OBJ objects, counts and global 1-based indices."""
        grid = grid_from_rows([
            "##.##",
            "##.##",
        ])
        meshes = [build_region_mesh(r) for r in detect_regions(grid)]
        path = str(Path(self.temp_dir) / "out.obj")

        write_obj(path, meshes)

        lines = Path(path).read_text(encoding="utf-8").splitlines()
        objects = [l for l in lines if l.startswith("o ")]
        vertices = [l for l in lines if l.startswith("v ")]
        normals = [l for l in lines if l.startswith("vn ")]
        faces = [l for l in lines if l.startswith("f ")]

        self.assertEqual(objects, ["o region_1", "o region_2"])
        self.assertEqual(len(vertices), 8)
        self.assertEqual(len(normals), 8)
        self.assertEqual(len(faces), 4)

        indices = [int(part.split("//")[0]) for face in faces for part in face.split()[1:]]
        self.assertEqual(min(indices), 1)
        self.assertEqual(max(indices), 8)
        # Second object's faces only reference its own vertices
        second = [int(part.split("//")[0]) for face in faces[2:] for part in face.split()[1:]]
        self.assertTrue(all(5 <= i <= 8 for i in second))

    def test_write_meshes_dispatch(self):
        """Test format dispatch and rejection of unknown formats."""
        json_path = str(Path(self.temp_dir) / "out.json")
        obj_path = str(Path(self.temp_dir) / "out.obj")

        write_meshes(json_path, sample_meshes(), "json")
        write_meshes(obj_path, sample_meshes(), "obj")

        self.assertTrue(Path(json_path).exists())
        self.assertTrue(Path(obj_path).read_text(encoding="utf-8").startswith("#"))

        with self.assertRaises(ValueError):
            write_meshes(str(Path(self.temp_dir) / "out.stl"), sample_meshes(), "stl")


if __name__ == '__main__':
    unittest.main()
