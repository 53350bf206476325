#!/usr/bin/env python3
"""
Test runner for region_mesher test suite.

Runs all unit tests and displays results.
"""

import sys
import unittest
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

# Import all test modules
from tests import (
    test_grid,
    test_region_detector,
    test_mesh_builder,
    test_scheduler,
    test_mesh_export,
    test_mesh_validation,
    test_mesher,
    test_config,
    test_cli,
    test_render_model
)


def run_tests():
    """Run all tests and return results."""
    loader = unittest.TestLoader()
    suite = unittest.TestSuite()

    # Add all test modules
    suite.addTests(loader.loadTestsFromModule(test_grid))
    suite.addTests(loader.loadTestsFromModule(test_region_detector))
    suite.addTests(loader.loadTestsFromModule(test_mesh_builder))
    suite.addTests(loader.loadTestsFromModule(test_scheduler))
    suite.addTests(loader.loadTestsFromModule(test_mesh_export))
    suite.addTests(loader.loadTestsFromModule(test_mesh_validation))
    suite.addTests(loader.loadTestsFromModule(test_mesher))
    suite.addTests(loader.loadTestsFromModule(test_config))
    suite.addTests(loader.loadTestsFromModule(test_cli))
    suite.addTests(loader.loadTestsFromModule(test_render_model))

    # Run tests
    runner = unittest.TextTestRunner(verbosity=2)
    result = runner.run(suite)

    # Print summary
    print("\n" + "="*70)
    print(f"Tests run: {result.testsRun}")
    print(f"Failures: {len(result.failures)}")
    print(f"Errors: {len(result.errors)}")
    print(f"Skipped: {len(result.skipped)}")

    if result.wasSuccessful():
        print("\n✓ All tests passed!")
        return 0
    else:
        print("\n✗ Some tests failed")
        return 1


if __name__ == '__main__':
    sys.exit(run_tests())
