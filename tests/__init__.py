"""
GPU Metrics Tests Module - Initialization
=========================================

Unit and integration tests for the gpu_metrics telemetry system.

Test Organization:
------------------
1. test_layout.py    - Vendor struct layouts and alignment
2. test_registry.py  - Schema registry and compiled-in tables
3. test_decoder.py   - Field decoder, sentinels and fallbacks
4. test_validator.py - Channel validator over every revision
5. test_detector.py  - Functional/dummy cores, renumbering, placement
6. test_cache.py     - Snapshot cache refresh, failures, concurrency
7. test_device.py    - Device facade, discovery, configuration

Snapshots are synthesized with telemetry.simulator.SnapshotSimulator; no
AMD hardware is needed.

Example Test Run:
-----------------
$ pip install -e .[test]
$ pytest tests/

Version: 1.0.0
Author: Telemetry Team
Date: October 19, 2026
"""

import unittest
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from . import test_layout
from . import test_registry
from . import test_decoder
from . import test_validator
from . import test_detector
from . import test_cache
from . import test_device

__all__ = [
    "test_layout",
    "test_registry",
    "test_decoder",
    "test_validator",
    "test_detector",
    "test_cache",
    "test_device",
]

__version__ = "1.0.0"
__author__ = "Telemetry Team"
__date__ = "2026-10-19"


def create_test_suite():
    """
    Create the complete test suite.

    Returns:
        unittest.TestSuite with all tests
    """
    loader = unittest.TestLoader()
    suite = unittest.TestSuite()

    for module in (test_layout, test_registry, test_decoder, test_validator,
                   test_detector, test_cache, test_device):
        suite.addTests(loader.loadTestsFromModule(module))

    return suite


def run_tests(verbosity: int = 2):
    """Run all tests."""
    suite = create_test_suite()
    runner = unittest.TextTestRunner(verbosity=verbosity)
    return runner.run(suite)


if __name__ == "__main__":
    result = run_tests()
    sys.exit(0 if result.wasSuccessful() else 1)
