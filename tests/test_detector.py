"""
GPU Metrics Tests - Core Functionality Detector
===============================================

Unit tests for functional/dummy core classification, label renumbering and
per-core placement.

Test Coverage:
--------------
1. Classification truth table
2. Dense renumbering of functional cores
3. NoFunctionalCores downgrade
4. split_per_core

Author: Telemetry Team
Date: October 19, 2026
"""

import unittest

from core.detector import CoreFunctionalityDetector
from core.errors import NoFunctionalCores
from core.placement import split_per_core
from core.types import Category
from core.validator import ChannelValidator
from revisions.registry import default_registry
from telemetry.simulator import SnapshotSimulator

TEMP = Category.TEMPERATURE
POWER = Category.POWER
FREQ = Category.FREQUENCY


class DetectorTestCase(unittest.TestCase):

    def setUp(self):
        self.registry = default_registry()
        self.validator = ChannelValidator()
        self.detector = CoreFunctionalityDetector()

    def simulator(self, fmt=2, content=1, seed=0):
        return SnapshotSimulator(self.registry, fmt, content, seed=seed).populate()

    def detect(self, sim):
        data = sim.build()
        tables = self.validator.validate_all(data, sim.schema)
        return tables, self.detector.detect(data, sim.schema, tables)


class TestClassification(DetectorTestCase):
    """Per-core truth table."""

    def test_all_cores_functional(self):
        _, report = self.detect(self.simulator())
        self.assertEqual(report.functional, 8)
        self.assertEqual(report.dummy, 0)

    def test_sixteen_cores(self):
        _, report = self.detect(self.simulator(3, 0))
        self.assertEqual(report.functional, 16)

    def test_dummy_core(self):
        sim = self.simulator()
        sim.set_core(3, temp=4200, power=0, freq=0)

        _, report = self.detect(sim)

        self.assertEqual(report.functional, 7)
        self.assertEqual(report.dummy, 1)
        for category in Category:
            self.assertFalse(report.tables[category].core_entry(3).valid)

    def test_power_without_frequency_is_dummy(self):
        sim = self.simulator()
        sim.set_core(2, power=1500, freq=0)
        _, report = self.detect(sim)
        self.assertFalse(report.tables[POWER].core_entry(2).valid)

    def test_zero_power_unavailable_frequency_is_dummy(self):
        sim = self.simulator()
        sim.set_core(2, power=0)
        sim.set_sentinel(FREQ, "coreclk[2]")
        _, report = self.detect(sim)
        self.assertFalse(report.tables[TEMP].core_entry(2).valid)
        self.assertEqual(report.dummy, 1)

    def test_unavailable_power_with_frequency_is_functional(self):
        sim = self.simulator()
        sim.set_sentinel(POWER, "core[5]")
        sim.set_core(5, freq=2200)
        _, report = self.detect(sim)
        self.assertTrue(report.tables[FREQ].core_entry(5).valid)
        self.assertEqual(report.functional, 8)

    def test_both_unavailable_is_functional(self):
        sim = self.simulator()
        sim.set_sentinel(POWER, "core[5]")
        sim.set_sentinel(FREQ, "coreclk[5]")
        _, report = self.detect(sim)
        self.assertTrue(report.tables[TEMP].core_entry(5).valid)
        self.assertEqual(report.functional, 8)

    def test_input_tables_untouched(self):
        sim = self.simulator()
        sim.set_core(3, temp=4200, power=0, freq=0)

        tables, _ = self.detect(sim)

        self.assertTrue(tables[TEMP].core_entry(3).valid)
        self.assertTrue(tables[POWER].core_entry(3).valid)


class TestRenumbering(DetectorTestCase):
    """Dense label indices over functional cores."""

    def test_next_core_takes_dummy_label(self):
        sim = self.simulator()
        sim.set_core(3, temp=4200, power=0, freq=0)

        _, report = self.detect(sim)

        for category in Category:
            table = report.tables[category]
            self.assertEqual(table.core_entry(4).label_index, category.core_offset + 3)
            self.assertEqual(table.core_entry(2).label_index, category.core_offset + 2)
        self.assertEqual(report.tables[TEMP].label(TEMP.core_offset + 4), "Core 3")

    def test_label_indices_gap_free(self):
        sim = self.simulator(3, 0, seed=9)
        for core in (1, 6, 11):
            sim.set_core(core, power=0, freq=0)

        _, report = self.detect(sim)

        self.assertEqual(report.functional, 13)
        for category in Category:
            table = report.tables[category]
            indices = [table[slot].label_index for slot in table.valid_slots()
                       if category.core_offset <= slot < category.core_offset + 16]
            self.assertEqual(
                indices,
                list(range(category.core_offset, category.core_offset + 13)),
            )

    def test_non_core_labels_unchanged(self):
        sim = self.simulator()
        sim.set_core(0, power=0, freq=0)
        _, report = self.detect(sim)
        table = report.tables[TEMP]
        self.assertEqual(table.label(TEMP.slot_index("gfx")), "GFX")
        self.assertEqual(table.label(TEMP.slot_index("l3[1]")), "L3 1")


class TestNoFunctionalCores(DetectorTestCase):
    """Per-core feature downgrade."""

    def test_all_dummy(self):
        sim = self.simulator()
        for core in range(8):
            sim.set_core(core, power=0, freq=0)

        data = sim.build()
        tables = self.validator.validate_all(data, sim.schema)
        with self.assertRaises(NoFunctionalCores) as ctx:
            self.detector.detect(data, sim.schema, tables)

        self.assertEqual(ctx.exception.dummy, 8)
        downgraded = ctx.exception.tables
        for category in Category:
            self.assertEqual(
                [s for s in downgraded[category].valid_slots()
                 if category.core_offset <= s < category.core_offset + 16],
                [],
            )
        self.assertTrue(downgraded[TEMP][TEMP.slot_index("gfx")].valid)

    def test_revision_without_cores(self):
        sim = self.simulator(1, 0)
        data = sim.build()
        tables = self.validator.validate_all(data, sim.schema)
        with self.assertRaises(NoFunctionalCores) as ctx:
            self.detector.detect(data, sim.schema, tables)
        self.assertEqual(ctx.exception.dummy, 0)


class TestPlacement(DetectorTestCase):
    """split_per_core."""

    def test_per_core_map_skips_dummy(self):
        sim = self.simulator()
        sim.set_core(3, power=0, freq=0)
        _, report = self.detect(sim)

        tables, per_core_map = split_per_core(report.tables)

        self.assertEqual(per_core_map, [0, 1, 2, 4, 5, 6, 7])
        for category in Category:
            self.assertTrue(tables[category].core_entry(4).external)
            self.assertFalse(report.tables[category].core_entry(4).external)
        self.assertFalse(tables[TEMP][TEMP.slot_index("gfx")].external)
        self.assertFalse(tables[POWER][POWER.slot_index("socket")].external)


if __name__ == "__main__":
    unittest.main()
