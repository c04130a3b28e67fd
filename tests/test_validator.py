"""
GPU Metrics Tests - Channel Validator
=====================================

Unit tests for ChannelValidator over synthetic snapshots of every
supported revision.

Test Coverage:
--------------
1. Table shape for every revision
2. Sentinel / zero handling per category
3. Fallback fields
4. Broken descriptors

Author: Telemetry Team
Date: October 19, 2026
"""

import unittest

from core.errors import MalformedDescriptor
from core.types import Category
from core.validator import ChannelValidator
from revisions.registry import default_registry
from telemetry.simulator import SnapshotSimulator


class TestValidatorShape(unittest.TestCase):
    """Dense tables for every revision."""

    @classmethod
    def setUpClass(cls):
        cls.registry = default_registry()
        cls.validator = ChannelValidator()

    def test_blank_snapshot_has_no_valid_channels(self):
        for fmt, content in self.registry.supported_revisions():
            sim = SnapshotSimulator(self.registry, fmt, content)
            tables = self.validator.validate_all(sim.build(), sim.schema)
            for category, table in tables.items():
                self.assertEqual(len(table), category.nslots)
                self.assertEqual(table.valid_slots(), [], f"{sim.schema.revision}")

    def test_populated_snapshot(self):
        for fmt, content in self.registry.supported_revisions():
            sim = SnapshotSimulator(self.registry, fmt, content, seed=fmt * 10 + content)
            sim.populate()
            tables = self.validator.validate_all(sim.build(), sim.schema)
            for category, table in tables.items():
                self.assertEqual(table.valid_slots(), list(sim.schema.populated(category)))

    def test_label_index_is_slot(self):
        sim = SnapshotSimulator(self.registry, 2, 1, seed=1).populate()
        tables = self.validator.validate_all(sim.build(), sim.schema)
        for table in tables.values():
            indices = [entry.label_index for entry in table]
            self.assertEqual(indices, list(range(len(table))))
            self.assertFalse(any(entry.external for entry in table))


class TestValidatorPolicy(unittest.TestCase):
    """Per-slot validity rules."""

    def setUp(self):
        self.registry = default_registry()
        self.validator = ChannelValidator()

    def test_zero_temperature_is_invalid(self):
        sim = SnapshotSimulator(self.registry, 2, 1, seed=2).populate()
        sim.set_slot(Category.TEMPERATURE, "gfx", 0)

        table = self.validator.validate(sim.build(), sim.schema, Category.TEMPERATURE)

        self.assertFalse(table[Category.TEMPERATURE.slot_index("gfx")].valid)
        self.assertTrue(table[Category.TEMPERATURE.slot_index("soc")].valid)

    def test_zero_power_and_frequency_stay_valid(self):
        sim = SnapshotSimulator(self.registry, 2, 1, seed=3).populate()
        sim.set_slot(Category.POWER, "socket", 0)
        sim.set_slot(Category.FREQUENCY, "coreclk[0]", 0)

        data = sim.build()
        power = self.validator.validate(data, sim.schema, Category.POWER)
        freq = self.validator.validate(data, sim.schema, Category.FREQUENCY)

        self.assertTrue(power[Category.POWER.slot_index("socket")].valid)
        self.assertTrue(freq[Category.FREQUENCY.slot_index("coreclk[0]")].valid)

    def test_sentinel_is_invalid(self):
        sim = SnapshotSimulator(self.registry, 3, 0, seed=4).populate()
        sim.set_sentinel(Category.TEMPERATURE, "skin")

        table = self.validator.validate(sim.build(), sim.schema, Category.TEMPERATURE)

        self.assertFalse(table[Category.TEMPERATURE.slot_index("skin")].valid)

    def test_fallback_makes_channel_valid(self):
        sim = SnapshotSimulator(self.registry, 1, 0)
        sim.set_slot(Category.FREQUENCY, "gfxclk[0]", 0xFFFF, fallback=800)

        table = self.validator.validate(sim.build(), sim.schema, Category.FREQUENCY)

        self.assertTrue(table[Category.FREQUENCY.slot_index("gfxclk[0]")].valid)
        self.assertFalse(table[Category.FREQUENCY.slot_index("uclk")].valid)

    def test_unpopulated_slots_are_invalid(self):
        sim = SnapshotSimulator(self.registry, 1, 0, seed=5).populate()
        table = self.validator.validate(sim.build(), sim.schema, Category.TEMPERATURE)
        for key in ("gfx", "soc", "core[0]", "skin"):
            self.assertFalse(table[Category.TEMPERATURE.slot_index(key)].valid)

    def test_truncated_buffer_is_a_descriptor_error(self):
        sim = SnapshotSimulator(self.registry, 2, 1, seed=6).populate()
        with self.assertRaises(MalformedDescriptor):
            self.validator.validate(sim.truncated(8), sim.schema, Category.TEMPERATURE)


if __name__ == "__main__":
    unittest.main()
