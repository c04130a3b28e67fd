"""
GPU Metrics Tests - Schema Registry
===================================

Unit tests for SchemaRegistry and the compiled-in schema tables.

Test Coverage:
--------------
1. Lookup of every supported revision
2. Unsupported revisions
3. Struct sizes of the vendor header
4. Slot counts and descriptor bounds of every table
5. Fallback pairs and per-core runs

Author: Telemetry Team
Date: October 19, 2026
"""

import unittest

from core.errors import UnsupportedSchema
from core.labels import NCORES
from core.types import Category
from revisions.channels import CHANNELS_V1_0, RevisionChannels
from revisions.layout import LayoutError, load_layout
from revisions.registry import SchemaRegistry, default_registry

EXPECTED_REVISIONS = (
    [(1, c) for c in range(9)] +
    [(2, c) for c in range(5)] +
    [(3, 0)]
)


class TestLookup(unittest.TestCase):
    """Revision lookup."""

    @classmethod
    def setUpClass(cls):
        cls.registry = default_registry()

    def test_supported_revisions(self):
        self.assertEqual(self.registry.supported_revisions(), EXPECTED_REVISIONS)

    def test_lookup_returns_matching_table(self):
        for fmt, content in EXPECTED_REVISIONS:
            schema = self.registry.lookup(fmt, content)
            self.assertEqual(schema.format_revision, fmt)
            self.assertEqual(schema.content_revision, content)
            self.assertEqual(schema.revision, f"v{fmt}.{content}")

    def test_unsupported(self):
        for fmt, content in [(0, 0), (1, 9), (2, 5), (3, 1), (4, 0)]:
            with self.assertRaises(UnsupportedSchema) as ctx:
                self.registry.lookup(fmt, content)
            self.assertEqual(ctx.exception.format_revision, fmt)
            self.assertEqual(ctx.exception.content_revision, content)

    def test_default_registry_is_shared(self):
        self.assertIs(default_registry(), default_registry())

    def test_max_size(self):
        sizes = [table.declared_size for table in self.registry.tables()]
        self.assertEqual(self.registry.max_size, max(sizes))


class TestVendorStructSizes(unittest.TestCase):
    """Struct sizes as laid out by the kernel's kgd_pp_interface.h."""

    SIZES = {
        (1, 0): 80,
        (1, 1): 96,
        (1, 2): 104,
        (1, 3): 120,
        (1, 6): 1664,
        (1, 7): 2208,
        (1, 8): 3872,
        (2, 0): 120,
        (2, 1): 120,
        (3, 0): 264,
    }

    @classmethod
    def setUpClass(cls):
        cls.registry = default_registry()

    def test_declared_sizes(self):
        for (fmt, content), size in self.SIZES.items():
            schema = self.registry.lookup(fmt, content)
            self.assertEqual(schema.declared_size, size, schema.revision)

    def test_largest_snapshot_is_v1_8(self):
        self.assertEqual(self.registry.max_size, 3872)

    def test_v1_8_partition_record(self):
        v1_8 = self.registry.layout.struct("v1_8")
        xcp = v1_8.member("xcp_stats")
        self.assertEqual(xcp.offset, 312)
        self.assertEqual(xcp.count, 8)
        self.assertEqual(v1_8.resolve("xgmi_link_status[7]")[0], 3862)


class TestSchemaTables(unittest.TestCase):
    """Invariants of every compiled-in table."""

    @classmethod
    def setUpClass(cls):
        cls.registry = default_registry()

    def test_slot_counts(self):
        for schema in self.registry.tables():
            self.assertEqual(len(schema.temp), 31)
            self.assertEqual(len(schema.power), 24)
            self.assertEqual(len(schema.freq), 43)

    def test_declared_size_matches_layout(self):
        for schema in self.registry.tables():
            struct = self.registry.layout.struct(schema.name)
            self.assertEqual(schema.declared_size, struct.size)

    def test_descriptors_fit_declared_size(self):
        for schema in self.registry.tables():
            for category in Category:
                for descriptor in schema.descriptors(category):
                    if descriptor is not None:
                        self.assertTrue(
                            descriptor.fits(schema.declared_size),
                            f"{schema.revision} {category.value} {descriptor}",
                        )

    def test_descriptors_do_not_overlap_header(self):
        header_size = self.registry.header.size
        for schema in self.registry.tables():
            for category in Category:
                for slot in schema.populated(category):
                    descriptor = schema.descriptors(category)[slot]
                    self.assertGreaterEqual(descriptor.offset, header_size)

    def test_v1_0_fallbacks(self):
        schema = self.registry.lookup(1, 0)
        struct = self.registry.layout.struct("v1_0")

        gfxclk = schema.freq[Category.FREQUENCY.slot_index("gfxclk[0]")]
        self.assertEqual(gfxclk.offset, struct.resolve("current_gfxclk")[0])
        self.assertEqual(gfxclk.fallback.offset,
                         struct.resolve("average_gfxclk_frequency")[0])

        vclk1 = schema.freq[Category.FREQUENCY.slot_index("vclk[1]")]
        self.assertEqual(vclk1.fallback.offset,
                         struct.resolve("average_vclk1_frequency")[0])

    def test_v1_has_no_cores(self):
        for content in range(9):
            schema = self.registry.lookup(1, content)
            for category in Category:
                self.assertTrue(all(d is None for d in schema.core_descriptors(category)))

    def test_v2_has_eight_cores(self):
        schema = self.registry.lookup(2, 1)
        for category in Category:
            cores = schema.core_descriptors(category)
            self.assertEqual(len(cores), NCORES)
            self.assertTrue(all(d is not None for d in cores[:8]))
            self.assertTrue(all(d is None for d in cores[8:]))

    def test_v3_has_sixteen_cores_and_skin(self):
        schema = self.registry.lookup(3, 0)
        for category in Category:
            self.assertTrue(all(d is not None for d in schema.core_descriptors(category)))
        self.assertIsNotNone(schema.temp[Category.TEMPERATURE.slot_index("skin")])
        self.assertIsNone(schema.temp[Category.TEMPERATURE.slot_index("l3[0]")])


class TestCustomFamilies(unittest.TestCase):
    """Registries built from explicit revision families."""

    def setUp(self):
        self.layout = load_layout()

    def test_single_revision(self):
        registry = SchemaRegistry(self.layout, families={1: [("v1_0", CHANNELS_V1_0)]})
        self.assertEqual(registry.supported_revisions(), [(1, 0)])
        with self.assertRaises(UnsupportedSchema):
            registry.lookup(1, 1)

    def test_unknown_slot_key(self):
        channels = RevisionChannels({"nosuch": "temperature_edge"}, {}, {})
        with self.assertRaises(LayoutError):
            SchemaRegistry(self.layout, families={1: [("v1_0", channels)]})

    def test_unknown_member(self):
        channels = RevisionChannels({"edge": "temperature_nosuch"}, {}, {})
        with self.assertRaises(LayoutError):
            SchemaRegistry(self.layout, families={1: [("v1_0", channels)]})


if __name__ == "__main__":
    unittest.main()
