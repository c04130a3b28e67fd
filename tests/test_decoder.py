"""
GPU Metrics Tests - Field Decoder
=================================

Unit tests for:
- read_unsigned (widths, byte order, bounds)
- ChannelDescriptor construction rules
- FieldDecoder sentinel handling and fallback

Author: Telemetry Team
Date: October 19, 2026
"""

import unittest
import numpy as np

from core.decoder import FieldDecoder, read_unsigned
from core.errors import ChannelUnavailable, MalformedDescriptor
from core.types import ChannelDescriptor, Width


def buffer_with(size, fields):
    """bytearray of `size` 0xFF bytes with little-endian (offset, width, value) fields."""
    data = bytearray(b"\xff" * size)
    for offset, width, value in fields:
        data[offset:offset + width.size] = value.to_bytes(width.size, "little")
    return bytes(data)


class TestWidth(unittest.TestCase):
    """Width helpers."""

    def test_sentinels(self):
        self.assertEqual(Width.U8.sentinel, 0xFF)
        self.assertEqual(Width.U16.sentinel, 0xFFFF)
        self.assertEqual(Width.U32.sentinel, 0xFFFFFFFF)
        self.assertEqual(Width.U64.sentinel, 0xFFFFFFFFFFFFFFFF)

    def test_from_name(self):
        self.assertIs(Width.from_name("u16"), Width.U16)
        with self.assertRaises(ValueError):
            Width.from_name("i16")


class TestReadUnsigned(unittest.TestCase):
    """Raw reads."""

    def test_little_endian(self):
        self.assertEqual(read_unsigned(b"\x34\x12", 0, Width.U16), 0x1234)

    def test_big_endian(self):
        self.assertEqual(read_unsigned(b"\x34\x12", 0, Width.U16, "big"), 0x3412)

    def test_all_widths(self):
        data = bytes(range(16))
        self.assertEqual(read_unsigned(data, 3, Width.U8), 3)
        self.assertEqual(read_unsigned(data, 4, Width.U32), 0x07060504)
        self.assertEqual(read_unsigned(data, 8, Width.U64), 0x0F0E0D0C0B0A0908)

    def test_numpy_buffer(self):
        data = np.array([0x10, 0x27], dtype=np.uint8)
        self.assertEqual(read_unsigned(data, 0, Width.U16), 10000)

    def test_out_of_bounds(self):
        with self.assertRaises(MalformedDescriptor):
            read_unsigned(b"\x00\x00\x00", 2, Width.U16)


class TestChannelDescriptor(unittest.TestCase):
    """Descriptor construction."""

    def test_offset_range(self):
        ChannelDescriptor(8191, Width.U8)
        with self.assertRaises(MalformedDescriptor):
            ChannelDescriptor(8192, Width.U8)
        with self.assertRaises(MalformedDescriptor):
            ChannelDescriptor(-1, Width.U8)

    def test_fallback_does_not_chain(self):
        inner = ChannelDescriptor(0, Width.U16)
        middle = ChannelDescriptor(2, Width.U16, inner)
        with self.assertRaises(MalformedDescriptor):
            ChannelDescriptor(4, Width.U16, middle)

    def test_fits(self):
        descriptor = ChannelDescriptor(4, Width.U16, ChannelDescriptor(8, Width.U32))
        self.assertTrue(descriptor.fits(12))
        self.assertFalse(descriptor.fits(11))


class TestFieldDecoder(unittest.TestCase):
    """Sentinel and fallback semantics."""

    def setUp(self):
        self.decoder = FieldDecoder()
        self.descriptor = ChannelDescriptor(4, Width.U16, ChannelDescriptor(8, Width.U16))

    def test_primary_value(self):
        data = buffer_with(16, [(4, Width.U16, 1600), (8, Width.U16, 800)])
        self.assertEqual(self.decoder.decode(data, self.descriptor), 1600)

    def test_primary_wins_over_sentinel_fallback(self):
        data = buffer_with(16, [(4, Width.U16, 1600)])
        self.assertEqual(self.decoder.decode(data, self.descriptor), 1600)

    def test_fallback_used_on_sentinel(self):
        data = buffer_with(16, [(8, Width.U16, 800)])
        self.assertEqual(self.decoder.decode(data, self.descriptor), 800)

    def test_both_sentinel(self):
        data = buffer_with(16, [])
        with self.assertRaises(ChannelUnavailable):
            self.decoder.decode(data, self.descriptor)
        self.assertIsNone(self.decoder.try_decode(data, self.descriptor))

    def test_no_fallback(self):
        data = buffer_with(16, [])
        with self.assertRaises(ChannelUnavailable):
            self.decoder.decode(data, ChannelDescriptor(4, Width.U16))

    def test_zero_is_a_value(self):
        data = buffer_with(16, [(4, Width.U16, 0)])
        self.assertEqual(self.decoder.decode(data, self.descriptor), 0)

    def test_wide_sentinels(self):
        data = buffer_with(16, [(8, Width.U32, 45000)])
        descriptor = ChannelDescriptor(0, Width.U64, ChannelDescriptor(8, Width.U32))
        self.assertEqual(self.decoder.decode(data, descriptor), 45000)

    def test_fallback_out_of_bounds(self):
        data = buffer_with(8, [])
        descriptor = ChannelDescriptor(4, Width.U16, ChannelDescriptor(8, Width.U16))
        with self.assertRaises(MalformedDescriptor):
            self.decoder.decode(data, descriptor)

    def test_big_endian_decoder(self):
        decoder = FieldDecoder(byte_order="big")
        self.assertEqual(decoder.decode(b"\x12\x34", ChannelDescriptor(0, Width.U16)), 0x1234)

    def test_unknown_byte_order(self):
        with self.assertRaises(ValueError):
            FieldDecoder(byte_order="pdp")


if __name__ == "__main__":
    unittest.main()
