"""
GPU Metrics Core - Field Decoder
================================

Resolves one ChannelDescriptor against one snapshot buffer.

Decoding Rules:
---------------
1. Bounds: offset + width must lie inside the buffer, otherwise the
   descriptor itself is broken (MalformedDescriptor).
2. Read the unsigned integer of the declared width at the declared offset.
3. A raw value equal to the width's all-ones sentinel means "not measured".
   If the descriptor has a fallback (typically average_* behind current_*),
   retry exactly once against it.
4. Sentinel again, or no fallback: ChannelUnavailable.

Example:
--------
>>> decoder = FieldDecoder()
>>> descriptor = ChannelDescriptor(8, Width.U16)
>>> decoder.decode(snapshot.data, descriptor)
4200

Author: Telemetry Team
Date: October 19, 2026
"""

import logging
from typing import Union

import numpy as np

from .errors import ChannelUnavailable, MalformedDescriptor
from .types import BYTE_ORDERS, ChannelDescriptor, Width

logger = logging.getLogger(__name__)

Buffer = Union[bytes, bytearray, memoryview, np.ndarray]


def read_unsigned(buffer: Buffer, offset: int, width: Width,
                  byte_order: str = "little") -> int:
    """
    Read one unsigned field from a buffer.

    Args:
        buffer: Snapshot bytes (bytes-like or uint8 array)
        offset: Byte offset of the field
        width: Field width
        byte_order: "little" or "big"

    Returns:
        Raw field value

    Raises:
        MalformedDescriptor: If the field does not fit inside the buffer
    """
    length = len(buffer)
    if offset < 0 or offset + width.size > length:
        raise MalformedDescriptor(
            f"Field at offset {offset} ({width.size}B) exceeds buffer of {length}B"
        )
    return int(np.frombuffer(buffer, dtype=width.dtype(byte_order),
                             count=1, offset=offset)[0])


class FieldDecoder:
    """
    Sentinel-aware decoder for snapshot fields.

    Example:
    --------
    >>> decoder = FieldDecoder(byte_order="little")
    >>> value = decoder.decode(buffer, descriptor)
    """

    def __init__(self, byte_order: str = "little"):
        if byte_order not in BYTE_ORDERS:
            raise ValueError(f"Unknown byte order: {byte_order}")
        self.byte_order = byte_order

    def decode(self, buffer: Buffer, descriptor: ChannelDescriptor) -> int:
        """
        Decode a channel, consulting its fallback at most once.

        Args:
            buffer: Snapshot bytes
            descriptor: Channel descriptor

        Returns:
            Decoded value in the snapshot's native unit

        Raises:
            ChannelUnavailable: Primary (and fallback) read the sentinel
            MalformedDescriptor: Descriptor exceeds the buffer
        """
        raw = read_unsigned(buffer, descriptor.offset, descriptor.width, self.byte_order)
        if raw != descriptor.width.sentinel:
            return raw

        fallback = descriptor.fallback
        if fallback is None:
            raise ChannelUnavailable(
                f"Field at offset {descriptor.offset} reads sentinel"
            )

        raw = read_unsigned(buffer, fallback.offset, fallback.width, self.byte_order)
        if raw != fallback.width.sentinel:
            return raw

        raise ChannelUnavailable(
            f"Field at offset {descriptor.offset} and fallback at "
            f"offset {fallback.offset} read sentinel"
        )

    def try_decode(self, buffer: Buffer, descriptor: ChannelDescriptor):
        """Decode, returning None instead of raising ChannelUnavailable."""
        try:
            return self.decode(buffer, descriptor)
        except ChannelUnavailable:
            return None
