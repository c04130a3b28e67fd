"""
GPU Metrics Telemetry - Snapshot Header
=======================================

Every gpu_metrics blob starts with metrics_table_header:

    structure_size    total size of the struct, self-declared
    format_revision   major revision
    content_revision  minor revision

Member offsets and widths come from the vendor layout data (the "header"
entry of the layout YAML), never from code.

Author: Telemetry Team
Date: October 19, 2026
"""

from dataclasses import dataclass

from core.decoder import Buffer, read_unsigned
from core.errors import SizeMismatch
from revisions.layout import StructLayout

HEADER_MEMBERS = ("structure_size", "format_revision", "content_revision")


@dataclass(frozen=True)
class SnapshotHeader:
    """Parsed metrics_table_header."""

    structure_size: int
    format_revision: int
    content_revision: int

    @property
    def revision(self) -> str:
        return f"v{self.format_revision}.{self.content_revision}"


@dataclass(frozen=True)
class Snapshot:
    """One immutable gpu_metrics capture."""

    header: SnapshotHeader
    data: bytes

    def __len__(self) -> int:
        return len(self.data)


def parse_header(data: Buffer, layout: StructLayout,
                 byte_order: str = "little") -> SnapshotHeader:
    """
    Parse the leading header of a snapshot.

    Args:
        data: Raw snapshot bytes
        layout: Header struct layout (VendorLayout.header)
        byte_order: Byte order of the snapshot

    Returns:
        SnapshotHeader

    Raises:
        SizeMismatch: If the data is shorter than the header
    """
    if len(data) < layout.size:
        raise SizeMismatch(
            f"Invalid gpu_metrics size: {len(data)} < {layout.size}",
            actual=len(data), expected=layout.size,
        )

    values = {}
    for name in HEADER_MEMBERS:
        offset, width = layout.resolve(name)
        values[name] = read_unsigned(data, offset, width, byte_order)

    return SnapshotHeader(**values)
