"""
GPU Metrics Core - Per-core Placement
=====================================

Moves per-core channels out of the main device so a presentation layer can
expose them on a dedicated per-core device (e.g. "cpu_thermal", which
system monitors such as htop recognise).

The main device hides entries marked `external`; the per-core device walks
the compact per_core_map, whose n-th element is the physical core index of
its n-th channel.

Author: Telemetry Team
Date: October 19, 2026
"""

from typing import Dict, List, Tuple

from .labels import NCORES
from .types import Category, RemapTable


def split_per_core(tables: Dict[Category, RemapTable]) -> Tuple[Dict[Category, RemapTable], List[int]]:
    """
    Mark per-core channels external and build the compact core map.

    Args:
        tables: Validated (and core-detected) remap tables; not modified

    Returns:
        (updated tables, physical core index per per-core channel)
    """
    tables = {category: table.copy() for category, table in tables.items()}
    per_core_map = []

    for core in range(NCORES):
        if not any(table.core_entry(core).valid for table in tables.values()):
            continue
        for category, table in tables.items():
            table.set(category.core_offset + core, external=True)
        per_core_map.append(core)

    return tables, per_core_map
