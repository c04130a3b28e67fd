"""
GPU Metrics Core - Channel Labels
=================================

Fixed-order label tables for the three channel categories. Positions map
1:1 onto RemapTable slots; the 16 per-core labels of every category are
contiguous.

Slot keys ("core[3]", "uclk") name the same positions for the schema
building blocks in revisions.channels.

Author: Telemetry Team
Date: October 19, 2026
"""

from typing import Dict, List, Tuple

NCORES = 16
NHBM = 4
NL3 = 2


def _expand(groups: List[Tuple[str, str, int]]) -> Tuple[Tuple[str, ...], Tuple[str, ...]]:
    """
    Expand (slot, label, count) groups into slot keys and labels.

    A count of 0 means a scalar slot; otherwise the slot is indexed
    ("core[0]" .. "core[n-1]") and the label is suffixed with the index.
    """
    keys = []
    labels = []
    for slot, label, count in groups:
        if count == 0:
            keys.append(slot)
            labels.append(label)
            continue
        for i in range(count):
            keys.append(f"{slot}[{i}]")
            labels.append(f"{label} {i}")
    return tuple(keys), tuple(labels)


TEMP_SLOTS, TEMP_LABELS = _expand([
    ("edge", "Edge", 0),
    ("hotspot", "Hotspot", 0),
    ("mem", "Mem", 0),
    ("vrgfx", "VRGFX", 0),
    ("vrsoc", "VRSoC", 0),
    ("vrmem", "VRMem", 0),
    ("hbm", "HBM", NHBM),
    ("gfx", "GFX", 0),
    ("soc", "SoC", 0),
    ("core", "Core", NCORES),
    ("l3", "L3", NL3),
    ("skin", "Skin", 0),
])

POWER_SLOTS, POWER_LABELS = _expand([
    ("socket", "Socket", 0),
    ("cpu", "CPU", 0),
    ("soc", "SoC", 0),
    ("gfx", "GFX", 0),
    ("core", "Core", NCORES),
    ("ipu", "IPU", 0),
    ("apu", "APU", 0),
    ("dgpu", "dGPU", 0),
    ("sys", "Sys", 0),
])

FREQ_SLOTS, FREQ_LABELS = _expand([
    ("gfxclk", "GFXCLK", 8),
    ("socclk", "SoCCLK", 4),
    ("uclk", "UCLK", 0),
    ("vclk", "VCLK", 4),
    ("dclk", "DCLK", 4),
    ("fclk", "FCLK", 0),
    ("coreclk", "CoreCLK", NCORES),
    ("l3clk", "L3CLK", NL3),
    ("vpeclk", "VPECLK", 0),
    ("ipuclk", "IPUCLK", 0),
    ("mpipuclk", "MPIPUCLK", 0),
])

# Keyed by Category.value
SLOTS: Dict[str, Tuple[str, ...]] = {
    "temp": TEMP_SLOTS,
    "power": POWER_SLOTS,
    "freq": FREQ_SLOTS,
}

LABELS: Dict[str, Tuple[str, ...]] = {
    "temp": TEMP_LABELS,
    "power": POWER_LABELS,
    "freq": FREQ_LABELS,
}

# First per-core slot of every category
CORE_OFFSETS: Dict[str, int] = {
    "temp": TEMP_SLOTS.index("core[0]"),
    "power": POWER_SLOTS.index("core[0]"),
    "freq": FREQ_SLOTS.index("coreclk[0]"),
}
