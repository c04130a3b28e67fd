"""
GPU Metrics Revisions - Channel Building Blocks
===============================================

Per-category channel maps, composed per revision family.

A channel map is a plain dict from slot key (see core.labels) to a member
reference of the vendor struct:

    "hotspot": "temperature_hotspot"                            # plain
    "gfxclk[0]": ("current_gfxclk", "average_gfxclk_frequency")  # fallback

Within one format line, temperature maps grow by addition (v1.1 adds HBM,
v3 adds 16 cores and skin); power and frequency maps are redefined per
family because the vendor renamed those members.

Author: Telemetry Team
Date: October 19, 2026
"""

from collections import namedtuple
from typing import Dict, Tuple, Union

FieldRef = Union[str, Tuple[str, str]]
ChannelMap = Dict[str, FieldRef]

# One map per category
RevisionChannels = namedtuple("RevisionChannels", ["temp", "power", "freq"])


def array(slot: str, member: str, count: int, start: int = 0) -> ChannelMap:
    """Map slot[i] onto member[i] for i in [start, start + count)."""
    return {
        f"{slot}[{i}]": f"{member}[{i}]"
        for i in range(start, start + count)
    }


# ---------------------------------------------------------------------------
# Format v1 (dGPU)
# ---------------------------------------------------------------------------

TEMP_V1_COMMON1: ChannelMap = {
    "hotspot": "temperature_hotspot",
    "mem": "temperature_mem",
    "vrsoc": "temperature_vrsoc",
}

TEMP_V1_COMMON2: ChannelMap = {
    "edge": "temperature_edge",
    "vrgfx": "temperature_vrgfx",
    "vrmem": "temperature_vrmem",
}

TEMP_V1_0: ChannelMap = {**TEMP_V1_COMMON1, **TEMP_V1_COMMON2}

TEMP_V1_1: ChannelMap = {**TEMP_V1_0, **array("hbm", "temperature_hbm", 4)}

POWER_V1_0: ChannelMap = {
    "socket": "average_socket_power",
}

FREQ_V1_0: ChannelMap = {
    "gfxclk[0]": ("current_gfxclk", "average_gfxclk_frequency"),
    "socclk[0]": ("current_socclk", "average_socclk_frequency"),
    "uclk": ("current_uclk", "average_uclk_frequency"),
    "vclk[0]": ("current_vclk0", "average_vclk0_frequency"),
    "vclk[1]": ("current_vclk1", "average_vclk1_frequency"),
    "dclk[0]": ("current_dclk0", "average_dclk0_frequency"),
    "dclk[1]": ("current_dclk1", "average_dclk1_frequency"),
}

# v1.4+ (multi-XCC parts) keep only three temperatures
TEMP_V1_4: ChannelMap = dict(TEMP_V1_COMMON1)

POWER_V1_4: ChannelMap = {
    "socket": "curr_socket_power",
}

FREQ_V1_4: ChannelMap = {
    **array("gfxclk", "current_gfxclk", 8),
    **array("socclk", "current_socclk", 4),
    "uclk": "current_uclk",
    **array("vclk", "current_vclk0", 4),
    **array("dclk", "current_dclk0", 4),
}

# ---------------------------------------------------------------------------
# Format v2 (APU)
# ---------------------------------------------------------------------------

TEMP_V2: ChannelMap = {
    "gfx": "temperature_gfx",
    "soc": "temperature_soc",
    **array("core", "temperature_core", 8),
    **array("l3", "temperature_l3", 2),
}

POWER_V2: ChannelMap = {
    "socket": "average_socket_power",
    "cpu": "average_cpu_power",
    "soc": "average_soc_power",
    "gfx": "average_gfx_power",
    **array("core", "average_core_power", 8),
}

FREQ_V2: ChannelMap = {
    "gfxclk[0]": ("current_gfxclk", "average_gfxclk_frequency"),
    "socclk[0]": ("current_socclk", "average_socclk_frequency"),
    "uclk": ("current_uclk", "average_uclk_frequency"),
    "fclk": ("current_fclk", "average_fclk_frequency"),
    "vclk[0]": ("current_vclk", "average_vclk_frequency"),
    "dclk[0]": ("current_dclk", "average_dclk_frequency"),
    **array("coreclk", "current_coreclk", 8),
    **array("l3clk", "current_l3clk", 2),
}

# ---------------------------------------------------------------------------
# Format v3 (APU with IPU)
# ---------------------------------------------------------------------------

TEMP_V3: ChannelMap = {
    "gfx": "temperature_gfx",
    "soc": "temperature_soc",
    **array("core", "temperature_core", 16),
    "skin": "temperature_skin",
}

POWER_V3: ChannelMap = {
    "socket": "average_socket_power",
    "ipu": "average_ipu_power",
    "apu": "average_apu_power",
    "gfx": "average_gfx_power",
    "dgpu": "average_dgpu_power",
    "cpu": "average_all_core_power",
    **array("core", "average_core_power", 16),
    "sys": "average_sys_power",
}

FREQ_V3: ChannelMap = {
    "gfxclk[0]": "average_gfxclk_frequency",
    "socclk[0]": "average_socclk_frequency",
    "vpeclk": "average_vpeclk_frequency",
    "ipuclk": "average_ipuclk_frequency",
    "fclk": "average_fclk_frequency",
    "vclk[0]": "average_vclk_frequency",
    "uclk": "average_uclk_frequency",
    **array("coreclk", "current_coreclk", 16),
    "mpipuclk": "average_mpipu_frequency",
}

# ---------------------------------------------------------------------------
# Revision families
# ---------------------------------------------------------------------------

CHANNELS_V1_0 = RevisionChannels(TEMP_V1_0, POWER_V1_0, FREQ_V1_0)
CHANNELS_V1_1 = RevisionChannels(TEMP_V1_1, POWER_V1_0, FREQ_V1_0)
CHANNELS_V1_4 = RevisionChannels(TEMP_V1_4, POWER_V1_4, FREQ_V1_4)
CHANNELS_V2_0 = RevisionChannels(TEMP_V2, POWER_V2, FREQ_V2)
CHANNELS_V3_0 = RevisionChannels(TEMP_V3, POWER_V3, FREQ_V3)

# format revision -> [(struct layout name, channels)], indexed by content revision
REVISION_FAMILIES = {
    1: [
        ("v1_0", CHANNELS_V1_0),
        ("v1_1", CHANNELS_V1_1),
        ("v1_2", CHANNELS_V1_1),
        ("v1_3", CHANNELS_V1_1),
        ("v1_4", CHANNELS_V1_4),
        ("v1_5", CHANNELS_V1_4),
        ("v1_6", CHANNELS_V1_4),
        ("v1_7", CHANNELS_V1_4),
        ("v1_8", CHANNELS_V1_4),
    ],
    2: [
        ("v2_0", CHANNELS_V2_0),
        ("v2_1", CHANNELS_V2_0),
        ("v2_2", CHANNELS_V2_0),
        ("v2_3", CHANNELS_V2_0),
        ("v2_4", CHANNELS_V2_0),
    ],
    3: [
        ("v3_0", CHANNELS_V3_0),
    ],
}
