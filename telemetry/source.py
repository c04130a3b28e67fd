"""
GPU Metrics Telemetry - Snapshot Sources
========================================

Where raw gpu_metrics bytes come from.

Sources:
--------
1. FileSnapshotSource   - Bounded binary read of a sysfs gpu_metrics file
2. MemorySnapshotSource - Replays in-memory blobs (tests, recorded captures)

Every source returns exactly the bytes it read; length checks against the
header and the schema are the cache's business.

Example:
--------
>>> source = FileSnapshotSource("/sys/class/drm/renderD128/device/gpu_metrics")
>>> data = source.read_snapshot(max_bytes=4096)

Author: Telemetry Team
Date: October 19, 2026
"""

import glob
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Union

from core.errors import SourceReadError

logger = logging.getLogger(__name__)

DEFAULT_GPU_METRICS_PATH = "/sys/class/drm/renderD128/device/gpu_metrics"
DEFAULT_GPU_METRICS_GLOB = "/sys/class/drm/render*/device/gpu_metrics"


class SnapshotSource(ABC):
    """Supplies raw snapshot bytes on demand."""

    @abstractmethod
    def read_snapshot(self, max_bytes: int) -> bytes:
        """
        Read one snapshot.

        Args:
            max_bytes: Upper bound of the read

        Returns:
            Bytes read (at most max_bytes)

        Raises:
            SourceReadError: If the read fails
        """
        pass

    @property
    def name(self) -> str:
        return type(self).__name__


class FileSnapshotSource(SnapshotSource):
    """Reads gpu_metrics from a file, typically under /sys/class/drm."""

    def __init__(self, path: Union[str, Path] = DEFAULT_GPU_METRICS_PATH):
        if not str(path):
            raise ValueError("Invalid gpu_metrics path")
        self.path = Path(path)

    def read_snapshot(self, max_bytes: int) -> bytes:
        try:
            with open(self.path, "rb") as f:
                data = f.read(max_bytes)
        except OSError as e:
            logger.error(f"Failed to read {self.path}: {e}")
            raise SourceReadError(f"Failed to read {self.path}: {e}", path=str(self.path))
        return data

    @property
    def name(self) -> str:
        return str(self.path)

    def __repr__(self) -> str:
        return f"FileSnapshotSource({str(self.path)!r})"


class MemorySnapshotSource(SnapshotSource):
    """
    Serves snapshots from memory.

    Each read returns the next blob; the last blob is repeated once the
    sequence is exhausted. A blob may be an exception instance, which is
    raised (wrapped in SourceReadError if needed) instead of returned.

    Example:
    --------
    >>> source = MemorySnapshotSource([blob_t0, blob_t1])
    >>> source.read_snapshot(4096) == blob_t0
    True
    >>> source.reads
    1
    """

    def __init__(self, blobs: Optional[Iterable[Union[bytes, Exception]]] = None):
        self.blobs: List[Union[bytes, Exception]] = list(blobs or [])
        self.reads = 0

    def push(self, blob: Union[bytes, Exception]) -> None:
        self.blobs.append(blob)

    def read_snapshot(self, max_bytes: int) -> bytes:
        if not self.blobs:
            raise SourceReadError("No snapshot available")

        index = min(self.reads, len(self.blobs) - 1)
        self.reads += 1
        blob = self.blobs[index]

        if isinstance(blob, SourceReadError):
            raise blob
        if isinstance(blob, Exception):
            raise SourceReadError(str(blob))
        return bytes(blob[:max_bytes])


class CallableSnapshotSource(SnapshotSource):
    """
    Adapts a plain function `read(max_bytes) -> bytes`.

    Any exception raised by the function reaches the caller as
    SourceReadError.
    """

    def __init__(self, read: Callable[[int], bytes]):
        self._read = read

    def read_snapshot(self, max_bytes: int) -> bytes:
        try:
            return bytes(self._read(max_bytes))
        except SourceReadError:
            raise
        except Exception as e:
            raise SourceReadError(f"{self.name}: {e}") from e


def discover_paths(pattern: str = DEFAULT_GPU_METRICS_GLOB) -> List[str]:
    """
    Find every gpu_metrics file matching a glob pattern.

    Args:
        pattern: Glob pattern

    Returns:
        Sorted list of paths (empty if no AMD GPU/APU exports gpu_metrics)
    """
    paths = sorted(glob.glob(pattern))
    if not paths:
        logger.warning(
            f"No gpu_metrics is exported. Did you install an AMD GPU/APU? "
            f"(glob: {pattern})"
        )
    return paths
