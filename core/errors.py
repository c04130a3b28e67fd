"""
GPU Metrics Core - Error Taxonomy
=================================

Every condition raised while turning a gpu_metrics snapshot into sensor
channels derives from MetricsError.

Severity:
---------
1. UnsupportedSchema   - Unknown (format, content) revision. Fatal to
                         initialization, no channels are exposed.
2. SizeMismatch        - Returned length, header structure_size and the
                         registry's declared size disagree. Fatal to one
                         refresh, the previous snapshot is kept as stale.
3. MalformedDescriptor - A compiled-in descriptor addresses past the end of
                         the buffer. Schema defect, caught by tests.
4. ChannelUnavailable  - One channel reads sentinel (or is not populated).
                         Absorbed locally, that channel is hidden.
5. NoFunctionalCores   - Every per-core slot belongs to a dummy core. The
                         per-core feature is reported absent.
6. SourceReadError     - The snapshot source failed. The triggering read
                         fails as well.

Author: Telemetry Team
Date: October 19, 2026
"""

from typing import Dict, Optional


class MetricsError(Exception):
    """Base class for gpu_metrics decoding errors."""
    pass


class UnsupportedSchema(MetricsError):
    """Unknown gpu_metrics format/content revision."""

    def __init__(self, format_revision: int, content_revision: int):
        super().__init__(
            f"Unsupported gpu_metrics revision v{format_revision}.{content_revision}"
        )
        self.format_revision = format_revision
        self.content_revision = content_revision


class SizeMismatch(MetricsError):
    """Snapshot length disagrees with its header or with the schema."""

    def __init__(self, message: str, actual: Optional[int] = None,
                 expected: Optional[int] = None):
        super().__init__(message)
        self.actual = actual
        self.expected = expected


class MalformedDescriptor(MetricsError):
    """Descriptor does not fit inside the snapshot buffer."""
    pass


class ChannelUnavailable(MetricsError):
    """Channel is not measured, not present or hidden."""
    pass


class NoFunctionalCores(MetricsError):
    """
    No per-core channel belongs to a functional core.

    The downgraded remap tables (dummy cores already invalidated) travel
    with the exception so the caller can still install the non-core
    channels.
    """

    def __init__(self, tables: Dict, dummy: int = 0):
        super().__init__(f"No functional CPU cores ({dummy} dummy cores)")
        self.tables = tables
        self.dummy = dummy


class SourceReadError(MetricsError):
    """Reading the raw snapshot from its source failed."""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path
