"""
GPU Metrics Utils - Logging & Diagnostics
=========================================

Logging setup and diagnostic utilities.

Features:
---------
1. Logging Setup
   - Console and rotating file handlers
   - Structured log format

2. Snapshot Logging
   - Installed snapshot summary (revision, size, cores)
   - Visible channels per category
   - Diagnostic report of a device

Log Format:
-----------
[2026-10-19 12:30:45.123] [INFO    ] [telemetry.cache] gpu_metrics v2.1, size=... B
[TIMESTAMP] [LEVEL] [MODULE] Message

Example:
--------
>>> from utils import setup_logging, get_logger
>>>
>>> setup_logging("logs/", level="DEBUG", file_output=False)
>>> logger = get_logger(__name__)
>>> logger.info("Device opened")

Author: Telemetry Team
Date: October 19, 2026
"""

import logging
import logging.handlers
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple
from datetime import datetime


_loggers = {}


class StructuredFormatter(logging.Formatter):
    """Structured logging formatter."""

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created).strftime(
            "%Y-%m-%d %H:%M:%S.%f"
        )[:-3]

        message = (
            f"[{timestamp}] [{record.levelname:8}] "
            f"[{record.name}] {record.getMessage()}"
        )
        if record.exc_info:
            message += "\n" + self.formatException(record.exc_info)
        return message


def setup_logging(log_dir: str = "logs",
                  level: str = "INFO",
                  console_output: bool = True,
                  file_output: bool = False) -> None:
    """
    Set up logging configuration.

    Args:
        log_dir: Directory for log files (created only with file_output)
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        console_output: Enable console output
        file_output: Enable rotating file output
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper()))

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    formatter = StructuredFormatter()

    if console_output:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(getattr(logging, level.upper()))
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

    if file_output:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_file = log_path / f"gpu_metrics_{timestamp}.log"

        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=10*1024*1024,  # 10 MB
            backupCount=5,
        )
        file_handler.setLevel(getattr(logging, level.upper()))
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    root_logger.info(f"Logging configured: level={level}, dir={log_dir}")


def setup_logging_from_config(config: Dict[str, Any]) -> None:
    """Apply the "logging" section of a configuration."""
    section = config.get("logging") or {}
    setup_logging(
        log_dir=section.get("dir", "logs"),
        level=section.get("level", "INFO"),
        console_output=section.get("console", True),
        file_output=section.get("file", False),
    )


def get_logger(name: str) -> logging.Logger:
    """Get logger for a module (typically __name__)."""
    if name not in _loggers:
        _loggers[name] = logging.getLogger(name)

    return _loggers[name]


def log_snapshot(state: Any) -> None:
    """
    Log an installed snapshot summary.

    Args:
        state: telemetry.cache.InstalledSnapshot
    """
    logger = get_logger(__name__)

    logger.info(
        f"Snapshot {state.revision}: "
        f"size={len(state.snapshot)}B, "
        f"per_core={'yes' if state.has_per_core else 'no'}, "
        f"functional_cores={state.functional_cores}"
    )

    for category, table in state.tables.items():
        logger.debug(f"  {category.value}: {len(table.valid_slots())}/{len(table)} valid")


def log_channels(category_name: str,
                 channels: List[Tuple[str, Optional[int]]]) -> None:
    """
    Log (label, value) pairs of one category.

    Args:
        category_name: "temp", "power" or "freq"
        channels: Visible channels; value None when the read failed
    """
    logger = get_logger(__name__)

    for label, value in channels:
        if value is None:
            logger.debug(f"{category_name} {label}: unavailable")
        else:
            logger.debug(f"{category_name} {label}: {value}")


def log_error(error: Exception,
              context: str = "") -> None:
    """
    Log an error with context.

    Example:
        >>> try:
        ...     device.read(Category.POWER, 0)
        ... except MetricsError as e:
        ...     log_error(e, context="Socket power read failed")
    """
    logger = get_logger(__name__)

    if context:
        logger.error(f"{context}: {str(error)}")
    else:
        logger.error(f"Error: {str(error)}")

    logger.debug("", exc_info=True)


def create_diagnostic_report(table: Dict[str, List[Tuple[str, Optional[int]]]],
                             stats: Dict[str, Any]) -> str:
    """
    Create diagnostic report of a device.

    Args:
        table: Category name -> [(label, value)], as returned by
            MetricsDevice.snapshot_table()
        stats: Summary values (revision, size, cores...)

    Returns:
        Diagnostic report string
    """
    report = []
    report.append("=" * 60)
    report.append("GPU METRICS REPORT")
    report.append("=" * 60)

    report.append("\n[Snapshot]")
    for key, value in stats.items():
        report.append(f"  {key}: {value}")

    for category_name, channels in table.items():
        report.append(f"\n[{category_name}]")
        if not channels:
            report.append("  (none)")
        for label, value in channels:
            shown = "unavailable" if value is None else str(value)
            report.append(f"  {label}: {shown}")

    report.append("\n" + "=" * 60)

    return "\n".join(report)


def save_diagnostic_report(report: str,
                           output_path: str) -> None:
    """Save diagnostic report to file."""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, 'w') as f:
        f.write(report)

    logger = get_logger(__name__)
    logger.info(f"Saved diagnostic report to {output_path}")
