"""Sampling disk space and current log usage."""

import logging
import os
import re
from pathlib import Path
from typing import Optional, Union

from log_manager.errors import CommandError, ProbeError
from log_manager.policy import DiskSpaceSample
from log_manager.services import command_exists, run_command

logger = logging.getLogger("log_manager")

GIB = 1024**3
JOURNAL_USAGE_REGEX = re.compile(r"(\d+(?:\.\d+)?\s*[KMGT])", re.IGNORECASE)


def probe_disk(path: str = "/") -> DiskSpaceSample:
    """
    Sample free space on the filesystem holding path.

    Sizes are whole GiB rounded down and the used percentage is rounded up,
    matching what df reports.

    Raises:
        ProbeError: If the filesystem statistics cannot be read.
    """
    try:
        stat = os.statvfs(path)
    except OSError as e:
        raise ProbeError(f"Cannot read filesystem statistics for {path}: {e}") from e

    total = stat.f_blocks * stat.f_frsize
    free = stat.f_bfree * stat.f_frsize
    available = stat.f_bavail * stat.f_frsize
    used = total - free

    if used + available > 0:
        # Ceiling division, the way df computes Use%.
        used_percent = min(-(-used * 100 // (used + available)), 100)
    else:
        used_percent = 0

    sample = DiskSpaceSample(
        available_gb=available // GIB,
        total_gb=total // GIB,
        used_percent=used_percent,
    )
    logger.debug(
        f"Disk sample for {path}: {sample.available_gb}GB available of "
        f"{sample.total_gb}GB ({sample.used_percent}% used)"
    )
    return sample


def directory_size(path: Union[str, Path]) -> int:
    """Return the total size in bytes of regular files below a directory."""
    root = Path(path)
    if not root.is_dir():
        return 0
    total = 0
    for dirpath, _, filenames in os.walk(root):
        for name in filenames:
            fp = os.path.join(dirpath, name)
            try:
                if not os.path.islink(fp):
                    total += os.path.getsize(fp)
            except OSError:
                continue
    return total


def journal_disk_usage(timeout: int = 30) -> Optional[str]:
    """Return the journal size reported by journalctl (e.g. '1.2G'), if known."""
    if not command_exists("journalctl"):
        return None
    try:
        result = run_command(["journalctl", "--disk-usage"], timeout=timeout)
    except CommandError as e:
        logger.debug(f"Could not query journal disk usage: {e}")
        return None
    match = JOURNAL_USAGE_REGEX.search(result.stdout or "")
    if not match:
        return None
    return match.group(1).replace(" ", "")
