"""Removing old container logs, journal entries and rotated log files."""

import logging
import os
import stat
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple

from log_manager.config import AppConfig
from log_manager.errors import CommandError, ProbeError
from log_manager.probe import directory_size, probe_disk
from log_manager.services import command_exists, run_command

logger = logging.getLogger("log_manager")

MB = 1024**2
DAY_SECONDS = 86400


@dataclass
class CleanupReport:
    """Results of a log cleanup run."""

    docker_checked: bool = False
    docker_freed_bytes: int = 0
    journal_vacuumed: bool = False
    rotated_files_removed: int = 0
    rotated_bytes_removed: int = 0
    available_gb_before: Optional[int] = None
    available_gb_after: Optional[int] = None
    warnings: List[str] = field(default_factory=list)

    @property
    def docker_freed_mb(self) -> int:
        return self.docker_freed_bytes // MB

    @property
    def space_freed_gb(self) -> int:
        if self.available_gb_before is None or self.available_gb_after is None:
            return 0
        return max(self.available_gb_after - self.available_gb_before, 0)


def truncate_container_logs(containers_dir: Path) -> int:
    """Truncate every <container>/<id>-json.log file; return bytes freed."""
    before = directory_size(containers_dir)
    for log_file in containers_dir.glob("*/*-json.log"):
        try:
            with open(log_file, "r+") as f:
                f.truncate(0)
            logger.debug(f"Truncated {log_file}")
        except OSError as e:
            logger.warning(f"Could not truncate {log_file}: {e}")
    after = directory_size(containers_dir)
    return max(before - after, 0)


def vacuum_journal(vacuum_time: str, vacuum_size: str, timeout: int) -> List[str]:
    """Vacuum the journal by age and size; return warnings for failed steps."""
    warnings = []
    for arg in (f"--vacuum-time={vacuum_time}", f"--vacuum-size={vacuum_size}"):
        try:
            run_command(["journalctl", arg], timeout=timeout)
        except CommandError as e:
            warnings.append(f"journalctl {arg} failed: {e}")
    return warnings


def remove_old_rotated_logs(
    log_dir: Path,
    compressed_max_age_days: int,
    rotated_max_age_days: int,
    now: Optional[float] = None,
) -> Tuple[int, int]:
    """
    Delete regular "*.gz" and "*.1" files older than their age limits.

    Ages are counted in whole days, so a 30-day limit removes files at
    least 31 days old. Symlinks are never removed.

    Returns:
        (files removed, bytes removed)
    """
    now = time.time() if now is None else now
    limits = {".gz": compressed_max_age_days, ".1": rotated_max_age_days}
    removed = 0
    removed_bytes = 0
    if not log_dir.is_dir():
        return removed, removed_bytes

    for dirpath, _, filenames in os.walk(log_dir):
        for name in filenames:
            suffix = os.path.splitext(name)[1]
            max_age_days = limits.get(suffix)
            if max_age_days is None:
                continue
            fp = os.path.join(dirpath, name)
            try:
                st = os.lstat(fp)
                if not stat.S_ISREG(st.st_mode):
                    continue
                if int((now - st.st_mtime) // DAY_SECONDS) <= max_age_days:
                    continue
                os.remove(fp)
            except OSError as e:
                logger.debug(f"Skipping {fp}: {e}")
                continue
            removed += 1
            removed_bytes += st.st_size
            logger.debug(f"Removed {fp}")
    return removed, removed_bytes


def _available_gb(path: str) -> Optional[int]:
    try:
        return probe_disk(path).available_gb
    except ProbeError as e:
        logger.warning(str(e))
        return None


def clean_old_logs(config: AppConfig) -> CleanupReport:
    """Clean Docker logs, vacuum the journal and remove old rotated logs."""
    report = CleanupReport(available_gb_before=_available_gb(config.ROOT_PATH))

    containers_dir = Path(config.DOCKER_CONTAINERS_DIR)
    if command_exists("docker") and containers_dir.is_dir():
        report.docker_checked = True
        report.docker_freed_bytes = truncate_container_logs(containers_dir)

    if command_exists("journalctl"):
        report.warnings.extend(
            vacuum_journal(
                config.JOURNAL_VACUUM_TIME,
                config.JOURNAL_VACUUM_SIZE,
                config.COMMAND_TIMEOUT,
            )
        )
        report.journal_vacuumed = True

    removed, removed_bytes = remove_old_rotated_logs(
        Path(config.SYSTEM_LOG_DIR),
        config.COMPRESSED_LOG_MAX_AGE_DAYS,
        config.ROTATED_LOG_MAX_AGE_DAYS,
    )
    report.rotated_files_removed = removed
    report.rotated_bytes_removed = removed_bytes

    report.available_gb_after = _available_gb(config.ROOT_PATH)
    for warning in report.warnings:
        logger.warning(warning)
    logger.info(
        f"Cleanup done: docker freed {report.docker_freed_mb}MB, "
        f"{removed} rotated files removed"
    )
    return report
