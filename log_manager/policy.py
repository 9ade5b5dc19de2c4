"""
Retention policy calculator.

Maps the free space on the root filesystem to one of four retention modes
and to the log rotation limits recommended for that mode. Everything here is
pure: the disk is sampled by log_manager.probe and the limits are written by
the docker_config and journald_config modules.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, NamedTuple

from log_manager.sizes import SIZE_UNITS, size_to_bytes


class RetentionMode(str, Enum):
    """How aggressively logs are rotated."""

    STRICT = "strict"
    NORMAL = "normal"
    RELAXED = "relaxed"
    AMPLE = "ample"

    @property
    def label(self) -> str:
        return self.value.capitalize()


@dataclass(frozen=True)
class DiskSpaceSample:
    """Free space of a filesystem at the moment it was sampled, in whole GB."""

    available_gb: int
    total_gb: int
    used_percent: int

    def __post_init__(self) -> None:
        if self.available_gb < 0 or self.total_gb < 0:
            raise ValueError("Disk space values must be non-negative")
        if not 0 <= self.used_percent <= 100:
            raise ValueError(f"Used percent out of range: {self.used_percent}")

    @property
    def used_gb(self) -> int:
        return max(self.total_gb - self.available_gb, 0)


@dataclass(frozen=True)
class RetentionParameters:
    """Log rotation limits for the container-log and journal subsystems."""

    container_log_max_size: str
    container_log_max_file: int
    journal_max_use: str
    journal_keep_free: str
    journal_max_file_size: str

    @property
    def container_log_total_mb(self) -> int:
        """Upper bound of log data kept per container, in MB."""
        per_file = size_to_bytes(self.container_log_max_size) // SIZE_UNITS["M"]
        return per_file * self.container_log_max_file


class Recommendation(NamedTuple):
    mode: RetentionMode
    parameters: RetentionParameters


# Exclusive upper bounds in GB; anything at or above RELAXED_BELOW_GB is ample.
STRICT_BELOW_GB = 5
NORMAL_BELOW_GB = 10
RELAXED_BELOW_GB = 30

RETENTION_TABLE: Dict[RetentionMode, RetentionParameters] = {
    RetentionMode.STRICT: RetentionParameters("5m", 2, "100M", "500M", "10M"),
    RetentionMode.NORMAL: RetentionParameters("10m", 3, "200M", "1G", "20M"),
    RetentionMode.RELAXED: RetentionParameters("20m", 5, "500M", "2G", "50M"),
    RetentionMode.AMPLE: RetentionParameters("50m", 10, "1G", "3G", "100M"),
}


def classify(available_gb: int) -> RetentionMode:
    """
    Classify available disk space into a retention mode.

    Intervals are half-open with the lower bound inclusive:
    [0, 5) strict, [5, 10) normal, [10, 30) relaxed, [30, inf) ample.

    Raises:
        ValueError: If available_gb is negative.
    """
    if available_gb < 0:
        raise ValueError(f"Available space cannot be negative: {available_gb}")
    if available_gb < STRICT_BELOW_GB:
        return RetentionMode.STRICT
    if available_gb < NORMAL_BELOW_GB:
        return RetentionMode.NORMAL
    if available_gb < RELAXED_BELOW_GB:
        return RetentionMode.RELAXED
    return RetentionMode.AMPLE


def parameters_for(mode: RetentionMode) -> RetentionParameters:
    """Return the fixed rotation limits for a retention mode."""
    return RETENTION_TABLE[RetentionMode(mode)]


def recommend(sample: DiskSpaceSample) -> Recommendation:
    """Recommend a retention mode and its rotation limits for a disk sample."""
    mode = classify(sample.available_gb)
    return Recommendation(mode, parameters_for(mode))
