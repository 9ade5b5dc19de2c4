"""Disk-aware log retention for Docker and systemd-journald."""

from log_manager.errors import (
    CommandError,
    LogManagerError,
    ProbeError,
    RestartError,
    WriteError,
)
from log_manager.policy import (
    DiskSpaceSample,
    Recommendation,
    RetentionMode,
    RetentionParameters,
    classify,
    parameters_for,
    recommend,
)

__version__ = "1.0.0"

__all__ = [
    "CommandError",
    "DiskSpaceSample",
    "LogManagerError",
    "ProbeError",
    "Recommendation",
    "RestartError",
    "RetentionMode",
    "RetentionParameters",
    "WriteError",
    "classify",
    "parameters_for",
    "recommend",
]
