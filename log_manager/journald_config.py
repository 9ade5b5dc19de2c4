"""
systemd-journald configuration.

Only the three disk limits are managed: SystemMaxUse, SystemKeepFree and
SystemMaxFileSize under the [Journal] section of journald.conf.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Union

from log_manager.backup import backup_file, replace_file
from log_manager.errors import WriteError
from log_manager.policy import RetentionParameters

logger = logging.getLogger("log_manager")

SECTION_HEADER = "[Journal]"
MAX_USE_KEY = "SystemMaxUse"
KEEP_FREE_KEY = "SystemKeepFree"
MAX_FILE_SIZE_KEY = "SystemMaxFileSize"
MANAGED_KEYS = (MAX_USE_KEY, KEEP_FREE_KEY, MAX_FILE_SIZE_KEY)
DEFAULT = "default"


@dataclass(frozen=True)
class JournaldConfig:
    """Current journal disk limits."""

    configured: bool
    max_use: Optional[str] = None
    keep_free: Optional[str] = None
    max_file_size: Optional[str] = None

    def matches(self, parameters: RetentionParameters) -> bool:
        return (
            self.configured
            and self.max_use == parameters.journal_max_use
            and self.keep_free == parameters.journal_keep_free
            and self.max_file_size == parameters.journal_max_file_size
        )


def _managed_key(line: str) -> Optional[str]:
    """Return the managed key an active 'Key=value' line sets, if any."""
    key, sep, _ = line.strip().partition("=")
    if not sep:
        return None
    key = key.strip()
    return key if key in MANAGED_KEYS else None


def read_journald_config(path: Union[str, Path]) -> JournaldConfig:
    """Read the journal disk limits currently set in journald.conf."""
    fp = Path(path)
    values: Dict[str, str] = {}
    try:
        lines = fp.read_text().splitlines() if fp.is_file() else []
    except OSError as e:
        logger.warning(f"Could not read journald config {fp}: {e}")
        lines = []

    for line in lines:
        key = _managed_key(line)
        if key:
            values[key] = line.split("=", 1)[1].strip()

    if not values:
        return JournaldConfig(configured=False)
    return JournaldConfig(
        configured=True,
        max_use=values.get(MAX_USE_KEY, DEFAULT),
        keep_free=values.get(KEEP_FREE_KEY, DEFAULT),
        max_file_size=values.get(MAX_FILE_SIZE_KEY, DEFAULT),
    )


def render_journald_config(content: str, parameters: RetentionParameters) -> str:
    """
    Return journald.conf content with the managed limits replaced.

    Existing active settings for the managed keys are removed and the new
    values are inserted right after the [Journal] header. When there is no
    [Journal] section, one is appended.
    """
    settings = [
        f"{MAX_USE_KEY}={parameters.journal_max_use}",
        f"{KEEP_FREE_KEY}={parameters.journal_keep_free}",
        f"{MAX_FILE_SIZE_KEY}={parameters.journal_max_file_size}",
    ]
    lines: List[str] = [line for line in content.splitlines() if not _managed_key(line)]

    for idx, line in enumerate(lines):
        if line.strip() == SECTION_HEADER:
            lines[idx + 1:idx + 1] = settings
            return "\n".join(lines) + "\n"

    if lines and lines[-1].strip():
        lines.append("")
    lines.append(SECTION_HEADER)
    lines.extend(settings)
    return "\n".join(lines) + "\n"


def write_journald_config(
    path: Union[str, Path], parameters: RetentionParameters
) -> Optional[str]:
    """
    Write the recommended journal disk limits into journald.conf.

    Returns:
        Path of the backup taken of the previous file, if any.

    Raises:
        WriteError: If the configuration cannot be read or written.
    """
    fp = Path(path)
    try:
        content = fp.read_text() if fp.is_file() else ""
    except OSError as e:
        raise WriteError(f"Cannot read {fp}: {e}") from e

    try:
        fp.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise WriteError(f"Cannot create directory {fp.parent}: {e}") from e

    backup = backup_file(fp)
    replace_file(fp, render_journald_config(content, parameters))
    logger.info(
        f"Journal limits set to {MAX_USE_KEY}={parameters.journal_max_use} "
        f"{KEEP_FREE_KEY}={parameters.journal_keep_free} "
        f"{MAX_FILE_SIZE_KEY}={parameters.journal_max_file_size} in {fp}"
    )
    return backup
