"""Timestamped backups and safe replacement of configuration files."""

import datetime
import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import Optional, Union

from log_manager.errors import WriteError

logger = logging.getLogger("log_manager")


def backup_file(path: Union[str, Path]) -> Optional[str]:
    """
    Backup a file with a timestamp suffix.

    Args:
        path: Path to the file to backup

    Returns:
        Path to the backup file, or None if the file does not exist

    Raises:
        WriteError: If the copy fails.
    """
    fp = Path(path)
    if not fp.is_file():
        return None
    ts = datetime.datetime.now().strftime("%Y%m%d_%H%M%S")
    backup = f"{fp}.bak.{ts}"
    try:
        shutil.copy2(fp, backup)
    except OSError as e:
        raise WriteError(f"Backup failed for {fp}: {e}") from e
    logger.info(f"Backed up {fp} to {backup}")
    return backup


def replace_file(path: Union[str, Path], content: str) -> None:
    """
    Replace a file's content without ever leaving it half written.

    The content goes to a temporary file in the same directory, which is then
    moved over the target. The target keeps its permissions; a new file
    gets 0644.

    Raises:
        WriteError: If the content cannot be written. The target is unchanged.
    """
    fp = Path(path)
    tmp_path = None
    try:
        fd, tmp_path = tempfile.mkstemp(
            dir=str(fp.parent), prefix=f".{fp.name}.", suffix=".tmp"
        )
        with os.fdopen(fd, "w") as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())
        if fp.is_file():
            shutil.copymode(fp, tmp_path)
        else:
            os.chmod(tmp_path, 0o644)
        os.replace(tmp_path, fp)
    except OSError as e:
        if tmp_path and os.path.exists(tmp_path):
            os.unlink(tmp_path)
        raise WriteError(f"Failed to write {fp}: {e}") from e
    logger.debug(f"Wrote {fp}")
