"""Running external commands and restarting services."""

import logging
import shutil
import subprocess
from typing import List

from log_manager.errors import CommandError, RestartError

logger = logging.getLogger("log_manager")

DEFAULT_TIMEOUT = 60  # seconds


def command_exists(cmd: str) -> bool:
    """Check whether a command is available on PATH."""
    return shutil.which(cmd) is not None


def run_command(
    cmd: List[str],
    check: bool = True,
    timeout: int = DEFAULT_TIMEOUT,
) -> subprocess.CompletedProcess:
    """
    Execute a command and capture its text output.

    Args:
        cmd: Command and arguments.
        check: Whether a non-zero exit status is an error.
        timeout: Command timeout in seconds.

    Returns:
        The completed process.

    Raises:
        CommandError: If the command cannot be started, exits non-zero
            (with check=True) or exceeds the timeout.
    """
    logger.debug(f"Running command: {' '.join(cmd)}")
    try:
        result = subprocess.run(
            cmd, check=check, capture_output=True, text=True, timeout=timeout
        )
    except subprocess.CalledProcessError as e:
        stderr = (e.stderr or "").strip()
        logger.debug(f"Command failed ({e.returncode}): {' '.join(cmd)}: {stderr}")
        raise CommandError(
            f"Command '{' '.join(cmd)}' exited with status {e.returncode}"
            + (f": {stderr}" if stderr else "")
        ) from e
    except subprocess.TimeoutExpired as e:
        raise CommandError(
            f"Command '{' '.join(cmd)}' timed out after {timeout} seconds"
        ) from e
    except OSError as e:
        raise CommandError(f"Could not run '{' '.join(cmd)}': {e}") from e
    return result


def restart_service(service: str, timeout: int = DEFAULT_TIMEOUT) -> None:
    """
    Restart a systemd service.

    Raises:
        RestartError: If systemctl is missing or the restart fails.
    """
    if not command_exists("systemctl"):
        raise RestartError(f"systemctl not found, cannot restart {service}")
    try:
        run_command(["systemctl", "restart", service], timeout=timeout)
    except CommandError as e:
        raise RestartError(f"Failed to restart {service}: {e}") from e
    logger.info(f"Restarted service {service}")
