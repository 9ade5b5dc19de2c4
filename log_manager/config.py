"""Application configuration and logging setup."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "log_manager"


@dataclass
class AppConfig:
    """Paths and tunables for the log manager."""

    APP_NAME: str = "Log Manager"
    APP_SUBTITLE: str = "Disk-Aware Log Retention"
    VERSION: str = "1.0.0"

    ROOT_PATH: str = "/"
    DOCKER_DAEMON_JSON: str = "/etc/docker/daemon.json"
    DOCKER_CONTAINERS_DIR: str = "/var/lib/docker/containers"
    JOURNALD_CONF: str = "/etc/systemd/journald.conf"
    SYSTEM_LOG_DIR: str = "/var/log"
    LOG_FILE: str = "/var/log/log_manager.log"

    DOCKER_SERVICE: str = "docker"
    JOURNALD_SERVICE: str = "systemd-journald"

    COMMAND_TIMEOUT: int = 60  # seconds
    JOURNAL_VACUUM_TIME: str = "7d"
    JOURNAL_VACUUM_SIZE: str = "500M"
    COMPRESSED_LOG_MAX_AGE_DAYS: int = 30
    ROTATED_LOG_MAX_AGE_DAYS: int = 7


def setup_logging(
    console: Console,
    log_file: Optional[Union[str, Path]] = None,
    verbose: bool = False,
) -> logging.Logger:
    """
    Configure the log_manager logger.

    Console output goes through a RichHandler on the shared console, and a
    FileHandler keeps a DEBUG-level record when the log file can be opened.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG)
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = False

    console_handler = RichHandler(console=console, rich_tracebacks=True, markup=False)
    console_handler.setLevel(logging.DEBUG if verbose else logging.WARNING)
    logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        try:
            log_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_path)
        except OSError as e:
            logger.debug(f"File logging disabled, cannot open {log_path}: {e}")
        else:
            file_handler.setLevel(logging.DEBUG)
            formatter = logging.Formatter(
                "[%(asctime)s] [%(levelname)s] %(message)s", "%Y-%m-%d %H:%M:%S"
            )
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)
            try:
                os.chmod(str(log_path), 0o600)
            except OSError as e:
                logger.debug(f"Could not set permissions on log file {log_path}: {e}")
    return logger
