"""
Docker container-log configuration.

Reads and writes the json-file log driver rotation options in the Docker
daemon configuration (/etc/docker/daemon.json by default).
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Union

from log_manager.backup import backup_file, replace_file
from log_manager.errors import WriteError
from log_manager.policy import RetentionParameters

logger = logging.getLogger("log_manager")

LOG_DRIVER = "json-file"
UNLIMITED = "unlimited"


@dataclass(frozen=True)
class DockerLogConfig:
    """Current container log rotation settings."""

    configured: bool
    max_size: Optional[str] = None
    max_file: Optional[str] = None

    def matches(self, parameters: RetentionParameters) -> bool:
        return (
            self.configured
            and self.max_size == parameters.container_log_max_size
            and self.max_file == str(parameters.container_log_max_file)
        )


def _load_daemon_json(path: Path) -> Dict[str, Any]:
    """Load daemon.json; a missing or empty file is an empty object."""
    if not path.is_file():
        return {}
    content = path.read_text()
    if not content.strip():
        return {}
    data = json.loads(content)
    if not isinstance(data, dict):
        raise ValueError("top-level value is not a JSON object")
    return data


def read_docker_config(path: Union[str, Path]) -> DockerLogConfig:
    """Read the log rotation options currently set in daemon.json."""
    fp = Path(path)
    try:
        data = _load_daemon_json(fp)
    except (OSError, ValueError) as e:
        logger.warning(f"Could not read Docker daemon config {fp}: {e}")
        return DockerLogConfig(configured=False)

    log_opts = data.get("log-opts")
    if not isinstance(log_opts, dict):
        return DockerLogConfig(configured=False)
    max_size = log_opts.get("max-size")
    max_file = log_opts.get("max-file")
    if max_size is None and max_file is None:
        return DockerLogConfig(configured=False)
    return DockerLogConfig(
        configured=True,
        max_size=str(max_size) if max_size is not None else UNLIMITED,
        max_file=str(max_file) if max_file is not None else UNLIMITED,
    )


def write_docker_config(
    path: Union[str, Path], parameters: RetentionParameters
) -> Optional[str]:
    """
    Merge the recommended log rotation options into daemon.json.

    Other top-level keys of an existing configuration are preserved; the
    log-driver and log-opts keys are replaced.

    Returns:
        Path of the backup taken of the previous file, if any.

    Raises:
        WriteError: If the existing file cannot be parsed or the new
            configuration cannot be written.
    """
    fp = Path(path)
    try:
        data = _load_daemon_json(fp)
    except (OSError, ValueError) as e:
        raise WriteError(f"Refusing to overwrite unreadable {fp}: {e}") from e

    try:
        fp.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise WriteError(f"Cannot create directory {fp.parent}: {e}") from e

    backup = backup_file(fp)
    data.update(
        {
            "log-driver": LOG_DRIVER,
            "log-opts": {
                "max-size": parameters.container_log_max_size,
                # Docker only accepts log-opts values as strings.
                "max-file": str(parameters.container_log_max_file),
            },
        }
    )
    replace_file(fp, json.dumps(data, indent=2) + "\n")
    logger.info(
        f"Docker log rotation set to max-size={parameters.container_log_max_size} "
        f"max-file={parameters.container_log_max_file} in {fp}"
    )
    return backup
