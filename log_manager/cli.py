"""
Log Manager command-line interface.

Samples free space on the root filesystem, recommends a log retention mode
and applies the matching rotation limits to Docker and systemd-journald.

Note: commands that change the system (configure, docker, journald, clean)
must be run with root privileges.
"""

import functools
import json
import logging
import os
import sys
from typing import Any, Callable, List, Optional, Tuple, TypeVar, cast

import click
from rich.traceback import install as install_rich_traceback

from log_manager.cleanup import clean_old_logs
from log_manager.config import LOGGER_NAME, AppConfig, setup_logging
from log_manager.docker_config import read_docker_config, write_docker_config
from log_manager.errors import LogManagerError, RestartError
from log_manager.journald_config import read_journald_config, write_journald_config
from log_manager.policy import DiskSpaceSample, Recommendation, recommend
from log_manager.probe import directory_size, journal_disk_usage, probe_disk
from log_manager.services import command_exists, restart_service
from log_manager.ui import (
    console,
    describe_parameters,
    mode_text,
    print_error,
    print_header,
    print_section,
    print_step,
    print_success,
    print_warning,
    show_cleanup_report,
    show_comparison,
    show_disk_status,
    show_docker_config,
    show_journald_config,
    show_recommendation,
    show_subsystem_change,
)

install_rich_traceback(show_locals=False)

logger = logging.getLogger(LOGGER_NAME)

F = TypeVar("F", bound=Callable[..., Any])

yes_option = click.option(
    "-y", "--yes", "assume_yes", is_flag=True, help="Apply without asking for confirmation"
)


# ------------------------------
# Helpers
# ------------------------------
def is_root() -> bool:
    return os.geteuid() == 0


def require_root() -> None:
    if not is_root():
        print_error("This command requires root privileges. Please run with sudo.")
        sys.exit(1)


def handle_errors(func: F) -> F:
    """Report LogManagerError as a red error line and exit with status 1."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except LogManagerError as e:
            logger.debug(f"{type(e).__name__}: {e}")
            print_error(str(e))
            sys.exit(1)

    return cast(F, wrapper)


def confirm(prompt: str, assume_yes: bool) -> bool:
    if assume_yes:
        return True
    return click.confirm(prompt, default=True)


def evaluate(config: AppConfig) -> Tuple[DiskSpaceSample, Recommendation]:
    """Sample the disk and compute the recommendation for it."""
    sample = probe_disk(config.ROOT_PATH)
    recommendation = recommend(sample)
    logger.info(
        f"{sample.available_gb}GB available on {config.ROOT_PATH}: "
        f"{recommendation.mode.value} mode"
    )
    return sample, recommendation


def restart(service: str, timeout: int) -> bool:
    """Restart a service, warning instead of failing when it does not come back."""
    print_step(f"Restarting {service} to apply changes...")
    try:
        restart_service(service, timeout=timeout)
    except RestartError as e:
        logger.warning(str(e))
        print_warning(f"Failed to restart {service} automatically")
        print_step(f"Please restart manually: systemctl restart {service}")
        return False
    print_success(f"{service} restarted, new settings are active")
    return True


def apply_docker(
    config: AppConfig,
    sample: DiskSpaceSample,
    recommendation: Recommendation,
    assume_yes: bool,
) -> bool:
    """Write the recommended Docker log rotation and restart Docker."""
    if not command_exists("docker"):
        print_warning("Docker is not installed, skipping Docker log configuration")
        return False

    params = recommendation.parameters
    current = read_docker_config(config.DOCKER_DAEMON_JSON)
    if current.configured:
        current_text = f"Max Size: {current.max_size}, Max Files: {current.max_file}"
    else:
        current_text = "Not configured [error](logs will grow indefinitely!)[/error]"
    show_subsystem_change(
        "Docker Log Configuration",
        current_text,
        f"Max Size: {params.container_log_max_size}, "
        f"Max Files: {params.container_log_max_file}",
        sample.available_gb,
    )

    if current.matches(params):
        print_success("Docker logs are already optimally configured!")
        return False
    if not confirm("Apply recommended Docker log configuration?", assume_yes):
        print_step("Docker log configuration cancelled")
        return False

    backup = write_docker_config(config.DOCKER_DAEMON_JSON, params)
    if backup:
        print_step(f"Backed up existing configuration to {backup}")
    print_success("Docker log configuration updated")
    restart(config.DOCKER_SERVICE, config.COMMAND_TIMEOUT)
    return True


def apply_journald(
    config: AppConfig,
    sample: DiskSpaceSample,
    recommendation: Recommendation,
    assume_yes: bool,
) -> bool:
    """Write the recommended journal limits and restart systemd-journald."""
    params = recommendation.parameters
    current = read_journald_config(config.JOURNALD_CONF)
    if current.configured:
        current_text = (
            f"MaxUse: {current.max_use}, KeepFree: {current.keep_free}, "
            f"MaxFileSize: {current.max_file_size}"
        )
    else:
        current_text = "Using system defaults (typically 10% of disk for logs)"
    show_subsystem_change(
        "System Journal Configuration",
        current_text,
        f"MaxUse: {params.journal_max_use}, KeepFree: {params.journal_keep_free}, "
        f"MaxFileSize: {params.journal_max_file_size}",
        sample.available_gb,
    )

    if current.matches(params):
        print_success("System journal is already optimally configured!")
        return False
    if not confirm("Apply recommended journal configuration?", assume_yes):
        print_step("Journal configuration cancelled")
        return False

    backup = write_journald_config(config.JOURNALD_CONF, params)
    if backup:
        print_step(f"Backed up existing configuration to {backup}")
    print_success("Journal configuration updated")
    restart(config.JOURNALD_SERVICE, config.COMMAND_TIMEOUT)
    return True


# ------------------------------
# Commands
# ------------------------------
@click.group(invoke_without_command=True)
@click.option(
    "--root-path",
    default=AppConfig.ROOT_PATH,
    envvar="LOG_MANAGER_ROOT_PATH",
    show_default=True,
    help="Filesystem whose free space drives the recommendation",
)
@click.option(
    "--daemon-json",
    default=AppConfig.DOCKER_DAEMON_JSON,
    envvar="LOG_MANAGER_DAEMON_JSON",
    show_default=True,
    help="Docker daemon configuration file",
)
@click.option(
    "--containers-dir",
    default=AppConfig.DOCKER_CONTAINERS_DIR,
    envvar="LOG_MANAGER_CONTAINERS_DIR",
    show_default=True,
    help="Docker containers directory holding *-json.log files",
)
@click.option(
    "--journald-conf",
    default=AppConfig.JOURNALD_CONF,
    envvar="LOG_MANAGER_JOURNALD_CONF",
    show_default=True,
    help="systemd-journald configuration file",
)
@click.option(
    "--log-dir",
    default=AppConfig.SYSTEM_LOG_DIR,
    envvar="LOG_MANAGER_LOG_DIR",
    show_default=True,
    help="Directory searched for old rotated log files",
)
@click.option(
    "--log-file",
    default=AppConfig.LOG_FILE,
    envvar="LOG_MANAGER_LOG_FILE",
    show_default=True,
    help="File receiving this tool's own debug log",
)
@click.option(
    "--timeout",
    default=AppConfig.COMMAND_TIMEOUT,
    type=click.IntRange(min=1),
    envvar="LOG_MANAGER_TIMEOUT",
    show_default=True,
    help="Seconds to wait for systemctl and journalctl",
)
@click.option("-v", "--verbose", is_flag=True, help="Show debug logging on the console")
@click.version_option(AppConfig.VERSION, prog_name="log-manager")
@click.pass_context
def cli(
    ctx: click.Context,
    root_path: str,
    daemon_json: str,
    containers_dir: str,
    journald_conf: str,
    log_dir: str,
    log_file: str,
    timeout: int,
    verbose: bool,
) -> None:
    """
    Log Manager - Nord Themed CLI

    Tunes Docker and systemd-journald log retention to the free disk space.
    Runs 'status' when no command is given.
    """
    ctx.obj = AppConfig(
        ROOT_PATH=root_path,
        DOCKER_DAEMON_JSON=daemon_json,
        DOCKER_CONTAINERS_DIR=containers_dir,
        JOURNALD_CONF=journald_conf,
        SYSTEM_LOG_DIR=log_dir,
        LOG_FILE=log_file,
        COMMAND_TIMEOUT=timeout,
    )
    setup_logging(console, log_file, verbose)
    if ctx.invoked_subcommand is None:
        ctx.invoke(status)


@cli.command()
@click.pass_obj
@handle_errors
def status(config: AppConfig) -> None:
    """Show disk space, current log settings and the recommendation."""
    print_header(config.APP_NAME)
    sample, recommendation = evaluate(config)
    show_disk_status(sample)

    if command_exists("docker"):
        show_docker_config(
            read_docker_config(config.DOCKER_DAEMON_JSON),
            directory_size(config.DOCKER_CONTAINERS_DIR),
        )
    else:
        show_docker_config(None)

    show_journald_config(
        read_journald_config(config.JOURNALD_CONF),
        journal_disk_usage(timeout=config.COMMAND_TIMEOUT),
    )
    show_recommendation(sample, recommendation)


@cli.command(name="recommend")
@click.option("--json", "as_json", is_flag=True, help="Print the recommendation as JSON")
@click.pass_obj
@handle_errors
def recommend_cmd(config: AppConfig, as_json: bool) -> None:
    """Show the recommended retention mode and rotation limits."""
    sample, recommendation = evaluate(config)
    if as_json:
        payload = {
            "mode": recommendation.mode.value,
            "available_gb": sample.available_gb,
            "total_gb": sample.total_gb,
            "used_percent": sample.used_percent,
        }
        payload.update(describe_parameters(recommendation.parameters))
        click.echo(json.dumps(payload, indent=2))
        return
    show_recommendation(sample, recommendation)


@cli.command()
@yes_option
@click.pass_obj
@handle_errors
def configure(config: AppConfig, assume_yes: bool) -> None:
    """Apply the recommendation to Docker and the system journal."""
    require_root()
    print_header(config.APP_NAME)
    sample, recommendation = evaluate(config)
    show_disk_status(sample)

    docker_installed = command_exists("docker")
    docker_current = read_docker_config(config.DOCKER_DAEMON_JSON) if docker_installed else None
    show_comparison(
        sample, recommendation, docker_current, read_journald_config(config.JOURNALD_CONF)
    )

    print_step("This will configure both Docker and system journal logs")
    if not confirm("Proceed with configuration?", assume_yes):
        print_step("Configuration cancelled")
        return

    if docker_installed:
        print_section("Docker")
        apply_docker(config, sample, recommendation, assume_yes)
    print_section("System Journal")
    apply_journald(config, sample, recommendation, assume_yes)

    print_success("Log management configuration completed!")
    console.print(
        f"Logs are tuned for {sample.available_gb}GB available space "
        f"({mode_text(recommendation.mode)} mode)"
    )


@cli.command()
@yes_option
@click.pass_obj
@handle_errors
def docker(config: AppConfig, assume_yes: bool) -> None:
    """Apply the recommended Docker log rotation only."""
    require_root()
    sample, recommendation = evaluate(config)
    apply_docker(config, sample, recommendation, assume_yes)


@cli.command()
@yes_option
@click.pass_obj
@handle_errors
def journald(config: AppConfig, assume_yes: bool) -> None:
    """Apply the recommended journal limits only."""
    require_root()
    sample, recommendation = evaluate(config)
    apply_journald(config, sample, recommendation, assume_yes)


@cli.command()
@yes_option
@click.pass_obj
@handle_errors
def clean(config: AppConfig, assume_yes: bool) -> None:
    """Truncate container logs, vacuum the journal and drop old rotated logs."""
    require_root()
    if not confirm("Truncate container logs and remove old rotated logs?", assume_yes):
        print_step("Log cleanup cancelled")
        return
    print_step("Cleaning old logs...")
    report = clean_old_logs(config)
    show_cleanup_report(report)
    print_success("Log cleanup completed")


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the log-manager console script."""
    try:
        cli.main(args=argv, prog_name="log-manager", standalone_mode=False)
    except click.exceptions.Abort:
        print_warning("Operation cancelled by user.")
        sys.exit(130)
    except click.ClickException as e:
        e.show()
        sys.exit(e.exit_code)
    except Exception as e:
        print_error(f"Unexpected error: {e}")
        console.print_exception()
        sys.exit(1)


if __name__ == "__main__":
    main()
