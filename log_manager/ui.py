"""Nord-themed terminal output for the log manager."""

from dataclasses import dataclass
from typing import Dict, Optional

import pyfiglet
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from rich.theme import Theme

from log_manager.cleanup import CleanupReport
from log_manager.docker_config import DockerLogConfig
from log_manager.journald_config import JournaldConfig
from log_manager.policy import (
    DiskSpaceSample,
    Recommendation,
    RetentionMode,
    RetentionParameters,
    classify,
)
from log_manager.sizes import SIZE_UNITS, format_bytes, size_to_bytes


@dataclass
class NordColors:
    """Nord color theme palette."""

    SNOW_STORM_1: str = "#D8DEE9"
    FROST_1: str = "#8FBCBB"
    FROST_2: str = "#88C0D0"
    FROST_3: str = "#81A1C1"
    FROST_4: str = "#5E81AC"
    RED: str = "#BF616A"
    YELLOW: str = "#EBCB8B"
    GREEN: str = "#A3BE8C"


console = Console(
    theme=Theme(
        {
            "info": f"bold {NordColors.FROST_2}",
            "warning": f"bold {NordColors.YELLOW}",
            "error": f"bold {NordColors.RED}",
            "success": f"bold {NordColors.GREEN}",
            "value": NordColors.FROST_2,
            "path": f"italic {NordColors.FROST_1}",
        }
    )
)

MODE_STYLES: Dict[RetentionMode, str] = {
    RetentionMode.STRICT: NordColors.RED,
    RetentionMode.NORMAL: NordColors.YELLOW,
    RetentionMode.RELAXED: NordColors.GREEN,
    RetentionMode.AMPLE: NordColors.FROST_2,
}

MODE_DESCRIPTIONS: Dict[RetentionMode, str] = {
    RetentionMode.STRICT: "Aggressive log rotation to preserve disk space",
    RetentionMode.NORMAL: "Balanced log retention",
    RetentionMode.RELAXED: "Keep more logs for debugging",
    RetentionMode.AMPLE: "Extended log retention",
}

MODE_RATIONALE: Dict[RetentionMode, str] = {
    RetentionMode.STRICT: "With only {gb}GB available, aggressive rotation prevents disk full.",
    RetentionMode.NORMAL: "With {gb}GB available, balanced settings prevent space issues.",
    RetentionMode.RELAXED: "With {gb}GB available, you can keep more logs for debugging.",
    RetentionMode.AMPLE: "With {gb}GB available, extended retention helps with analysis.",
}

DISK_STATUS: Dict[RetentionMode, str] = {
    RetentionMode.STRICT: f"[{NordColors.RED}]⚠ Critical - Very Low Space[/]",
    RetentionMode.NORMAL: f"[{NordColors.YELLOW}]⚠ Warning - Low Space[/]",
    RetentionMode.RELAXED: f"[{NordColors.GREEN}]✓ Normal[/]",
    RetentionMode.AMPLE: f"[{NordColors.GREEN}]✓ Ample Space[/]",
}


# ------------------------------
# Basic messages
# ------------------------------
def print_header(text: str) -> None:
    """Print a striking ASCII art header using pyfiglet."""
    ascii_art = pyfiglet.figlet_format(text, font="slant")
    console.print(ascii_art, style=f"bold {NordColors.FROST_2}")


def print_section(text: str) -> None:
    console.print(f"\n[bold {NordColors.FROST_2}]{text}[/]")


def print_step(text: str) -> None:
    console.print(f"[{NordColors.FROST_3}]• {text}[/]")


def print_success(text: str) -> None:
    console.print(f"[success]✓ {text}[/success]")


def print_warning(text: str) -> None:
    console.print(f"[warning]⚠ {text}[/warning]")


def print_error(text: str) -> None:
    console.print(f"[error]✗ {text}[/error]")


def mode_text(mode: RetentionMode) -> str:
    return f"[bold {MODE_STYLES[mode]}]{mode.label}[/]"


def _settings_table(title: str, border: str = NordColors.FROST_3) -> Table:
    table = Table(
        title=title,
        box=box.ROUNDED,
        border_style=border,
        show_header=False,
        title_style=f"bold {NordColors.FROST_2}",
        title_justify="left",
    )
    table.add_column("Setting", style=NordColors.SNOW_STORM_1, no_wrap=True)
    table.add_column("Value")
    return table


# ------------------------------
# Status panels
# ------------------------------
def show_disk_status(sample: DiskSpaceSample) -> None:
    """Print total, used and available space with a status label."""
    table = _settings_table("Disk Space Status")
    table.add_row("Total Space", f"[value]{sample.total_gb}GB[/value]")
    table.add_row(
        "Used Space",
        f"[{NordColors.YELLOW}]{sample.used_gb}GB[/] ({sample.used_percent}%)",
    )
    table.add_row("Available Space", f"[{NordColors.GREEN}]{sample.available_gb}GB[/]")
    table.add_row("Status", DISK_STATUS[classify(sample.available_gb)])
    console.print(table)


def show_docker_config(
    current: Optional[DockerLogConfig], log_size: Optional[int] = None
) -> None:
    """Print the current Docker log rotation; None means Docker is not installed."""
    table = _settings_table("Docker Log Configuration")
    if current is None:
        table.add_row("Status", "[warning]Docker is not installed[/warning]")
        console.print(table)
        return
    if not current.configured:
        table.add_row("Status", "[warning]Not Configured[/warning]")
        table.add_row("", "[warning]Using Docker default (no log rotation)[/warning]")
        table.add_row("", "[error]⚠ Logs will grow indefinitely![/error]")
    else:
        table.add_row("Status", "[success]Configured[/success]")
        table.add_row("Max Size per File", f"[value]{current.max_size}[/value]")
        table.add_row("Max Files", f"[value]{current.max_file}[/value]")
    if log_size is not None:
        table.add_row("Current Log Size", f"[value]{format_bytes(log_size)}[/value]")
    console.print(table)


def show_journald_config(
    current: JournaldConfig, journal_usage: Optional[str] = None
) -> None:
    """Print the current journald disk limits."""
    table = _settings_table("System Journal (journald) Configuration")
    if not current.configured:
        table.add_row("Status", "[warning]Not Configured[/warning]")
        table.add_row("Max Disk Usage", "[warning]Default (10% of disk)[/warning]")
        table.add_row("Keep Free", "[warning]Default (15% of disk)[/warning]")
        table.add_row("Max File Size", "[warning]Default[/warning]")
    else:
        table.add_row("Status", "[success]Configured[/success]")
        table.add_row("Max Disk Usage", f"[value]{current.max_use}[/value]")
        table.add_row("Keep Free", f"[value]{current.keep_free}[/value]")
        table.add_row("Max File Size", f"[value]{current.max_file_size}[/value]")
    if journal_usage:
        table.add_row("Current Usage", f"[value]{journal_usage}[/value]")
    console.print(table)


def show_recommendation(sample: DiskSpaceSample, recommendation: Recommendation) -> None:
    """Print the recommended mode and its rotation limits."""
    mode, params = recommendation
    table = _settings_table("Recommended Configuration", border=NordColors.GREEN)
    table.add_row("Mode", f"{mode_text(mode)} (Available: {sample.available_gb}GB)")
    table.add_row("", f"[{MODE_STYLES[mode]}]{MODE_DESCRIPTIONS[mode]}[/]")
    table.add_section()
    table.add_row("[warning]Docker Log Settings[/warning]", "")
    table.add_row("  Max Size per File", f"[value]{params.container_log_max_size}[/value]")
    table.add_row("  Max Files", f"[value]{params.container_log_max_file}[/value]")
    table.add_row(
        "  Total per Container", f"[value]~{params.container_log_total_mb}MB[/value]"
    )
    table.add_section()
    table.add_row("[warning]System Journal Settings[/warning]", "")
    table.add_row("  Max Disk Usage", f"[value]{params.journal_max_use}[/value]")
    table.add_row("  Keep Free", f"[value]{params.journal_keep_free}[/value]")
    table.add_row("  Max File Size", f"[value]{params.journal_max_file_size}[/value]")
    console.print(table)


# ------------------------------
# Current vs recommended
# ------------------------------
def _docker_total(current: DockerLogConfig) -> str:
    try:
        per_file = size_to_bytes(current.max_size or "") // SIZE_UNITS["M"]
        files = int(current.max_file or "")
    except ValueError:
        return "unknown"
    return f"~{per_file * files}MB"


def show_comparison(
    sample: DiskSpaceSample,
    recommendation: Recommendation,
    docker_current: Optional[DockerLogConfig],
    journald_current: JournaldConfig,
) -> None:
    """Print current settings next to the recommendation for both subsystems."""
    mode, params = recommendation
    console.print(
        Panel(
            Text("Current vs Recommended Configuration", justify="center"),
            border_style=NordColors.FROST_2,
            style=f"bold {NordColors.YELLOW}",
        )
    )

    print_section("📊 Analysis Basis")
    console.print(f"   Total Disk Space    : [value]{sample.total_gb}GB[/value]")
    console.print(f"   Available Space     : [{NordColors.GREEN}]{sample.available_gb}GB[/]")
    console.print(f"   Recommendation Mode : {mode_text(mode)}")

    docker_table = Table(
        title="🐳 Docker Log Settings",
        box=box.ROUNDED,
        border_style=NordColors.FROST_3,
        title_style=f"bold {NordColors.FROST_2}",
        title_justify="left",
    )
    if docker_current is None:
        print_section("🐳 Docker Log Settings")
        print_warning("Docker is not installed - will skip Docker configuration")
    else:
        docker_table.add_column("Setting", style=NordColors.SNOW_STORM_1)
        docker_table.add_column("Current", style=NordColors.YELLOW)
        docker_table.add_column("Recommended", style=NordColors.FROST_2)
        if docker_current.configured:
            current_size = docker_current.max_size or ""
            current_file = docker_current.max_file or ""
            current_total = _docker_total(docker_current)
        else:
            current_size = current_file = "[error]not set[/error]"
            current_total = "[error]unbounded![/error]"
        docker_table.add_row("Max Size per File", current_size, params.container_log_max_size)
        docker_table.add_row("Max Files", current_file, str(params.container_log_max_file))
        docker_table.add_row(
            "Total per Container", current_total, f"~{params.container_log_total_mb}MB"
        )
        console.print(docker_table)
        if not docker_current.configured:
            print_warning("Docker logs are not rotated and may fill up the disk")

    journal_table = Table(
        title="📋 System Journal (journald) Settings",
        box=box.ROUNDED,
        border_style=NordColors.FROST_3,
        title_style=f"bold {NordColors.FROST_2}",
        title_justify="left",
    )
    journal_table.add_column("Setting", style=NordColors.SNOW_STORM_1)
    journal_table.add_column("Current", style=NordColors.YELLOW)
    journal_table.add_column("Recommended", style=NordColors.FROST_2)
    if journald_current.configured:
        current_use = journald_current.max_use or ""
        current_free = journald_current.keep_free or ""
        current_file_size = journald_current.max_file_size or ""
    else:
        current_use = f"~10% of disk (~{sample.total_gb // 10}GB)"
        current_free = f"~15% of disk (~{sample.total_gb * 15 // 100}GB)"
        current_file_size = "default"
    journal_table.add_row("Max Disk Usage", current_use, params.journal_max_use)
    journal_table.add_row("Keep Free", current_free, params.journal_keep_free)
    journal_table.add_row("Max File Size", current_file_size, params.journal_max_file_size)
    console.print(journal_table)
    console.print(
        f"  [{NordColors.FROST_4}]→ System logs limited to {params.journal_max_use}, "
        f"ensuring {params.journal_keep_free} always free[/]"
    )

    print_section("💡 Why these recommendations?")
    console.print(
        f"   [{MODE_STYLES[mode]}]{MODE_RATIONALE[mode].format(gb=sample.available_gb)}[/]"
    )


def show_subsystem_change(
    title: str,
    current: str,
    recommended: str,
    available_gb: int,
) -> None:
    """Print a short current/recommended summary before applying a change."""
    console.print(f"[bold {NordColors.FROST_2}]━━━ {title} ━━━[/]")
    console.print(f"[warning]Current:[/warning] {current}")
    console.print(f"[success]Recommended:[/success] {recommended}")
    console.print(f"  (Based on {available_gb}GB available space)")


def show_cleanup_report(report: CleanupReport) -> None:
    """Summarize what a cleanup run removed."""
    table = _settings_table("Log Cleanup Summary", border=NordColors.GREEN)
    if report.docker_checked:
        freed = report.docker_freed_mb
        table.add_row(
            "Docker Logs",
            f"[success]freed {freed}MB[/success]" if freed > 0 else "already clean",
        )
    else:
        table.add_row("Docker Logs", "[warning]skipped (Docker not installed)[/warning]")
    table.add_row(
        "System Journal",
        "vacuumed" if report.journal_vacuumed else "[warning]skipped[/warning]",
    )
    table.add_row(
        "Rotated Log Files",
        f"{report.rotated_files_removed} removed "
        f"({format_bytes(report.rotated_bytes_removed)})",
    )
    if report.space_freed_gb > 0:
        table.add_row(
            "Total Space Freed",
            f"[success]approximately {report.space_freed_gb}GB[/success]",
        )
    console.print(table)
    for warning in report.warnings:
        print_warning(warning)


def describe_parameters(params: RetentionParameters) -> Dict[str, object]:
    """Return the rotation limits as a JSON-friendly mapping."""
    return {
        "docker": {
            "max-size": params.container_log_max_size,
            "max-file": params.container_log_max_file,
            "total-per-container-mb": params.container_log_total_mb,
        },
        "journald": {
            "SystemMaxUse": params.journal_max_use,
            "SystemKeepFree": params.journal_keep_free,
            "SystemMaxFileSize": params.journal_max_file_size,
        },
    }
