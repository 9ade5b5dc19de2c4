import json

import pytest
from click.testing import CliRunner

from log_manager import cli as cli_module
from log_manager.cli import cli
from log_manager.errors import ProbeError, RestartError
from log_manager.policy import DiskSpaceSample


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def system(monkeypatch, paths):
    """Fake host: 7GB free, Docker installed, running as root."""
    state = {
        "sample": DiskSpaceSample(7, 50, 86),
        "installed": {"docker", "journalctl", "systemctl"},
        "restarted": [],
        "restart_fails": set(),
        "timeouts": [],
        "root": True,
    }

    def fake_restart(service, timeout=None):
        state["timeouts"].append(timeout)
        if service in state["restart_fails"]:
            raise RestartError(f"Failed to restart {service}")
        state["restarted"].append(service)

    def fake_journal_usage(timeout=30):
        state["timeouts"].append(timeout)
        return "48M"

    monkeypatch.setattr(cli_module, "probe_disk", lambda path: state["sample"])
    monkeypatch.setattr(cli_module, "command_exists", lambda name: name in state["installed"])
    monkeypatch.setattr(cli_module, "restart_service", fake_restart)
    monkeypatch.setattr(cli_module, "is_root", lambda: state["root"])
    monkeypatch.setattr(cli_module, "journal_disk_usage", fake_journal_usage)
    return state


def path_args(paths):
    return [
        "--daemon-json", str(paths.daemon_json),
        "--journald-conf", str(paths.journald_conf),
        "--containers-dir", str(paths.containers),
        "--log-dir", str(paths.log_dir),
        "--log-file", str(paths.log_file),
    ]


def invoke(runner, paths, *args, **kwargs):
    return runner.invoke(cli, path_args(paths) + list(args), **kwargs)


def test_recommend_json(runner, paths, system):
    result = invoke(runner, paths, "recommend", "--json")
    assert result.exit_code == 0, result.output
    payload = json.loads(result.output)
    assert payload["mode"] == "normal"
    assert payload["available_gb"] == 7
    assert payload["docker"] == {
        "max-size": "10m",
        "max-file": 3,
        "total-per-container-mb": 30,
    }
    assert payload["journald"] == {
        "SystemMaxUse": "200M",
        "SystemKeepFree": "1G",
        "SystemMaxFileSize": "20M",
    }


def test_recommend_human_readable(runner, paths, system):
    system["sample"] = DiskSpaceSample(100, 200, 50)
    result = invoke(runner, paths, "recommend")
    assert result.exit_code == 0, result.output
    assert "Ample" in result.output
    assert "50m" in result.output
    assert "100M" in result.output


def test_default_command_is_status(runner, paths, system):
    system["root"] = False
    result = invoke(runner, paths)
    assert result.exit_code == 0, result.output
    assert "Disk Space Status" in result.output
    assert "Not Configured" in result.output
    assert "Recommended Configuration" in result.output


def test_status_without_docker(runner, paths, system):
    system["installed"] = {"journalctl"}
    result = invoke(runner, paths, "status")
    assert result.exit_code == 0, result.output
    assert "Docker is not installed" in result.output


def test_probe_error_exits_with_failure(runner, paths, monkeypatch, system):
    def broken(path):
        raise ProbeError("Cannot read filesystem statistics for /")

    monkeypatch.setattr(cli_module, "probe_disk", broken)
    result = invoke(runner, paths, "recommend")
    assert result.exit_code == 1
    assert "Cannot read filesystem statistics" in result.output


def test_modifying_commands_require_root(runner, paths, system):
    system["root"] = False
    for command in ("configure", "docker", "journald", "clean"):
        result = invoke(runner, paths, command, "--yes")
        assert result.exit_code == 1, command
        assert "root privileges" in result.output
    assert not paths.daemon_json.exists()
    assert not paths.journald_conf.exists()


def test_docker_apply(runner, paths, system):
    paths.daemon_json.parent.mkdir(parents=True)
    paths.daemon_json.write_text(json.dumps({"storage-driver": "overlay2"}))

    result = invoke(runner, paths, "docker", "--yes")

    assert result.exit_code == 0, result.output
    data = json.loads(paths.daemon_json.read_text())
    assert data["storage-driver"] == "overlay2"
    assert data["log-opts"] == {"max-size": "10m", "max-file": "3"}
    assert system["restarted"] == ["docker"]
    assert "Docker log configuration updated" in result.output


def test_docker_already_optimal(runner, paths, system):
    paths.daemon_json.parent.mkdir(parents=True)
    paths.daemon_json.write_text(
        json.dumps({"log-driver": "json-file", "log-opts": {"max-size": "10m", "max-file": "3"}})
    )
    before = paths.daemon_json.read_text()

    result = invoke(runner, paths, "docker", "--yes")

    assert result.exit_code == 0, result.output
    assert "already optimally configured" in result.output
    assert paths.daemon_json.read_text() == before
    assert system["restarted"] == []


def test_docker_not_installed(runner, paths, system):
    system["installed"] = set()
    result = invoke(runner, paths, "docker", "--yes")
    assert result.exit_code == 0, result.output
    assert "Docker is not installed" in result.output
    assert not paths.daemon_json.exists()


def test_docker_prompt_declined(runner, paths, system):
    result = invoke(runner, paths, "docker", input="n\n")
    assert result.exit_code == 0, result.output
    assert "cancelled" in result.output
    assert not paths.daemon_json.exists()


def test_docker_invalid_json_fails(runner, paths, system):
    paths.daemon_json.parent.mkdir(parents=True)
    paths.daemon_json.write_text("{oops")
    result = invoke(runner, paths, "docker", "--yes")
    assert result.exit_code == 1
    assert paths.daemon_json.read_text() == "{oops"
    assert system["restarted"] == []


def test_journald_apply_with_prompt(runner, paths, system):
    system["sample"] = DiskSpaceSample(2, 20, 90)
    result = invoke(runner, paths, "journald", input="\n")

    assert result.exit_code == 0, result.output
    content = paths.journald_conf.read_text()
    assert "[Journal]" in content
    assert "SystemMaxUse=100M" in content
    assert "SystemKeepFree=500M" in content
    assert "SystemMaxFileSize=10M" in content
    assert system["restarted"] == ["systemd-journald"]


def test_restart_failure_is_a_warning(runner, paths, system):
    system["restart_fails"] = {"systemd-journald"}
    result = invoke(runner, paths, "journald", "--yes")
    assert result.exit_code == 0, result.output
    assert "systemctl restart systemd-journald" in result.output
    assert "SystemMaxUse=200M" in paths.journald_conf.read_text()


def test_configure_applies_both(runner, paths, system):
    system["sample"] = DiskSpaceSample(15, 100, 85)
    result = invoke(runner, paths, "configure", "--yes")

    assert result.exit_code == 0, result.output
    assert json.loads(paths.daemon_json.read_text())["log-opts"] == {
        "max-size": "20m",
        "max-file": "5",
    }
    assert "SystemMaxUse=500M" in paths.journald_conf.read_text()
    assert system["restarted"] == ["docker", "systemd-journald"]
    assert "Log management configuration completed!" in result.output


def test_configure_cancelled(runner, paths, system):
    result = invoke(runner, paths, "configure", input="n\n")
    assert result.exit_code == 0, result.output
    assert "Configuration cancelled" in result.output
    assert not paths.daemon_json.exists()
    assert not paths.journald_conf.exists()


def test_configure_skips_docker_when_missing(runner, paths, system):
    system["installed"] = {"journalctl", "systemctl"}
    result = invoke(runner, paths, "configure", "--yes")
    assert result.exit_code == 0, result.output
    assert not paths.daemon_json.exists()
    assert system["restarted"] == ["systemd-journald"]


def test_clean(runner, paths, system, monkeypatch):
    monkeypatch.setattr("log_manager.cleanup.command_exists", lambda name: False)
    monkeypatch.setattr(
        "log_manager.cleanup.probe_disk", lambda path: DiskSpaceSample(7, 50, 86)
    )
    result = invoke(runner, paths, "clean", "--yes")
    assert result.exit_code == 0, result.output
    assert "Log Cleanup Summary" in result.output
    assert "Log cleanup completed" in result.output


def test_environment_overrides_paths(runner, paths, system):
    result = runner.invoke(
        cli,
        ["journald", "--yes"],
        env={
            "LOG_MANAGER_JOURNALD_CONF": str(paths.journald_conf),
            "LOG_MANAGER_LOG_FILE": str(paths.log_file),
        },
    )
    assert result.exit_code == 0, result.output
    assert "SystemMaxUse=200M" in paths.journald_conf.read_text()


def test_log_file_records_debug(runner, paths, system):
    result = invoke(runner, paths, "journald", "--yes")
    assert result.exit_code == 0, result.output
    assert "normal mode" in paths.log_file.read_text()


def test_version(runner):
    result = runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert "1.0.0" in result.output


def test_timeout_reaches_commands(runner, paths, system):
    result = invoke(runner, paths, "--timeout", "15", "journald", "--yes")
    assert result.exit_code == 0, result.output
    assert system["timeouts"] == [15]

    system["timeouts"].clear()
    result = invoke(runner, paths, "status")
    assert result.exit_code == 0, result.output
    assert system["timeouts"] == [60]


def test_main_keyboard_interrupt_exits_130(paths, system, monkeypatch, capsys):
    def interrupted(path):
        raise KeyboardInterrupt

    monkeypatch.setattr(cli_module, "probe_disk", interrupted)
    with pytest.raises(SystemExit) as exc:
        cli_module.main(path_args(paths) + ["recommend"])
    assert exc.value.code == 130
    assert "Operation cancelled by user." in capsys.readouterr().out


def test_main_unexpected_error_exits_1(paths, system, monkeypatch, capsys):
    def crashed(path):
        raise RuntimeError("statvfs exploded")

    monkeypatch.setattr(cli_module, "probe_disk", crashed)
    with pytest.raises(SystemExit) as exc:
        cli_module.main(path_args(paths) + ["recommend"])
    assert exc.value.code == 1
    out = capsys.readouterr().out
    assert "Unexpected error: statvfs exploded" in out
    assert "Traceback" in out


def test_main_success_returns_normally(paths, system, capsys):
    cli_module.main(path_args(paths) + ["recommend", "--json"])
    assert json.loads(capsys.readouterr().out)["mode"] == "normal"
