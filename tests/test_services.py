import subprocess

import pytest

from log_manager import services
from log_manager.errors import CommandError, RestartError


def test_run_command_captures_output(monkeypatch):
    calls = []

    def fake_run(cmd, **kwargs):
        calls.append((cmd, kwargs))
        return subprocess.CompletedProcess(cmd, 0, "ok\n", "")

    monkeypatch.setattr(services.subprocess, "run", fake_run)
    result = services.run_command(["echo", "ok"], timeout=5)
    assert result.stdout == "ok\n"
    assert calls[0][1]["capture_output"] is True
    assert calls[0][1]["timeout"] == 5


def test_run_command_failure(monkeypatch):
    def fake_run(cmd, **kwargs):
        raise subprocess.CalledProcessError(3, cmd, "", "permission denied")

    monkeypatch.setattr(services.subprocess, "run", fake_run)
    with pytest.raises(CommandError, match="permission denied"):
        services.run_command(["false"])


def test_run_command_timeout(monkeypatch):
    def fake_run(cmd, **kwargs):
        raise subprocess.TimeoutExpired(cmd, kwargs["timeout"])

    monkeypatch.setattr(services.subprocess, "run", fake_run)
    with pytest.raises(CommandError, match="timed out"):
        services.run_command(["sleep", "100"], timeout=1)


def test_run_command_missing_binary(monkeypatch):
    def fake_run(cmd, **kwargs):
        raise FileNotFoundError(2, "No such file or directory")

    monkeypatch.setattr(services.subprocess, "run", fake_run)
    with pytest.raises(CommandError):
        services.run_command(["nope"])


def test_restart_service(monkeypatch):
    calls = []
    monkeypatch.setattr(services, "command_exists", lambda name: True)
    monkeypatch.setattr(
        services, "run_command", lambda cmd, timeout=60: calls.append(cmd)
    )
    services.restart_service("docker")
    assert calls == [["systemctl", "restart", "docker"]]


def test_restart_service_without_systemctl(monkeypatch):
    monkeypatch.setattr(services, "command_exists", lambda name: False)
    with pytest.raises(RestartError):
        services.restart_service("docker")


def test_restart_service_failure(monkeypatch):
    def failing(cmd, timeout=60):
        raise CommandError("exit 1")

    monkeypatch.setattr(services, "command_exists", lambda name: True)
    monkeypatch.setattr(services, "run_command", failing)
    with pytest.raises(RestartError, match="systemd-journald"):
        services.restart_service("systemd-journald")
