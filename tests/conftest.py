from types import SimpleNamespace

import pytest

from log_manager.policy import DiskSpaceSample

GIB = 1024**3


@pytest.fixture
def fake_statvfs():
    def make(total_gib, free_gib, avail_gib, frsize=4096):
        return SimpleNamespace(
            f_frsize=frsize,
            f_blocks=total_gib * GIB // frsize,
            f_bfree=free_gib * GIB // frsize,
            f_bavail=avail_gib * GIB // frsize,
        )

    return make


@pytest.fixture
def sample_factory():
    def make(available_gb, total_gb=50, used_percent=None):
        if used_percent is None:
            used = max(total_gb - available_gb, 0)
            used_percent = min(used * 100 // total_gb, 100) if total_gb else 0
        return DiskSpaceSample(available_gb, total_gb, used_percent)

    return make


@pytest.fixture
def paths(tmp_path):
    containers = tmp_path / "containers"
    log_dir = tmp_path / "log"
    containers.mkdir()
    log_dir.mkdir()
    return SimpleNamespace(
        daemon_json=tmp_path / "docker" / "daemon.json",
        journald_conf=tmp_path / "systemd" / "journald.conf",
        containers=containers,
        log_dir=log_dir,
        log_file=tmp_path / "log_manager.log",
    )
