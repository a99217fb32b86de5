import os
from types import SimpleNamespace

import psutil

from spacehog import system


def test_filesystem_info_for_real_path(tmp_path):
    info = system.filesystem_info(str(tmp_path))

    assert info is not None
    assert info["total"] > 0
    assert 0.0 <= info["percent"] <= 100.0
    assert str(tmp_path).startswith(info["mountpoint"].rstrip(os.sep)) or info["mountpoint"] == os.sep


def test_filesystem_info_missing_path(tmp_path):
    assert system.filesystem_info(str(tmp_path / "gone")) is None


def test_longest_mountpoint_wins(monkeypatch):
    parts = [
        SimpleNamespace(mountpoint="/", fstype="ext4"),
        SimpleNamespace(mountpoint="/data", fstype="xfs"),
        SimpleNamespace(mountpoint="/data/archive", fstype="nfs"),
        SimpleNamespace(mountpoint="/dat", fstype="tmpfs"),
    ]
    monkeypatch.setattr(system.psutil, "disk_partitions", lambda all=True: parts)

    assert system.mountpoint_of("/data/logs/app.log").mountpoint == "/data"
    assert system.mountpoint_of("/data/archive").mountpoint == "/data/archive"
    assert system.mountpoint_of("/home").mountpoint == "/"


def test_lower_priority(monkeypatch):
    calls = []

    class FakeProcess:
        def nice(self, value):
            calls.append(value)

    monkeypatch.setattr(system.psutil, "Process", FakeProcess)
    monkeypatch.setattr(system.psutil, "WINDOWS", False)

    assert system.lower_priority() is True
    assert calls == [system.NICE_LOWEST]


def test_lower_priority_denied(monkeypatch):
    class DeniedProcess:
        def nice(self, value):
            raise psutil.AccessDenied()

    monkeypatch.setattr(system.psutil, "Process", DeniedProcess)
    monkeypatch.setattr(system.psutil, "WINDOWS", False)

    assert system.lower_priority() is False
