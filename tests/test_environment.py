from __future__ import annotations

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from opener import environment
from opener.environment import DEFAULT_MOUNT_POINT, Environment, normalize_arch, parse_mount_point


def test_parse_mount_point_reads_root_and_appends_slash():
    config = "[automount]\nenabled = true\nroot = /windir\n"
    assert parse_mount_point(config) == "/windir/"
    assert parse_mount_point("[automount]\nroot=/host/\n") == "/host/"


def test_parse_mount_point_skips_commented_lines():
    assert parse_mount_point("[automount]\n# root = /ignored/\n") is None
    config = "[automount]\n#root = /ignored/\nroot = /used/\n"
    assert parse_mount_point(config) == "/used/"


def test_parse_mount_point_keeps_trailing_comment():
    # Trailing comments after the value are not stripped.
    assert parse_mount_point("root = /c # drives\n") == "/c # drives/"


def test_wsl_mount_point_reads_config_once(tmp_path, monkeypatch):
    config = tmp_path / "wsl.conf"
    config.write_text("[automount]\nroot = /windir/\n", encoding="utf-8")
    env = Environment(platform="linux", is_wsl=True, is_container=False, wsl_config_path=config)

    reads = []
    original = Path.read_text

    def counting_read_text(self, *args, **kwargs):
        reads.append(self)
        return original(self, *args, **kwargs)

    monkeypatch.setattr(Path, "read_text", counting_read_text)

    assert env.wsl_mount_point() == "/windir/"
    config.write_text("[automount]\nroot = /other/\n", encoding="utf-8")
    assert env.wsl_mount_point() == "/windir/"
    assert reads.count(config) == 1


def test_wsl_mount_point_defaults_without_config(tmp_path):
    config = tmp_path / "wsl.conf"
    env = Environment(platform="linux", is_wsl=True, is_container=False, wsl_config_path=config)

    assert env.wsl_mount_point() == DEFAULT_MOUNT_POINT

    # A missing file is not remembered.
    config.write_text("[automount]\nroot = /late\n", encoding="utf-8")
    assert env.wsl_mount_point() == "/late/"


def test_wsl_mount_point_defaults_when_root_missing(tmp_path):
    config = tmp_path / "wsl.conf"
    config.write_text("[network]\nhostname = box\n", encoding="utf-8")
    env = Environment(platform="linux", is_wsl=True, wsl_config_path=config)

    assert env.wsl_mount_point() == DEFAULT_MOUNT_POINT
    config.write_text("[automount]\nroot = /late\n", encoding="utf-8")
    assert env.wsl_mount_point() == DEFAULT_MOUNT_POINT


def test_detect_wsl_only_on_linux():
    assert environment.detect_wsl("darwin") is False
    assert environment.detect_wsl("win32", in_container=False) is False


def test_detect_wsl_reads_proc_version(monkeypatch):
    monkeypatch.setattr(environment._platform, "release", lambda: "6.1.0-generic")
    monkeypatch.setattr(
        environment,
        "_read_text",
        lambda path: "Linux version 5.15.90.1-microsoft-standard-WSL2" if path == Path("/proc/version") else None,
    )
    assert environment.detect_wsl("linux", in_container=False) is True
    assert environment.detect_wsl("linux", in_container=True) is False


def test_environment_detections_are_cached(monkeypatch):
    calls = []

    def fake_detect_container():
        calls.append("container")
        return True

    monkeypatch.setattr(environment, "detect_container", fake_detect_container)
    env = Environment(platform="linux", is_wsl=False)

    assert env.is_container is True
    assert env.is_container is True
    assert calls == ["container"]


def test_normalize_arch():
    assert normalize_arch("x86_64") == "x64"
    assert normalize_arch("AMD64") == "x64"
    assert normalize_arch("i686") == "ia32"
    assert normalize_arch("aarch64") == "arm64"
    assert normalize_arch("riscv64") == "riscv64"


def test_snapshot_includes_mount_point_only_under_wsl(tmp_path):
    config = tmp_path / "wsl.conf"
    config.write_text("root = /w/\n", encoding="utf-8")

    wsl = Environment(platform="linux", arch="x64", is_wsl=True, is_container=False, wsl_config_path=config)
    assert wsl.snapshot().wsl_mount_point == "/w/"

    mac = Environment(platform="darwin", arch="arm64", is_wsl=False, is_container=False)
    snapshot = mac.snapshot()
    assert snapshot.platform == "darwin"
    assert snapshot.arch == "arm64"
    assert snapshot.wsl_mount_point is None
