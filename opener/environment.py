"""Host environment detection with per-instance caching."""
from __future__ import annotations

import logging
import os
import platform as _platform
import re
import sys
import threading
from pathlib import Path
from typing import Mapping, Optional

from .models import EnvironmentSnapshot

_LOGGER = logging.getLogger(__name__)

WSL_CONFIG_PATH = Path("/etc/wsl.conf")
# https://docs.microsoft.com/en-us/windows/wsl/wsl-config
DEFAULT_MOUNT_POINT = "/mnt/"
BUNDLED_OPENER_PATH = Path(__file__).resolve().parent / "xdg-open"

_ROOT_PATTERN = re.compile(r"root\s*=\s*(?P<mount_point>.*)")

_ARCH_ALIASES = {
    "x86_64": "x64",
    "amd64": "x64",
    "x64": "x64",
    "i386": "ia32",
    "i686": "ia32",
    "x86": "ia32",
    "ia32": "ia32",
    "aarch64": "arm64",
    "arm64": "arm64",
    "armv7l": "arm",
    "armv6l": "arm",
    "arm": "arm",
}


def normalize_arch(machine: str) -> str:
    return _ARCH_ALIASES.get(machine.lower(), machine.lower())


def _read_text(path: Path) -> Optional[str]:
    try:
        return path.read_text(encoding="utf-8", errors="ignore")
    except OSError:
        return None


def detect_container() -> bool:
    """Return True when running inside a Docker or Podman container."""

    if Path("/.dockerenv").exists() or Path("/run/.containerenv").exists():
        return True
    cgroup = _read_text(Path("/proc/self/cgroup"))
    return bool(cgroup and "docker" in cgroup)


def detect_wsl(platform: str = sys.platform, in_container: Optional[bool] = None) -> bool:
    """Return True when running under the Windows Subsystem for Linux."""

    if platform != "linux":
        return False
    if in_container is None:
        in_container = detect_container()
    if "microsoft" in _platform.release().lower():
        return not in_container
    version = _read_text(Path("/proc/version"))
    if version and "microsoft" in version.lower():
        return not in_container
    return False


def parse_mount_point(config: str) -> Optional[str]:
    """Extract the ``root`` value from a wsl.conf body.

    A match is skipped when a ``#`` appears earlier on the same line. A
    comment after the value is not stripped and ends up in the result.
    """

    pos = 0
    while True:
        match = _ROOT_PATTERN.search(config, pos)
        if match is None:
            return None
        line_start = config.rfind("\n", 0, match.start()) + 1
        if "#" not in config[line_start:match.start()]:
            mount_point = match.group("mount_point").strip()
            return mount_point if mount_point.endswith("/") else f"{mount_point}/"
        pos = match.start() + 1


class Environment:
    """Platform facts for the running process.

    Every detection runs at most once per instance. Values passed to the
    constructor replace the corresponding detection, which is how tests fake a
    macOS, Windows or WSL host.
    """

    def __init__(
        self,
        platform: Optional[str] = None,
        arch: Optional[str] = None,
        is_wsl: Optional[bool] = None,
        is_container: Optional[bool] = None,
        wsl_config_path: Path = WSL_CONFIG_PATH,
        bundled_opener_path: Optional[Path] = BUNDLED_OPENER_PATH,
        environ: Optional[Mapping[str, str]] = None,
    ) -> None:
        self.platform = platform or sys.platform
        self.arch = arch or normalize_arch(_platform.machine())
        self.wsl_config_path = Path(wsl_config_path)
        self.bundled_opener_path = bundled_opener_path
        self.environ = os.environ if environ is None else environ
        self._is_wsl = is_wsl
        self._is_container = is_container
        self._mount_point: Optional[str] = None
        self._lock = threading.Lock()

    @property
    def is_container(self) -> bool:
        if self._is_container is None:
            self._is_container = detect_container()
        return self._is_container

    @property
    def is_wsl(self) -> bool:
        if self._is_wsl is None:
            self._is_wsl = detect_wsl(self.platform, self.is_container)
        return self._is_wsl

    @property
    def is_frozen(self) -> bool:
        return bool(getattr(sys, "frozen", False))

    def wsl_mount_point(self) -> str:
        """Mount point under which WSL exposes the host's fixed drives."""

        if self._mount_point is not None:
            return self._mount_point

        try:
            config = self.wsl_config_path.read_text(encoding="utf-8", errors="ignore")
        except FileNotFoundError:
            return DEFAULT_MOUNT_POINT
        except OSError as exc:
            _LOGGER.warning("Failed to read %s: %s", self.wsl_config_path, exc)
            return DEFAULT_MOUNT_POINT

        mount_point = parse_mount_point(config) or DEFAULT_MOUNT_POINT
        with self._lock:
            if self._mount_point is None:
                self._mount_point = mount_point
                _LOGGER.debug("WSL drives mounted under %s", mount_point)
            return self._mount_point

    def snapshot(self) -> EnvironmentSnapshot:
        return EnvironmentSnapshot(
            platform=self.platform,
            arch=self.arch,
            is_wsl=self.is_wsl,
            is_container=self.is_container,
            wsl_mount_point=self.wsl_mount_point() if self.is_wsl else None,
        )


__all__ = [
    "DEFAULT_MOUNT_POINT",
    "Environment",
    "detect_container",
    "detect_wsl",
    "normalize_arch",
    "parse_mount_point",
]
