"""Known applications and their platform specific command names."""
from __future__ import annotations

import logging
import threading
from typing import Dict, List, Mapping, Optional, Union

from .environment import Environment
from .errors import UnknownApplicationError, UnsupportedPlatformError

_LOGGER = logging.getLogger(__name__)

Binary = Union[str, List[str]]
ArchBinary = Union[Binary, Mapping[str, Binary]]

BROWSER = "browser"
BROWSER_PRIVATE = "browserPrivate"

# logical name -> {"platforms": {platform: binary}, "wsl": binary or {arch: binary}}
APPLICATION_TABLE: Dict[str, Dict[str, ArchBinary]] = {
    "chrome": {
        "platforms": {
            "darwin": "google chrome",
            "win32": "chrome",
            "linux": ["google-chrome", "google-chrome-stable", "chromium"],
        },
        "wsl": {
            "ia32": "/mnt/c/Program Files (x86)/Google/Chrome/Application/chrome.exe",
            "x64": [
                "/mnt/c/Program Files/Google/Chrome/Application/chrome.exe",
                "/mnt/c/Program Files (x86)/Google/Chrome/Application/chrome.exe",
            ],
        },
    },
    "firefox": {
        "platforms": {
            "darwin": "firefox",
            "win32": r"C:\Program Files\Mozilla Firefox\firefox.exe",
            "linux": "firefox",
        },
        "wsl": "/mnt/c/Program Files/Mozilla Firefox/firefox.exe",
    },
    "edge": {
        "platforms": {
            "darwin": "microsoft edge",
            "win32": "msedge",
            "linux": ["microsoft-edge", "microsoft-edge-dev"],
        },
        "wsl": "/mnt/c/Program Files (x86)/Microsoft/Edge/Application/msedge.exe",
    },
}

# Resolved dynamically from the default browser, never through the table.
SENTINELS = (BROWSER, BROWSER_PRIVATE)


def detect_arch_binary(binary: ArchBinary, arch: str) -> Binary:
    if isinstance(binary, (str, list)):
        return binary
    arch_binary = binary.get(arch)
    if not arch_binary:
        raise UnsupportedPlatformError(arch)
    return arch_binary


def detect_platform_binary(entry: Mapping[str, ArchBinary], env: Environment) -> Binary:
    wsl = entry.get("wsl")
    if wsl and env.is_wsl:
        return detect_arch_binary(wsl, env.arch)
    platforms = entry.get("platforms") or {}
    platform_binary = platforms.get(env.platform)  # type: ignore[union-attr]
    if not platform_binary:
        raise UnsupportedPlatformError(env.platform)
    return detect_arch_binary(platform_binary, env.arch)


class Applications:
    """Lazily resolved command names for the known applications.

    Each entry is computed on first access and cached on the instance.
    Resolution failures are not cached, so a later access tries again.
    """

    def __init__(self, environment: Optional[Environment] = None,
                 table: Optional[Mapping[str, Mapping[str, ArchBinary]]] = None) -> None:
        self.environment = environment or Environment()
        self.table = APPLICATION_TABLE if table is None else table
        self._cache: Dict[str, Binary] = {}
        self._lock = threading.Lock()

    def resolve(self, name: str) -> Binary:
        cached = self._cache.get(name)
        if cached is not None:
            return cached
        if name in SENTINELS:
            binary: Binary = name
        else:
            entry = self.table.get(name)
            if entry is None:
                raise UnknownApplicationError(name)
            binary = detect_platform_binary(entry, self.environment)
        with self._lock:
            binary = self._cache.setdefault(name, binary)
        _LOGGER.debug("Resolved application %s to %s", name, binary)
        return binary

    def is_cached(self, name: str) -> bool:
        return name in self._cache

    def __getitem__(self, name: str) -> Binary:
        return self.resolve(name)

    def __contains__(self, name: object) -> bool:
        return name in self.table or name in SENTINELS

    @property
    def chrome(self) -> Binary:
        return self.resolve("chrome")

    @property
    def firefox(self) -> Binary:
        return self.resolve("firefox")

    @property
    def edge(self) -> Binary:
        return self.resolve("edge")

    @property
    def browser(self) -> Binary:
        return self.resolve(BROWSER)

    @property
    def browser_private(self) -> Binary:
        return self.resolve(BROWSER_PRIVATE)


__all__ = [
    "APPLICATION_TABLE",
    "Applications",
    "BROWSER",
    "BROWSER_PRIVATE",
    "detect_arch_binary",
    "detect_platform_binary",
]
