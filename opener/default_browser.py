"""Query the operating system for the user's default web browser."""
from __future__ import annotations

import logging
import plistlib
import subprocess
import sys
from pathlib import Path
from typing import Callable, Dict, Optional, Tuple

from .errors import OpenError, UnsupportedPlatformError
from .models import DefaultBrowser

_LOGGER = logging.getLogger(__name__)

DefaultBrowserQuery = Callable[[], DefaultBrowser]

LAUNCH_SERVICES_PLIST = (
    Path.home()
    / "Library"
    / "Preferences"
    / "com.apple.LaunchServices"
    / "com.apple.launchservices.secure.plist"
)
SAFARI_ID = "com.apple.Safari"

USER_CHOICE_KEY = r"Software\Microsoft\Windows\Shell\Associations\UrlAssociations\http\UserChoice"

# Windows ProgId prefix -> (id, display name)
WINDOWS_PROG_IDS: Tuple[Tuple[str, Tuple[str, str]], ...] = (
    ("AppXq0fevzme2pys62n3e0fbqa7peapykr8v", ("com.microsoft.edge.old", "Edge")),
    ("MSEdgeDHTML", ("com.microsoft.edge", "Edge")),
    ("MSEdgeHTM", ("com.microsoft.edge", "Edge")),
    ("MSEdgeBHTML", ("com.microsoft.edge.beta", "Edge Beta")),
    ("ChromeHTML", ("com.google.chrome", "Chrome")),
    ("ChromeBHTML", ("com.google.chrome.beta", "Chrome Beta")),
    ("ChromeDHTML", ("com.google.chrome.dev", "Chrome Dev")),
    ("ChromiumHTM", ("org.chromium.Chromium", "Chromium")),
    ("FirefoxURL", ("org.mozilla.firefox", "Firefox")),
    ("BraveHTML", ("com.brave.Browser", "Brave")),
    ("OperaStable", ("com.operasoftware.Opera", "Opera")),
    ("IE.HTTP", ("com.microsoft.ie", "Internet Explorer")),
)

MAC_BUNDLE_NAMES: Dict[str, str] = {
    "com.apple.safari": "Safari",
    "com.google.chrome": "Google Chrome",
    "com.google.chrome.beta": "Google Chrome Beta",
    "org.mozilla.firefox": "Firefox",
    "com.microsoft.edgemac": "Microsoft Edge",
    "com.microsoft.edge": "Microsoft Edge",
    "com.brave.browser": "Brave Browser",
    "com.operasoftware.opera": "Opera",
}


def _mac_default_browser(plist_path: Path = LAUNCH_SERVICES_PLIST) -> DefaultBrowser:
    bundle_id: Optional[str] = None
    try:
        with plist_path.open("rb") as handle:
            data = plistlib.load(handle)
    except (OSError, plistlib.InvalidFileException) as exc:
        _LOGGER.debug("No LaunchServices handlers in %s: %s", plist_path, exc)
        data = {}
    for handler in data.get("LSHandlers", []):
        if handler.get("LSHandlerURLScheme") in ("http", "https"):
            role = handler.get("LSHandlerRoleAll")
            if role and role != "-":
                bundle_id = role
                break
    # Safari is the implicit default when nothing was ever chosen.
    bundle_id = bundle_id or SAFARI_ID
    return DefaultBrowser(id=bundle_id, name=MAC_BUNDLE_NAMES.get(bundle_id.lower(), bundle_id))


def windows_browser_from_prog_id(prog_id: str) -> DefaultBrowser:
    for prefix, (browser_id, name) in WINDOWS_PROG_IDS:
        if prog_id == prefix or prog_id.startswith(f"{prefix}-"):
            return DefaultBrowser(id=browser_id, name=name)
    return DefaultBrowser(id=prog_id, name=prog_id)


def _windows_default_browser() -> DefaultBrowser:
    import winreg  # type: ignore

    try:
        with winreg.OpenKey(winreg.HKEY_CURRENT_USER, USER_CHOICE_KEY) as opened:
            prog_id, _ = winreg.QueryValueEx(opened, "ProgId")
    except OSError as exc:
        raise OpenError(f"Cannot read the default browser from the registry: {exc}") from exc
    return windows_browser_from_prog_id(str(prog_id))


def linux_browser_from_desktop_id(desktop_id: str) -> DefaultBrowser:
    stem = desktop_id[: -len(".desktop")] if desktop_id.endswith(".desktop") else desktop_id
    name = " ".join(part.capitalize() for part in stem.replace("-", " ").split())
    return DefaultBrowser(id=desktop_id, name=name or desktop_id)


def _linux_default_browser() -> DefaultBrowser:
    try:
        completed = subprocess.run(
            ["xdg-mime", "query", "default", "x-scheme-handler/http"],
            capture_output=True,
            text=True,
            check=False,
        )
    except OSError as exc:
        raise OpenError(f"Cannot query xdg-mime for the default browser: {exc}") from exc

    if completed.returncode != 0:
        raise OpenError(
            f"xdg-mime failed to report the default browser: {completed.stderr.strip()}"
        )
    desktop_id = completed.stdout.strip()
    if not desktop_id:
        raise OpenError("No default browser is configured")
    return linux_browser_from_desktop_id(desktop_id)


def default_browser(platform: Optional[str] = None) -> DefaultBrowser:
    """Return the identifier and display name of the default web browser."""

    platform = platform or sys.platform
    if platform == "darwin":
        browser = _mac_default_browser()
    elif platform == "win32":
        browser = _windows_default_browser()
    elif platform == "linux":
        browser = _linux_default_browser()
    else:
        raise UnsupportedPlatformError(platform)
    _LOGGER.debug("Default browser is %s (%s)", browser.name, browser.id)
    return browser


__all__ = [
    "DefaultBrowserQuery",
    "default_browser",
    "linux_browser_from_desktop_id",
    "windows_browser_from_prog_id",
]
