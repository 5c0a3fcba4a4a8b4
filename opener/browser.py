"""Resolve the ``browser`` and ``browserPrivate`` aliases to a concrete application."""
from __future__ import annotations

import logging
from typing import Dict, List, Tuple

from .applications import BROWSER_PRIVATE, Applications, Binary
from .default_browser import DefaultBrowserQuery
from .errors import UnsupportedBrowserError

_LOGGER = logging.getLogger(__name__)

# Bundle ids (macOS, also reported on Windows) and desktop entry ids (Linux).
BROWSER_IDS: Dict[str, str] = {
    "com.google.chrome": "chrome",
    "google-chrome.desktop": "chrome",
    "org.mozilla.firefox": "firefox",
    "firefox.desktop": "firefox",
    "com.microsoft.msedge": "edge",
    "com.microsoft.edge": "edge",
    "microsoft-edge.desktop": "edge",
}

PRIVATE_FLAGS: Dict[str, str] = {
    "chrome": "--incognito",
    "firefox": "--private-window",
    "edge": "--inPrivate",
}


def resolve_browser_alias(
    alias: str,
    arguments: List[str],
    apps: Applications,
    query: DefaultBrowserQuery,
) -> Tuple[Binary, List[str]]:
    """Map a browser alias to the default browser's command and arguments.

    Returns the application table entry for the default browser (a name or
    a list of alternatives) and a new argument list, with the private-mode
    flag appended for ``browserPrivate``.
    """

    browser = query()
    browser_name = BROWSER_IDS.get(browser.id)
    if browser_name is None:
        raise UnsupportedBrowserError(browser.name)

    arguments = list(arguments)
    if alias == BROWSER_PRIVATE:
        arguments.append(PRIVATE_FLAGS[browser_name])

    binary = apps.resolve(browser_name)
    _LOGGER.debug("Alias %s resolved to %s (%s)", alias, browser_name, browser.id)
    return (list(binary) if isinstance(binary, list) else binary), arguments


__all__ = ["BROWSER_IDS", "PRIVATE_FLAGS", "resolve_browser_alias"]
