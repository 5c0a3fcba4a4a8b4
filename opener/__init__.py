"""Open files, URLs and applications with the platform's native launcher."""
from __future__ import annotations

from typing import Any

from .applications import Applications
from .environment import Environment
from .errors import (
    InvalidArgument,
    NonZeroExitError,
    OpenError,
    SpawnError,
    UnknownApplicationError,
    UnsupportedBrowserError,
    UnsupportedPlatformError,
)
from .launch import Launcher, default_launcher, open, open_app
from .models import ApplicationSpec, OpenOptions, ResolvedCommand, SpawnOptions

__version__ = "1.0.0"


def __getattr__(name: str) -> Any:
    # ``opener.apps`` is bound to the default launcher's environment.
    if name == "apps":
        return default_launcher().apps
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "Applications",
    "ApplicationSpec",
    "Environment",
    "InvalidArgument",
    "Launcher",
    "NonZeroExitError",
    "OpenError",
    "OpenOptions",
    "ResolvedCommand",
    "SpawnError",
    "SpawnOptions",
    "UnknownApplicationError",
    "UnsupportedBrowserError",
    "UnsupportedPlatformError",
    "apps",
    "default_launcher",
    "open",
    "open_app",
]
