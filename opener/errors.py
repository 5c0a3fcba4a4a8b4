"""Exceptions raised while resolving and launching open requests."""
from __future__ import annotations

from typing import Optional, Sequence


class OpenError(Exception):
    """Base class for every error raised by :mod:`opener`."""


class InvalidArgument(OpenError, TypeError):
    """Raised when a target, application name or argument list has the wrong type."""


class UnsupportedPlatformError(OpenError):
    """Raised when an application table has no entry for this platform or architecture."""

    def __init__(self, platform: str) -> None:
        super().__init__(f"{platform} is not supported")
        self.platform = platform


class UnsupportedBrowserError(OpenError):
    """Raised when the default browser is not one of the known browsers."""

    def __init__(self, browser_name: str) -> None:
        super().__init__(f"{browser_name} is not supported as a default browser")
        self.browser_name = browser_name


class UnknownApplicationError(OpenError, KeyError):
    """Raised when a name is not in the known-application table."""

    def __init__(self, name: str) -> None:
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"{self.name} is not a known application"


class SpawnError(OpenError):
    """Raised when the operating system fails to start the process."""

    def __init__(self, command: Sequence[str], reason: Optional[str] = None) -> None:
        message = f"Failed to start {command[0] if command else '<empty command>'}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.command = list(command)


class NonZeroExitError(OpenError):
    """Raised when an awaited process exits with a nonzero code."""

    def __init__(self, exit_code: int) -> None:
        super().__init__(f"Exited with code {exit_code}")
        self.exit_code = exit_code


__all__ = [
    "OpenError",
    "InvalidArgument",
    "UnsupportedPlatformError",
    "UnsupportedBrowserError",
    "UnknownApplicationError",
    "SpawnError",
    "NonZeroExitError",
]
