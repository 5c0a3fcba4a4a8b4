"""Data models for open requests and resolved commands."""
from __future__ import annotations

from typing import Any, List, Optional, Union

from pydantic import BaseModel, Field


class SingleName(BaseModel):
    """One concrete application name."""

    value: str


class AlternativeNames(BaseModel):
    """Ordered application names, tried until one starts."""

    values: List[str]


ApplicationName = Union[SingleName, AlternativeNames]


class ApplicationSpec(BaseModel):
    """Application to open a target with, plus its extra CLI arguments."""

    name: Union[str, List[str]]
    arguments: List[str] = Field(default_factory=list)

    def choice(self) -> ApplicationName:
        if isinstance(self.name, list):
            return AlternativeNames(values=list(self.name))
        return SingleName(value=self.name)


class OpenOptions(BaseModel):
    """A single open request.

    ``background`` and ``new_instance`` are only honoured on macOS and
    ``allow_nonzero_exit_code`` only matters together with ``wait``.
    """

    target: Optional[str] = None
    app: Optional[Union[ApplicationSpec, List[ApplicationSpec]]] = None
    wait: bool = False
    background: bool = False
    new_instance: bool = False
    allow_nonzero_exit_code: bool = False

    def clone(self, **updates: Any) -> "OpenOptions":
        return self.model_copy(update=updates)


class SpawnOptions(BaseModel):
    detached: bool = False
    ignore_stdio: bool = False
    windows_verbatim_arguments: bool = False


class ResolvedCommand(BaseModel):
    """Concrete command line produced for one launch attempt."""

    executable: str
    argv: List[str] = Field(default_factory=list)
    options: SpawnOptions = Field(default_factory=SpawnOptions)

    def command_line(self) -> List[str]:
        return [self.executable, *self.argv]


class EnvironmentSnapshot(BaseModel):
    platform: str
    arch: str
    is_wsl: bool = False
    is_container: bool = False
    wsl_mount_point: Optional[str] = None


class DefaultBrowser(BaseModel):
    """Identifier and display name reported for the default browser."""

    id: str
    name: str


__all__ = [
    "SingleName",
    "AlternativeNames",
    "ApplicationName",
    "ApplicationSpec",
    "OpenOptions",
    "SpawnOptions",
    "ResolvedCommand",
    "EnvironmentSnapshot",
    "DefaultBrowser",
]
