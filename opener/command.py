"""Build the OS specific command line for an open request."""
from __future__ import annotations

import base64
import logging
import os
from typing import List, Optional

from .environment import Environment
from .models import OpenOptions, ResolvedCommand, SpawnOptions

_LOGGER = logging.getLogger(__name__)

MACOS_OPENER = "open"
SYSTEM_OPENER = "xdg-open"
POWERSHELL_ARGS = ["-NoProfile", "-NonInteractive", "-ExecutionPolicy", "Bypass", "-EncodedCommand"]


def quote_for_nested_shell(value: str) -> str:
    """Quote ``value`` so it survives two rounds of PowerShell parsing.

    The command is parsed once by PowerShell and once more when
    ``Start-Process`` builds the child's command line. The outer ``"..."``
    is consumed by the first parse; the backtick-escaped ``\\`"`` pair
    becomes a literal ``"`` that protects the value in the second parse.
    Quotes or backticks inside ``value`` are not escaped.
    """

    return f'"`"{value}`""'


def encode_powershell_command(command: str) -> str:
    """Encode a script for ``powershell -EncodedCommand`` (Base64 of UTF-16LE)."""

    return base64.b64encode(command.encode("utf-16-le")).decode("ascii")


def powershell_path(env: Environment) -> str:
    if env.is_wsl:
        return f"{env.wsl_mount_point()}c/Windows/System32/WindowsPowerShell/v1.0/powershell.exe"
    system_root = env.environ.get("SYSTEMROOT") or env.environ.get("windir") or "C:\\Windows"
    return f"{system_root}\\System32\\WindowsPowerShell\\v1.0\\powershell"


def local_opener(env: Environment) -> str:
    """Pick the bundled ``xdg-open`` when usable, otherwise the system one."""

    path = env.bundled_opener_path
    executable = False
    if path is not None:
        try:
            executable = os.access(path, os.X_OK)
        except (OSError, ValueError):
            executable = False
    if env.is_frozen or env.platform == "android" or path is None or not executable:
        return SYSTEM_OPENER
    return str(path)


def uses_powershell(env: Environment, app: Optional[str]) -> bool:
    if env.platform == "win32":
        return True
    return env.is_wsl and not env.is_container and not app


def _build_darwin(options: OpenOptions, app: Optional[str], arguments: List[str]) -> ResolvedCommand:
    argv: List[str] = []
    if options.wait:
        argv.append("--wait-apps")
    if options.background:
        argv.append("--background")
    if options.new_instance:
        argv.append("--new")
    if app:
        argv.extend(["-a", app])
    # --args must precede the target.
    if arguments:
        argv.extend(["--args", *arguments])
    if options.target:
        argv.append(options.target)
    return ResolvedCommand(executable=MACOS_OPENER, argv=argv)


def _build_windows(
    env: Environment, options: OpenOptions, app: Optional[str], arguments: List[str]
) -> ResolvedCommand:
    arguments = list(arguments)
    encoded: List[str] = ["Start"]
    if options.wait:
        encoded.append("-Wait")
    if app:
        encoded.append(quote_for_nested_shell(app))
        if options.target:
            arguments.append(options.target)
    elif options.target:
        encoded.append(f'"{options.target}"')
    if arguments:
        encoded.extend(["-ArgumentList", ",".join(quote_for_nested_shell(arg) for arg in arguments)])

    script = " ".join(encoded)
    _LOGGER.debug("PowerShell command: %s", script)
    return ResolvedCommand(
        executable=powershell_path(env),
        argv=[*POWERSHELL_ARGS, encode_powershell_command(script)],
        options=SpawnOptions(windows_verbatim_arguments=not env.is_wsl),
    )


def _build_other(
    env: Environment, options: OpenOptions, app: Optional[str], arguments: List[str]
) -> ResolvedCommand:
    executable = app or local_opener(env)
    argv = list(arguments)
    if options.target:
        argv.append(options.target)
    spawn_options = SpawnOptions()
    if not options.wait:
        # xdg-open keeps the parent alive unless it is fully detached.
        spawn_options = SpawnOptions(detached=True, ignore_stdio=True)
    return ResolvedCommand(executable=executable, argv=argv, options=spawn_options)


def build_command(
    env: Environment,
    options: OpenOptions,
    app: Optional[str] = None,
    arguments: Optional[List[str]] = None,
) -> ResolvedCommand:
    """Return the command that opens ``options.target`` with ``app``.

    ``app`` must already be a concrete command name (aliases and
    alternatives are resolved by the caller). The target, when given, is
    always the last element of ``argv``.

    ``env`` is the live :class:`Environment`, not an
    :class:`~opener.models.EnvironmentSnapshot`. Its detections stay lazy, so
    ``/etc/wsl.conf`` is only read the first time a WSL command goes
    through PowerShell, and the result is cached on ``env``.
    """

    arguments = list(arguments or [])
    if env.platform == "darwin":
        command = _build_darwin(options, app, arguments)
    elif uses_powershell(env, app):
        command = _build_windows(env, options, app, arguments)
    else:
        command = _build_other(env, options, app, arguments)
    _LOGGER.debug("Built command %s", command.command_line())
    return command


__all__ = [
    "build_command",
    "encode_powershell_command",
    "local_opener",
    "powershell_path",
    "quote_for_nested_shell",
    "uses_powershell",
]
