"""Resolve open requests, spawn the resulting command and track its exit."""
from __future__ import annotations

import logging
import os
import subprocess
from typing import Any, Callable, Iterable, List, Optional, TypeVar, Union

from pydantic import ValidationError

from .applications import SENTINELS, Applications
from .browser import resolve_browser_alias
from .command import build_command
from .default_browser import DefaultBrowserQuery, default_browser
from .environment import Environment
from .errors import InvalidArgument, NonZeroExitError, OpenError, SpawnError
from .models import AlternativeNames, ApplicationSpec, OpenOptions, ResolvedCommand

_LOGGER = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")

Spawn = Callable[[ResolvedCommand], "subprocess.Popen[Any]"]
AppArgument = Union[ApplicationSpec, dict, List[Union[ApplicationSpec, dict]], None]

# Windows process creation flags
DETACHED_PROCESS = 0x00000008
CREATE_NEW_PROCESS_GROUP = 0x00000200


def spawn_process(command: ResolvedCommand) -> "subprocess.Popen[Any]":
    """Start ``command`` with :class:`subprocess.Popen`."""

    kwargs: dict = {}
    if command.options.ignore_stdio:
        kwargs.update(stdin=subprocess.DEVNULL, stdout=subprocess.DEVNULL, stderr=subprocess.DEVNULL)
    if command.options.detached:
        if os.name == "nt":
            kwargs["creationflags"] = DETACHED_PROCESS | CREATE_NEW_PROCESS_GROUP
        else:
            kwargs["start_new_session"] = True

    args: Union[str, List[str]] = command.command_line()
    if command.options.windows_verbatim_arguments:
        # Passed through untouched so the encoded script is not re-quoted.
        args = " ".join([subprocess.list2cmdline([command.executable]), *command.argv])
    return subprocess.Popen(args, **kwargs)


def try_each(candidates: Iterable[T], attempt: Callable[[T], R]) -> R:
    """Return the result of the first candidate whose attempt succeeds.

    Candidates are tried in order. When all of them fail the error of the
    last attempt is raised; earlier failures are discarded.
    """

    latest_error: Optional[BaseException] = None
    for candidate in candidates:
        try:
            return attempt(candidate)
        except (OpenError, OSError) as exc:
            _LOGGER.debug("Candidate %r failed: %s", candidate, exc)
            latest_error = exc
    if latest_error is None:
        raise InvalidArgument("Expected at least one application candidate")
    raise latest_error


class Launcher:
    """Open targets and applications on the current platform.

    ``environment``, ``spawn`` and ``default_browser`` replace the host
    detection, :func:`spawn_process` and the default browser query.
    """

    def __init__(
        self,
        environment: Optional[Environment] = None,
        spawn: Optional[Spawn] = None,
        default_browser: Optional[DefaultBrowserQuery] = None,
    ) -> None:
        self.environment = environment or Environment()
        self.apps = Applications(self.environment)
        self._spawn = spawn or spawn_process
        self._default_browser = default_browser or self._query_default_browser

    def _query_default_browser(self):
        return default_browser(self.environment.platform)

    # ----- Public API -------------------------------------------------
    def open(
        self,
        target: str,
        *,
        app: AppArgument = None,
        wait: bool = False,
        background: bool = False,
        new_instance: bool = False,
        allow_nonzero_exit_code: bool = False,
    ) -> "subprocess.Popen[Any]":
        """Open ``target`` with its default handler or with ``app``."""

        if not isinstance(target, str):
            raise InvalidArgument("Expected a `target`")
        options = _make_options(
            target=target,
            app=app,
            wait=wait,
            background=background,
            new_instance=new_instance,
            allow_nonzero_exit_code=allow_nonzero_exit_code,
        )
        return self.open_options(options)

    def open_app(
        self,
        name: Union[str, List[str]],
        *,
        arguments: Optional[List[str]] = None,
        target: Optional[str] = None,
        wait: bool = False,
        background: bool = False,
        new_instance: bool = False,
        allow_nonzero_exit_code: bool = False,
    ) -> "subprocess.Popen[Any]":
        """Start the application ``name``, or the first that starts of a list of names."""

        if not isinstance(name, (str, list)):
            raise InvalidArgument("Expected a valid `name`")
        if arguments is not None and not isinstance(arguments, list):
            raise InvalidArgument("Expected `arguments` as a list")
        options = _make_options(
            target=target,
            app={"name": name, "arguments": arguments or []},
            wait=wait,
            background=background,
            new_instance=new_instance,
            allow_nonzero_exit_code=allow_nonzero_exit_code,
        )
        return self.open_options(options)

    def open_options(self, options: OpenOptions) -> "subprocess.Popen[Any]":
        app = options.app
        if isinstance(app, list):
            return try_each(app, lambda spec: self.open_options(options.clone(app=spec)))

        name: Optional[str] = None
        arguments: List[str] = []
        if app is not None:
            arguments = list(app.arguments)
            choice = app.choice()
            if isinstance(choice, AlternativeNames):
                return try_each(
                    choice.values,
                    lambda candidate: self.open_options(
                        options.clone(app=ApplicationSpec(name=candidate, arguments=arguments))
                    ),
                )
            name = choice.value

        if name in SENTINELS:
            binary, arguments = resolve_browser_alias(name, arguments, self.apps, self._default_browser)
            return self.open_options(options.clone(app=ApplicationSpec(name=binary, arguments=arguments)))

        command = build_command(self.environment, options, name, arguments)
        return self.run(command, wait=options.wait, allow_nonzero_exit_code=options.allow_nonzero_exit_code)

    # ----- Process lifecycle ------------------------------------------
    def run(
        self,
        command: ResolvedCommand,
        wait: bool = False,
        allow_nonzero_exit_code: bool = False,
    ) -> "subprocess.Popen[Any]":
        """Spawn ``command`` and return its process handle.

        Without ``wait`` nothing reaps the child; the caller owns the
        returned handle. Dropping it while the child still runs makes
        CPython emit ``ResourceWarning: subprocess N is still running``.
        """

        try:
            process = self._spawn(command)
        except OSError as exc:
            _LOGGER.error("Failed to start %s: %s", command.executable, exc)
            raise SpawnError(command.command_line(), str(exc)) from exc

        if not wait:
            _LOGGER.info("Launched %s without waiting", command.executable)
            return process

        exit_code = process.wait()
        _LOGGER.info("%s exited with code %s", command.executable, exit_code)
        if exit_code != 0 and not allow_nonzero_exit_code:
            raise NonZeroExitError(exit_code)
        return process


def _make_options(**values: Any) -> OpenOptions:
    try:
        return OpenOptions(**values)
    except ValidationError as exc:
        raise InvalidArgument(str(exc)) from exc


_default_launcher: Optional[Launcher] = None


def default_launcher() -> Launcher:
    global _default_launcher
    if _default_launcher is None:
        _default_launcher = Launcher()
    return _default_launcher


def open(target: str, **options: Any) -> "subprocess.Popen[Any]":  # noqa: A001
    """Open ``target`` using the default launcher. See :meth:`Launcher.open`."""

    return default_launcher().open(target, **options)


def open_app(name: Union[str, List[str]], **options: Any) -> "subprocess.Popen[Any]":
    """Start an application using the default launcher. See :meth:`Launcher.open_app`."""

    return default_launcher().open_app(name, **options)


__all__ = [
    "Launcher",
    "default_launcher",
    "open",
    "open_app",
    "spawn_process",
    "try_each",
]
