from __future__ import annotations

from typing import Dict, List, Optional, Union

import pytest


class FakeProcess:
    def __init__(self, exit_code: int = 0) -> None:
        self.exit_code = exit_code
        self.waited = False

    def wait(self) -> int:
        self.waited = True
        return self.exit_code


class FakeSpawn:
    """Records every command and answers by executable name."""

    def __init__(self, outcomes: Optional[Dict[str, Union[int, BaseException]]] = None) -> None:
        self.outcomes = outcomes or {}
        self.commands: List = []
        self.processes: List[FakeProcess] = []

    @property
    def executables(self) -> List[str]:
        return [command.executable for command in self.commands]

    def __call__(self, command):
        self.commands.append(command)
        outcome = self.outcomes.get(command.executable, 0)
        if isinstance(outcome, BaseException):
            raise outcome
        process = FakeProcess(outcome)
        self.processes.append(process)
        return process


@pytest.fixture
def fake_spawn() -> FakeSpawn:
    return FakeSpawn()
