"""
Command recorders: observe the command lines a helper issues.

The dispatcher appends each command here immediately before handing it
to the process runner. The record is never used to decide what runs
next; it exists so callers and tests can see exactly what was issued.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class CommandRecorder(ABC):
    """Observer for issued command lines."""

    @abstractmethod
    def record(self, command: str) -> None:
        """Note that ``command`` is about to be issued."""

    @abstractmethod
    def reset(self) -> None:
        """Forget everything recorded so far."""

    @property
    @abstractmethod
    def commands(self) -> list[str]:
        """Recorded commands, oldest first."""


class CommandStack(CommandRecorder):
    """Ordered, append-only list of commands for the current run."""

    def __init__(self) -> None:
        self._commands: list[str] = []

    def record(self, command: str) -> None:
        self._commands.append(command)

    def reset(self) -> None:
        self._commands.clear()

    @property
    def commands(self) -> list[str]:
        return list(self._commands)

    def __len__(self) -> int:
        return len(self._commands)


class NullRecorder(CommandRecorder):
    """Discards everything."""

    def record(self, command: str) -> None:
        pass

    def reset(self) -> None:
        pass

    @property
    def commands(self) -> list[str]:
        return []
