"""
Adapter base: the contracts between the helpers and the outside world.

Helpers never touch the pipeline agent, the process table, the disk or
os.environ directly. They go through these narrow interfaces, so every
collaborator can be swapped for a test double.

To add a new backend for a capability:
    1. Subclass the matching ABC
    2. Implement its abstract methods
    3. Pass the instance to the dispatcher (or ``run_helper``)
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from chefhelpers.core.models.receipt import Receipt


class InputSource(ABC):
    """Raw named task parameters."""

    @abstractmethod
    def get_input(self, name: str) -> str | None:
        """Return the raw value of input ``name``, or None when not supplied."""


class ResultReporter(ABC):
    """Tells the pipeline agent how the task ended."""

    @abstractmethod
    def report_failure(self, message: str) -> None:
        """Mark the task failed. Called at most once per run."""

    @abstractmethod
    def report_success(self, message: str) -> None:
        """Mark the task succeeded."""


class ProcessRunner(ABC):
    """Runs fully formed command lines.

    Implementations block until the process has exited and NEVER raise
    for a failing command: the failure is captured in the Receipt.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """The runner identifier (e.g., 'shell', 'mock')."""

    @abstractmethod
    def execute(self, command: str) -> Receipt:
        """Run ``command`` to completion and return a receipt."""

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"


class Filesystem(ABC):
    """Text file primitives.

    I/O failures propagate as OSError; undecodable content as
    UnicodeDecodeError.
    """

    @abstractmethod
    def read_text(self, path: str) -> str:
        """Read a UTF-8 file."""

    @abstractmethod
    def write_text(self, path: str, content: str) -> None:
        """Create or overwrite a UTF-8 file."""

    @abstractmethod
    def exists(self, path: str) -> bool:
        """Whether ``path`` exists."""

    @abstractmethod
    def make_dir(self, path: str) -> None:
        """Create ``path`` and any missing parents; no-op if it exists."""


class EnvironmentStore(ABC):
    """Process-wide variables visible to later tool invocations."""

    @abstractmethod
    def set_variable(self, name: str, value: str) -> None:
        """Set variable ``name``."""

    @abstractmethod
    def get_variable(self, name: str) -> str | None:
        """Return variable ``name``, or None when unset."""
