"""
Mock adapters: test doubles for the external collaborators.

Used in mock mode (``chefhelpers run --mock``) and in tests to
exercise helpers without running knife, touching the agent or
changing os.environ. Configurable to return success, failure, or
custom responses per command.
"""

from __future__ import annotations

from chefhelpers.adapters.base import EnvironmentStore, Filesystem, ProcessRunner, ResultReporter
from chefhelpers.core.models.receipt import Receipt


class MockProcessRunner(ProcessRunner):
    """Universal mock process runner.

    By default, returns success for every command. Individual commands
    can be given a custom receipt, matched on the exact command string
    or on a substring of it.
    """

    def __init__(
        self,
        runner_name: str = "mock",
        default_output: str = "[mock] executed",
    ):
        self._name = runner_name
        self._default_output = default_output
        self._responses: dict[str, Receipt] = {}
        self._call_log: list[str] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def call_log(self) -> list[str]:
        """All commands this mock has received."""
        return self._call_log

    @property
    def call_count(self) -> int:
        """Number of times execute has been called."""
        return len(self._call_log)

    def set_response(self, match: str, receipt: Receipt) -> None:
        """Set a custom response for commands containing ``match``."""
        self._responses[match] = receipt

    def set_failure(self, match: str, error: str = "Mock failure") -> None:
        """Configure commands containing ``match`` to fail."""
        self._responses[match] = Receipt.failure(
            source=self._name,
            step=match,
            error=error,
        )

    def execute(self, command: str) -> Receipt:
        self._call_log.append(command)

        if command in self._responses:
            return self._responses[command]
        for match, receipt in self._responses.items():
            if match in command:
                return receipt

        return Receipt.success(
            source=self._name,
            step=command,
            output=self._default_output,
            metadata={"mock": True},
        )

    def reset(self) -> None:
        """Clear call log and custom responses."""
        self._call_log.clear()
        self._responses.clear()


class RecordingReporter(ResultReporter):
    """Remembers every reported outcome instead of telling an agent."""

    def __init__(self) -> None:
        self.failures: list[str] = []
        self.successes: list[str] = []

    @property
    def failure_count(self) -> int:
        return len(self.failures)

    @property
    def failed(self) -> bool:
        return bool(self.failures)

    def report_failure(self, message: str) -> None:
        self.failures.append(message)

    def report_success(self, message: str) -> None:
        self.successes.append(message)


class InMemoryEnvironment(EnvironmentStore):
    """Variables kept in a dict, isolated from os.environ."""

    def __init__(self, initial: dict[str, str] | None = None):
        self.variables: dict[str, str] = dict(initial or {})

    def set_variable(self, name: str, value: str) -> None:
        self.variables[name] = value

    def get_variable(self, name: str) -> str | None:
        return self.variables.get(name)


class InMemoryFilesystem(Filesystem):
    """Files and directories kept in memory, keyed by the exact path string.

    Paths are never normalised, so Windows-style paths can be checked on
    any host.
    """

    def __init__(self, files: dict[str, str] | None = None):
        self.files: dict[str, str] = dict(files or {})
        self.directories: set[str] = set()

    def read_text(self, path: str) -> str:
        try:
            return self.files[path]
        except KeyError:
            raise FileNotFoundError(path) from None

    def write_text(self, path: str, content: str) -> None:
        self.files[path] = content

    def exists(self, path: str) -> bool:
        return path in self.files or path in self.directories

    def make_dir(self, path: str) -> None:
        self.directories.add(path)
