"""
Helper dispatcher: run the one helper the configuration asks for.

Flow:
    reset recorder → resolve helper name → run helper → report → receipt

The dispatcher is the only place helper failures are reported. Every
fatal condition becomes exactly one ``report_failure`` call and a failed
Receipt; nothing escapes ``run()``.
"""

from __future__ import annotations

import logging
import time

from chefhelpers.adapters.base import EnvironmentStore, Filesystem, ProcessRunner, ResultReporter
from chefhelpers.adapters.shell.command import ShellCommandRunner
from chefhelpers.adapters.shell.filesystem import LocalFilesystem
from chefhelpers.adapters.task import ProcessEnvironment, TaskResultReporter
from chefhelpers.core.engine.recorder import CommandRecorder, CommandStack
from chefhelpers.core.errors import HelperError, UnknownHelperError
from chefhelpers.core.helpers import HELPERS, Helper, HelperContext, HelperName
from chefhelpers.core.models.configuration import TaskConfiguration
from chefhelpers.core.models.receipt import Receipt, utc_now_iso

logger = logging.getLogger(__name__)


def resolve_helper(name: str | None) -> Helper:
    """Look up a helper by its task name.

    Raises:
        UnknownHelperError: ``name`` is empty or not a HelperName.
    """
    known = [h.value for h in HelperName]
    try:
        return HELPERS[HelperName(name)]
    except ValueError:
        raise UnknownHelperError(name, known) from None


class HelperDispatcher:
    """Runs helpers against one resolved configuration.

    Collaborators default to the real agent adapters. Tests pass the
    doubles from ``chefhelpers.adapters.mock`` instead.
    """

    def __init__(
        self,
        configuration: TaskConfiguration,
        *,
        runner: ProcessRunner | None = None,
        filesystem: Filesystem | None = None,
        environment: EnvironmentStore | None = None,
        reporter: ResultReporter | None = None,
        recorder: CommandRecorder | None = None,
    ):
        self._configuration = configuration
        self._runner = runner or ShellCommandRunner()
        self._filesystem = filesystem or LocalFilesystem()
        self._environment = environment or ProcessEnvironment()
        self._reporter = reporter or TaskResultReporter()
        self._recorder = recorder or CommandStack()

    @property
    def configuration(self) -> TaskConfiguration:
        return self._configuration

    @property
    def reporter(self) -> ResultReporter:
        return self._reporter

    @property
    def command_stack(self) -> list[str]:
        """Commands issued during the most recent run, in order."""
        return self._recorder.commands

    def run(self) -> Receipt:
        """Run the configured helper and report the outcome.

        Returns:
            Receipt with step = helper name; failed if anything fatal happened.
        """
        self._recorder.reset()
        step = self._configuration.helper or "<none>"
        started_at = utc_now_iso()
        start = time.monotonic()

        try:
            helper = resolve_helper(self._configuration.helper)
            logger.info("Running helper %s", helper.name.value)
            context = HelperContext(
                configuration=self._configuration,
                runner=self._runner,
                filesystem=self._filesystem,
                environment=self._environment,
                recorder=self._recorder,
            )
            summary = helper.run(context)
        except (HelperError, OSError) as e:
            elapsed_ms = int((time.monotonic() - start) * 1000)
            message = str(e)
            self._reporter.report_failure(message)
            return Receipt.failure(
                source="dispatcher",
                step=step,
                started_at=started_at,
                error=message,
                duration_ms=elapsed_ms,
                metadata={
                    "error_type": type(e).__name__,
                    "commands": self._recorder.commands,
                },
            )

        elapsed_ms = int((time.monotonic() - start) * 1000)
        self._reporter.report_success(summary)
        return Receipt.success(
            source="dispatcher",
            step=step,
            started_at=started_at,
            output=summary,
            duration_ms=elapsed_ms,
            metadata={"commands": self._recorder.commands},
        )
