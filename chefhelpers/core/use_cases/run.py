"""
Run use case: resolve the configuration and run one helper.

The full vertical slice from raw task inputs to a reported result.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from chefhelpers.adapters.base import (
    EnvironmentStore,
    Filesystem,
    InputSource,
    ProcessRunner,
    ResultReporter,
)
from chefhelpers.core.config.resolver import resolve_configuration
from chefhelpers.core.engine.dispatcher import HelperDispatcher
from chefhelpers.core.engine.recorder import CommandRecorder, CommandStack
from chefhelpers.core.models.configuration import TaskConfiguration
from chefhelpers.core.models.receipt import Receipt

logger = logging.getLogger(__name__)


@dataclass
class RunResult:
    """Result of running a helper."""

    configuration: TaskConfiguration | None = None
    receipt: Receipt | None = None
    commands: list[str] = field(default_factory=list)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.receipt is not None and self.receipt.ok

    def to_dict(self) -> dict:
        result: dict = {"ok": self.ok}
        if self.error:
            result["error"] = self.error
        if self.configuration is not None:
            result["configuration"] = self.configuration.to_dict()
        if self.receipt is not None:
            result["receipt"] = self.receipt.model_dump(mode="json")
        result["commands"] = list(self.commands)
        return result


def run_helper(
    inputs: InputSource,
    platform_id: str,
    tmp_root: str,
    reporter: ResultReporter,
    *,
    home_dir: str | None = None,
    runner: ProcessRunner | None = None,
    filesystem: Filesystem | None = None,
    environment: EnvironmentStore | None = None,
    recorder: CommandRecorder | None = None,
) -> RunResult:
    """Resolve the task configuration and run the requested helper.

    Args:
        inputs: Where raw task inputs come from.
        platform_id: Host OS identifier ('win32', 'linux', ...).
        tmp_root: The job's scratch directory.
        reporter: Receives the single success/failure report.
        home_dir: Home directory for the Chef config dir.
        runner, filesystem, environment, recorder: Adapter overrides.

    Returns:
        RunResult. Failures have already been reported through ``reporter``.
    """
    result = RunResult()

    # ── Resolve configuration ────────────────────────────────────
    configuration = resolve_configuration(
        inputs, platform_id, tmp_root, reporter, home_dir=home_dir
    )
    if configuration is None:
        result.error = f"Platform is not supported: {platform_id!r}"
        return result
    result.configuration = configuration

    # ── Dispatch ─────────────────────────────────────────────────
    recorder = recorder or CommandStack()
    dispatcher = HelperDispatcher(
        configuration,
        runner=runner,
        filesystem=filesystem,
        environment=environment,
        reporter=reporter,
        recorder=recorder,
    )
    receipt = dispatcher.run()
    result.receipt = receipt
    result.commands = dispatcher.command_stack

    if receipt.failed:
        result.error = receipt.error

    logger.info(
        "%s %s → %s",
        "✓" if receipt.ok else "✗",
        receipt.step,
        receipt.status,
    )
    return result
