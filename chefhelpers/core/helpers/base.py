"""
Helper base: the contract every helper implements.

A helper is one named unit of work. It reads its typed inputs from the
configuration, uses the context's adapters for every side effect, and
raises a HelperError subclass for anything fatal. It never reports
results itself: the dispatcher does that, exactly once.

To add a helper:
    1. Add its task name to HelperName
    2. Subclass Helper and implement run()
    3. Register the instance in chefhelpers.core.helpers.HELPERS
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import StrEnum

from chefhelpers.adapters.base import EnvironmentStore, Filesystem, ProcessRunner
from chefhelpers.core.engine.recorder import CommandRecorder
from chefhelpers.core.errors import ExternalCommandError
from chefhelpers.core.models.configuration import TaskConfiguration
from chefhelpers.core.models.receipt import Receipt

logger = logging.getLogger(__name__)


class HelperName(StrEnum):
    """The helpers a task can ask for, by their task input value."""

    SET_COOKBOOK_VERSION = "setCookbookVersion"
    SETUP_HABITAT = "setupHabitat"
    SETUP_CHEF = "setupChef"
    ENV_COOKBOOK_VERSION = "envCookbookVersion"


@dataclass
class HelperContext:
    """Everything a helper may touch during one run."""

    configuration: TaskConfiguration
    runner: ProcessRunner
    filesystem: Filesystem
    environment: EnvironmentStore
    recorder: CommandRecorder

    def issue(self, command: str) -> Receipt:
        """Record ``command``, run it, and wait for it to finish.

        Raises:
            ExternalCommandError: The command failed.
        """
        self.recorder.record(command)
        logger.info("$ %s", command)
        receipt = self.runner.execute(command)
        if receipt.failed:
            raise ExternalCommandError(command, receipt)
        return receipt


class Helper(ABC):
    """Abstract base class for all helpers."""

    @property
    @abstractmethod
    def name(self) -> HelperName:
        """The task name this helper answers to."""

    @abstractmethod
    def run(self, context: HelperContext) -> str:
        """Do the work and return a one-line summary.

        Raises:
            HelperError: For every fatal condition.
        """

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name.value!r}>"
