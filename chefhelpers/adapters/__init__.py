"""Adapters: bindings to the pipeline agent, the shell and the disk.

Public re-exports for convenient access.
"""

from chefhelpers.adapters.base import (
    EnvironmentStore,
    Filesystem,
    InputSource,
    ProcessRunner,
    ResultReporter,
)
from chefhelpers.adapters.mock import (
    InMemoryEnvironment,
    InMemoryFilesystem,
    MockProcessRunner,
    RecordingReporter,
)
from chefhelpers.adapters.shell.command import ShellCommandRunner
from chefhelpers.adapters.shell.filesystem import LocalFilesystem
from chefhelpers.adapters.task import (
    LayeredInputSource,
    MappingInputSource,
    ProcessEnvironment,
    TaskInputSource,
    TaskResultReporter,
)

__all__ = [
    "EnvironmentStore",
    "Filesystem",
    "InMemoryEnvironment",
    "InMemoryFilesystem",
    "InputSource",
    "LayeredInputSource",
    "LocalFilesystem",
    "MappingInputSource",
    "MockProcessRunner",
    "ProcessEnvironment",
    "ProcessRunner",
    "RecordingReporter",
    "ResultReporter",
    "ShellCommandRunner",
    "TaskInputSource",
    "TaskResultReporter",
]
