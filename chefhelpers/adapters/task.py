"""
Pipeline agent adapters: inputs, results and variables.

The build agent passes task inputs as ``INPUT_<NAME>`` environment
variables and listens on stdout for ``##vso[...]`` logging commands.
These adapters speak that protocol; the rest of the package only sees
the ABCs in ``chefhelpers.adapters.base``.
"""

from __future__ import annotations

import logging
import os
import sys
import tempfile
from collections.abc import Iterable, Mapping
from typing import IO

import click

from chefhelpers.adapters.base import EnvironmentStore, InputSource, ResultReporter

logger = logging.getLogger(__name__)

# Agent variable holding the per-job scratch directory
AGENT_TEMP_VAR = "AGENT_TEMPDIRECTORY"


def current_platform_id() -> str:
    """Host OS identifier ('win32', 'linux', 'darwin', ...)."""
    return sys.platform


def default_tmp_root() -> str:
    """The agent's temp directory, falling back to the system one."""
    return os.environ.get(AGENT_TEMP_VAR) or tempfile.gettempdir()


def _escape_data(value: str) -> str:
    return value.replace("%", "%AZP25").replace("\r", "%0D").replace("\n", "%0A")


def _escape_property(value: str) -> str:
    return _escape_data(value).replace("]", "%5D").replace(";", "%3B")


def logging_command(command: str, properties: Mapping[str, str], message: str) -> str:
    """Format a ``##vso[area.action key=value;]message`` line."""
    props = "".join(f"{k}={_escape_property(v)};" for k, v in properties.items())
    return f"##vso[{command} {props}]{_escape_data(message)}"


# ── Inputs ──────────────────────────────────────────────────────────


class MappingInputSource(InputSource):
    """Inputs held in a plain mapping (CLI flags, files, tests)."""

    def __init__(self, values: Mapping[str, str] | None = None):
        self._values = dict(values or {})

    def get_input(self, name: str) -> str | None:
        return self._values.get(name)


class TaskInputSource(InputSource):
    """Inputs the agent exported as ``INPUT_<NAME>`` variables."""

    def __init__(self, environ: Mapping[str, str] | None = None):
        self._environ = os.environ if environ is None else environ

    @staticmethod
    def variable_name(name: str) -> str:
        return "INPUT_" + name.replace(" ", "_").upper()

    def get_input(self, name: str) -> str | None:
        return self._environ.get(self.variable_name(name))


class LayeredInputSource(InputSource):
    """First source that knows an input wins."""

    def __init__(self, sources: Iterable[InputSource]):
        self._sources = list(sources)

    def get_input(self, name: str) -> str | None:
        for source in self._sources:
            value = source.get_input(name)
            if value is not None:
                return value
        return None


# ── Results ─────────────────────────────────────────────────────────


class TaskResultReporter(ResultReporter):
    """Report the task outcome to the agent via ``task.complete``."""

    def __init__(self, stream: IO[str] | None = None):
        self._stream = stream

    def report_failure(self, message: str) -> None:
        logger.error("%s", message)
        click.echo(
            logging_command("task.complete", {"result": "Failed"}, message),
            file=self._stream,
        )

    def report_success(self, message: str) -> None:
        logger.info("%s", message)
        click.echo(
            logging_command("task.complete", {"result": "Succeeded"}, message),
            file=self._stream,
        )


# ── Variables ───────────────────────────────────────────────────────


class ProcessEnvironment(EnvironmentStore):
    """os.environ for this process, mirrored to the agent for later steps."""

    def __init__(self, stream: IO[str] | None = None, announce: bool = True):
        self._stream = stream
        self._announce = announce

    def set_variable(self, name: str, value: str) -> None:
        os.environ[name] = value
        logger.debug("Set environment variable %s", name)
        if self._announce:
            click.echo(
                logging_command("task.setvariable", {"variable": name}, value),
                file=self._stream,
            )

    def get_variable(self, name: str) -> str | None:
        return os.environ.get(name)
