"""
Shared test fixtures and configuration.
"""

from collections.abc import Callable
from pathlib import Path

import pytest

from chefhelpers.adapters.mock import InMemoryEnvironment, MockProcessRunner, RecordingReporter
from chefhelpers.adapters.shell.filesystem import LocalFilesystem
from chefhelpers.adapters.task import MappingInputSource
from chefhelpers.core.config.resolver import resolve_configuration
from chefhelpers.core.engine.dispatcher import HelperDispatcher
from chefhelpers.core.engine.recorder import CommandStack
from chefhelpers.core.models.configuration import TaskConfiguration

LINUX = "linux"
WINDOWS = "win32"
MACOS = "darwin"


@pytest.fixture
def tmp_root(tmp_path: Path) -> Path:
    """The job's scratch directory."""
    root = tmp_path / "agent-temp"
    root.mkdir()
    return root


@pytest.fixture
def home_dir(tmp_path: Path) -> Path:
    """A throwaway home directory for the .chef config dir."""
    home = tmp_path / "home"
    home.mkdir()
    return home


@pytest.fixture
def reporter() -> RecordingReporter:
    return RecordingReporter()


@pytest.fixture
def runner() -> MockProcessRunner:
    return MockProcessRunner()


@pytest.fixture
def environment() -> InMemoryEnvironment:
    return InMemoryEnvironment()


@pytest.fixture
def make_configuration(
    tmp_root: Path, home_dir: Path, reporter: RecordingReporter
) -> Callable[..., TaskConfiguration]:
    """Resolve a Linux configuration from a dict of raw inputs."""

    def _make(inputs: dict[str, str], platform_id: str = LINUX) -> TaskConfiguration:
        configuration = resolve_configuration(
            MappingInputSource(inputs),
            platform_id,
            str(tmp_root),
            reporter,
            home_dir=str(home_dir),
        )
        assert configuration is not None
        return configuration

    return _make


@pytest.fixture
def make_dispatcher(
    make_configuration: Callable[..., TaskConfiguration],
    runner: MockProcessRunner,
    environment: InMemoryEnvironment,
    reporter: RecordingReporter,
) -> Callable[..., HelperDispatcher]:
    """Build a dispatcher wired to the mock adapters."""

    def _make(inputs: dict[str, str]) -> HelperDispatcher:
        return HelperDispatcher(
            make_configuration(inputs),
            runner=runner,
            filesystem=LocalFilesystem(),
            environment=environment,
            reporter=reporter,
            recorder=CommandStack(),
        )

    return _make
