"""
Configuration resolver: platform detection, tool paths and raw inputs.

Turns "which OS are we on, which temp directory do we own, what did the
pipeline pass us" into one immutable TaskConfiguration. Nothing is cached
between calls: resolving twice with different inputs gives two
independent snapshots.
"""

from __future__ import annotations

import logging
from pathlib import Path, PurePath, PurePosixPath, PureWindowsPath

from chefhelpers.adapters.base import InputSource, ResultReporter
from chefhelpers.core.errors import UnsupportedPlatformError
from chefhelpers.core.models.configuration import TaskConfiguration
from chefhelpers.core.models.inputs import OperationInputs
from chefhelpers.core.models.platform import PlatformKind, ResolvedPaths

logger = logging.getLogger(__name__)

# Chef workstation install roots
WINDOWS_WORKSTATION_DIR = r"C:\opscode\chef-workstation"
LINUX_WORKSTATION_DIR = "/opt/chef-workstation"

# Input naming the helper to run
HELPER_INPUT = "helper"

_PLATFORM_IDS = {
    "win32": PlatformKind.WINDOWS,
    "linux": PlatformKind.LINUX,
}


def detect_platform(platform_id: str) -> PlatformKind:
    """Map a host OS identifier ('win32', 'linux', ...) to a PlatformKind."""
    return _PLATFORM_IDS.get(platform_id, PlatformKind.UNSUPPORTED)


def build_paths(
    platform: PlatformKind,
    tmp_root: str,
    home_dir: str | None = None,
) -> ResolvedPaths:
    """Derive every tool and work path for ``platform``.

    Args:
        platform: Windows or Linux.
        tmp_root: The job's scratch directory.
        home_dir: Home of the user knife runs as (default: current user).

    Raises:
        UnsupportedPlatformError: For PlatformKind.UNSUPPORTED.
    """
    path_cls: type[PurePath]
    if platform == PlatformKind.WINDOWS:
        path_cls, root, suffix, script = PureWindowsPath, WINDOWS_WORKSTATION_DIR, ".bat", "install.ps1"
    elif platform == PlatformKind.LINUX:
        path_cls, root, suffix, script = PurePosixPath, LINUX_WORKSTATION_DIR, "", "install.sh"
    else:
        raise UnsupportedPlatformError(str(platform))

    workstation = path_cls(root)
    bin_dir = workstation / "bin"
    tmp = path_cls(tmp_root)
    home = path_cls(home_dir if home_dir is not None else str(Path.home()))

    return ResolvedPaths(
        workstation_dir=str(workstation),
        chef_executable=str(bin_dir / f"chef{suffix}"),
        berks_executable=str(bin_dir / f"berks{suffix}"),
        inspec_executable=str(bin_dir / f"inspec{suffix}"),
        knife_executable=str(bin_dir / f"knife{suffix}"),
        config_dir=str(home / ".chef"),
        script_path=str(tmp / script),
        tmp_dir=str(tmp),
    )


def resolve_configuration(
    inputs: InputSource,
    platform_id: str,
    tmp_root: str,
    reporter: ResultReporter,
    home_dir: str | None = None,
) -> TaskConfiguration | None:
    """Build the TaskConfiguration for one helper run.

    Inputs are captured as given; whether the ones a helper needs are
    present is only checked when that helper runs.

    Returns:
        The configuration, or None when the platform is unsupported.
        In that case the failure has already been reported, once.
    """
    platform = detect_platform(platform_id)
    try:
        paths = build_paths(platform, tmp_root, home_dir)
    except UnsupportedPlatformError:
        reporter.report_failure(
            f"Platform is not supported: {platform_id!r}. "
            "Chef helpers run on Windows and Linux agents only."
        )
        return None

    configuration = TaskConfiguration(
        platform=platform,
        paths=paths,
        helper=inputs.get_input(HELPER_INPUT) or None,
        inputs=OperationInputs.from_source(inputs),
    )
    logger.debug(
        "Resolved %s configuration (helper=%s, tmp=%s)",
        platform.value,
        configuration.helper,
        paths.tmp_dir,
    )
    return configuration
