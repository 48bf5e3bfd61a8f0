"""
Platform models: which host we run on and where its tools live.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict


class PlatformKind(StrEnum):
    """Host operating system family, as far as Chef workstation cares."""

    WINDOWS = "windows"
    LINUX = "linux"
    UNSUPPORTED = "unsupported"


class ResolvedPaths(BaseModel):
    """Filesystem locations of the Chef workstation tools and work areas.

    Paths are rendered with the target platform's separators, so a
    Windows configuration built on a Linux host still reads
    ``C:\\opscode\\chef-workstation\\bin\\knife.bat``.
    """

    model_config = ConfigDict(frozen=True)

    workstation_dir: str
    chef_executable: str
    berks_executable: str
    inspec_executable: str
    knife_executable: str
    config_dir: str
    script_path: str
    tmp_dir: str
