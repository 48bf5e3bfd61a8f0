"""
TaskConfiguration: the immutable snapshot a helper run works from.
"""

from __future__ import annotations

from pathlib import PurePosixPath, PureWindowsPath

from pydantic import BaseModel, ConfigDict, Field

from chefhelpers.core.models.inputs import OperationInputs
from chefhelpers.core.models.platform import PlatformKind, ResolvedPaths


class TaskConfiguration(BaseModel):
    """Resolved platform, tool paths, requested helper and raw inputs.

    Built by the configuration resolver; never mutated afterwards.
    """

    model_config = ConfigDict(frozen=True)

    platform: PlatformKind
    paths: ResolvedPaths
    helper: str | None = None
    inputs: OperationInputs = Field(default_factory=OperationInputs)

    @property
    def is_windows(self) -> bool:
        """Whether generated files should follow Windows conventions."""
        return self.platform == PlatformKind.WINDOWS

    def join_path(self, *parts: str) -> str:
        """Join path segments with the target platform's separator."""
        path_cls = PureWindowsPath if self.is_windows else PurePosixPath
        return str(path_cls(*parts))

    def to_dict(self) -> dict:
        """Platform, helper and paths; inputs are left out as they may hold secrets."""
        return {
            "platform": self.platform.value,
            "is_windows": self.is_windows,
            "helper": self.helper,
            "paths": self.paths.model_dump(mode="json"),
        }
