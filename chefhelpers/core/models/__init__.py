"""
Domain models: Pydantic types for the helper task.

All models are re-exported here for convenient access:

    from chefhelpers.core.models import TaskConfiguration, ResolvedPaths, Receipt
"""

from chefhelpers.core.models.configuration import TaskConfiguration
from chefhelpers.core.models.inputs import (
    DEFAULT_VERSION_REGEX,
    ChefServerInputs,
    CookbookVersionInputs,
    EnvironmentCookbookInputs,
    HabitatInputs,
    OperationInputs,
)
from chefhelpers.core.models.platform import PlatformKind, ResolvedPaths
from chefhelpers.core.models.receipt import Receipt

__all__ = [
    "DEFAULT_VERSION_REGEX",
    # inputs.py
    "ChefServerInputs",
    "CookbookVersionInputs",
    "EnvironmentCookbookInputs",
    "HabitatInputs",
    "OperationInputs",
    # platform.py
    "PlatformKind",
    # receipt.py
    "Receipt",
    "ResolvedPaths",
    # configuration.py
    "TaskConfiguration",
]
