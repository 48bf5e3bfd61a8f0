"""Helpers: the named units of work a task can run."""

from chefhelpers.core.helpers.base import Helper, HelperContext, HelperName
from chefhelpers.core.helpers.chef_setup import SetupChef
from chefhelpers.core.helpers.cookbook_version import SetCookbookVersion
from chefhelpers.core.helpers.environment_version import EnvironmentCookbookVersion
from chefhelpers.core.helpers.habitat import SetupHabitat

HELPERS: dict[HelperName, Helper] = {
    helper.name: helper
    for helper in (
        SetCookbookVersion(),
        SetupHabitat(),
        SetupChef(),
        EnvironmentCookbookVersion(),
    )
}

__all__ = [
    "HELPERS",
    "EnvironmentCookbookVersion",
    "Helper",
    "HelperContext",
    "HelperName",
    "SetCookbookVersion",
    "SetupChef",
    "SetupHabitat",
]
