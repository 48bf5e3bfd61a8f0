"""
envCookbookVersion: pin a cookbook version in a Chef environment.

Download the environment with knife, change one entry of its
``cookbook_versions`` mapping, upload the whole document again.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from chefhelpers.core.errors import MalformedDocumentError
from chefhelpers.core.helpers.base import Helper, HelperContext, HelperName

logger = logging.getLogger(__name__)

COOKBOOK_VERSIONS_KEY = "cookbook_versions"


def pin_cookbook_version(raw: str, cookbook: str, version: str) -> dict[str, Any]:
    """Parse an environment document and pin ``cookbook`` to ``version``.

    Every other key, and every other cookbook entry, is kept as is.

    Raises:
        MalformedDocumentError: The text is not a JSON object, or its
            ``cookbook_versions`` is not an object.
    """
    try:
        document = json.loads(raw)
    except json.JSONDecodeError as e:
        raise MalformedDocumentError(f"Environment file is not valid JSON: {e}") from e

    if not isinstance(document, dict):
        raise MalformedDocumentError(
            f"Expected a JSON object for the environment, got {type(document).__name__}"
        )

    versions = document.get(COOKBOOK_VERSIONS_KEY)
    if versions is None:
        versions = {}
    elif not isinstance(versions, dict):
        raise MalformedDocumentError(
            f"'{COOKBOOK_VERSIONS_KEY}' must be an object, got {type(versions).__name__}"
        )

    versions[cookbook] = version
    document[COOKBOOK_VERSIONS_KEY] = versions
    return document


class EnvironmentCookbookVersion(Helper):
    """Download, patch and re-upload a Chef environment.

    Each knife call finishes before the next step starts; a failure at
    any step stops the ones after it.
    """

    @property
    def name(self) -> HelperName:
        return HelperName.ENV_COOKBOOK_VERSION

    def run(self, context: HelperContext) -> str:
        inputs = context.configuration.inputs.environment_cookbook()
        configuration = context.configuration
        knife = configuration.paths.knife_executable
        env_file = configuration.join_path(
            configuration.paths.tmp_dir, f"{inputs.environment_name}.json"
        )

        context.issue(
            f"{knife} environment show {inputs.environment_name} -F json > {env_file}"
        )

        try:
            raw = context.filesystem.read_text(env_file)
        except UnicodeDecodeError as e:
            raise MalformedDocumentError(f"Environment file is not valid UTF-8: {env_file}: {e}") from e

        document = pin_cookbook_version(
            raw,
            inputs.cookbook_name,
            inputs.cookbook_version_number,
        )
        context.filesystem.write_text(env_file, json.dumps(document, indent=2))
        logger.debug("Pinned %s to %s in %s", inputs.cookbook_name, inputs.cookbook_version_number, env_file)

        context.issue(f"{knife} environment from file {env_file}")

        return (
            f"Pinned {inputs.cookbook_name} to {inputs.cookbook_version_number} "
            f"in environment '{inputs.environment_name}'"
        )
