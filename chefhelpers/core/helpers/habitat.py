"""
setupHabitat: provision origin keys for later ``hab`` commands.
"""

from __future__ import annotations

import logging

from chefhelpers.core.helpers.base import Helper, HelperContext, HelperName

logger = logging.getLogger(__name__)

HAB_ORIGIN_VAR = "HAB_ORIGIN"
HAB_CACHE_KEY_PATH_VAR = "HAB_CACHE_KEY_PATH"


def key_file_names(origin: str, revision: str) -> tuple[str, str]:
    """Habitat's naming for an origin key pair: (public, signing)."""
    stem = f"{origin}-{revision}"
    return f"{stem}.pub", f"{stem}.sig.key"


class SetupHabitat(Helper):
    """Write the origin key pair to the temp directory and point hab at it.

    Both key files are written before any variable is set, so a failed
    write leaves the environment untouched.
    """

    @property
    def name(self) -> HelperName:
        return HelperName.SETUP_HABITAT

    def run(self, context: HelperContext) -> str:
        inputs = context.configuration.inputs.habitat()
        configuration = context.configuration
        key_dir = configuration.paths.tmp_dir

        public_name, signing_name = key_file_names(
            inputs.habitat_origin, inputs.habitat_origin_revision
        )
        public_path = configuration.join_path(key_dir, public_name)
        signing_path = configuration.join_path(key_dir, signing_name)

        context.filesystem.write_text(public_path, inputs.habitat_origin_public_key)
        context.filesystem.write_text(signing_path, inputs.habitat_origin_signing_key)
        logger.info("Wrote origin keys %s, %s", public_path, signing_path)

        context.environment.set_variable(HAB_ORIGIN_VAR, inputs.habitat_origin)
        context.environment.set_variable(HAB_CACHE_KEY_PATH_VAR, key_dir)

        return f"Configured Habitat origin '{inputs.habitat_origin}' with keys in {key_dir}"
