"""
setCookbookVersion: stamp a new version into a cookbook's metadata.rb.
"""

from __future__ import annotations

import logging
import re

from chefhelpers.core.errors import InvalidInputError, MissingTargetFileError
from chefhelpers.core.helpers.base import Helper, HelperContext, HelperName

logger = logging.getLogger(__name__)


def patch_version(content: str, pattern: str, version: str) -> tuple[str, bool]:
    """Replace the first match of ``pattern`` with ``version '<version>'``.

    The replacement is literal: backslashes or group references in the
    version string are not expanded.

    Returns:
        (new_content, matched)

    Raises:
        InvalidInputError: ``pattern`` is not a valid regular expression.
    """
    try:
        regex = re.compile(pattern)
    except re.error as e:
        raise InvalidInputError(f"Invalid cookbook version regex {pattern!r}: {e}") from e

    replacement = f"version '{version}'"
    new_content, count = regex.subn(lambda _m: replacement, content, count=1)
    return new_content, count > 0


class SetCookbookVersion(Helper):
    """Patch the version line of a metadata file in place.

    The pattern and version are used exactly as supplied; no semantic
    version checks are made. Applying the same version twice gives the
    same file as applying it once.
    """

    @property
    def name(self) -> HelperName:
        return HelperName.SET_COOKBOOK_VERSION

    def run(self, context: HelperContext) -> str:
        inputs = context.configuration.inputs.cookbook_version()
        fs = context.filesystem
        path = inputs.cookbook_metadata_path

        if not fs.exists(path):
            raise MissingTargetFileError(path)

        try:
            content = fs.read_text(path)
        except UnicodeDecodeError as e:
            raise InvalidInputError(f"Metadata file is not valid UTF-8: {path}: {e}") from e
        patched, matched = patch_version(
            content, inputs.cookbook_version_regex, inputs.cookbook_version_number
        )
        if not matched:
            logger.warning(
                "No match for %r in %s; file left unchanged",
                inputs.cookbook_version_regex,
                path,
            )

        fs.write_text(path, patched)
        return f"Set cookbook version to {inputs.cookbook_version_number} in {path}"
