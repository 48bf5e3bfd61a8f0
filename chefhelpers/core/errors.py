"""
Helper errors: the failure taxonomy.

Helpers raise these; the resolver and the dispatcher catch them at the
boundary and report each one exactly once through the result reporter.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from chefhelpers.core.models.receipt import Receipt


class HelperError(Exception):
    """Base class for every fatal helper condition."""


class UnsupportedPlatformError(HelperError):
    """The host operating system has no Chef workstation layout."""

    def __init__(self, platform_id: str):
        self.platform_id = platform_id
        super().__init__(f"Platform is not supported: {platform_id!r}")


class UnknownHelperError(HelperError):
    """The requested helper name is missing or not one of the known helpers."""

    def __init__(self, name: str | None, known: list[str]):
        self.name = name
        self.known = known
        if not name:
            message = f"No helper specified. Valid: {', '.join(known)}"
        else:
            message = f"Unknown helper '{name}'. Valid: {', '.join(known)}"
        super().__init__(message)


class MissingRequiredInputError(HelperError):
    """One or more task inputs needed by a helper were not supplied."""

    def __init__(self, helper: str, missing: list[str]):
        self.helper = helper
        self.missing = missing
        super().__init__(
            f"Missing required input(s) for {helper}: {', '.join(missing)}"
        )


class InvalidInputError(HelperError):
    """A task input was supplied but cannot be used as given."""


class MissingTargetFileError(HelperError):
    """The file a helper was asked to patch does not exist."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"File not found: {path}")


class ExternalCommandError(HelperError):
    """An external command returned a failed receipt."""

    def __init__(self, command: str, receipt: Receipt):
        self.command = command
        self.receipt = receipt
        super().__init__(f"Command failed: {command}: {receipt.error}")


class MalformedDocumentError(HelperError):
    """A JSON document fetched from an external tool has the wrong shape."""
