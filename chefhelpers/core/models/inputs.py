"""
Operation inputs: raw task parameters and the typed view each helper needs.

The pipeline agent hands us untyped strings. ``OperationInputs`` captures
all of them without judging; each helper then asks for its own sub-shape
(``CookbookVersionInputs``, ``HabitatInputs``, ...) and only at that point
are missing or malformed values turned into errors. A configuration built
for one helper never fails because another helper's inputs are absent.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, TypeVar

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from chefhelpers.core.errors import InvalidInputError, MissingRequiredInputError

if TYPE_CHECKING:
    from chefhelpers.adapters.base import InputSource

DEFAULT_VERSION_REGEX = r"""version\s+['"]?.*['"]?"""

_T = TypeVar("_T", bound="_HelperInputs")


class OperationInputs(BaseModel):
    """Every task input any helper understands, all optional.

    Field names are snake_case; the task input names are their camelCase
    aliases (``cookbook_version_number`` ← ``cookbookVersionNumber``).
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    # setCookbookVersion / envCookbookVersion
    cookbook_version_number: str | None = None
    cookbook_metadata_path: str | None = None
    cookbook_version_regex: str | None = None
    cookbook_name: str | None = None
    environment_name: str | None = None

    # setupHabitat
    habitat_origin: str | None = None
    habitat_origin_revision: str | None = None
    habitat_origin_public_key: str | None = None
    habitat_origin_signing_key: str | None = None

    # setupChef
    target_url: str | None = None
    username: str | None = None
    password: str | None = None
    ssl_verify: str | None = None

    @field_validator("*", mode="before")
    @classmethod
    def _blank_is_absent(cls, value: Any) -> Any:
        if isinstance(value, str) and value == "":
            return None
        return value

    @classmethod
    def input_names(cls) -> list[str]:
        """Task input names, in declaration order."""
        return [field.alias or name for name, field in cls.model_fields.items()]

    @classmethod
    def from_source(cls, source: InputSource) -> OperationInputs:
        """Read every known input from ``source``; absent ones stay None."""
        raw = {name: source.get_input(name) for name in cls.input_names()}
        return cls.model_validate({k: v for k, v in raw.items() if v is not None})

    def cookbook_version(self) -> CookbookVersionInputs:
        return CookbookVersionInputs.from_operation_inputs(self, "setCookbookVersion")

    def habitat(self) -> HabitatInputs:
        return HabitatInputs.from_operation_inputs(self, "setupHabitat")

    def chef_server(self) -> ChefServerInputs:
        return ChefServerInputs.from_operation_inputs(self, "setupChef")

    def environment_cookbook(self) -> EnvironmentCookbookInputs:
        return EnvironmentCookbookInputs.from_operation_inputs(self, "envCookbookVersion")


class _HelperInputs(BaseModel):
    """Base for the per-helper typed sub-shapes."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    @classmethod
    def from_operation_inputs(cls: type[_T], inputs: OperationInputs, helper: str) -> _T:
        """Validate the subset of ``inputs`` this helper needs.

        Raises:
            MissingRequiredInputError: Required inputs are absent.
            InvalidInputError: An input is present but cannot be coerced.
        """
        data = {
            name: getattr(inputs, name)
            for name in cls.model_fields
            if getattr(inputs, name, None) is not None
        }
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            missing: list[str] = []
            invalid: list[str] = []
            for err in e.errors():
                loc = str(err["loc"][0]) if err["loc"] else ""
                field = cls.model_fields.get(loc)
                input_name = (field.alias if field and field.alias else loc)
                if err["type"] == "missing":
                    missing.append(input_name)
                else:
                    invalid.append(f"{input_name}: {err['msg']}")
            if missing:
                raise MissingRequiredInputError(helper, missing) from e
            raise InvalidInputError(
                f"Invalid input(s) for {helper}: {'; '.join(invalid)}"
            ) from e


class CookbookVersionInputs(_HelperInputs):
    cookbook_version_number: str
    cookbook_metadata_path: str
    cookbook_version_regex: str = DEFAULT_VERSION_REGEX


class HabitatInputs(_HelperInputs):
    habitat_origin: str
    habitat_origin_revision: str
    habitat_origin_public_key: str
    habitat_origin_signing_key: str


class ChefServerInputs(_HelperInputs):
    target_url: str
    username: str
    password: str
    ssl_verify: bool = True


class EnvironmentCookbookInputs(_HelperInputs):
    environment_name: str
    cookbook_name: str
    cookbook_version_number: str
