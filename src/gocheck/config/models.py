# Copyright 2025 CrownOps Engineering
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Configuration models for gocheck.

``CheckConfigModel`` validates raw option mappings (editor settings, TOML
tables) with pydantic; ``CheckConfig`` is the frozen dataclass the engine
consumes. Options accept both the camelCase names editors use
(``buildOnSave``) and snake_case names. Missing options mean "disabled".
"""

from __future__ import annotations

import shlex
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from typing import ClassVar, Final

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from gocheck.exceptions import ConfigValidationError

DEFAULT_LINTER: Final[str] = "golint"

_LIST_FIELDS: Final[tuple[str, ...]] = ("build_flags", "lint_flags", "vet_flags")
_BOOL_FIELDS: Final[tuple[str, ...]] = ("build_on_save", "lint_on_save", "vet_on_save", "cover_on_save")


class ConfigFieldTypeError(ConfigValidationError):
    """Raised when a configuration field has an invalid type."""

    def __init__(self, field: str, expected: str) -> None:
        """Initialize the exception with the offending field.

        Args:
            field: Name of the configuration field.
            expected: Description of the accepted type.
        """
        self.field = field
        self.expected = expected
        super().__init__(f"{field} must be {expected}")


class CheckConfigModel(BaseModel):
    """Pydantic model validating check options.

    Attributes:
        build_on_save: Run the build check.
        build_flags: Extra arguments for ``go build`` / ``go test -c``.
        build_tags: Value passed to ``-tags``; empty means no ``-tags`` flag.
        lint_on_save: Run the lint check.
        linter: Linter executable name.
        lint_flags: Arguments for the linter.
        vet_on_save: Run the vet check.
        vet_flags: Extra arguments for ``go tool vet``.
        cover_on_save: Ask the coverage collector for gaps.
        tool_timeout: Seconds before a tool process is killed; ``None`` waits forever.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(populate_by_name=True, extra="ignore")

    build_on_save: bool = Field(default=False, alias="buildOnSave")
    build_flags: list[str] = Field(default_factory=list, alias="buildFlags")
    build_tags: str = Field(default="", alias="buildTags")
    lint_on_save: bool = Field(default=False, alias="lintOnSave")
    linter: str = Field(default=DEFAULT_LINTER)
    lint_flags: list[str] = Field(default_factory=list, alias="lintFlags")
    vet_on_save: bool = Field(default=False, alias="vetOnSave")
    vet_flags: list[str] = Field(default_factory=list, alias="vetFlags")
    cover_on_save: bool = Field(default=False, alias="coverOnSave")
    tool_timeout: float | None = Field(default=None, alias="toolTimeout")

    @field_validator(*_BOOL_FIELDS, mode="before")
    @classmethod
    def _none_is_false(cls, value: object) -> object:
        return False if value is None else value

    @field_validator(*_LIST_FIELDS, mode="before")
    @classmethod
    def _coerce_list(cls, value: object) -> list[str]:
        if value is None:
            return []
        if isinstance(value, str):
            return shlex.split(value)
        if isinstance(value, (list, tuple)):
            items: list[str] = []
            for item in value:
                if not isinstance(item, str):
                    msg = "flags"
                    raise ConfigFieldTypeError(msg, "a list of strings")
                items.append(item)
            return items
        msg = "flags"
        raise ConfigFieldTypeError(msg, "a string or a list of strings")

    @field_validator("build_tags", mode="before")
    @classmethod
    def _strip_tags(cls, value: object) -> str:
        if value is None:
            return ""
        if isinstance(value, str):
            return value.strip()
        msg = "buildTags"
        raise ConfigFieldTypeError(msg, "a string")

    @field_validator("linter", mode="before")
    @classmethod
    def _default_linter(cls, value: object) -> str:
        if value is None:
            return DEFAULT_LINTER
        if isinstance(value, str):
            return value.strip() or DEFAULT_LINTER
        msg = "linter"
        raise ConfigFieldTypeError(msg, "a string")

    @field_validator("tool_timeout")
    @classmethod
    def _positive_timeout(cls, value: float | None) -> float | None:
        if value is not None and value <= 0:
            msg = "toolTimeout must be greater than zero"
            raise ConfigValidationError(msg)
        return value


def _default_str_list() -> list[str]:
    return []


@dataclass(slots=True, frozen=True)
class CheckConfig:
    """Validated check options used at runtime.

    Attributes mirror ``CheckConfigModel``.
    """

    build_on_save: bool = False
    build_flags: list[str] = field(default_factory=_default_str_list)
    build_tags: str = ""
    lint_on_save: bool = False
    linter: str = DEFAULT_LINTER
    lint_flags: list[str] = field(default_factory=_default_str_list)
    vet_on_save: bool = False
    vet_flags: list[str] = field(default_factory=_default_str_list)
    cover_on_save: bool = False
    tool_timeout: float | None = None

    @classmethod
    def from_mapping(cls, options: Mapping[str, object]) -> CheckConfig:
        """Build a configuration from a provider mapping.

        Args:
            options: Option names (camelCase or snake_case) to values. Unknown
                keys are ignored.

        Returns:
            CheckConfig: Validated configuration.

        Raises:
            ConfigValidationError: If a value has the wrong type.
        """
        try:
            model = CheckConfigModel.model_validate(dict(options))
        except ValidationError as exc:
            raise ConfigValidationError(str(exc)) from exc
        return model_to_dataclass(model)

    def with_overrides(self, **changes: object) -> CheckConfig:
        """Return a copy with the non-``None`` ``changes`` applied."""
        return replace(self, **{key: value for key, value in changes.items() if value is not None})

    @property
    def any_enabled(self) -> bool:
        """Whether at least one check is switched on."""
        return self.build_on_save or self.lint_on_save or self.vet_on_save or self.cover_on_save


def model_to_dataclass(model: CheckConfigModel) -> CheckConfig:
    """Convert a validated model into the runtime dataclass.

    Args:
        model: Validated ``CheckConfigModel``.

    Returns:
        CheckConfig: Equivalent runtime configuration.
    """
    payload = model.model_dump(mode="python", by_alias=False)
    return CheckConfig(
        build_on_save=bool(payload["build_on_save"]),
        build_flags=list(payload["build_flags"]),
        build_tags=str(payload["build_tags"]),
        lint_on_save=bool(payload["lint_on_save"]),
        linter=str(payload["linter"]),
        lint_flags=list(payload["lint_flags"]),
        vet_on_save=bool(payload["vet_on_save"]),
        vet_flags=list(payload["vet_flags"]),
        cover_on_save=bool(payload["cover_on_save"]),
        tool_timeout=payload["tool_timeout"],
    )


__all__ = [
    "DEFAULT_LINTER",
    "CheckConfig",
    "CheckConfigModel",
    "ConfigFieldTypeError",
    "model_to_dataclass",
]
