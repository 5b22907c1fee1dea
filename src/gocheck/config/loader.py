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

"""Configuration loading for gocheck.

Options live either in a standalone ``gocheck.toml`` / ``.gocheck.toml`` (keys
at the top level) or under ``[tool.gocheck]`` in ``pyproject.toml``. Discovery
walks from a start directory up to the filesystem root and uses the first file
that defines gocheck options.
"""

from __future__ import annotations

import logging
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Final, cast

from pydantic import ValidationError

from gocheck.core.model_types import LogComponent
from gocheck.exceptions import ConfigReadError, InvalidConfigFileError
from gocheck.logging import structured_extra

from .models import CheckConfig, CheckConfigModel, model_to_dataclass

logger: logging.Logger = logging.getLogger("gocheck.config")

CONFIG_FILENAMES: Final[tuple[str, ...]] = ("gocheck.toml", ".gocheck.toml", "pyproject.toml")


@dataclass(slots=True, frozen=True)
class LoadedConfig:
    """Container for a loaded configuration and its source path.

    Attributes:
        config: Parsed configuration instance.
        path: Filesystem path the configuration was loaded from, or None when
            defaults are used.
    """

    config: CheckConfig
    path: Path | None


def load_config(explicit_path: Path | None = None, *, start: Path | None = None) -> LoadedConfig:
    """Load gocheck configuration from a TOML file or fall back to defaults.

    Args:
        explicit_path: Configuration file to read. When given, no discovery
            happens and the file must define gocheck options.
        start: Directory discovery starts from; defaults to the current
            working directory.

    Returns:
        LoadedConfig: Parsed configuration and the path it originated from.

    Raises:
        ConfigReadError: If a candidate file cannot be read or is not valid TOML.
        InvalidConfigFileError: If a candidate file holds invalid options.
    """
    if explicit_path is not None:
        candidate = explicit_path if explicit_path.is_absolute() else (Path.cwd() / explicit_path)
        loaded = _load_candidate(candidate.resolve(), explicit=True)
        if loaded is None:
            raise ConfigReadError(candidate, FileNotFoundError(str(candidate)))
        return loaded
    for candidate in _search_order((start or Path.cwd()).resolve()):
        loaded = _load_candidate(candidate, explicit=False)
        if loaded is not None:
            logger.debug(
                "Loaded configuration from %s",
                candidate,
                extra=structured_extra(component=LogComponent.CONFIG, path=candidate),
            )
            return loaded
    return LoadedConfig(config=CheckConfig(), path=None)


def _search_order(start: Path) -> list[Path]:
    directory = start if start.is_dir() else start.parent
    return [folder / name for folder in (directory, *directory.parents) for name in CONFIG_FILENAMES]


def _load_candidate(candidate: Path, *, explicit: bool) -> LoadedConfig | None:
    if not candidate.is_file():
        return None
    try:
        raw_map: dict[str, object] = tomllib.loads(candidate.read_text(encoding="utf-8"))
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ConfigReadError(candidate, exc) from exc

    payload = _extract_payload(candidate, raw_map)
    if payload is None:
        if explicit:
            message = f"{candidate.name} does not define a [tool.gocheck] section"
            raise InvalidConfigFileError(candidate, ValueError(message))
        return None
    try:
        model = CheckConfigModel.model_validate(payload)
    except ValidationError as exc:
        raise InvalidConfigFileError(candidate, exc) from exc
    return LoadedConfig(config=model_to_dataclass(model), path=candidate)


def _extract_payload(candidate: Path, raw_map: dict[str, object]) -> dict[str, object] | None:
    """Extract the gocheck options from a parsed TOML document.

    Args:
        candidate: Source configuration path.
        raw_map: Data parsed from the TOML document.

    Returns:
        Mapping to validate, or None when a pyproject.toml has no gocheck section.

    Raises:
        InvalidConfigFileError: If [tool.gocheck] exists but is not a table.
    """
    if candidate.name != "pyproject.toml":
        return raw_map
    tool_section = raw_map.get("tool")
    if not isinstance(tool_section, dict):
        return None
    section = cast("dict[str, object]", tool_section).get("gocheck")
    if section is None:
        return None
    if not isinstance(section, dict):
        message = "[tool.gocheck] must be a TOML table"
        raise InvalidConfigFileError(candidate, ValueError(message))
    return cast("dict[str, object]", section)


__all__ = ["CONFIG_FILENAMES", "LoadedConfig", "load_config"]
