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

"""Enumerations shared by the gocheck engine, configuration and CLI.

This module defines:

- Severity levels that every diagnostic is normalised to
- Check kinds, in the order their results are merged
- Logging components and formats used by the structured logger
"""

from __future__ import annotations

from enum import StrEnum
from typing import Final


class SeverityLevel(StrEnum):
    """Enumeration of diagnostic severity levels.

    Attributes:
        ERROR: Findings that break the build.
        WARNING: Lint or vet findings that should be addressed.
        INFO: Informational diagnostics (notes, hints).
    """

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"

    @classmethod
    def from_str(cls, raw: str) -> SeverityLevel:
        """Create a SeverityLevel enum from a string value.

        Args:
            raw: String representation of the severity level.

        Returns:
            SeverityLevel enum value.

        Raises:
            ValueError: If the string does not match any SeverityLevel value.
        """
        value = raw.strip().lower()
        try:
            return cls(value)
        except ValueError as exc:
            msg = f"Unknown severity '{raw}'"
            raise ValueError(msg) from exc

    @classmethod
    def coerce(cls, raw: object) -> SeverityLevel:
        """Coerce an arbitrary object to a SeverityLevel with fallback.

        Handles the spellings tools commonly print: plural forms, ``information``
        and ``note``. Anything unrecognised becomes ``INFO``.

        Args:
            raw: Object to coerce to a SeverityLevel.

        Returns:
            SeverityLevel enum value, defaulting to INFO.
        """
        if isinstance(raw, SeverityLevel):
            return raw
        if isinstance(raw, str):
            input_str = raw.strip().lower()
            if input_str.endswith("s"):
                singular = input_str[:-1]
                if singular in cls._value2member_map_:
                    input_str = singular
            input_str = _SEVERITY_SYNONYMS.get(input_str, input_str)
            try:
                return cls.from_str(input_str)
            except ValueError:
                return cls.INFO
        return cls.INFO


_SEVERITY_SYNONYMS: Final[dict[str, str]] = {
    "information": "info",
    "note": "info",
    "err": "error",
    "warn": "warning",
}


class CheckKind(StrEnum):
    """Categories of checks run against a file.

    Declaration order is the order in which results are merged.

    Attributes:
        BUILD: Compile the package containing the file.
        LINT: Run the configured linter against the file.
        VET: Run ``go tool vet`` against the file.
        COVERAGE: Ask the coverage collector for uncovered regions.
    """

    BUILD = "build"
    LINT = "lint"
    VET = "vet"
    COVERAGE = "coverage"

    @classmethod
    def from_str(cls, raw: str) -> CheckKind:
        """Create a CheckKind enum from a string value.

        Args:
            raw: String representation of the check kind.

        Returns:
            CheckKind enum value.

        Raises:
            ValueError: If the string does not match any CheckKind value.
        """
        value = raw.strip().lower()
        try:
            return cls(value)
        except ValueError as exc:
            msg = f"Unknown check '{raw}'"
            raise ValueError(msg) from exc


class LogFormat(StrEnum):
    """Enumeration of log output formats.

    Attributes:
        TEXT: Human-readable text format.
        JSON: Machine-readable JSON format.
    """

    TEXT = "text"
    JSON = "json"

    @classmethod
    def from_str(cls, raw: str) -> LogFormat:
        """Create a LogFormat enum from a string value.

        Args:
            raw: String representation of the log format.

        Returns:
            LogFormat enum value.

        Raises:
            ValueError: If the string does not match any LogFormat value.
        """
        value = raw.strip().lower()
        try:
            return cls(value)
        except ValueError as exc:
            msg = f"Unknown log format '{raw}'"
            raise ValueError(msg) from exc


class LogComponent(StrEnum):
    """Enumeration of loggable system components.

    Attributes:
        ENGINE: Parser and orchestration layer.
        RUNNER: Subprocess execution.
        CONFIG: Configuration loading.
        SERVICES: Default collaborator implementations.
        CLI: Command-line interface.
    """

    ENGINE = "engine"
    RUNNER = "runner"
    CONFIG = "config"
    SERVICES = "services"
    CLI = "cli"


class OutputFormat(StrEnum):
    """Formats the CLI can print diagnostics in."""

    TEXT = "text"
    JSON = "json"


__all__ = [
    "CheckKind",
    "LogComponent",
    "LogFormat",
    "OutputFormat",
    "SeverityLevel",
]
