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

"""Common exception hierarchy for gocheck."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path

__all__ = [
    "ConfigReadError",
    "ConfigValidationError",
    "GocheckError",
    "GocheckTypeError",
    "GocheckValidationError",
    "InvalidConfigFileError",
    "ParseInternalError",
]


class GocheckError(Exception):
    """Base error for all gocheck exceptions."""


class GocheckValidationError(GocheckError, ValueError):
    """Raised when input data fails validation checks."""


class GocheckTypeError(GocheckError, TypeError):
    """Raised when input data has an unexpected type."""


class ParseInternalError(GocheckError):
    """Raised when parsing tool output fails for a reason other than a non-matching line.

    Unlike a missing tool, this aborts the whole check run.
    """

    def __init__(self, tool: str, error: Exception) -> None:
        """Initialize the exception with the tool whose output could not be parsed.

        Args:
            tool: Name of the tool whose output was being parsed.
            error: The underlying exception.
        """
        self.tool = tool
        self.error = error
        super().__init__(f"Failed to parse output of {tool}: {error}")


class ConfigValidationError(GocheckValidationError):
    """Raised when configuration data contains invalid values."""


class ConfigReadError(ConfigValidationError):
    """Raised when a configuration file cannot be read from disk."""

    def __init__(self, path: Path, error: Exception) -> None:
        """Initialize the exception with file path and underlying error.

        Args:
            path: The path to the configuration file that could not be read.
            error: The underlying exception that caused the read failure.
        """
        self.path = path
        self.error = error
        super().__init__(f"Unable to read {path}: {error}")


class InvalidConfigFileError(ConfigValidationError):
    """Raised when a configuration file fails validation."""

    def __init__(self, path: Path, error: Exception) -> None:
        """Initialize the exception with configuration file path and validation error.

        Args:
            path: The path to the configuration file that failed validation.
            error: The underlying validation exception.
        """
        self.path = path
        self.error = error
        super().__init__(f"Invalid gocheck configuration in {path}: {error}")
