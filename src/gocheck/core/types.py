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

"""Core data classes for diagnostics and tool invocations.

``Diagnostic`` is the normalised finding handed back to callers.
``InvocationDescriptor`` describes one external tool run and lives only as long
as the task executing it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .model_types import CheckKind, SeverityLevel

if TYPE_CHECKING:
    from pathlib import Path

    from .type_aliases import Command, ToolName


@dataclass(slots=True, frozen=True)
class Diagnostic:
    """Immutable dataclass representing a single finding from one tool.

    Attributes:
        file: Absolute path to the file the finding applies to.
        line: Line number (1-indexed, never 0).
        column: Column number (1-indexed, never 0).
        message: Human-readable message; continuation lines are joined with ``\\n``.
        severity: Normalised severity level.
        tool: Name of the tool that reported the finding, when known.
        check: Check category the finding was produced by, when known.
    """

    file: Path
    line: int
    column: int
    message: str
    severity: SeverityLevel
    tool: ToolName | None = None
    check: CheckKind | None = None

    def format_line(self) -> str:
        """Render the diagnostic the way it is echoed to the log sink.

        Returns:
            ``file:line:column: message``.
        """
        return f"{self.file}:{self.line}:{self.column}: {self.message}"

    def to_payload(self) -> dict[str, object]:
        """Return a JSON-ready mapping of the diagnostic.

        Returns:
            Dictionary with string, integer or ``None`` values only.
        """
        return {
            "file": str(self.file),
            "line": self.line,
            "column": self.column,
            "severity": self.severity.value,
            "message": self.message,
            "tool": self.tool,
            "check": self.check.value if self.check is not None else None,
        }


def _default_args() -> Command:
    return []


@dataclass(slots=True, frozen=True)
class InvocationDescriptor:
    """Everything needed to run one external tool for one check.

    Attributes:
        check: Check category this invocation belongs to.
        tool: Logical tool name (``go``, ``golint``...).
        binary: Resolved executable path, or ``None`` when it could not be found.
        cwd: Working directory for the process and for path resolution.
        severity: Severity applied to lines that do not carry their own.
        read_stderr: Parse stderr instead of stdout.
        not_found_message: Message sent to the notifier when the tool is missing.
        args: Arguments passed after the executable.
        timeout: Optional limit in seconds before the process is killed.
    """

    check: CheckKind
    tool: ToolName
    binary: str | None
    cwd: Path
    severity: SeverityLevel
    read_stderr: bool
    not_found_message: str
    args: Command = field(default_factory=_default_args)
    timeout: float | None = None

    @property
    def argv(self) -> Command:
        """Full argument vector, executable first."""
        return [self.binary or str(self.tool), *self.args]


__all__ = ["Diagnostic", "InvocationDescriptor"]
