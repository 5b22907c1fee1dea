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

"""Line-oriented parser for compiler and linter text output.

Go tools report findings as ``path:line:column: message`` with optional column
and severity fields. Tab-indented lines continue the previous finding. Anything
else (banners, package headers, summaries) is ignored.

The functions here are pure: text in, diagnostics out.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Final

from gocheck.core.model_types import LogComponent, SeverityLevel
from gocheck.core.types import Diagnostic
from gocheck.logging import structured_extra

if TYPE_CHECKING:
    from gocheck.core.model_types import CheckKind
    from gocheck.core.type_aliases import ToolName

logger: logging.Logger = logging.getLogger("gocheck.engines.parser")

CONTINUATION_PREFIX: Final[str] = "\t"

_DIAGNOSTIC_LINE: Final[re.Pattern[str]] = re.compile(
    r"^(?P<path>[\w./]+):(?P<line>\d+):(?P<column>\d*):*"
    r"(?P<severity>\w*):* (?P<message>.*)$"
)


@dataclass(slots=True, frozen=True)
class ParsedLine:
    """Raw fields of one matching output line.

    Attributes:
        path: Path exactly as the tool reported it.
        line: Line number, at least 1.
        column: Column number, at least 1.
        severity: Severity the tool printed, or ``None`` when it printed none.
        message: Remainder of the line.
    """

    path: str
    line: int
    column: int
    severity: SeverityLevel | None
    message: str


def parse_line(text: str) -> ParsedLine | None:
    """Match a single output line against the diagnostic pattern.

    Args:
        text: One physical line without its trailing newline.

    Returns:
        ParsedLine when the line looks like a diagnostic, otherwise ``None``.
    """
    match = _DIAGNOSTIC_LINE.match(text)
    if match is None:
        return None
    data = match.groupdict()
    severity_word = data["severity"]
    return ParsedLine(
        path=data["path"],
        line=max(int(data["line"]), 1),
        # empty and 0 both mean "no column"
        column=int(data["column"] or 0) or 1,
        severity=SeverityLevel.coerce(severity_word) if severity_word else None,
        message=data["message"],
    )


def resolve_diagnostic_path(cwd: Path, reported: str) -> Path:
    """Resolve a tool-reported path against the invocation's working directory.

    Only the final component of ``reported`` is kept, so findings reported
    for files outside ``cwd`` are attributed to a same-named file inside it.

    Args:
        cwd: Working directory the tool ran in.
        reported: Path as printed by the tool.

    Returns:
        Absolute path.
    """
    return (cwd / Path(reported).name).absolute()


def parse_diagnostics(
    raw_text: str,
    *,
    cwd: Path,
    default_severity: SeverityLevel,
    tool: ToolName | None = None,
    check: CheckKind | None = None,
) -> list[Diagnostic]:
    """Convert one tool's raw output into diagnostics, in output order.

    Args:
        raw_text: Complete stdout or stderr text of the tool.
        cwd: Working directory used to resolve reported paths.
        default_severity: Severity for lines that carry none.
        tool: Optional tool name recorded on each diagnostic.
        check: Optional check category recorded on each diagnostic.

    Returns:
        list[Diagnostic]: Findings in the order they appeared.
    """
    diagnostics: list[Diagnostic] = []
    # Diagnostic is frozen; continuation lines are buffered per finding.
    pending: list[tuple[ParsedLine, list[str]]] = []
    for text in raw_text.replace("\r\n", "\n").split("\n"):
        if text.startswith(CONTINUATION_PREFIX) and pending:
            pending[-1][1].append(text)
            continue
        parsed = parse_line(text)
        if parsed is None:
            continue
        pending.append((parsed, [parsed.message]))
    for parsed, message_lines in pending:
        diagnostics.append(
            Diagnostic(
                file=resolve_diagnostic_path(cwd, parsed.path),
                line=parsed.line,
                column=parsed.column,
                message="\n".join(message_lines),
                severity=parsed.severity or default_severity,
                tool=tool,
                check=check,
            ),
        )
    logger.debug(
        "Parsed %s diagnostics from %s lines",
        len(diagnostics),
        raw_text.count("\n"),
        extra=structured_extra(
            component=LogComponent.ENGINE,
            tool=tool,
            check=check,
            path=cwd,
        ),
    )
    return diagnostics


__all__ = [
    "ParsedLine",
    "parse_diagnostics",
    "parse_line",
    "resolve_diagnostic_path",
]
