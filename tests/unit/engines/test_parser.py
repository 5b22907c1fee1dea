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

"""Unit tests for Engines Parser."""

from __future__ import annotations

from pathlib import Path

import pytest

from gocheck.core.model_types import CheckKind, SeverityLevel
from gocheck.core.type_aliases import ToolName
from gocheck.engines.parser import parse_diagnostics, parse_line, resolve_diagnostic_path

pytestmark = [pytest.mark.unit, pytest.mark.engine]

PROJ = Path("/proj")


def test_parse_joins_tab_continuation_and_forces_column_one() -> None:
    raw = "main.go:10:0: undeclared name: foo\n\tsee also bar.go:3\n"
    diagnostics = parse_diagnostics(raw, cwd=PROJ, default_severity=SeverityLevel.ERROR)
    assert len(diagnostics) == 1
    diag = diagnostics[0]
    assert diag.file == Path("/proj/main.go")
    assert diag.line == 10
    assert diag.column == 1
    assert diag.severity is SeverityLevel.ERROR
    assert diag.message == "undeclared name: foo\n\tsee also bar.go:3"


def test_inline_severity_overrides_default() -> None:
    raw = "util.go:5:12:warning: unused variable x\n"
    diagnostics = parse_diagnostics(raw, cwd=PROJ, default_severity=SeverityLevel.ERROR)
    assert len(diagnostics) == 1
    diag = diagnostics[0]
    assert diag.file == Path("/proj/util.go")
    assert (diag.line, diag.column) == (5, 12)
    assert diag.severity is SeverityLevel.WARNING
    assert diag.message == "unused variable x"


def test_missing_column_defaults_to_one() -> None:
    diagnostics = parse_diagnostics(
        "main.go:7: exported function Foo should have comment\n",
        cwd=PROJ,
        default_severity=SeverityLevel.WARNING,
    )
    assert [(d.line, d.column, d.severity) for d in diagnostics] == [(7, 1, SeverityLevel.WARNING)]
    assert diagnostics[0].message == "exported function Foo should have comment"


def test_non_matching_lines_are_discarded() -> None:
    raw = "\n".join([
        "# example.com/pkg",
        "main.go:3:2: undefined: x",
        "exit status 2",
        "",
        "FAIL\tthis line is not a continuation",
    ])
    diagnostics = parse_diagnostics(raw, cwd=PROJ, default_severity=SeverityLevel.ERROR)
    assert [d.message for d in diagnostics] == ["undefined: x"]


def test_leading_tab_line_without_prior_diagnostic_is_ignored() -> None:
    raw = "\torphan continuation\nmain.go:1:1: first\n"
    diagnostics = parse_diagnostics(raw, cwd=PROJ, default_severity=SeverityLevel.ERROR)
    assert len(diagnostics) == 1
    assert diagnostics[0].message == "first"


def test_continuations_attach_to_the_most_recent_diagnostic_only() -> None:
    raw = "a.go:1:1: first\n\tmore first\nb.go:2:2: second\n\tmore second\n\tand more\n"
    diagnostics = parse_diagnostics(raw, cwd=PROJ, default_severity=SeverityLevel.ERROR)
    assert [d.message for d in diagnostics] == [
        "first\n\tmore first",
        "second\n\tmore second\n\tand more",
    ]


def test_order_matches_output_order() -> None:
    raw = "z.go:9:1: later file first\na.go:1:1: earlier file second\n"
    diagnostics = parse_diagnostics(raw, cwd=PROJ, default_severity=SeverityLevel.ERROR)
    assert [d.file.name for d in diagnostics] == ["z.go", "a.go"]


def test_reported_directories_are_dropped() -> None:
    diagnostics = parse_diagnostics(
        "./vendor/lib/dep.go:4:2: shadowed\n",
        cwd=PROJ,
        default_severity=SeverityLevel.WARNING,
    )
    assert diagnostics[0].file == Path("/proj/dep.go")


def test_crlf_output_is_handled() -> None:
    diagnostics = parse_diagnostics(
        "main.go:2:3: windows line\r\n\tcontinued\r\n",
        cwd=PROJ,
        default_severity=SeverityLevel.ERROR,
    )
    assert diagnostics[0].message == "windows line\n\tcontinued"


def test_tool_and_check_are_recorded() -> None:
    diagnostics = parse_diagnostics(
        "main.go:1:1: x\n",
        cwd=PROJ,
        default_severity=SeverityLevel.ERROR,
        tool=ToolName("go"),
        check=CheckKind.BUILD,
    )
    assert diagnostics[0].tool == "go"
    assert diagnostics[0].check is CheckKind.BUILD


@pytest.mark.parametrize(
    ("line", "expected"),
    [
        ("main.go:3:4: plain", (3, 4, None, "plain")),
        ("main.go:3:: empty column", (3, 1, None, "empty column")),
        ("main.go:0:0: zeros", (1, 1, None, "zeros")),
        ("main.go:3:4:error: with severity", (3, 4, SeverityLevel.ERROR, "with severity")),
        ("main.go:3:4:note: a note", (3, 4, SeverityLevel.INFO, "a note")),
    ],
)
def test_parse_line_fields(line: str, expected: tuple[int, int, SeverityLevel | None, str]) -> None:
    parsed = parse_line(line)
    assert parsed is not None
    assert (parsed.line, parsed.column, parsed.severity, parsed.message) == expected


@pytest.mark.parametrize(
    "line",
    [
        "",
        "no colon here",
        "main.go:abc:1: not a line number",
        "my file.go:1:1: space in path",
        "main.go:1:1:no-space-before-message",
    ],
)
def test_parse_line_rejects(line: str) -> None:
    assert parse_line(line) is None


def test_resolve_diagnostic_path_is_absolute(tmp_path: Path) -> None:
    resolved = resolve_diagnostic_path(tmp_path, "sub/dir/file.go")
    assert resolved.is_absolute()
    assert resolved == tmp_path / "file.go"
