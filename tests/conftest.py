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

"""Pytest entry point that wires shared fixtures and markers."""

from __future__ import annotations

import logging
import stat
import sys
from pathlib import Path
from textwrap import dedent
from typing import TYPE_CHECKING

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator, Mapping


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest with the custom markers used by the test suite."""
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line("markers", "property: Property-based tests")
    config.addinivalue_line("markers", "engine: Parser, runner and orchestrator tests")
    config.addinivalue_line("markers", "cli: CLI-related tests")


class StaticResolver:
    """Binary resolver answering from a fixed mapping."""

    def __init__(self, binaries: Mapping[str, str | None]) -> None:
        super().__init__()
        self.binaries = dict(binaries)
        self.requested: list[str] = []

    def resolve(self, tool_name: str) -> str | None:
        self.requested.append(tool_name)
        return self.binaries.get(tool_name)


@pytest.fixture
def static_resolver() -> type[StaticResolver]:
    """Provide the StaticResolver class so tests can build their own mappings.

    Returns:
        The resolver class.
    """
    return StaticResolver


@pytest.fixture
def make_tool(tmp_path: Path) -> Callable[[str, str], Path]:
    """Return a factory writing executable Python scripts that stand in for Go tools.

    The factory takes the tool name and the script body; the body sees
    ``sys`` imported and ``args`` bound to ``sys.argv[1:]``.

    Returns:
        Factory producing the path of the executable script.
    """
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir(exist_ok=True)

    def _make(name: str, body: str) -> Path:
        script = bin_dir / name
        header = f"#!{sys.executable}\nimport sys\nargs = sys.argv[1:]\n"
        _ = script.write_text(header + dedent(body), encoding="utf-8")
        script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return script

    return _make


@pytest.fixture
def go_file(tmp_path: Path) -> Path:
    """Create an empty Go source file inside a package directory.

    Returns:
        Path to ``pkg/main.go``.
    """
    package = tmp_path / "pkg"
    package.mkdir()
    source = package / "main.go"
    _ = source.write_text("package main\n", encoding="utf-8")
    return source


@pytest.fixture(autouse=True)
def _reset_gocheck_logger() -> Iterator[None]:
    """Undo ``configure_logging`` side effects so ``caplog`` keeps seeing records."""
    yield
    root = logging.getLogger("gocheck")
    root.handlers.clear()
    root.propagate = True
    root.setLevel(logging.NOTSET)
    for name in list(logging.root.manager.loggerDict):
        if name.startswith("gocheck."):
            logging.getLogger(name).setLevel(logging.NOTSET)
