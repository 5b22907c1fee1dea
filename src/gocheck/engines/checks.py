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

"""Construction of the per-check tool invocations.

Each builder turns the configuration for one check into an
``InvocationDescriptor``: which binary to run, its arguments, the stream
carrying findings and the severity to assume when a line has none.
"""

from __future__ import annotations

import os
import re
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING, Final

from gocheck.config.models import DEFAULT_LINTER
from gocheck.core.model_types import CheckKind, SeverityLevel
from gocheck.core.type_aliases import ToolName
from gocheck.core.types import InvocationDescriptor
from gocheck.services import GO_TOOL

if TYPE_CHECKING:
    from gocheck.config.models import CheckConfig
    from gocheck.core.type_aliases import Command
    from gocheck.services import BinaryResolver

BUILD_OUTPUT_NAME: Final[str] = "go-code-check"
_TEST_FILE: Final[re.Pattern[str]] = re.compile(r"_test\.go$", re.IGNORECASE)


def is_test_file(filename: Path | str) -> bool:
    """Whether ``filename`` follows the ``*_test.go`` naming convention."""
    return _TEST_FILE.search(str(filename)) is not None


def build_output_path() -> Path:
    """Scratch location for build artefacts that are thrown away."""
    return Path(os.path.normpath(Path(tempfile.gettempdir()) / BUILD_OUTPUT_NAME))


def _go_not_found_message() -> str:
    return f'No "go" binary could be found in GOROOT: "{os.environ.get("GOROOT", "")}"'


def _tag_args(config: CheckConfig) -> Command:
    return ["-tags", config.build_tags] if config.build_tags else []


def build_args(filename: Path, config: CheckConfig) -> Command:
    """Arguments for the build check.

    Test files are compiled with ``go test -c`` so that the test-only
    declarations they depend on are part of the build.

    Args:
        filename: File being checked.
        config: Check configuration.

    Returns:
        Command: Arguments following the ``go`` executable.
    """
    output = str(build_output_path())
    if is_test_file(filename):
        return ["test", "-copybinary", "-o", output, "-c", *_tag_args(config), *config.build_flags, "."]
    return ["build", "-o", output, *_tag_args(config), *config.build_flags, "."]


def build_invocation(filename: Path, config: CheckConfig, resolver: BinaryResolver) -> InvocationDescriptor:
    """Describe the build check for ``filename``."""
    return InvocationDescriptor(
        check=CheckKind.BUILD,
        tool=ToolName(GO_TOOL),
        binary=resolver.resolve(GO_TOOL),
        cwd=filename.parent,
        severity=SeverityLevel.ERROR,
        read_stderr=True,
        not_found_message=_go_not_found_message(),
        args=build_args(filename, config),
        timeout=config.tool_timeout,
    )


def lint_invocation(filename: Path, config: CheckConfig, resolver: BinaryResolver) -> InvocationDescriptor:
    """Describe the lint check for ``filename``.

    Only the default linter receives the file as its last argument; other
    linters are expected to get their target from ``lint_flags``.
    """
    linter = config.linter or DEFAULT_LINTER
    args = list(config.lint_flags)
    if linter == DEFAULT_LINTER:
        args.append(str(filename))
    return InvocationDescriptor(
        check=CheckKind.LINT,
        tool=ToolName(linter),
        binary=resolver.resolve(linter),
        cwd=filename.parent,
        severity=SeverityLevel.WARNING,
        read_stderr=False,
        not_found_message=f"The '{linter}' command is not available.  Please install it.",
        args=args,
        timeout=config.tool_timeout,
    )


def vet_invocation(filename: Path, config: CheckConfig, resolver: BinaryResolver) -> InvocationDescriptor:
    """Describe the vet check for ``filename``."""
    return InvocationDescriptor(
        check=CheckKind.VET,
        tool=ToolName(GO_TOOL),
        binary=resolver.resolve(GO_TOOL),
        cwd=filename.parent,
        severity=SeverityLevel.WARNING,
        read_stderr=True,
        not_found_message=_go_not_found_message(),
        args=["tool", "vet", *config.vet_flags, str(filename)],
        timeout=config.tool_timeout,
    )


def enabled_invocations(
    filename: Path,
    config: CheckConfig,
    resolver: BinaryResolver,
) -> list[InvocationDescriptor]:
    """Descriptors for every enabled process-based check, in merge order.

    Coverage is not included; it does not run a process.
    """
    invocations: list[InvocationDescriptor] = []
    if config.build_on_save:
        invocations.append(build_invocation(filename, config, resolver))
    if config.lint_on_save:
        invocations.append(lint_invocation(filename, config, resolver))
    if config.vet_on_save:
        invocations.append(vet_invocation(filename, config, resolver))
    return invocations


__all__ = [
    "BUILD_OUTPUT_NAME",
    "build_args",
    "build_invocation",
    "build_output_path",
    "enabled_invocations",
    "is_test_file",
    "lint_invocation",
    "vet_invocation",
]
