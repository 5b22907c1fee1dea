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

"""IO helpers for CLI output."""

from __future__ import annotations

import json
import sys
from typing import TYPE_CHECKING, Protocol

from gocheck.core.model_types import OutputFormat

if TYPE_CHECKING:
    from collections.abc import Sequence

    from gocheck.core.types import Diagnostic


class _TextStream(Protocol):
    def write(self, s: str, /) -> int: ...


def _select_stream(*, err: bool = False) -> _TextStream:
    return sys.stderr if err else sys.stdout


def echo(message: str, *, newline: bool = True, err: bool = False) -> None:
    """Write a message to stdout/stderr."""
    stream = _select_stream(err=err)
    _ = stream.write(message)
    if newline:
        _ = stream.write("\n")


def render_diagnostics(diagnostics: Sequence[Diagnostic], output_format: OutputFormat) -> str:
    """Render diagnostics for terminal output.

    Args:
        diagnostics: Diagnostics in result-set order.
        output_format: ``text`` for one ``file:line:column: severity: message``
            entry per diagnostic, ``json`` for a JSON array.

    Returns:
        Rendered text without a trailing newline.
    """
    if output_format is OutputFormat.JSON:
        return json.dumps([diagnostic.to_payload() for diagnostic in diagnostics], indent=2)
    return "\n".join(
        f"{diag.file}:{diag.line}:{diag.column}: {diag.severity.value}: {diag.message}" for diag in diagnostics
    )


__all__ = ["echo", "render_diagnostics"]
