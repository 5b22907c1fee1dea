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

"""Tool execution, output parsing and check orchestration."""

from __future__ import annotations

from .checks import build_invocation, enabled_invocations, is_test_file, lint_invocation, vet_invocation
from .orchestrator import check, check_sync
from .parser import ParsedLine, parse_diagnostics, parse_line, resolve_diagnostic_path
from .runner import CommandOutput, DiagnosticParser, execute, run_tool

__all__ = [
    "CommandOutput",
    "DiagnosticParser",
    "ParsedLine",
    "build_invocation",
    "check",
    "check_sync",
    "enabled_invocations",
    "execute",
    "is_test_file",
    "lint_invocation",
    "parse_diagnostics",
    "parse_line",
    "resolve_diagnostic_path",
    "run_tool",
    "vet_invocation",
]
