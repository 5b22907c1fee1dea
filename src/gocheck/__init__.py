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

"""gocheck - run Go tooling on a file and collect normalised diagnostics.

Runs the build, lint and vet checks enabled for a file concurrently, parses
their text output and returns one ordered list of diagnostics.
"""

from __future__ import annotations

__version__ = "0.1.0"

from .config import CheckConfig, LoadedConfig, load_config
from .core.model_types import CheckKind, SeverityLevel
from .core.types import Diagnostic, InvocationDescriptor
from .engines import check, check_sync, parse_diagnostics, run_tool
from .exceptions import GocheckError, GocheckTypeError, GocheckValidationError, ParseInternalError

__all__ = [
    "CheckConfig",
    "CheckKind",
    "Diagnostic",
    "GocheckError",
    "GocheckTypeError",
    "GocheckValidationError",
    "InvocationDescriptor",
    "LoadedConfig",
    "ParseInternalError",
    "SeverityLevel",
    "__version__",
    "check",
    "check_sync",
    "load_config",
    "parse_diagnostics",
    "run_tool",
]
