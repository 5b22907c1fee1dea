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

"""Fan-out/fan-in over the checks enabled for one file.

``check`` starts every enabled check at once, waits for all of them and
concatenates their diagnostics in the fixed order build, lint, vet, coverage,
whatever order the processes finish in.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections import Counter
from collections.abc import Mapping
from pathlib import Path
from typing import TYPE_CHECKING, cast

from gocheck.config.models import CheckConfig
from gocheck.core.model_types import LogComponent
from gocheck.exceptions import GocheckTypeError
from gocheck.logging import structured_extra
from gocheck.services import GoBinaryResolver, LoggingNotifier, MemoryLogSink, NullCoverageCollector

from .checks import enabled_invocations
from .parser import parse_diagnostics
from .runner import run_tool

if TYPE_CHECKING:
    from gocheck.core.types import Diagnostic
    from gocheck.services import BinaryResolver, CoverageCollector, LogSink, Notifier

    from .runner import DiagnosticParser

logger: logging.Logger = logging.getLogger("gocheck.engines.orchestrator")


def _coerce_config(config: object) -> CheckConfig:
    if isinstance(config, CheckConfig):
        return config
    if isinstance(config, Mapping):
        return CheckConfig.from_mapping(cast("Mapping[str, object]", config))
    msg = f"config must be a CheckConfig or a mapping, got {type(config).__name__}"
    raise GocheckTypeError(msg)


async def check(  # noqa: PLR0913
    filename: Path | str,
    config: CheckConfig | Mapping[str, object],
    *,
    resolver: BinaryResolver | None = None,
    notifier: Notifier | None = None,
    sink: LogSink | None = None,
    coverage: CoverageCollector | None = None,
    parser: DiagnosticParser = parse_diagnostics,
) -> list[Diagnostic]:
    """Run every enabled check against ``filename`` and merge the findings.

    Args:
        filename: Source file to check; its directory is the working directory.
        config: Check configuration, or a raw option mapping.
        resolver: Binary resolver; ``GoBinaryResolver`` by default.
        notifier: Receives missing-tool messages; ``LoggingNotifier`` by default.
        sink: Log sink cleared at the start of the run; a fresh
            ``MemoryLogSink`` by default.
        coverage: Coverage collector; ``NullCoverageCollector`` by default.
        parser: Output parser used for process-based checks.

    Returns:
        list[Diagnostic]: Build, lint, vet then coverage diagnostics.

    Raises:
        ParseInternalError: If any tool's output could not be parsed. No
            partial result is returned in that case.
        ConfigValidationError: If ``config`` is a mapping with invalid values.
        GocheckTypeError: If ``config`` is neither a ``CheckConfig`` nor a mapping.
    """
    resolved_config = _coerce_config(config)
    resolver = resolver if resolver is not None else GoBinaryResolver()
    notifier = notifier if notifier is not None else LoggingNotifier()
    sink = sink if sink is not None else MemoryLogSink()
    coverage = coverage if coverage is not None else NullCoverageCollector()

    sink.clear()
    target = Path(filename).absolute()
    start = time.perf_counter()

    pending: list[asyncio.Future[list[Diagnostic]]] = [
        asyncio.ensure_future(run_tool(invocation, sink=sink, notifier=notifier, parser=parser))
        for invocation in enabled_invocations(target, resolved_config, resolver)
    ]
    if resolved_config.cover_on_save:
        pending.append(asyncio.ensure_future(coverage.get_coverage(target)))

    # gather preserves argument order, which is the merge order
    try:
        result_sets = await asyncio.gather(*pending)
    except BaseException:
        for task in pending:
            task.cancel()
        _ = await asyncio.gather(*pending, return_exceptions=True)
        raise
    diagnostics = [diagnostic for result_set in result_sets for diagnostic in result_set]

    counts = Counter(diagnostic.severity.value for diagnostic in diagnostics)
    logger.info(
        "Checked %s: %s diagnostics from %s checks",
        target.name,
        len(diagnostics),
        len(pending),
        extra=structured_extra(
            component=LogComponent.ENGINE,
            path=target,
            duration_ms=(time.perf_counter() - start) * 1000,
            details=dict(counts),
        ),
    )
    return diagnostics


def check_sync(  # noqa: PLR0913
    filename: Path | str,
    config: CheckConfig | Mapping[str, object],
    *,
    resolver: BinaryResolver | None = None,
    notifier: Notifier | None = None,
    sink: LogSink | None = None,
    coverage: CoverageCollector | None = None,
    parser: DiagnosticParser = parse_diagnostics,
) -> list[Diagnostic]:
    """Blocking wrapper around ``check`` for callers without an event loop."""
    return asyncio.run(
        check(
            filename,
            config,
            resolver=resolver,
            notifier=notifier,
            sink=sink,
            coverage=coverage,
            parser=parser,
        ),
    )


__all__ = ["check", "check_sync"]
