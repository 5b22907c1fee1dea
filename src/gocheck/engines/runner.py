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

"""Asynchronous execution of a single external tool.

``run_tool`` spawns one process described by an ``InvocationDescriptor``,
waits for it, and parses the designated output stream. Every execution
problem degrades to an empty result; only parser faults escape.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import os
import signal
import sys
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Final, Protocol

from gocheck.core.model_types import LogComponent
from gocheck.exceptions import GocheckError, ParseInternalError
from gocheck.logging import structured_extra

from .parser import parse_diagnostics

if TYPE_CHECKING:
    from pathlib import Path

    from gocheck.core.model_types import CheckKind, SeverityLevel
    from gocheck.core.type_aliases import Command, ToolName
    from gocheck.core.types import Diagnostic, InvocationDescriptor
    from gocheck.services import LogSink, Notifier

logger: logging.Logger = logging.getLogger("gocheck.engines.runner")

_POSIX: Final[bool] = sys.platform != "win32"
# Seconds to wait for pipes to close once a process group has been killed.
_DRAIN_TIMEOUT: Final[float] = 2.0


class DiagnosticParser(Protocol):
    """Callable signature shared by ``parse_diagnostics`` and test doubles."""

    def __call__(
        self,
        raw_text: str,
        *,
        cwd: Path,
        default_severity: SeverityLevel,
        tool: ToolName | None = None,
        check: CheckKind | None = None,
    ) -> list[Diagnostic]: ...


@dataclass(slots=True)
class CommandOutput:
    """Captured result of one finished process."""

    args: Command
    stdout: str
    stderr: str
    exit_code: int
    duration_ms: float


class ToolTimeoutError(GocheckError):
    """Raised internally when a process outlives its timeout."""


def _decode(raw: bytes) -> str:
    return raw.decode("utf-8", errors="replace")


async def _kill_and_drain(process: asyncio.subprocess.Process) -> None:
    """Kill the process with everything it spawned, then release its pipes.

    Tools such as ``go tool vet`` run helpers that inherit the output pipes, so
    killing only the direct child would leave the pipes open until those
    helpers finish.
    """
    with contextlib.suppress(ProcessLookupError, PermissionError):
        if _POSIX:
            os.killpg(process.pid, signal.SIGKILL)
        else:
            process.kill()
    with contextlib.suppress(TimeoutError):
        _ = await asyncio.wait_for(process.communicate(), timeout=_DRAIN_TIMEOUT)


async def execute(argv: Command, *, cwd: Path, timeout: float | None = None) -> CommandOutput:
    """Run ``argv`` in ``cwd`` and capture both output streams completely.

    Args:
        argv: Command line; the first element is the executable.
        cwd: Working directory for the child process.
        timeout: Optional limit in seconds.

    Returns:
        CommandOutput with decoded stdout/stderr, exit code and duration.

    Raises:
        OSError: If the executable cannot be started (``FileNotFoundError``
            when it does not exist).
        ToolTimeoutError: If ``timeout`` expired; the process has been killed.
    """
    start = time.perf_counter()
    logger.debug(
        "Executing command: %s",
        " ".join(argv),
        extra=structured_extra(component=LogComponent.RUNNER, path=cwd),
    )
    process = await asyncio.create_subprocess_exec(
        *argv,
        cwd=str(cwd),
        stdin=asyncio.subprocess.DEVNULL,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
        start_new_session=_POSIX,
    )
    try:
        stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=timeout)
    except TimeoutError as exc:
        await _kill_and_drain(process)
        raise ToolTimeoutError(argv[0]) from exc
    except asyncio.CancelledError:
        await _kill_and_drain(process)
        raise
    duration_ms = (time.perf_counter() - start) * 1000
    exit_code = process.returncode if process.returncode is not None else -1
    return CommandOutput(
        args=list(argv),
        stdout=_decode(stdout),
        stderr=_decode(stderr),
        exit_code=exit_code,
        duration_ms=duration_ms,
    )


async def run_tool(
    descriptor: InvocationDescriptor,
    *,
    sink: LogSink,
    notifier: Notifier,
    parser: DiagnosticParser = parse_diagnostics,
) -> list[Diagnostic]:
    """Run one tool and return the diagnostics found in its output.

    A missing executable notifies the user once and contributes nothing.
    The exit status never decides which stream is read.

    Args:
        descriptor: What to run and how to interpret its output.
        sink: Log sink receiving a trace of the run.
        notifier: Receives ``descriptor.not_found_message`` when the tool is missing.
        parser: Output parser, ``parse_diagnostics`` unless overridden.

    Returns:
        list[Diagnostic]: Parsed findings, possibly empty.

    Raises:
        ParseInternalError: If the parser fails unexpectedly.
    """
    extra = structured_extra(
        component=LogComponent.RUNNER,
        tool=descriptor.tool,
        check=descriptor.check,
        path=descriptor.cwd,
    )
    if descriptor.binary is None:
        logger.warning("Tool %s could not be resolved", descriptor.tool, extra=extra)
        notifier.notify(descriptor.not_found_message)
        return []
    argv = descriptor.argv
    try:
        result = await execute(argv, cwd=descriptor.cwd, timeout=descriptor.timeout)
    except ToolTimeoutError:
        logger.warning(
            "Tool %s timed out after %ss and was killed",
            descriptor.tool,
            descriptor.timeout,
            extra=extra,
        )
        return []
    except OSError as exc:
        logger.warning("Unable to execute %s: %s", argv[0], exc, extra=extra)
        notifier.notify(descriptor.not_found_message)
        return []

    if result.exit_code != 0:
        logger.debug(
            "Command exited with %s: %s",
            result.exit_code,
            " ".join(argv),
            extra=structured_extra(
                component=LogComponent.RUNNER,
                tool=descriptor.tool,
                check=descriptor.check,
                exit_code=result.exit_code,
                duration_ms=result.duration_ms,
            ),
        )
    raw_text = result.stderr if descriptor.read_stderr else result.stdout
    sink.append_line(" ".join(["Finished running tool:", *argv]))
    try:
        diagnostics = parser(
            raw_text,
            cwd=descriptor.cwd,
            default_severity=descriptor.severity,
            tool=descriptor.tool,
            check=descriptor.check,
        )
    # ignore JUSTIFIED: any parser fault must abort the run as ParseInternalError
    except Exception as exc:  # noqa: BLE001
        raise ParseInternalError(descriptor.tool, exc) from exc
    for diagnostic in diagnostics:
        sink.append_line(diagnostic.format_line())
    sink.append_line("")
    logger.debug(
        "%s run completed: exit=%s diagnostics=%s",
        descriptor.tool,
        result.exit_code,
        len(diagnostics),
        extra=structured_extra(
            component=LogComponent.RUNNER,
            tool=descriptor.tool,
            check=descriptor.check,
            exit_code=result.exit_code,
            duration_ms=result.duration_ms,
            details={"diagnostics": len(diagnostics)},
        ),
    )
    return diagnostics


__all__ = ["CommandOutput", "DiagnosticParser", "ToolTimeoutError", "execute", "run_tool"]
