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

"""Interfaces to the services the check engine depends on, plus defaults.

The engine never looks up binaries, shows messages or collects coverage by
itself; it talks to these narrow protocols instead. The defaults here are what
the CLI wires in.
"""

from __future__ import annotations

import logging
import os
import shutil
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Final, Protocol, TextIO, override, runtime_checkable

from gocheck.core.model_types import LogComponent
from gocheck.logging import structured_extra

if TYPE_CHECKING:
    from collections.abc import Mapping

    from gocheck.core.types import Diagnostic

logger: logging.Logger = logging.getLogger("gocheck.services")

GO_TOOL: Final[str] = "go"
_EXE_SUFFIX: Final[str] = ".exe" if sys.platform == "win32" else ""


@runtime_checkable
class BinaryResolver(Protocol):
    """Maps a logical tool name to an executable path."""

    def resolve(self, tool_name: str) -> str | None:
        """Return the executable for ``tool_name`` or ``None`` when it is absent."""
        ...


@runtime_checkable
class Notifier(Protocol):
    """Surfaces user-facing messages such as missing-tool warnings."""

    def notify(self, message: str) -> None:
        """Show ``message`` to the user."""
        ...


@runtime_checkable
class LogSink(Protocol):
    """Append-only text sink that mirrors each run for human inspection."""

    def clear(self) -> None:
        """Discard everything written so far."""
        ...

    def append_line(self, text: str) -> None:
        """Append one line of text."""
        ...


@runtime_checkable
class CoverageCollector(Protocol):
    """Independent diagnostic source reporting coverage gaps."""

    async def get_coverage(self, filename: Path) -> list[Diagnostic]:
        """Return already-normalised diagnostics for ``filename``."""
        ...


class GoBinaryResolver(BinaryResolver):
    """Locate Go tooling through ``GOROOT``, ``GOPATH`` and ``PATH``.

    ``go`` itself is looked up in ``$GOROOT/bin`` first. Every other tool is
    looked up in the ``bin`` directory of each ``GOPATH`` entry. Both fall back
    to a ``PATH`` search.
    """

    def __init__(self, environ: Mapping[str, str] | None = None) -> None:
        super().__init__()
        self._environ: Mapping[str, str] = os.environ if environ is None else environ

    @property
    def goroot(self) -> str | None:
        """Value of ``GOROOT`` or ``None`` when unset."""
        return self._environ.get("GOROOT") or None

    def _candidates(self, tool_name: str) -> list[Path]:
        if tool_name == GO_TOOL:
            goroot = self.goroot
            return [Path(goroot) / "bin" / f"{GO_TOOL}{_EXE_SUFFIX}"] if goroot else []
        gopath = self._environ.get("GOPATH", "")
        return [Path(entry) / "bin" / f"{tool_name}{_EXE_SUFFIX}" for entry in gopath.split(os.pathsep) if entry]

    @override
    def resolve(self, tool_name: str) -> str | None:
        """Resolve ``tool_name`` to an executable path.

        Args:
            tool_name: Logical tool name such as ``go`` or ``golint``, or a path.

        Returns:
            str | None: Executable path, or ``None`` when nothing was found.
        """
        if os.sep in tool_name and Path(tool_name).is_file():
            return tool_name
        for candidate in self._candidates(tool_name):
            if candidate.is_file():
                return str(candidate)
        found = shutil.which(tool_name, path=self._environ.get("PATH"))
        if found is None:
            logger.debug(
                "No executable found for %s",
                tool_name,
                extra=structured_extra(component=LogComponent.SERVICES, tool=tool_name),
            )
        return found


class LoggingNotifier(Notifier):
    """Notifier that writes messages to the ``gocheck.services`` logger."""

    @override
    def notify(self, message: str) -> None:
        logger.info(message, extra=structured_extra(component=LogComponent.SERVICES))


class RecordingNotifier(Notifier):
    """Notifier that keeps every message, in order."""

    def __init__(self) -> None:
        super().__init__()
        self.messages: list[str] = []

    @override
    def notify(self, message: str) -> None:
        self.messages.append(message)


class MemoryLogSink(LogSink):
    """Log sink backed by a list of lines."""

    def __init__(self) -> None:
        super().__init__()
        self.lines: list[str] = []

    @override
    def clear(self) -> None:
        self.lines.clear()

    @override
    def append_line(self, text: str) -> None:
        self.lines.append(text)

    def text(self) -> str:
        """Return the sink contents joined with newlines."""
        return "\n".join(self.lines)


class StreamLogSink(LogSink):
    """Log sink writing straight to a text stream.

    A stream cannot be rewound, so ``clear`` does nothing.
    """

    def __init__(self, stream: TextIO | None = None) -> None:
        super().__init__()
        self._stream: TextIO = stream if stream is not None else sys.stderr

    @override
    def clear(self) -> None:
        return

    @override
    def append_line(self, text: str) -> None:
        self._stream.write(f"{text}\n")


class NullCoverageCollector(CoverageCollector):
    """Coverage collector that reports no gaps."""

    @override
    async def get_coverage(self, filename: Path) -> list[Diagnostic]:
        del filename
        return []


__all__ = [
    "GO_TOOL",
    "BinaryResolver",
    "CoverageCollector",
    "GoBinaryResolver",
    "LogSink",
    "LoggingNotifier",
    "MemoryLogSink",
    "Notifier",
    "NullCoverageCollector",
    "RecordingNotifier",
    "StreamLogSink",
]
