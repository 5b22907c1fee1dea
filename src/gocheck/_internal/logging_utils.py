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

"""Structured logging for the ``gocheck`` logger tree.

Log records carry optional structured fields (component, tool, check, timing)
passed through ``extra=structured_extra(...)``. The text formatter ignores
them; the JSON formatter emits them as top-level keys.
"""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum
from typing import TYPE_CHECKING, Final, Literal, TypedDict, Unpack, cast, override

from gocheck.core.model_types import CheckKind, LogComponent, LogFormat

if TYPE_CHECKING:
    from gocheck.core.type_aliases import ToolName

ROOT_LOGGER_NAME: Final[str] = "gocheck"
LOG_FORMAT_ENV: Final[str] = "GOCHECK_LOG_FORMAT"
LOG_LEVEL_ENV: Final[str] = "GOCHECK_LOG_LEVEL"

_LEVELS: Final[dict[str, int]] = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}

LOG_FORMATS: Final[tuple[Literal["text", "json"], ...]] = ("text", "json")
LOG_LEVELS: Final[tuple[Literal["debug", "info", "warning", "error"], ...]] = (
    "debug",
    "info",
    "warning",
    "error",
)


@dataclass(slots=True, frozen=True)
class LogConfig:
    """Logging setup chosen by ``configure_logging``."""

    format: LogFormat
    level: int
    level_name: str


class JSONLogFormatter(logging.Formatter):
    """One JSON object per record, structured fields included."""

    @override
    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, object] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in ("component", *_FIELD_NORMALISERS, "details"):
            if hasattr(record, key):
                payload[key] = getattr(record, key)
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=_json_default)


class TextLogFormatter(logging.Formatter):
    """``[LEVEL] message`` lines for terminals."""

    def __init__(self) -> None:
        super().__init__("[%(levelname)s] %(message)s")


def _json_default(value: object) -> object:
    if isinstance(value, Enum):
        return value.value
    return str(value)


def configure_logging(
    log_format: LogFormat | str | None = None,
    *,
    log_level: str | None = None,
) -> LogConfig:
    """Install a single handler on the ``gocheck`` logger.

    Args:
        log_format: ``text`` or ``json``. ``None`` falls back to
            ``GOCHECK_LOG_FORMAT``, then ``text``.
        log_level: ``debug``, ``info``, ``warning`` or ``error``. ``None`` falls
            back to ``GOCHECK_LOG_LEVEL``, then ``info``. Unknown names mean ``info``.

    Returns:
        LogConfig: The format and level that were applied.
    """
    raw_format = log_format or os.getenv(LOG_FORMAT_ENV) or LogFormat.TEXT
    selected_format = LogFormat.from_str(str(raw_format))
    level_name = (log_level or os.getenv(LOG_LEVEL_ENV) or "info").strip().lower()
    if level_name not in _LEVELS:
        level_name = "info"
    level = _LEVELS[level_name]

    handler = logging.StreamHandler()
    handler.setFormatter(JSONLogFormatter() if selected_format is LogFormat.JSON else TextLogFormatter())
    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level)
    root_logger.propagate = False
    return LogConfig(format=selected_format, level=level, level_name=level_name)


class _StructuredLogBase(TypedDict):
    component: LogComponent


class StructuredLogExtra(_StructuredLogBase, total=False):
    """Shape of the ``extra`` mapping produced by ``structured_extra``."""

    tool: str
    check: CheckKind
    duration_ms: float
    exit_code: int
    path: str
    details: dict[str, object]


class _StructuredLogKwargs(TypedDict, total=False):
    tool: ToolName | str
    check: CheckKind | str
    duration_ms: float
    exit_code: int
    path: str | os.PathLike[str]
    details: Mapping[str, object]


def _check_kind(value: object) -> CheckKind:
    return value if isinstance(value, CheckKind) else CheckKind.from_str(str(value))


def _fspath(value: object) -> str:
    return os.fspath(cast("str | os.PathLike[str]", value))


_FIELD_NORMALISERS: Final[dict[str, Callable[[object], object]]] = {
    "tool": str,
    "check": _check_kind,
    "duration_ms": lambda value: float(cast("float", value)),
    "exit_code": lambda value: int(cast("int", value)),
    "path": _fspath,
}


def structured_extra(
    component: LogComponent,
    **kwargs: Unpack[_StructuredLogKwargs],
) -> StructuredLogExtra:
    """Build the ``extra`` mapping for a log call.

    ``None`` values are left out; ``details`` is kept only when non-empty.

    Args:
        component: Component emitting the record.
        **kwargs: Optional structured fields.

    Returns:
        StructuredLogExtra: Normalised fields.
    """
    fields = cast("dict[str, object]", kwargs)
    extra: dict[str, object] = {"component": component}
    for key, normalise in _FIELD_NORMALISERS.items():
        value = fields.get(key)
        if value is not None:
            extra[key] = normalise(value)
    details = fields.get("details")
    if isinstance(details, Mapping) and details:
        extra["details"] = dict(cast("Mapping[str, object]", details))
    return cast("StructuredLogExtra", extra)


__all__ = [
    "LOG_FORMATS",
    "LOG_LEVELS",
    "LogConfig",
    "StructuredLogExtra",
    "configure_logging",
    "structured_extra",
]
