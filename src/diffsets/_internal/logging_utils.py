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

"""Structured logging utilities shared across diffsets components.

Every diffsets logger lives under the ``diffsets`` root. Records carry their
structured fields as ``extra`` attributes built with ``structured_extra``;
the JSON formatter lifts them into the emitted object.
"""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import Final, Literal

from diffsets.compat import UTC, TypedDict, Unpack, override
from diffsets.core.model_types import LogComponent, LogFormat, Phase
from diffsets.json import normalise_enums_for_json

ROOT_LOGGER_NAME: Final[str] = "diffsets"
LOG_FORMAT_ENV: Final[str] = "DIFFSETS_LOG_FORMAT"
LOG_LEVEL_ENV: Final[str] = "DIFFSETS_LOG_LEVEL"

_LEVEL_VALUES: Final[dict[str, int]] = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}
LOG_LEVELS: Final[tuple[Literal["debug", "info", "warning", "error"], ...]] = (
    "debug",
    "info",
    "warning",
    "error",
)
# attribute names copied from a record into JSON output
_RECORD_FIELDS: Final[tuple[str, ...]] = (
    "component",
    "phase",
    "added",
    "removed",
    "overlap",
    "bound",
    "path",
    "details",
)


@dataclass(slots=True, frozen=True)
class LogConfig:
    """Resolved logging configuration."""

    format: LogFormat
    level: int
    level_name: str


class JSONLogFormatter(logging.Formatter):
    """Render each record as one JSON object per line."""

    @override
    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, object] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname.lower(),
            "message": record.getMessage(),
            "logger": record.name,
        }
        payload.update({name: getattr(record, name) for name in _RECORD_FIELDS if hasattr(record, name)})
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(normalise_enums_for_json(payload), ensure_ascii=False)


class TextLogFormatter(logging.Formatter):
    """Readable, single-line formatter."""

    def __init__(self) -> None:
        super().__init__("[%(levelname)s] %(message)s")


def _resolve_format(log_format: LogFormat | str | None) -> LogFormat:
    if log_format is None:
        log_format = os.getenv(LOG_FORMAT_ENV) or LogFormat.TEXT
    return log_format if isinstance(log_format, LogFormat) else LogFormat.from_str(log_format)


def _resolve_level(log_level: str | int | None) -> tuple[int, str]:
    if isinstance(log_level, int):
        return log_level, logging.getLevelName(log_level).lower()
    name = (log_level or os.getenv(LOG_LEVEL_ENV) or "info").strip().lower()
    # unknown names fall back to info
    if name not in _LEVEL_VALUES:
        name = "info"
    return _LEVEL_VALUES[name], name


def configure_logging(
    log_format: LogFormat | str | None = None,
    *,
    log_level: str | int | None = None,
) -> LogConfig:
    """Install a single handler on the ``diffsets`` root logger.

    The library never calls this itself; applications opt in, either directly
    or through ``diffsets.api.configure``. Child loggers (``diffsets.iterator``,
    ``diffsets.resource``, ``diffsets.diff_sets``, ``diffsets.config``) inherit
    the level and handler.

    Args:
        log_format: Desired log output format. ``None`` falls back to the
            ``DIFFSETS_LOG_FORMAT`` environment variable or ``text``.
        log_level: Preferred verbosity (string or numeric). ``None`` consults
            ``DIFFSETS_LOG_LEVEL`` or defaults to ``info``.

    Returns:
        The format and level that were applied.
    """
    selected_format = _resolve_format(log_format)
    level_value, level_name = _resolve_level(log_level)

    handler = logging.StreamHandler()
    handler.setFormatter(JSONLogFormatter() if selected_format is LogFormat.JSON else TextLogFormatter())

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level_value)
    root_logger.propagate = False
    return LogConfig(format=selected_format, level=level_value, level_name=level_name)


class _StructuredLogBase(TypedDict):
    component: LogComponent


class StructuredLogExtra(_StructuredLogBase, total=False):
    """Structured logging extras accepted by diffsets log records."""

    phase: Phase
    added: int
    removed: int
    overlap: list[int]
    bound: bool
    path: str
    details: dict[str, object]


class _StructuredLogKwargs(TypedDict, total=False):
    phase: Phase | str
    added: int
    removed: int
    overlap: Iterable[int]
    bound: bool
    path: str | os.PathLike[str] | None
    details: Mapping[str, object]


def structured_extra(
    component: LogComponent,
    **kwargs: Unpack[_StructuredLogKwargs],
) -> StructuredLogExtra:
    """Return a consistently typed ``logging.extra`` payload.

    Fields left out or passed as ``None`` are omitted, as is an empty
    ``details`` mapping.

    Args:
        component: Logical logging component for the record.
        **kwargs: Optional structured fields (phase, set sizes, overlap, etc.).

    Returns:
        Mapping suitable for the ``extra`` parameter when emitting log records.
    """
    extra: StructuredLogExtra = {"component": component}
    if (phase := kwargs.get("phase")) is not None:
        extra["phase"] = Phase(phase)
    if (added := kwargs.get("added")) is not None:
        extra["added"] = int(added)
    if (removed := kwargs.get("removed")) is not None:
        extra["removed"] = int(removed)
    if (overlap := kwargs.get("overlap")) is not None:
        extra["overlap"] = [int(value) for value in overlap]
    if (bound := kwargs.get("bound")) is not None:
        extra["bound"] = bool(bound)
    if (path := kwargs.get("path")) is not None:
        extra["path"] = os.fspath(path)
    if details := kwargs.get("details"):
        extra["details"] = dict(details)
    return extra


__all__ = [
    "LOG_LEVELS",
    "LogConfig",
    "StructuredLogExtra",
    "configure_logging",
    "structured_extra",
]
