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

"""Enumerations for diffsets.

- ``Phase``: states of the diff-applying iterator
- ``OverlapPolicy``: reaction to ids present in both added and removed sets
- ``LogFormat`` and ``LogComponent``: logging configuration and record tagging
"""

from __future__ import annotations

from diffsets.compat import StrEnum


class Phase(StrEnum):
    """Phases of a diff-applying iterator.

    Attributes:
        FILTERING_BASE: Pulling base values and dropping removed or added ids.
        EMITTING_ADDED: Draining the added set after the base is exhausted.
        EXHAUSTED: Terminal; every further fetch reports end of sequence.
    """

    FILTERING_BASE = "filtering_base"
    EMITTING_ADDED = "emitting_added"
    EXHAUSTED = "exhausted"


class OverlapPolicy(StrEnum):
    """Policy applied when an id is both added and removed.

    Overlap never changes iteration output: such an id is suppressed while the
    base is filtered and emitted once with the added ids. The policy only
    controls whether the overlap is reported.

    Attributes:
        ALLOW: Accept silently.
        WARN: Log a warning naming the overlapping ids.
        ERROR: Raise ``OverlappingDiffSetsError``.
    """

    ALLOW = "allow"
    WARN = "warn"
    ERROR = "error"

    @classmethod
    def from_str(cls, raw: str) -> OverlapPolicy:
        """Create an OverlapPolicy from a string value.

        Args:
            raw: String representation of the policy.

        Returns:
            OverlapPolicy enum value.

        Raises:
            ValueError: If the string does not match any OverlapPolicy value.
        """
        value = raw.strip().lower()
        try:
            return cls(value)
        except ValueError as exc:
            msg = f"Unknown overlap policy '{raw}'"
            raise ValueError(msg) from exc


class LogFormat(StrEnum):
    """Log output formats.

    Attributes:
        TEXT: Single-line human readable records.
        JSON: One JSON object per record.
    """

    TEXT = "text"
    JSON = "json"

    @classmethod
    def from_str(cls, raw: str) -> LogFormat:
        """Create a LogFormat from a string value.

        Args:
            raw: String representation of the log format.

        Returns:
            LogFormat enum value.

        Raises:
            ValueError: If the string does not match any LogFormat value.
        """
        value = raw.strip().lower()
        try:
            return cls(value)
        except ValueError as exc:
            msg = f"Unknown log format '{raw}'"
            raise ValueError(msg) from exc


class LogComponent(StrEnum):
    """Logical component attached to structured log records."""

    ITERATOR = "iterator"
    RESOURCE = "resource"
    DIFF_SETS = "diff_sets"
    CONFIG = "config"


__all__ = ["LogComponent", "LogFormat", "OverlapPolicy", "Phase"]
