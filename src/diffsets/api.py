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

"""Application-level entry points for diffsets."""

from __future__ import annotations

from typing import TYPE_CHECKING

from diffsets._internal.logging_utils import configure_logging
from diffsets.config import load_config_with_metadata
from diffsets.diff_sets import ReadableDiffSets

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path

    from diffsets.config import DiffsetsConfig
    from diffsets.core.type_aliases import RecordId


def configure(config_path: Path | None = None) -> DiffsetsConfig:
    """Load configuration and apply its logging settings.

    Args:
        config_path: Optional explicit configuration file; otherwise the
            project root is searched.

    Returns:
        The loaded configuration, for use with ``diff_sets_from``.
    """
    config = load_config_with_metadata(config_path).config
    _ = configure_logging(config.log_format, log_level=config.log_level)
    return config


def diff_sets_from(
    config: DiffsetsConfig,
    added: Iterable[RecordId] = (),
    removed: Iterable[RecordId] = (),
) -> ReadableDiffSets:
    """Build ``ReadableDiffSets`` under the overlap policy of ``config``."""
    return ReadableDiffSets.from_iterables(added, removed, overlap_policy=config.overlap_policy)


__all__ = ["configure", "diff_sets_from"]
