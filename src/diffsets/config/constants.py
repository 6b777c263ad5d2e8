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

"""Shared configuration names for diffsets."""

from __future__ import annotations

from typing import Final, Literal, TypeAlias

ConfigFilename: TypeAlias = Literal["diffsets.toml", ".diffsets.toml", "pyproject.toml"]

CONFIG_FILENAMES: Final[tuple[ConfigFilename, ConfigFilename, ConfigFilename]] = (
    "diffsets.toml",
    ".diffsets.toml",
    "pyproject.toml",
)
TOOL_SECTION: Final[str] = "diffsets"
OVERLAP_POLICY_ENV: Final[str] = "DIFFSETS_OVERLAP_POLICY"
LOG_FORMAT_ENV: Final[str] = "DIFFSETS_LOG_FORMAT"
LOG_LEVEL_ENV: Final[str] = "DIFFSETS_LOG_LEVEL"

__all__ = [
    "CONFIG_FILENAMES",
    "LOG_FORMAT_ENV",
    "LOG_LEVEL_ENV",
    "OVERLAP_POLICY_ENV",
    "TOOL_SECTION",
    "ConfigFilename",
]
