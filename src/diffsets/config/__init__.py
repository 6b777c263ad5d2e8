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

"""Configuration management for diffsets.

Loading and validation of ``diffsets.toml`` / ``[tool.diffsets]`` settings
with environment overrides.
"""

from __future__ import annotations

from .loader import (
    LoadedConfig,
    apply_env_overrides,
    load_config,
    load_config_with_metadata,
    resolve_project_root,
)
from .models import (
    CONFIG_VERSION,
    ConfigFieldChoiceError,
    ConfigModel,
    ConfigReadError,
    ConfigValidationError,
    DiffsetsConfig,
    InvalidConfigFileError,
    UnsupportedConfigVersionError,
    config_from_model,
)

__all__ = [
    "CONFIG_VERSION",
    "ConfigFieldChoiceError",
    "ConfigModel",
    "ConfigReadError",
    "ConfigValidationError",
    "DiffsetsConfig",
    "InvalidConfigFileError",
    "LoadedConfig",
    "UnsupportedConfigVersionError",
    "apply_env_overrides",
    "config_from_model",
    "load_config",
    "load_config_with_metadata",
    "resolve_project_root",
]
