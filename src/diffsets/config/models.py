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

"""Configuration models and validation for diffsets.

Raw TOML payloads are validated with the pydantic ``ConfigModel`` and then
converted into the frozen ``DiffsetsConfig`` dataclass used at runtime.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Final

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from diffsets._internal.exceptions import DiffsetsValidationError
from diffsets._internal.logging_utils import LOG_LEVELS
from diffsets.core.model_types import LogFormat, OverlapPolicy

if TYPE_CHECKING:
    from pathlib import Path

CONFIG_VERSION: Final[int] = 0


class ConfigValidationError(DiffsetsValidationError):
    """Raised when configuration data contains invalid values."""


class ConfigFieldChoiceError(ConfigValidationError):
    """Raised when a configuration field is provided with an unsupported value."""

    def __init__(self, field: str, allowed: tuple[str, ...]) -> None:
        """Initialize the exception with the field name and allowed values.

        Args:
            field: The name of the configuration field with an invalid value.
            allowed: Tuple of allowed values for this field.
        """
        self.field = field
        self.allowed = allowed
        allowed_text = ", ".join(sorted(allowed))
        super().__init__(f"{field} must be one of: {allowed_text}")


class UnsupportedConfigVersionError(ConfigValidationError):
    """Raised when a configuration file declares an unsupported schema version."""

    def __init__(self, provided: int, expected: int) -> None:
        """Initialize the exception with version information.

        Args:
            provided: The config_version value found in the file.
            expected: The config_version value this release understands.
        """
        self.provided = provided
        self.expected = expected
        super().__init__(f"Unsupported config_version {provided}; expected {expected}")


class ConfigReadError(ConfigValidationError):
    """Raised when a configuration file cannot be read or parsed."""

    def __init__(self, path: Path, error: Exception) -> None:
        """Initialize the exception with file path and underlying error.

        Args:
            path: The configuration file that could not be read.
            error: The underlying exception.
        """
        self.path = path
        self.error = error
        super().__init__(f"Unable to read {path}: {error}")


class InvalidConfigFileError(ConfigValidationError):
    """Raised when a configuration file fails validation."""

    def __init__(self, path: Path, error: Exception) -> None:
        """Initialize the exception with configuration file path and validation error.

        Args:
            path: The configuration file that failed validation.
            error: The underlying validation exception.
        """
        self.path = path
        self.error = error
        super().__init__(f"Invalid diffsets configuration in {path}: {error}")


class ConfigModel(BaseModel):
    """Schema of a diffsets configuration table."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    config_version: int = Field(default=CONFIG_VERSION)
    overlap_policy: OverlapPolicy = Field(default=OverlapPolicy.ALLOW)
    log_format: LogFormat = Field(default=LogFormat.TEXT)
    log_level: str = Field(default="info")

    @field_validator("overlap_policy", mode="before")
    @classmethod
    def _coerce_overlap_policy(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @field_validator("log_format", mode="before")
    @classmethod
    def _coerce_log_format(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        level = value.strip().lower()
        if level not in LOG_LEVELS:
            raise ConfigFieldChoiceError("log_level", LOG_LEVELS)
        return level

    @model_validator(mode="after")
    def _check_version(self) -> ConfigModel:
        if self.config_version != CONFIG_VERSION:
            raise UnsupportedConfigVersionError(self.config_version, CONFIG_VERSION)
        return self


@dataclass(slots=True, frozen=True)
class DiffsetsConfig:
    """Runtime configuration for diffsets.

    Attributes:
        overlap_policy: Policy applied by ``ReadableDiffSets.from_iterables``.
        log_format: Output format passed to ``configure_logging``.
        log_level: Verbosity passed to ``configure_logging``.
    """

    overlap_policy: OverlapPolicy = OverlapPolicy.ALLOW
    log_format: LogFormat = LogFormat.TEXT
    log_level: str = "info"


def config_from_model(model: ConfigModel) -> DiffsetsConfig:
    """Convert a validated model into the runtime dataclass."""
    return DiffsetsConfig(
        overlap_policy=model.overlap_policy,
        log_format=model.log_format,
        log_level=model.log_level,
    )


__all__ = [
    "CONFIG_VERSION",
    "ConfigFieldChoiceError",
    "ConfigModel",
    "ConfigReadError",
    "ConfigValidationError",
    "DiffsetsConfig",
    "InvalidConfigFileError",
    "UnsupportedConfigVersionError",
    "config_from_model",
]
