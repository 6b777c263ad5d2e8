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

"""Configuration loading for diffsets.

Configuration lives in ``diffsets.toml``, ``.diffsets.toml`` or the
``[tool.diffsets]`` table of ``pyproject.toml``. Standalone files may use the
top-level table directly or nest it under ``[tool.diffsets]``. Environment
variables override file values.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import TYPE_CHECKING, cast

from pydantic import ValidationError

from diffsets._internal.logging_utils import LOG_LEVELS, structured_extra
from diffsets.compat import tomllib
from diffsets.core.model_types import LogComponent, LogFormat, OverlapPolicy

from .constants import CONFIG_FILENAMES, LOG_FORMAT_ENV, LOG_LEVEL_ENV, OVERLAP_POLICY_ENV, TOOL_SECTION
from .models import (
    ConfigFieldChoiceError,
    ConfigModel,
    ConfigReadError,
    DiffsetsConfig,
    InvalidConfigFileError,
    UnsupportedConfigVersionError,
    config_from_model,
)

if TYPE_CHECKING:
    from collections.abc import Mapping

logger: logging.Logger = logging.getLogger("diffsets.config")


@dataclass(slots=True, frozen=True)
class LoadedConfig:
    """Container for a loaded configuration and its source path.

    Attributes:
        config: Parsed configuration instance.
        path: File the configuration was loaded from, or None when defaults
            are used.
    """

    config: DiffsetsConfig
    path: Path | None


def resolve_project_root(start: Path | None = None) -> Path:
    """Return the nearest directory at or above ``start`` holding a config marker.

    Args:
        start: Starting path (defaults to the current working directory).

    Returns:
        The first directory containing one of the configuration filenames, or
        the starting directory when none does.
    """
    base = (start or Path.cwd()).resolve()
    if base.is_file():
        base = base.parent
    for candidate in (base, *base.parents):
        for marker in CONFIG_FILENAMES:
            if (candidate / marker).exists():
                return candidate
    return base


def load_config(explicit_path: Path | None = None) -> DiffsetsConfig:
    """Load diffsets configuration from a TOML file or use defaults.

    Args:
        explicit_path: Optional explicit configuration file. When given, only
            this file is checked.

    Returns:
        Configuration with environment overrides applied.
    """
    return load_config_with_metadata(explicit_path).config


def load_config_with_metadata(
    explicit_path: Path | None = None,
    *,
    start: Path | None = None,
) -> LoadedConfig:
    """Load diffsets configuration together with its source path.

    Search order without ``explicit_path``: ``diffsets.toml``,
    ``.diffsets.toml``, then ``pyproject.toml`` in the project root found by
    ``resolve_project_root``. The first file that carries diffsets
    configuration wins; ``pyproject.toml`` without a ``[tool.diffsets]`` table
    is skipped. Environment overrides are applied last, also to defaults.

    Args:
        explicit_path: Optional explicit configuration file.
        start: Directory to start the project-root search from.

    Returns:
        LoadedConfig: Parsed configuration and the path it originated from.

    Raises:
        ConfigReadError: If a candidate file cannot be read or parsed.
        InvalidConfigFileError: If a candidate file fails validation.
        UnsupportedConfigVersionError: If ``config_version`` is unknown.
        ConfigFieldChoiceError: If an environment override is not a valid choice.
    """
    if explicit_path is not None:
        search_order = [_resolve_candidate_path(explicit_path)]
    else:
        root = resolve_project_root(start)
        search_order = [root / name for name in CONFIG_FILENAMES]

    loaded = LoadedConfig(config=DiffsetsConfig(), path=None)
    for candidate in search_order:
        candidate_config = _load_candidate_config(candidate, explicit=explicit_path is not None)
        if candidate_config is not None:
            loaded = candidate_config
            break

    config = apply_env_overrides(loaded.config)
    logger.debug(
        "Loaded diffsets configuration",
        extra=structured_extra(
            LogComponent.CONFIG,
            path=loaded.path,
            details={"overlap_policy": config.overlap_policy.value},
        ),
    )
    return LoadedConfig(config=config, path=loaded.path)


def apply_env_overrides(config: DiffsetsConfig, environ: Mapping[str, str] | None = None) -> DiffsetsConfig:
    """Return ``config`` with ``DIFFSETS_*`` environment overrides applied.

    Args:
        config: Base configuration.
        environ: Environment mapping (defaults to ``os.environ``).

    Returns:
        Updated configuration.

    Raises:
        ConfigFieldChoiceError: If an override is not one of the allowed values.
    """
    env = os.environ if environ is None else environ
    overlap_policy = config.overlap_policy
    log_format = config.log_format
    log_level = config.log_level

    if raw_policy := env.get(OVERLAP_POLICY_ENV, "").strip():
        try:
            overlap_policy = OverlapPolicy.from_str(raw_policy)
        except ValueError as exc:
            allowed = tuple(policy.value for policy in OverlapPolicy)
            raise ConfigFieldChoiceError(OVERLAP_POLICY_ENV, allowed) from exc

    if raw_format := env.get(LOG_FORMAT_ENV, "").strip():
        try:
            log_format = LogFormat.from_str(raw_format)
        except ValueError as exc:
            allowed = tuple(format_.value for format_ in LogFormat)
            raise ConfigFieldChoiceError(LOG_FORMAT_ENV, allowed) from exc

    if raw_level := env.get(LOG_LEVEL_ENV, "").strip():
        log_level = raw_level.lower()
        if log_level not in LOG_LEVELS:
            raise ConfigFieldChoiceError(LOG_LEVEL_ENV, LOG_LEVELS)

    return replace(config, overlap_policy=overlap_policy, log_format=log_format, log_level=log_level)


def _resolve_candidate_path(candidate: Path) -> Path:
    return candidate if candidate.is_absolute() else (Path.cwd() / candidate).resolve()


def _load_candidate_config(candidate: Path, *, explicit: bool) -> LoadedConfig | None:
    if not candidate.exists():
        if explicit:
            raise ConfigReadError(candidate, FileNotFoundError(candidate))
        return None
    try:
        raw_map: dict[str, object] = tomllib.loads(candidate.read_text(encoding="utf-8"))
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ConfigReadError(candidate, exc) from exc

    payload = _extract_diffsets_payload(candidate, raw_map)
    if payload is None:
        if explicit:
            message = f"{candidate.name} does not define a [tool.{TOOL_SECTION}] section"
            raise InvalidConfigFileError(candidate, ValueError(message))
        return None

    try:
        model = ConfigModel.model_validate(payload)
    except ValidationError as exc:
        if (version_error := _unsupported_version(exc)) is not None:
            raise version_error from exc
        raise InvalidConfigFileError(candidate, exc) from exc
    return LoadedConfig(config=config_from_model(model), path=candidate.resolve())


def _unsupported_version(exc: ValidationError) -> UnsupportedConfigVersionError | None:
    for error in exc.errors():
        cause = error.get("ctx", {}).get("error")
        if isinstance(cause, UnsupportedConfigVersionError):
            return cause
    return None


def _extract_diffsets_payload(candidate: Path, raw_map: dict[str, object]) -> dict[str, object] | None:
    """Extract the diffsets table from a parsed TOML document.

    Args:
        candidate: Source configuration path.
        raw_map: Data parsed from the TOML document.

    Returns:
        Mapping to validate, or None when a ``pyproject.toml`` carries no
        diffsets configuration.

    Raises:
        InvalidConfigFileError: If ``[tool.diffsets]`` exists but is not a table.
    """
    is_pyproject = candidate.name == "pyproject.toml"
    tool_section = raw_map.get("tool")
    if isinstance(tool_section, dict):
        section = cast("dict[str, object]", tool_section).get(TOOL_SECTION)
        if section is not None and not isinstance(section, dict):
            message = f"[tool.{TOOL_SECTION}] must be a TOML table"
            raise InvalidConfigFileError(candidate, ValueError(message))
        if isinstance(section, dict):
            return cast("dict[str, object]", section)

    if is_pyproject:
        return None
    # standalone configs ignore unrelated tool entries
    return {key: value for key, value in raw_map.items() if key != "tool"}


__all__ = [
    "LoadedConfig",
    "apply_env_overrides",
    "load_config",
    "load_config_with_metadata",
    "resolve_project_root",
]
