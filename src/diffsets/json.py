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

"""JSON value shapes and the enum normalisation used by structured logging."""

from __future__ import annotations

from enum import Enum
from typing import TypeAlias, cast

from pydantic import JsonValue

__all__ = ["JSONMapping", "JSONValue", "normalise_enums_for_json"]

JSONValue: TypeAlias = JsonValue
JSONMapping = dict[str, JsonValue]


def normalise_enums_for_json(value: object) -> JSONValue:
    """Recursively replace Enum keys and values with their payloads.

    Sets and frozensets become lists so that id collections attached to log
    records serialise cleanly.

    Args:
        value: Arbitrary object hierarchy that may include ``Enum`` members,
            mappings, sequences or sets.

    Returns:
        A JSON-compatible structure.
    """
    if isinstance(value, Enum):
        return cast("JSONValue", value.value)
    if isinstance(value, dict):
        mapping = cast("dict[object, object]", value)
        result: dict[str, JSONValue] = {}
        for key, raw in mapping.items():
            norm_key = str(key.value) if isinstance(key, Enum) else str(key)
            result[norm_key] = normalise_enums_for_json(raw)
        return result
    if isinstance(value, (list, tuple, set, frozenset)):
        items = cast("list[object]", list(value))
        return [normalise_enums_for_json(item) for item in items]
    return cast("JSONValue", value)
