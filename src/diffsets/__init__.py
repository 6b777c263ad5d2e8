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

"""diffsets - lazy application of pending id changes to id sequences.

``augment`` and ``augment_resource`` overlay a set of added ids and a set of
removed ids on an already-produced iterator of record ids, without
materialising the merged result. ``ReadableDiffSets`` bundles the two sets.
"""

from __future__ import annotations

from .api import configure, diff_sets_from
from .config import DiffsetsConfig, load_config
from .core.model_types import OverlapPolicy, Phase
from .diff_applying import DiffApplyingIterator, augment, augment_resource
from .diff_sets import OverlappingDiffSetsError, ReadableDiffSets
from .exceptions import DiffsetsError, DiffsetsTypeError, DiffsetsValidationError
from .iterators import BaseIterator, PeekingIterator, empty_iterator
from .resource import (
    EMPTY_RESOURCE,
    BoundResource,
    NoResource,
    Resource,
    ResourceBinding,
    ResourceIterator,
    resource_iterator,
)

__version__ = "0.1.0"

__all__ = [
    "EMPTY_RESOURCE",
    "BaseIterator",
    "BoundResource",
    "DiffApplyingIterator",
    "DiffsetsConfig",
    "DiffsetsError",
    "DiffsetsTypeError",
    "DiffsetsValidationError",
    "NoResource",
    "OverlapPolicy",
    "OverlappingDiffSetsError",
    "PeekingIterator",
    "Phase",
    "ReadableDiffSets",
    "Resource",
    "ResourceBinding",
    "ResourceIterator",
    "__version__",
    "augment",
    "augment_resource",
    "configure",
    "diff_sets_from",
    "empty_iterator",
    "load_config",
    "resource_iterator",
]
