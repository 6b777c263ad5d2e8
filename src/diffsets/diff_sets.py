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

"""Read-only pair of added and removed id sets.

``ReadableDiffSets`` is the value a transaction-state holder hands out when a
previously computed id sequence has to reflect uncommitted changes. It owns
no iteration state; ``augment`` and ``augment_resource`` create a fresh
``DiffApplyingIterator`` per consumption.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Set
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, ClassVar

from diffsets._internal.exceptions import DiffsetsValidationError
from diffsets._internal.logging_utils import structured_extra
from diffsets.core.model_types import LogComponent, OverlapPolicy
from diffsets.diff_applying import DiffApplyingIterator, augment, augment_resource

if TYPE_CHECKING:
    from collections.abc import Iterator

    from diffsets.core.type_aliases import RecordId
    from diffsets.resource import ResourceIterator

logger: logging.Logger = logging.getLogger("diffsets.diff_sets")

__all__ = ["OverlappingDiffSetsError", "ReadableDiffSets"]


class OverlappingDiffSetsError(DiffsetsValidationError):
    """Raised when ids are both added and removed under the ``error`` policy."""

    def __init__(self, overlap: tuple[int, ...]) -> None:
        """Initialize the exception with the overlapping ids.

        Args:
            overlap: Ids present in both sets, in added order.
        """
        self.overlap = overlap
        shown = ", ".join(str(value) for value in overlap)
        super().__init__(f"ids both added and removed: {shown}")


def _ordered_set(values: Iterable[RecordId]) -> Set[RecordId]:
    # dict key views are read-only sets that keep first-insertion order
    return dict.fromkeys(values).keys()


def _empty_set() -> Set[RecordId]:
    return _ordered_set(())


@dataclass(slots=True, frozen=True)
class ReadableDiffSets:
    """Immutable added/removed id sets.

    Attributes:
        added: Ids to append after the filtered base sequence.
        removed: Ids to drop from the base sequence.
    """

    added: Set[RecordId] = field(default_factory=_empty_set)
    removed: Set[RecordId] = field(default_factory=_empty_set)

    _EMPTY: ClassVar[ReadableDiffSets | None] = None

    def __hash__(self) -> int:
        # key views compare as sets, so hashing ignores insertion order too
        return hash((frozenset(self.added), frozenset(self.removed)))

    @classmethod
    def from_iterables(
        cls,
        added: Iterable[RecordId] = (),
        removed: Iterable[RecordId] = (),
        *,
        overlap_policy: OverlapPolicy = OverlapPolicy.ALLOW,
    ) -> ReadableDiffSets:
        """Build diff sets from arbitrary iterables.

        Duplicates collapse onto their first occurrence, which also fixes the
        order in which added ids are later emitted.

        Args:
            added: Ids to add.
            removed: Ids to remove.
            overlap_policy: Reaction to ids present in both inputs.

        Returns:
            New diff sets.

        Raises:
            OverlappingDiffSetsError: If ``overlap_policy`` is ``error`` and the
                inputs share ids.
        """
        diff_sets = cls(added=_ordered_set(added), removed=_ordered_set(removed))
        diff_sets.check_overlap(overlap_policy)
        return diff_sets

    @classmethod
    def empty(cls) -> ReadableDiffSets:
        """Return the shared diff sets with nothing added or removed."""
        if cls._EMPTY is None:
            cls._EMPTY = cls()
        return cls._EMPTY

    def is_added(self, value: RecordId) -> bool:
        return value in self.added

    def is_removed(self, value: RecordId) -> bool:
        return value in self.removed

    def is_empty(self) -> bool:
        return not self.added and not self.removed

    def delta(self) -> int:
        """Return the net size change, ``len(added) - len(removed)``."""
        return len(self.added) - len(self.removed)

    def overlap(self) -> tuple[RecordId, ...]:
        """Return ids present in both sets, in added order."""
        return tuple(value for value in self.added if value in self.removed)

    def check_overlap(self, policy: OverlapPolicy) -> None:
        """Apply ``policy`` to ids present in both sets.

        Args:
            policy: Reaction to overlapping ids.

        Raises:
            OverlappingDiffSetsError: If ``policy`` is ``error`` and ids overlap.
        """
        if policy is OverlapPolicy.ALLOW:
            return
        overlap = self.overlap()
        if not overlap:
            return
        if policy is OverlapPolicy.ERROR:
            raise OverlappingDiffSetsError(overlap)
        logger.warning(
            "%d id(s) are both added and removed; they will be emitted once with the added ids",
            len(overlap),
            extra=structured_extra(
                LogComponent.DIFF_SETS,
                added=len(self.added),
                removed=len(self.removed),
                overlap=overlap,
            ),
        )

    def augment(self, source: Iterator[RecordId]) -> DiffApplyingIterator:
        """Apply these diff sets to ``source``; see ``diffsets.augment``."""
        return augment(source, self.added, self.removed)

    def augment_resource(self, source: ResourceIterator) -> DiffApplyingIterator:
        """Apply these diff sets to a resource-owning ``source``.

        See ``diffsets.augment_resource``; closing the result closes ``source``.
        """
        return augment_resource(source, self.added, self.removed)
