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

"""Lazy application of added and removed ids to a base id sequence.

``DiffApplyingIterator`` yields the base ids that are neither removed nor
added, in base order, followed by every added id in the added set's own
iteration order. Nothing is materialised: each ``next()`` pulls just enough
from the base or the added set to produce one value.

An id present in both the base and the added set is suppressed while the
base is filtered and surfaces exactly once with the added ids. The same holds
for an id present in both the added and the removed sets: removal only
suppresses base values, never explicit additions.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from diffsets._internal.logging_utils import structured_extra
from diffsets.compat import assert_never, override
from diffsets.core.model_types import LogComponent, Phase
from diffsets.core.type_aliases import RecordId
from diffsets.iterators import BaseIterator, PeekingIterator
from diffsets.resource import BoundResource, NoResource, ResourceBinding, bind_resource

if TYPE_CHECKING:
    from collections.abc import Iterator, Set
    from types import TracebackType

    from diffsets.compat import Self
    from diffsets.resource import ResourceIterator

logger: logging.Logger = logging.getLogger("diffsets.iterator")

__all__ = ["DiffApplyingIterator", "augment", "augment_resource"]


class DiffApplyingIterator(BaseIterator[RecordId]):
    """Iterator over a base sequence with a diff applied on top.

    The added and removed sets are only read: membership tests for both and a
    single pass over ``added``. The base iterator is owned by this object once
    constructed and must not be advanced by anyone else.

    Args:
        source: Base ids, consumed at most once.
        added: Ids appended after the base is exhausted.
        removed: Ids dropped from the base.
        resource: Binding released by ``close()``.
    """

    def __init__(
        self,
        source: Iterator[RecordId],
        added: Set[RecordId],
        removed: Set[RecordId],
        resource: ResourceBinding,
    ) -> None:
        super().__init__()
        self._source = source
        self._added = added
        self._added_cursor: PeekingIterator[RecordId] = PeekingIterator(added)
        self._removed = removed
        self._resource = resource
        self._phase = Phase.FILTERING_BASE

    @property
    def phase(self) -> Phase:
        """Current phase of the iterator."""
        return self._phase

    @property
    def resource(self) -> ResourceBinding:
        """Resource binding released by ``close()``."""
        return self._resource

    @override
    def _fetch_next(self) -> bool:
        match self._phase:
            case Phase.FILTERING_BASE:
                return self._fetch_from_filtered_source()
            case Phase.EMITTING_ADDED:
                return self._fetch_from_added()
            case Phase.EXHAUSTED:
                return False
            case _:
                assert_never(self._phase)

    def _fetch_from_filtered_source(self) -> bool:
        for value in self._source:
            if value not in self._removed and value not in self._added:
                return self._emit(value)
        self._transition_from_source()
        return self._fetch_next()

    def _transition_from_source(self) -> None:
        self._phase = Phase.EMITTING_ADDED if self._added_cursor.has_next() else Phase.EXHAUSTED
        logger.debug(
            "Base sequence exhausted; moving to %s",
            self._phase,
            extra=structured_extra(LogComponent.ITERATOR, phase=self._phase),
        )

    def _fetch_from_added(self) -> bool:
        if self._added_cursor.has_next():
            return self._emit(next(self._added_cursor))
        self._phase = Phase.EXHAUSTED
        return False

    def close(self) -> None:
        """Release the bound resource, if any.

        Every call is forwarded; repeated calls are only safe if the resource
        tolerates them. Iteration state is left untouched.
        """
        match self._resource:
            case BoundResource(resource=resource):
                logger.debug(
                    "Releasing resource bound to diff-applying iterator",
                    extra=structured_extra(LogComponent.RESOURCE, phase=self._phase, bound=True),
                )
                resource.close()
            case NoResource():
                pass
            case _:
                assert_never(self._resource)

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()


def augment(
    source: Iterator[RecordId],
    added: Set[RecordId],
    removed: Set[RecordId],
) -> DiffApplyingIterator:
    """Apply a diff to ``source`` without binding any resource.

    ``close()`` on the result is a no-op.

    Args:
        source: Base ids, consumed at most once.
        added: Ids appended after the filtered base.
        removed: Ids dropped from the base.

    Returns:
        Lazy iterator over the merged ids.

    Example:
        >>> list(augment(iter([1, 2, 3, 4]), {5}, {2}))
        [1, 3, 4, 5]
    """
    return DiffApplyingIterator(source, added, removed, NoResource())


def augment_resource(
    source: ResourceIterator,
    added: Set[RecordId],
    removed: Set[RecordId],
) -> DiffApplyingIterator:
    """Apply a diff to a resource-owning ``source`` and take over its release.

    ``close()`` on the result forwards to ``source.close()``.

    Args:
        source: Base ids whose own ``close()`` releases the underlying handle.
        added: Ids appended after the filtered base.
        removed: Ids dropped from the base.

    Returns:
        Lazy iterator over the merged ids, bound to ``source``.
    """
    return DiffApplyingIterator(source, added, removed, bind_resource(source))
