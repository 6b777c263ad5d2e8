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

"""Releasable resources and the binding held by resource-aware iterators.

A ``ResourceBinding`` is either ``NoResource`` or ``BoundResource``. Iterators
that may or may not own a handle match on the binding when closed instead of
testing a nullable reference.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, TypeAlias, runtime_checkable

from diffsets._internal.logging_utils import structured_extra
from diffsets.compat import override
from diffsets.core.model_types import LogComponent
from diffsets.iterators import BaseIterator

if TYPE_CHECKING:
    from types import TracebackType

    from diffsets.compat import Self

logger: logging.Logger = logging.getLogger("diffsets.resource")

__all__ = [
    "EMPTY_RESOURCE",
    "BoundResource",
    "CallbackResourceIterator",
    "NoResource",
    "Resource",
    "ResourceBinding",
    "ResourceIterator",
    "bind_resource",
    "resource_iterator",
]


@runtime_checkable
class Resource(Protocol):
    """Anything holding a handle that must be released with ``close()``."""

    def close(self) -> None:
        """Release the underlying handle."""
        ...


@runtime_checkable
class ResourceIterator(Protocol):
    """An iterator of record ids that owns a releasable resource."""

    def __iter__(self) -> Iterator[int]: ...

    def __next__(self) -> int: ...

    def close(self) -> None:
        """Release the underlying handle."""
        ...


class _EmptyResource:
    def close(self) -> None:
        return None

    @override
    def __repr__(self) -> str:
        return "EMPTY_RESOURCE"


EMPTY_RESOURCE: Resource = _EmptyResource()


@dataclass(slots=True, frozen=True)
class NoResource:
    """Binding for iterators that own nothing to release."""


@dataclass(slots=True, frozen=True)
class BoundResource:
    """Binding for iterators responsible for releasing ``resource``.

    Attributes:
        resource: Handle whose ``close()`` is called on every release.
    """

    resource: Resource


ResourceBinding: TypeAlias = NoResource | BoundResource


def bind_resource(resource: Resource | None) -> ResourceBinding:
    """Wrap an optional resource in the matching binding variant."""
    if resource is None:
        return NoResource()
    return BoundResource(resource)


class CallbackResourceIterator(BaseIterator[int]):
    """Resource iterator over plain values whose ``close()`` runs a callback.

    Also a context manager that closes on exit.
    """

    def __init__(self, values: Iterable[int], on_close: Callable[[], None]) -> None:
        super().__init__()
        self._source: Iterator[int] = iter(values)
        self._on_close = on_close

    @override
    def _fetch_next(self) -> bool:
        for value in self._source:
            return self._emit(value)
        return False

    def close(self) -> None:
        logger.debug(
            "Closing resource iterator",
            extra=structured_extra(LogComponent.RESOURCE, bound=True),
        )
        self._on_close()

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()


def resource_iterator(values: Iterable[int], close: Callable[[], None]) -> CallbackResourceIterator:
    """Return a resource-owning iterator over ``values``.

    Every ``close()`` call on the returned iterator invokes ``close``; no
    guarding against repeated calls is performed. The iterator is also a
    context manager that closes on exit.

    Args:
        values: Ids to iterate, consumed lazily.
        close: Release hook, typically the cursor's own ``close``.

    Returns:
        Iterator satisfying ``ResourceIterator``.
    """
    return CallbackResourceIterator(values, close)
