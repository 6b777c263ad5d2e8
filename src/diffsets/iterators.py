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

"""Pull-based iterator skeleton with a one-value look-ahead.

``BaseIterator`` splits iteration into two steps: subclasses implement
``_fetch_next`` to compute the next value and publish it with ``_emit``, and
the base class turns that into ``has_next()`` plus the Python iterator
protocol. The look-ahead is computed at most once per value, so calling
``has_next()`` repeatedly never advances the underlying source.
"""

from __future__ import annotations

from abc import abstractmethod
from collections.abc import Iterable, Iterator
from typing import TYPE_CHECKING, Generic, TypeVar, cast

from diffsets.compat import override

if TYPE_CHECKING:
    from diffsets.compat import Self

T = TypeVar("T")

__all__ = ["BaseIterator", "PeekingIterator", "empty_iterator"]


class BaseIterator(Iterator[T], Generic[T]):
    """Iterator driven by a ``_fetch_next`` step function."""

    def __init__(self) -> None:
        self._has_next_decided = False
        self._has_next = False
        self._next_value: T | None = None

    @abstractmethod
    def _fetch_next(self) -> bool:
        """Compute the next value.

        Implementations call ``_emit(value)`` and return its result when a
        value is available, or return ``False`` at end of sequence.
        """

    def _emit(self, value: T) -> bool:
        self._next_value = value
        return True

    def has_next(self) -> bool:
        """Return whether another value is available, fetching it if needed."""
        if not self._has_next_decided:
            self._has_next = self._fetch_next()
            self._has_next_decided = True
        return self._has_next

    @override
    def __iter__(self) -> Self:
        return self

    @override
    def __next__(self) -> T:
        if not self.has_next():
            raise StopIteration
        self._has_next_decided = False
        value = self._next_value
        self._next_value = None
        return cast("T", value)


class PeekingIterator(BaseIterator[T]):
    """Adapt any iterable into an iterator that supports ``has_next()``.

    Args:
        values: Iterable to draw from. It is converted with ``iter()`` once, at
            construction time.
    """

    def __init__(self, values: Iterable[T]) -> None:
        super().__init__()
        self._source: Iterator[T] = iter(values)

    @override
    def _fetch_next(self) -> bool:
        for value in self._source:
            return self._emit(value)
        return False


class _EmptyIterator(BaseIterator[T]):
    @override
    def _fetch_next(self) -> bool:
        return False


def empty_iterator() -> BaseIterator[T]:
    """Return an iterator that is exhausted from the start."""
    return _EmptyIterator()
