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

"""Shared Hypothesis strategies for property-based tests."""

from __future__ import annotations

from hypothesis import strategies as st

__all__ = ["diff_inputs", "id_lists", "unique_id_lists"]

# small id space so base, added and removed overlap often
_IDS = st.integers(min_value=0, max_value=30)


def id_lists(max_size: int = 20) -> st.SearchStrategy[list[int]]:
    """Return a strategy of id lists that may contain duplicates."""
    return st.lists(_IDS, max_size=max_size)


def unique_id_lists(max_size: int = 20) -> st.SearchStrategy[list[int]]:
    """Return a strategy of duplicate-free id lists."""
    return st.lists(_IDS, max_size=max_size, unique=True)


def diff_inputs() -> st.SearchStrategy[tuple[list[int], list[int], list[int]]]:
    """Strategy emitting ``(base, added, removed)`` duplicate-free id lists.

    Returns:
        Hypothesis strategy producing three lists drawn from a shared id space.
    """
    return st.tuples(unique_id_lists(), unique_id_lists(), unique_id_lists())
