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

"""Unit tests for ReadableDiffSets."""

from __future__ import annotations

import logging

import pytest

from diffsets import OverlapPolicy, OverlappingDiffSetsError, ReadableDiffSets
from tests.fixtures.stubs import ResourceSource

pytestmark = pytest.mark.unit


def test_from_iterables_collapses_duplicates_in_first_seen_order() -> None:
    diff_sets = ReadableDiffSets.from_iterables([5, 3, 5, 1], [2, 2])
    assert list(diff_sets.added) == [5, 3, 1]
    assert list(diff_sets.removed) == [2]


def test_membership_and_delta() -> None:
    diff_sets = ReadableDiffSets.from_iterables([1, 2], [3])
    assert diff_sets.is_added(1)
    assert not diff_sets.is_added(3)
    assert diff_sets.is_removed(3)
    assert diff_sets.delta() == 1
    assert not diff_sets.is_empty()


def test_empty_is_shared_and_empty() -> None:
    empty = ReadableDiffSets.empty()
    assert empty is ReadableDiffSets.empty()
    assert empty.is_empty()
    assert empty.delta() == 0
    assert list(empty.augment(iter([1, 2]))) == [1, 2]


def test_augment_applies_sets() -> None:
    diff_sets = ReadableDiffSets.from_iterables(added=[9, 8], removed=[2])
    assert list(diff_sets.augment(iter([1, 2, 3, 8]))) == [1, 3, 9, 8]


def test_augment_resource_binds_source() -> None:
    source = ResourceSource([1, 2])
    diff_sets = ReadableDiffSets.from_iterables(removed=[1])
    with diff_sets.augment_resource(source) as merged:
        assert list(merged) == [2]
    assert source.close_calls == 1


def test_each_augment_call_gets_a_fresh_cursor() -> None:
    diff_sets = ReadableDiffSets.from_iterables(added=[7])
    assert list(diff_sets.augment(iter([1]))) == [1, 7]
    assert list(diff_sets.augment(iter([2]))) == [2, 7]


def test_overlap_reports_ids_in_added_order() -> None:
    diff_sets = ReadableDiffSets.from_iterables([4, 2, 3], [3, 4])
    assert diff_sets.overlap() == (4, 3)


def test_overlap_allowed_by_default_and_emitted_once() -> None:
    diff_sets = ReadableDiffSets.from_iterables([2], [2])
    assert list(diff_sets.augment(iter([1, 2]))) == [1, 2]


def test_overlap_error_policy_raises() -> None:
    with pytest.raises(OverlappingDiffSetsError, match="ids both added and removed: 2") as excinfo:
        _ = ReadableDiffSets.from_iterables([2, 5], [2], overlap_policy=OverlapPolicy.ERROR)
    assert excinfo.value.overlap == (2,)
    assert isinstance(excinfo.value, ValueError)


def test_overlap_error_policy_accepts_disjoint_sets() -> None:
    diff_sets = ReadableDiffSets.from_iterables([1], [2], overlap_policy=OverlapPolicy.ERROR)
    assert diff_sets.overlap() == ()


def test_overlap_warn_policy_logs(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.WARNING, logger="diffsets.diff_sets")
    diff_sets = ReadableDiffSets.from_iterables([1, 2], [2], overlap_policy=OverlapPolicy.WARN)
    assert diff_sets.overlap() == (2,)
    warnings = [record for record in caplog.records if record.name == "diffsets.diff_sets"]
    assert len(warnings) == 1
    assert warnings[0].levelno == logging.WARNING
    assert getattr(warnings[0], "overlap", None) == [2]


def test_diff_sets_are_frozen() -> None:
    diff_sets = ReadableDiffSets.from_iterables([1])
    with pytest.raises(AttributeError):
        diff_sets.added = frozenset()  # type: ignore[misc]


def test_diff_sets_are_hashable_and_usable_as_keys() -> None:
    first = ReadableDiffSets.from_iterables([1, 3], [2])
    same = ReadableDiffSets.from_iterables([3, 1], [2])
    other = ReadableDiffSets.from_iterables([1], [2])
    assert first == same
    assert hash(first) == hash(same)
    assert len({first, same, other}) == 2
    assert {first: "cached"}[same] == "cached"
    assert hash(ReadableDiffSets.empty()) == hash(ReadableDiffSets())
