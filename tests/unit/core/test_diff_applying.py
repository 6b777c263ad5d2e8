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

"""Unit tests for the diff-applying iterator."""

from __future__ import annotations

import logging

import pytest

from diffsets import DiffApplyingIterator, Phase, augment, augment_resource
from diffsets.resource import BoundResource, NoResource
from tests.fixtures.stubs import (
    CountingIterator,
    FailingIterator,
    RecordingResource,
    ResourceSource,
    TrackingSet,
)

pytestmark = pytest.mark.unit


def _ordered(*values: int) -> dict[int, None]:
    return dict.fromkeys(values)


@pytest.mark.parametrize(
    ("base", "added", "removed", "expected"),
    [
        pytest.param([1, 2, 3, 4], (5,), (2,), [1, 3, 4, 5], id="add-and-remove"),
        pytest.param([1, 2], (), (), [1, 2], id="no-diff"),
        pytest.param([], (7, 8), (), [7, 8], id="empty-base"),
        pytest.param([5], (5,), (), [5], id="base-and-added"),
        pytest.param([1], (), (1,), [], id="fully-removed"),
        pytest.param([], (), (), [], id="all-empty"),
    ],
)
def test_augment_matches_documented_examples(
    base: list[int],
    added: tuple[int, ...],
    removed: tuple[int, ...],
    expected: list[int],
) -> None:
    merged = augment(iter(base), _ordered(*added).keys(), _ordered(*removed).keys())
    assert list(merged) == expected


def test_added_ids_follow_set_iteration_order() -> None:
    added = _ordered(9, 3, 7).keys()
    assert list(augment(iter([1, 2]), added, frozenset())) == [1, 2, 9, 3, 7]


def test_id_both_added_and_removed_is_emitted_once_from_added() -> None:
    merged = augment(iter([1, 2, 3]), _ordered(2).keys(), frozenset({2}))
    assert list(merged) == [1, 3, 2]


def test_added_and_removed_overlap_absent_from_base_is_still_emitted() -> None:
    merged = augment(iter([1]), _ordered(4).keys(), frozenset({4}))
    assert list(merged) == [1, 4]


def test_exhaustion_is_idempotent() -> None:
    source = CountingIterator([1])
    merged = augment(source, frozenset(), frozenset())
    assert next(merged) == 1
    for _ in range(3):
        with pytest.raises(StopIteration):
            _ = next(merged)
        assert merged.has_next() is False
    assert merged.phase is Phase.EXHAUSTED
    # base was asked once past its end, never again
    assert source.pulls == 2


def test_phase_transitions_through_added() -> None:
    merged = augment(iter([1]), _ordered(2).keys(), frozenset())
    assert merged.phase is Phase.FILTERING_BASE
    assert next(merged) == 1
    assert merged.phase is Phase.FILTERING_BASE
    assert next(merged) == 2
    assert merged.phase is Phase.EMITTING_ADDED
    assert merged.has_next() is False
    assert merged.phase is Phase.EXHAUSTED


def test_phase_skips_added_when_added_is_empty() -> None:
    merged = augment(iter([1, 2]), frozenset(), frozenset())
    assert list(merged) == [1, 2]
    assert merged.phase is Phase.EXHAUSTED


def test_base_is_pulled_lazily() -> None:
    source = CountingIterator([1, 2, 3, 4])
    merged = augment(source, frozenset(), frozenset({1}))
    assert next(merged) == 2
    assert source.pulls == 2
    assert next(merged) == 3
    assert source.pulls == 3


def test_added_is_not_pulled_until_base_is_exhausted() -> None:
    source = CountingIterator([1, 2, 3])
    base_pulls_at_first_added_pull: list[int] = []
    added = TrackingSet([9, 8], on_first_pull=lambda: base_pulls_at_first_added_pull.append(source.pulls))
    merged = augment(source, added, frozenset({2}))

    assert next(merged) == 1
    assert next(merged) == 3
    assert merged.phase is Phase.FILTERING_BASE
    assert added.pulls == 0

    assert next(merged) == 9
    assert merged.phase is Phase.EMITTING_ADDED
    # the base reported its end (pull 4) before the added cursor moved
    assert base_pulls_at_first_added_pull == [4]
    assert list(merged) == [8]
    assert source.pulls == 4


def test_has_next_does_not_advance() -> None:
    source = CountingIterator([1, 2])
    merged = augment(source, frozenset(), frozenset())
    assert merged.has_next()
    assert merged.has_next()
    assert source.pulls == 1
    assert list(merged) == [1, 2]


def test_added_and_removed_sets_are_not_mutated() -> None:
    added = {3, 4}
    removed = {1}
    assert sorted(augment(iter([1, 2, 3]), added, removed)) == [2, 3, 4]
    assert added == {3, 4}
    assert removed == {1}


def test_base_errors_propagate_unchanged() -> None:
    error = RuntimeError("cursor lost")
    merged = augment(FailingIterator([1, 2], error), frozenset(), frozenset({2}))
    assert next(merged) == 1
    with pytest.raises(RuntimeError, match="cursor lost") as excinfo:
        _ = next(merged)
    assert excinfo.value is error


def test_added_iteration_errors_propagate() -> None:
    class ExplodingSet(frozenset[int]):
        def __iter__(self):  # type: ignore[override]
            yield 1
            raise KeyError("added set broken")

    merged = augment(iter([]), ExplodingSet({1}), frozenset())
    with pytest.raises(KeyError, match="added set broken"):
        _ = list(merged)


def test_close_without_resource_is_a_noop() -> None:
    merged = augment(iter([1]), frozenset(), frozenset())
    assert isinstance(merged.resource, NoResource)
    merged.close()
    merged.close()
    assert list(merged) == [1]


def test_close_forwards_to_bound_source() -> None:
    source = ResourceSource([1, 2])
    merged = augment_resource(source, frozenset(), frozenset())
    assert merged.resource == BoundResource(source)
    merged.close()
    assert source.close_calls == 1


def test_close_forwards_every_call() -> None:
    source = ResourceSource([])
    merged = augment_resource(source, frozenset(), frozenset())
    merged.close()
    merged.close()
    assert source.close_calls == 2


def test_close_midway_keeps_iteration_state() -> None:
    source = ResourceSource([1, 2, 3])
    merged = augment_resource(source, frozenset(), frozenset())
    assert next(merged) == 1
    merged.close()
    assert merged.phase is Phase.FILTERING_BASE
    assert source.close_calls == 1


def test_close_errors_propagate() -> None:
    resource = RecordingResource(error=OSError("handle already gone"))
    merged = DiffApplyingIterator(iter([]), frozenset(), frozenset(), BoundResource(resource))
    with pytest.raises(OSError, match="handle already gone"):
        merged.close()
    assert resource.close_calls == 1


def test_context_manager_closes_on_exit() -> None:
    source = ResourceSource([1, 2, 3])
    with augment_resource(source, _ordered(9).keys(), frozenset({2})) as merged:
        assert list(merged) == [1, 3, 9]
        assert source.close_calls == 0
    assert source.close_calls == 1


def test_context_manager_closes_when_body_raises() -> None:
    source = ResourceSource([1])
    with pytest.raises(ValueError, match="consumer failed"):
        with augment_resource(source, frozenset(), frozenset()):
            raise ValueError("consumer failed")
    assert source.close_calls == 1


def test_merged_iterator_composes_as_resource_source() -> None:
    source = ResourceSource([1, 2, 3])
    inner = augment_resource(source, _ordered(4).keys(), frozenset({1}))
    outer = augment_resource(inner, _ordered(5).keys(), frozenset({4}))
    assert list(outer) == [2, 3, 5]
    outer.close()
    assert source.close_calls == 1


def test_generator_base_is_supported() -> None:
    def ids():
        yield from (10, 20, 30)

    assert list(augment(ids(), frozenset(), frozenset({20}))) == [10, 30]


def test_phase_transition_is_logged_at_debug(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.DEBUG, logger="diffsets.iterator")
    assert list(augment(iter([1]), _ordered(2).keys(), frozenset())) == [1, 2]
    records = [record for record in caplog.records if record.name == "diffsets.iterator"]
    assert len(records) == 1
    assert getattr(records[0], "phase", None) is Phase.EMITTING_ADDED
