"""
Unit tests for the Stream pipeline.

Tests cover:
- Transforming stages: map, filter
- Narrowing stages: take, take_while, skip, skip_while
- Terminal operations: for_each, for_each_indexed, reduce, any, all, collect
- Composition errors and the empty no-seed reduce
"""

import pytest

from rangestream import (
    EmptyStreamError,
    InvalidCountError,
    ListAdapter,
    SortedSet,
    SortedSetAdapter,
    StageCompositionError,
    Stream,
    StreamError,
    UnsupportedContainerError,
    stream,
)


def is_odd(x):
    return x % 2 != 0


# =============================================================================
# Head wrapper
# =============================================================================

class TestHead:
    """Tests for wrapping a source collection."""

    def test_wraps_list_without_copying(self, small):
        s = Stream(small)
        assert s.range.storage is small
        assert s.kind is list
        assert not s.owns_storage

    def test_stream_helper(self, small):
        assert stream(small).collect() == small

    def test_len_and_iter(self, small):
        s = Stream(small)
        assert len(s) == 4
        assert list(s) == small

    def test_generic_sequence_collects_as_list(self):
        s = Stream(range(5))
        assert s.kind is list
        assert s.collect() == [0, 1, 2, 3, 4]

    def test_set_like_view_collects_as_set(self):
        s = Stream({"a": 1, "b": 2}.keys())
        assert s.kind is set
        assert s.collect() == {"a", "b"}

    def test_unsupported_source(self):
        with pytest.raises(UnsupportedContainerError):
            Stream({"a": 1})

    def test_unsupported_source_is_type_error(self):
        with pytest.raises(TypeError):
            Stream(42)

    def test_repr(self, small):
        assert repr(Stream(small)) == "Stream(kind=list, size=4)"


# =============================================================================
# Transforming stages
# =============================================================================

class TestMap:
    """Tests for the map stage."""

    def test_map_preserves_order_and_length(self, small):
        result = Stream(small).map(lambda x: x * 10).collect(list)
        assert result == [10, 20, 30, 40]

    def test_map_changes_element_type(self, small):
        s = Stream(small).map(str, element_type=str)
        assert s.element_type is str
        assert s.collect() == ["1", "2", "3", "4"]

    def test_map_owns_new_storage(self, small):
        s = Stream(small).map(lambda x: x + 1)
        assert s.owns_storage
        assert s.range.storage is not small

    def test_map_keeps_container_kind(self):
        s = Stream((1, 2, 3)).map(lambda x: x * 2)
        assert s.kind is tuple
        assert s.collect() == (2, 4, 6)

    def test_map_into_set_deduplicates(self):
        result = Stream({1, 2, 3, 4}).map(lambda x: x % 2).collect()
        assert result == {0, 1}

    def test_map_into_sorted_set_deduplicates_and_sorts(self):
        result = Stream(SortedSet([1, 2, 3, 4, 5])).map(lambda x: 10 - x // 2).collect()
        assert isinstance(result, SortedSet)
        assert list(result) == [8, 9, 10]

    def test_map_does_not_mutate_source(self, small):
        before = list(small)
        Stream(small).map(lambda x: x * 2).filter(is_odd).take(1)
        assert small == before

    def test_map_empty(self):
        calls = []
        assert Stream([]).map(calls.append).collect() == []
        assert calls == []

    def test_mapper_exception_propagates(self, small):
        with pytest.raises(ZeroDivisionError):
            Stream(small).map(lambda x: x / 0)


class TestFilter:
    """Tests for the filter stage."""

    def test_filter_keeps_matching_in_order(self, numbers):
        result = Stream(numbers).filter(is_odd).collect()
        assert result == list(range(1, 80, 2))

    def test_filter_partitions_source(self, numbers):
        kept = Stream(numbers).filter(lambda x: x % 3 == 0)
        dropped = Stream(numbers).filter(lambda x: x % 3 != 0)
        assert len(kept) + len(dropped) == len(numbers)
        assert kept.all(lambda x: x % 3 == 0)
        assert not dropped.any(lambda x: x % 3 == 0)

    def test_double_filter_is_idempotent(self, numbers):
        once = Stream(numbers).filter(is_odd).collect()
        twice = Stream(numbers).filter(is_odd).filter(is_odd).collect()
        assert once == twice

    def test_filter_keeps_kind_and_element_type(self):
        s = Stream(SortedSet([3, 1, 2])).filter(lambda x: x > 1)
        assert s.kind is SortedSet
        assert s.collect() == SortedSet([2, 3])

    def test_narrowing_and_filter_keep_declared_element_type(self, small):
        s = Stream(small).map(str, element_type=str)
        assert s.element_type is str
        assert s.filter(lambda x: x != "2").element_type is str
        assert s.take(2).element_type is str
        assert s.skip(1).element_type is str
        assert s.take_while(lambda x: x == "1").element_type is str
        assert s.skip_while(lambda x: x == "1").element_type is str
        assert s.filter(bool).take(1).skip_while(lambda x: False).element_type is str

    def test_filter_owns_new_storage(self, small):
        s = Stream(small).filter(lambda x: True)
        assert s.owns_storage
        assert s.range.storage is not small


# =============================================================================
# Narrowing stages
# =============================================================================

class TestTakeSkip:
    """Tests for count-based narrowing."""

    def test_take_shares_storage(self, small):
        s = Stream(small).take(2)
        assert s.range.storage is small
        assert s.collect() == [1, 2]

    def test_take_zero_is_empty(self, small):
        assert Stream(small).take(0).collect() == []

    def test_take_clamps(self, small):
        assert Stream(small).take(100).collect() == small

    def test_skip_shares_storage(self, small):
        s = Stream(small).skip(1)
        assert s.range.storage is small
        assert s.collect() == [2, 3, 4]

    def test_over_skip_is_empty(self, small):
        assert Stream(small).skip(10).collect() == []

    @pytest.mark.parametrize("n,m", [(0, 3), (2, 5), (5, 2), (3, 3), (10, 1)])
    def test_take_take_is_take_min(self, numbers, n, m):
        assert Stream(numbers).take(n).take(m).collect() == Stream(numbers).take(min(n, m)).collect()

    @pytest.mark.parametrize("n,m", [(0, 3), (2, 5), (70, 20), (80, 0), (100, 100)])
    def test_skip_skip_is_skip_sum(self, numbers, n, m):
        assert Stream(numbers).skip(n).skip(m).collect() == Stream(numbers).skip(n + m).collect()

    def test_narrowed_range_is_sub_range(self, numbers):
        base = Stream(numbers).skip(10)
        narrowed = base.take(5)
        assert base.range.start <= narrowed.range.start <= narrowed.range.end <= base.range.end

    def test_narrowing_after_map_keeps_owned_storage(self, small):
        s = Stream(small).map(lambda x: x * 3).skip(1).take(2)
        assert s.owns_storage
        assert s.collect() == [6, 9]

    @pytest.mark.parametrize("count", [-1, 1.5, "2", None, True])
    def test_invalid_count(self, small, count):
        with pytest.raises(InvalidCountError):
            Stream(small).take(count)
        with pytest.raises(ValueError):
            Stream(small).skip(count)


class TestTakeSkipWhile:
    """Tests for predicate-based narrowing."""

    def test_take_while_stops_at_first_failure(self):
        data = [1, 3, 5, 6, 7, 9]
        result = Stream(data).take_while(is_odd).collect()
        assert result == [1, 3, 5]
        assert not is_odd(data[len(result)])

    def test_take_while_false_on_first_is_empty(self):
        assert Stream([2, 3]).take_while(is_odd).collect() == []

    def test_take_while_always_true_is_whole_range(self, small):
        s = Stream(small).take_while(lambda x: True)
        assert s.range.start == 0 and s.range.end == 4

    def test_take_while_stops_calling_predicate(self):
        seen = []

        def predicate(x):
            seen.append(x)
            return x < 2

        Stream([0, 1, 2, 3, 4]).take_while(predicate)
        assert seen == [0, 1, 2]

    def test_skip_while_starts_at_first_failure(self):
        data = [1, 3, 4, 5, 6]
        result = Stream(data).skip_while(is_odd).collect()
        assert result == [4, 5, 6]

    def test_skip_while_always_true_is_empty(self, small):
        s = Stream(small).skip_while(lambda x: True)
        assert len(s) == 0
        assert s.range.start == s.range.end == 4

    def test_skip_while_false_on_first_is_whole_range(self, small):
        assert Stream(small).skip_while(lambda x: False).collect() == small

    def test_while_stages_share_storage(self, small):
        s = Stream(small)
        assert s.take_while(lambda x: x < 3).range.storage is small
        assert s.skip_while(lambda x: x < 3).range.storage is small

    def test_non_callable_predicate(self, small):
        with pytest.raises(StageCompositionError):
            Stream(small).take_while(True)
        with pytest.raises(TypeError):
            Stream(small).skip_while(None)


# =============================================================================
# Terminal operations
# =============================================================================

class TestTerminals:
    """Tests for consuming operations."""

    def test_for_each_in_order(self, small):
        seen = []
        Stream(small).skip(1).for_each(seen.append)
        assert seen == [2, 3, 4]

    def test_for_each_indexed_counts_from_zero(self):
        seen = []
        Stream(["a", "b", "c"]).skip(1).for_each_indexed(lambda i, v: seen.append((i, v)))
        assert seen == [(0, "b"), (1, "c")]

    def test_reduce_with_seed(self, small):
        assert Stream(small).reduce(lambda acc, x: acc + x, 0) == 10

    def test_reduce_with_seed_changes_type(self, small):
        assert Stream(small).reduce(lambda acc, x: acc + str(x), "") == "1234"

    def test_reduce_without_seed_single_element(self):
        calls = []

        def reducer(acc, x):
            calls.append((acc, x))
            return acc + x

        assert Stream([5]).reduce(reducer) == 5
        assert calls == []

    def test_reduce_without_seed_folds_left(self):
        assert Stream([10, 3, 2]).reduce(lambda acc, x: acc - x) == 5

    def test_reduce_with_seed_on_empty_returns_seed(self):
        seed = object()
        assert Stream([]).reduce(lambda acc, x: acc, seed) is seed

    def test_reduce_without_seed_on_empty_raises(self):
        with pytest.raises(EmptyStreamError):
            Stream([1, 2]).skip(2).reduce(lambda acc, x: acc + x)

    def test_empty_reduce_error_is_value_error(self):
        with pytest.raises(ValueError, match="empty stream"):
            Stream([]).reduce(max)

    def test_any_short_circuits(self):
        seen = []

        def predicate(x):
            seen.append(x)
            return x == 2

        assert Stream([1, 2, 3]).any(predicate)
        assert seen == [1, 2]

    def test_all_short_circuits(self):
        seen = []

        def predicate(x):
            seen.append(x)
            return x < 2

        assert not Stream([1, 2, 3]).all(predicate)
        assert seen == [1, 2]

    def test_collect_round_trip(self, small):
        result = Stream(small).collect()
        assert result == small
        assert result is not small

    def test_collect_into_other_kinds(self, small):
        s = Stream(small + [4, 1])
        assert s.collect(tuple) == (1, 2, 3, 4, 4, 1)
        assert s.collect(set) == {1, 2, 3, 4}
        assert s.collect(frozenset) == frozenset({1, 2, 3, 4})
        assert list(s.collect(SortedSet)) == [1, 2, 3, 4]

    def test_collect_parameterized_kind(self, small):
        assert Stream(small).collect(list[int]) == small

    def test_collect_unsupported_kind(self, small):
        with pytest.raises(UnsupportedContainerError):
            Stream(small).collect(dict)

    def test_non_callable_consumer(self, small):
        with pytest.raises(StageCompositionError) as exc_info:
            Stream(small).for_each("print")
        assert exc_info.value.stage == "for_each"
        assert isinstance(exc_info.value, StreamError)


# =============================================================================
# Scenarios
# =============================================================================

class TestScenarios:
    """End-to-end chains."""

    def test_odd_halves_below_eight(self, numbers):
        result = (
            Stream(numbers)
            .filter(lambda x: x % 2 != 0)
            .map(lambda x: x / 2.0)
            .take(10)
            .take_while(lambda x: x < 8)
            .collect(SortedSet)
        )
        assert result == SortedSet([0.5, 1.5, 2.5, 3.5, 4.5, 5.5, 6.5, 7.5])
        assert len(result) == 8

    def test_intermediate_stages(self, numbers):
        odds = Stream(numbers).filter(lambda x: x % 2 != 0)
        assert odds.collect() == list(range(1, 80, 2))
        halves = odds.map(lambda x: x / 2.0)
        assert halves.collect()[-1] == 39.5
        assert halves.take(10).collect() == [x + 0.5 for x in range(10)]

    def test_empty_source(self):
        s = Stream([])
        calls = []
        assert s.any(lambda x: True) is False
        assert s.all(lambda x: False) is True
        s.for_each(calls.append)
        s.for_each_indexed(lambda i, v: calls.append((i, v)))
        assert calls == []
        assert s.collect() == []
        assert s.filter(lambda x: True).take(3).skip_while(lambda x: True).collect() == []

    def test_stages_are_independent(self, small):
        base = Stream(small)
        first = base.take(2)
        second = base.skip(2)
        assert first.collect() == [1, 2]
        assert second.collect() == [3, 4]
        assert base.collect() == small

    def test_concurrent_chains_over_one_source(self, numbers):
        evens = Stream(numbers).filter(lambda x: x % 2 == 0)
        odds = Stream(numbers).filter(is_odd)
        assert evens.reduce(lambda a, b: a + b, 0) + odds.reduce(lambda a, b: a + b, 0) == sum(numbers)


# =============================================================================
# Introspection
# =============================================================================

class TestIntrospection:
    """Tests for the read-only stage properties."""

    def test_adapter_of_head(self, small):
        assert Stream(small).adapter == ListAdapter()
        assert Stream(SortedSet([2, 1])).adapter == SortedSetAdapter()

    def test_adapter_follows_map(self, small):
        mapped = Stream(small).map(str, element_type=str)
        assert mapped.adapter == ListAdapter(str)
        assert mapped.adapter.value_type is str
        assert mapped.take(1).adapter is mapped.adapter

    def test_collect_builds_through_adapter(self, small):
        s = Stream(small).filter(lambda x: x > 1)
        assert s.adapter.build(s.range) == s.collect()
