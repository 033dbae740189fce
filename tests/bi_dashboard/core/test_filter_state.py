from __future__ import annotations

from bi_dashboard.core.filter_state import (
    EMPTY_FILTERS,
    ActiveFilters,
    clear_all_filters,
    clear_filter,
    prune_filters,
    set_filter,
)


def test_initial_state_is_empty():
    assert len(EMPTY_FILTERS) == 0
    assert EMPTY_FILTERS.to_dict() == {}


def test_set_filter_adds_new_filter():
    actual = set_filter(EMPTY_FILTERS, "mod3", [1, 2])
    assert actual["mod3"] == (1, 2)
    assert actual.selection("mod3") == [1, 2]


def test_set_filter_replaces_existing_selection():
    state = ActiveFilters({"mod3": [1, 2]})
    actual = set_filter(state, "mod3", [0])
    assert actual.to_dict() == {"mod3": [0]}


def test_set_filter_with_empty_values_removes_entry():
    state = ActiveFilters({"mod3": [1]})
    actual = set_filter(state, "mod3", [])
    assert "mod3" not in actual
    assert len(actual) == 0
    assert actual == clear_filter(state, "mod3")


def test_set_filter_does_not_mutate_previous_state():
    state = ActiveFilters({"mod3": [1]})
    updated = set_filter(state, "mod4", [2])
    assert state.to_dict() == {"mod3": [1]}
    assert updated.to_dict() == {"mod3": [1], "mod4": [2]}


def test_set_filter_tolerates_duplicates():
    actual = set_filter(EMPTY_FILTERS, "region", ["East", "East"])
    assert actual.selection("region") == ["East", "East"]


def test_clear_filter_removes_only_that_column():
    state = ActiveFilters({"mod3": [1], "mod4": [0]})
    actual = clear_filter(state, "mod3")
    assert "mod3" not in actual
    assert actual["mod4"] == (0,)


def test_clear_filter_missing_column_is_noop():
    state = ActiveFilters({"mod3": [1]})
    assert clear_filter(state, "nope") is state


def test_clear_all_filters():
    state = ActiveFilters({"mod3": [1], "mod4": [0]})
    assert clear_all_filters(state) == EMPTY_FILTERS


def test_prune_filters_removes_unknown_columns():
    state = ActiveFilters({"mod3": [1], "mod4": [0], "toBeRemoved": [100]})
    actual = prune_filters(state, ["mod3", "mod4"])
    assert actual.to_dict() == {"mod3": [1], "mod4": [0]}
    assert len(actual) == 2


def test_prune_filters_keeps_valid_entries_identical():
    state = ActiveFilters({"mod3": [1], "mod4": [0]})
    assert prune_filters(state, ["mod3", "mod4", "mod5"]) == state
    assert prune_filters(state, ["mod3", "mod4"]) is state


def test_prune_filters_is_idempotent():
    state = ActiveFilters({"a": [1], "b": [2], "c": [3]})
    once = prune_filters(state, ["a", "c"])
    twice = prune_filters(once, ["a", "c"])
    assert once == twice
    assert twice.to_dict() == {"a": [1], "c": [3]}


def test_empty_selections_are_never_stored():
    state = ActiveFilters({"a": [], "b": [1]})
    assert list(state) == ["b"]


def test_from_dict_roundtrip_and_hash():
    state = ActiveFilters({"mod3": [1, 2], "region": ["East"]})
    rebuilt = ActiveFilters.from_dict(state.to_dict())
    assert rebuilt == state
    assert hash(rebuilt) == hash(state)
    assert ActiveFilters.from_dict(None) == EMPTY_FILTERS


def test_value_equality_distinguishes_numbers_and_strings():
    assert ActiveFilters({"a": [1]}) != ActiveFilters({"a": ["1"]})
