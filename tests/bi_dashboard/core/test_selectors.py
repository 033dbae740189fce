from __future__ import annotations

import threading

from bi_dashboard.core import selectors
from bi_dashboard.core.filter_state import EMPTY_FILTERS, ActiveFilters
from bi_dashboard.core.selectors import (
    ColumnOptionsSelectors,
    all_unique_options,
    available_options,
    filter_rows,
    make_select_available_options,
    row_matches,
    sort_options,
    unique_options,
)
from bi_dashboard.core.memo import memoize_last

SAMPLE_ROWS = (
    {"id": 1, "value": 10, "mod3": 1, "mod4": 2, "mod5": 0},
    {"id": 2, "value": 11, "mod3": 2, "mod4": 3, "mod5": 1},
    {"id": 3, "value": 12, "mod3": 0, "mod4": 0, "mod5": 2},
    {"id": 4, "value": 13, "mod3": 1, "mod4": 1, "mod5": 3},
    {"id": 5, "value": 14, "mod3": 2, "mod4": 2, "mod5": 4},
    {"id": 6, "value": 15, "mod3": 0, "mod4": 3, "mod5": 0},
)
SAMPLE_COLUMNS = ("id", "value", "mod3", "mod4", "mod5")


def _ids(rows):
    return [row["id"] for row in rows]


# -----------------------------------------------------------------------------
# Visible rows
# -----------------------------------------------------------------------------
def test_no_filters_returns_all_rows():
    assert filter_rows(SAMPLE_ROWS, EMPTY_FILTERS) is SAMPLE_ROWS


def test_single_filter():
    visible = filter_rows(SAMPLE_ROWS, ActiveFilters({"mod3": [0]}))
    assert _ids(visible) == [3, 6]


def test_multiple_filters_are_anded():
    visible = filter_rows(SAMPLE_ROWS, ActiveFilters({"mod3": [1], "mod4": [2]}))
    assert _ids(visible) == [1]


def test_values_within_a_column_are_ored():
    visible = filter_rows(SAMPLE_ROWS, ActiveFilters({"mod5": [0, 1]}))
    assert _ids(visible) == [1, 2, 6]


def test_no_match_gives_empty_result():
    assert list(filter_rows(SAMPLE_ROWS, ActiveFilters({"mod3": [100]}))) == []


def test_empty_accepted_list_does_not_restrict():
    assert _ids(filter_rows(SAMPLE_ROWS, {"mod3": []})) == [1, 2, 3, 4, 5, 6]


def test_absent_value_never_matches():
    rows = ({"id": 1, "region": "east"}, {"id": 2}, {"id": 3, "region": None})
    assert _ids(filter_rows(rows, {"region": ["east"]})) == [1]


def test_filter_on_unknown_column_excludes_every_row():
    assert list(filter_rows(SAMPLE_ROWS, {"nope": [1]})) == []


def test_empty_string_can_match_when_selected():
    row = {"id": 1, "note": ""}
    assert row_matches(row, {"note": [""]})
    assert not row_matches(row, {"note": ["x"]})


def test_number_and_string_forms_are_distinct():
    rows = ({"id": 1, "code": 7}, {"id": 2, "code": "7"})
    assert _ids(filter_rows(rows, {"code": [7]})) == [1]
    assert _ids(filter_rows(rows, {"code": ["7"]})) == [2]


def test_filtering_keeps_dataset_order():
    visible = filter_rows(SAMPLE_ROWS, {"mod5": [0, 4, 2]})
    assert _ids(visible) == [1, 3, 5, 6]


# -----------------------------------------------------------------------------
# Available options
# -----------------------------------------------------------------------------
def test_options_without_other_filters():
    assert available_options(SAMPLE_ROWS, EMPTY_FILTERS, "mod3") == [0, 1, 2]


def test_options_narrowed_by_other_filter():
    assert available_options(SAMPLE_ROWS, ActiveFilters({"mod4": [0]}), "mod3") == [0]


def test_own_filter_is_ignored_for_own_options():
    filters = ActiveFilters({"mod3": [1], "mod4": [2]})
    assert available_options(SAMPLE_ROWS, filters, "mod3") == [1, 2]


def test_options_for_mod4_given_mod3():
    assert available_options(SAMPLE_ROWS, ActiveFilters({"mod3": [0]}), "mod4") == [0, 3]


def test_options_empty_when_other_filters_match_nothing():
    assert available_options(SAMPLE_ROWS, ActiveFilters({"mod5": [100]}), "mod3") == []


def test_options_skip_absent_and_empty_string():
    rows = ({"c": "b"}, {"c": ""}, {"c": None}, {}, {"c": "a"}, {"c": "b"})
    assert unique_options(rows, "c") == ["a", "b"]


# -----------------------------------------------------------------------------
# All unique options
# -----------------------------------------------------------------------------
def test_all_unique_options_per_column():
    actual = all_unique_options(SAMPLE_ROWS, SAMPLE_COLUMNS)
    assert list(actual) == list(SAMPLE_COLUMNS)
    assert actual == {
        "id": [1, 2, 3, 4, 5, 6],
        "value": [10, 11, 12, 13, 14, 15],
        "mod3": [0, 1, 2],
        "mod4": [0, 1, 2, 3],
        "mod5": [0, 1, 2, 3, 4],
    }


def test_all_unique_options_empty_rows():
    assert all_unique_options((), SAMPLE_COLUMNS) == {}


def test_all_unique_options_empty_columns():
    assert all_unique_options(SAMPLE_ROWS, ()) == {}


def test_all_unique_options_column_with_only_blanks():
    rows = ({"a": 1, "b": ""}, {"a": 2})
    assert all_unique_options(rows, ("a", "b")) == {"a": [1, 2], "b": []}


# -----------------------------------------------------------------------------
# Ordering
# -----------------------------------------------------------------------------
def test_numbers_sort_numerically():
    assert sort_options([10, 2, 1.5, 33]) == [1.5, 2, 10, 33]


def test_strings_sort_by_collation():
    assert sort_options(["pear", "apple", "fig"]) == ["apple", "fig", "pear"]


def test_mixed_values_compare_by_string_form():
    assert sort_options(["a", 10, 2]) == [2, 10, "a"]


def test_integral_float_is_shown_as_int_when_compared_with_text():
    assert sort_options(["3", 2.0]) == [2.0, "3"]


# -----------------------------------------------------------------------------
# Memoisation
# -----------------------------------------------------------------------------
def test_visible_rows_selector_reuses_result_for_equal_filters():
    select = memoize_last(filter_rows)
    first = select(SAMPLE_ROWS, ActiveFilters({"mod3": [0]}))
    second = select(SAMPLE_ROWS, ActiveFilters.from_dict({"mod3": [0]}))
    assert first is second
    assert select.recomputations == 1


def test_visible_rows_selector_recomputes_on_new_rows_object():
    select = memoize_last(filter_rows)
    select(SAMPLE_ROWS, ActiveFilters({"mod3": [0]}))
    select(tuple(dict(row) for row in SAMPLE_ROWS), ActiveFilters({"mod3": [0]}))
    assert select.recomputations == 2


def test_available_options_selectors_are_independent():
    select_mod3 = make_select_available_options()
    select_mod4 = make_select_available_options()
    filters = ActiveFilters({"mod3": [0]})

    mod3 = select_mod3(SAMPLE_ROWS, filters, "mod3")
    mod4 = select_mod4(SAMPLE_ROWS, filters, "mod4")
    assert mod3 == [0, 1, 2]
    assert mod4 == [0, 3]

    assert select_mod3(SAMPLE_ROWS, filters, "mod3") is mod3
    assert select_mod3.recomputations == 1
    assert select_mod4.recomputations == 1


def test_column_options_selectors_scope_and_reset():
    by_column = ColumnOptionsSelectors()
    options = by_column.options(SAMPLE_ROWS, EMPTY_FILTERS, "mod4", scope="small")
    assert options == [0, 1, 2, 3]
    assert by_column.get("mod4", scope="small") is by_column.get("mod4", scope="small")
    assert by_column.get("mod4", scope="large") is not by_column.get("mod4", scope="small")
    assert len(by_column) == 2

    by_column.reset("small")
    assert len(by_column) == 1
    by_column.reset()
    assert len(by_column) == 0


def test_string_order_ignores_case():
    assert sort_options(["banana", "Cherry", "apple"]) == ["apple", "banana", "Cherry"]


def test_code_point_locale_orders_like_a_dictionary(monkeypatch):
    monkeypatch.setattr(selectors, "_uses_code_point_collation", lambda: True)
    assert sort_options(["B", "b", "A", "a"]) == ["a", "A", "b", "B"]
    assert sort_options(["ezra", "éclair", "eclair"]) == ["eclair", "éclair", "ezra"]
    assert sort_options(["Zulu", 10, "alpha", 2]) == [2, 10, "alpha", "Zulu"]


def test_column_options_selectors_shared_across_threads():
    selectors_by_column = ColumnOptionsSelectors()
    seen = []

    def worker():
        for _ in range(200):
            seen.append(selectors_by_column.get("mod3", scope="small"))

    threads = [threading.Thread(target=worker) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len({id(s) for s in seen}) == 1
    assert len(selectors_by_column) == 1
