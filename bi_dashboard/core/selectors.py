"""
Derivations over (dataset rows, active filters).

Everything here is a pure function of its inputs. The `select_*` objects
and the per-column selectors built by `make_select_available_options()`
wrap those functions in single-entry caches so repeated calls with the
same dataset and filter content do not rescan the rows.

Absent vs empty string: row matching treats only an absent value (missing
key or None) specially, while option collection also skips "". Both
behaviours are relied on by the UI and are kept distinct.
"""
from __future__ import annotations

import functools
import locale
import threading
import unicodedata
from typing import (
    Callable,
    Dict,
    FrozenSet,
    Iterable,
    List,
    Mapping,
    Optional,
    Sequence,
    Tuple,
)

from bi_dashboard.core.dataset import CellValue, Row
from bi_dashboard.core.memo import MemoizedSelector, memoize_last

OptionsByColumn = Dict[str, List[CellValue]]


# -----------------------------------------------------------------------------
# Row matching
# -----------------------------------------------------------------------------
def _compile_filters(
    filters: Mapping[str, Sequence[CellValue]],
) -> List[Tuple[str, FrozenSet[CellValue]]]:
    # An empty accepted list would mean "no restriction"; skipping it here
    # gives exactly that.
    return [(column, frozenset(values)) for column, values in filters.items() if len(values) > 0]


def _matches(row: Row, compiled: List[Tuple[str, FrozenSet[CellValue]]]) -> bool:
    for column, accepted in compiled:
        value = row.get(column)
        if value is None:
            return False
        if value not in accepted:
            return False
    return True


def row_matches(row: Row, filters: Mapping[str, Sequence[CellValue]]) -> bool:
    """True if `row` satisfies every (column, accepted values) pair."""
    return _matches(row, _compile_filters(filters))


def filter_rows(
    rows: Sequence[Row],
    filters: Mapping[str, Sequence[CellValue]],
) -> Sequence[Row]:
    """
    Visible rows: the ordered subsequence of `rows` matching all filters.

    With no active filters the input sequence itself is returned.
    """
    if not filters:
        return rows

    compiled = _compile_filters(filters)
    return tuple(row for row in rows if _matches(row, compiled))


# -----------------------------------------------------------------------------
# Option ordering
# -----------------------------------------------------------------------------
def _is_number(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _as_text(value: CellValue) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _uses_code_point_collation() -> bool:
    current = locale.setlocale(locale.LC_COLLATE) or "C"
    return current.split(".")[0].upper() in ("C", "POSIX")


def _text_key(text: str) -> Tuple[str, str, str]:
    # Base letters ignoring case and accents, then lowercase before uppercase
    decomposed = unicodedata.normalize("NFKD", text)
    base = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return base.casefold(), text.swapcase(), text


def _dictionary_collate(a: str, b: str) -> int:
    ka, kb = _text_key(a), _text_key(b)
    return (ka > kb) - (ka < kb)


def _compare_options(a: CellValue, b: CellValue, collate: Callable[[str, str], int]) -> int:
    if _is_number(a) and _is_number(b):
        return (a > b) - (a < b)
    if isinstance(a, str) and isinstance(b, str):
        return collate(a, b)
    return collate(_as_text(a), _as_text(b))


def sort_options(values: Iterable[CellValue]) -> List[CellValue]:
    """
    Ascending dropdown order.

    Two numbers compare numerically, two strings with the active collation
    locale, and a number/string pair by their string forms. Under the C or
    POSIX locale, which only orders code points, strings are compared
    case- and accent-insensitively first instead.
    """
    collate = _dictionary_collate if _uses_code_point_collation() else locale.strcoll
    compare = functools.partial(_compare_options, collate=collate)
    return sorted(values, key=functools.cmp_to_key(compare))


# -----------------------------------------------------------------------------
# Options
# -----------------------------------------------------------------------------
def unique_options(rows: Iterable[Row], column: str) -> List[CellValue]:
    """Sorted distinct values of `column`, skipping absent and ""."""
    seen: Dict[CellValue, None] = {}
    for row in rows:
        value = row.get(column)
        if value is None or value == "":
            continue
        seen.setdefault(value, None)
    return sort_options(seen)


def available_options(
    rows: Sequence[Row],
    filters: Mapping[str, Sequence[CellValue]],
    column: str,
) -> List[CellValue]:
    """
    Options for `column` given every active filter except its own.

    The column's own selection never narrows its option list, so a user
    can always see (and deselect) what they picked.
    """
    other_filters = {c: v for c, v in filters.items() if c != column}
    candidates = filter_rows(rows, other_filters)
    return unique_options(candidates, column)


def all_unique_options(rows: Sequence[Row], column_names: Sequence[str]) -> OptionsByColumn:
    """Unfiltered options for every column; {} for an empty dataset."""
    if not rows or not column_names:
        return {}
    return {column: unique_options(rows, column) for column in column_names}


# -----------------------------------------------------------------------------
# Memoised selectors
# -----------------------------------------------------------------------------
select_visible_rows: MemoizedSelector[Sequence[Row]] = memoize_last(filter_rows)
select_all_unique_options: MemoizedSelector[OptionsByColumn] = memoize_last(all_unique_options)


def make_select_available_options() -> MemoizedSelector[List[CellValue]]:
    """
    Build an independent memoised `available_options` selector.

    Create one per column control; calling it as
    `selector(rows, filters, column)` only recomputes when the rows object,
    the filter content or the column changes.
    """
    return memoize_last(available_options)


class ColumnOptionsSelectors:
    """Lazily created per-column selectors, keyed by (scope, column)."""

    def __init__(self) -> None:
        self._selectors: Dict[Tuple[Optional[str], str], MemoizedSelector[List[CellValue]]] = {}
        self._lock = threading.Lock()

    def get(self, column: str, scope: Optional[str] = None) -> MemoizedSelector[List[CellValue]]:
        key = (scope, column)
        with self._lock:
            selector = self._selectors.get(key)
            if selector is None:
                selector = make_select_available_options()
                self._selectors[key] = selector
        return selector

    def options(
        self,
        rows: Sequence[Row],
        filters: Mapping[str, Sequence[CellValue]],
        column: str,
        scope: Optional[str] = None,
    ) -> List[CellValue]:
        return self.get(column, scope)(rows, filters, column)

    def reset(self, scope: Optional[str] = None) -> None:
        """Drop selectors for `scope` (all scopes when None)."""
        with self._lock:
            if scope is None:
                self._selectors.clear()
                return
            for key in [k for k in self._selectors if k[0] == scope]:
                del self._selectors[key]

    def __len__(self) -> int:
        with self._lock:
            return len(self._selectors)
