from __future__ import annotations

from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple

from bi_dashboard.core.dataset import CellValue

FilterValues = Tuple[CellValue, ...]


class ActiveFilters(Mapping[str, FilterValues]):
    """
    Immutable mapping of column name -> accepted values.

    Invariant: every stored selection is non-empty. A column without an
    entry is unrestricted. Use the module-level transitions
    (set_filter, clear_filter, clear_all_filters, prune_filters) to derive
    new instances; an instance is never mutated after construction.

    Equality is content-based and instances are hashable, so they can be
    used as memoisation keys.
    """

    __slots__ = ("_selections", "_hash")

    def __init__(self, selections: Optional[Mapping[str, Iterable[CellValue]]] = None) -> None:
        normalised: Dict[str, FilterValues] = {}
        for column, values in (selections or {}).items():
            values = tuple(values)
            if values:
                normalised[column] = values
        self._selections = normalised
        self._hash: Optional[int] = None

    def __getitem__(self, column: str) -> FilterValues:
        return self._selections[column]

    def __iter__(self) -> Iterator[str]:
        return iter(self._selections)

    def __len__(self) -> int:
        return len(self._selections)

    def __hash__(self) -> int:
        if self._hash is None:
            self._hash = hash(frozenset(self._selections.items()))
        return self._hash

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ActiveFilters):
            return self._selections == other._selections
        return super().__eq__(other)

    def __repr__(self) -> str:
        return f"ActiveFilters({self._selections!r})"

    def selection(self, column: str) -> List[CellValue]:
        """Current selection for `column` ([] when unrestricted)."""
        return list(self._selections.get(column, ()))

    def to_dict(self) -> Dict[str, List[CellValue]]:
        return {column: list(values) for column, values in self._selections.items()}

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> ActiveFilters:
        if not data:
            return EMPTY_FILTERS
        return cls({str(column): list(values or []) for column, values in data.items()})


EMPTY_FILTERS = ActiveFilters()


# -----------------------------------------------------------------------------
# Transitions
# -----------------------------------------------------------------------------
def set_filter(filters: ActiveFilters, column: str, values: Iterable[CellValue]) -> ActiveFilters:
    """
    Replace the selection for `column` with `values`.

    An empty `values` removes the entry. This is a full replace, not a
    merge with the previous selection.
    """
    values = tuple(values)
    if not values:
        return clear_filter(filters, column)

    updated = dict(filters.items())
    updated[column] = values
    return ActiveFilters(updated)


def clear_filter(filters: ActiveFilters, column: str) -> ActiveFilters:
    if column not in filters:
        return filters
    return ActiveFilters({c: v for c, v in filters.items() if c != column})


def clear_all_filters(filters: ActiveFilters) -> ActiveFilters:
    return EMPTY_FILTERS


def prune_filters(filters: ActiveFilters, valid_columns: Iterable[str]) -> ActiveFilters:
    """Drop entries whose column is not in `valid_columns`."""
    valid = set(valid_columns)
    if all(column in valid for column in filters):
        return filters
    return ActiveFilters({c: v for c, v in filters.items() if c in valid})
