from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Mapping, Optional, Sequence, Tuple, Union

CellValue = Union[str, int, float]
Row = Mapping[str, Optional[CellValue]]


@dataclass(frozen=True)
class Dataset:
    """
    Rectangular dataset produced by ingestion.

    Fields:

    - rows: Ordered rows. Each row maps column name -> cell value; a missing
      key or None means the value is absent.
    - column_names: Column names in source order (display order).
    - locator: Where the data came from (path or URL), informational only.
    """
    rows: Tuple[Row, ...] = ()
    column_names: Tuple[str, ...] = ()
    locator: Optional[str] = None

    @classmethod
    def from_records(
        cls,
        rows: Sequence[Row],
        column_names: Sequence[str],
        locator: Optional[str] = None,
    ) -> Dataset:
        return cls(rows=tuple(rows), column_names=tuple(column_names), locator=locator)

    @property
    def n_rows(self) -> int:
        return len(self.rows)

    @property
    def is_empty(self) -> bool:
        return not self.rows or not self.column_names


class LoadStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


@dataclass(frozen=True)
class DatasetState:
    """
    Dataset store: the currently loaded rows/columns plus load status.

    IDLE and LOADING both mean "not ready yet"; `error` is only set when
    status is FAILED.
    """
    rows: Tuple[Row, ...] = ()
    column_names: Tuple[str, ...] = ()
    status: LoadStatus = LoadStatus.IDLE
    error: Optional[str] = None

    @property
    def loading(self) -> bool:
        return self.status is LoadStatus.LOADING

    @property
    def ready(self) -> bool:
        return self.status is LoadStatus.READY

    def to_dict(self) -> dict:
        """Status summary for the UI; rows stay server-side."""
        return {
            "status": self.status.value,
            "error": self.error,
            "column_names": list(self.column_names),
            "n_rows": len(self.rows),
        }


EMPTY_DATASET_STATE = DatasetState()


# -----------------------------------------------------------------------------
# Transitions: (previous state, payload) -> new state
# -----------------------------------------------------------------------------
def load_start(state: DatasetState) -> DatasetState:
    # Rows are kept; callers wanting a clean slate call clear() first
    return replace(state, status=LoadStatus.LOADING, error=None)


def load_success(
    state: DatasetState,
    rows: Sequence[Row],
    column_names: Sequence[str],
) -> DatasetState:
    return replace(
        state,
        rows=tuple(rows),
        column_names=tuple(column_names),
        status=LoadStatus.READY,
        error=None,
    )


def load_failure(state: DatasetState, message: str) -> DatasetState:
    return replace(
        state,
        rows=(),
        column_names=(),
        status=LoadStatus.FAILED,
        error=message,
    )


def clear(state: DatasetState) -> DatasetState:
    return EMPTY_DATASET_STATE
