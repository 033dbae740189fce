from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Sequence

from bi_dashboard.core import dataset as dataset_store
from bi_dashboard.core import filter_state as filter_store
from bi_dashboard.core.dataset import CellValue, Dataset, DatasetState, Row
from bi_dashboard.core.exceptions import (
    ContentTypeMismatchError,
    IngestionError,
    SourceNotFoundError,
)
from bi_dashboard.core.filter_state import ActiveFilters
from bi_dashboard.core.memo import memoize_last
from bi_dashboard.core.selectors import (
    ColumnOptionsSelectors,
    OptionsByColumn,
    all_unique_options,
    filter_rows,
)
from bi_dashboard.services.dataset_service import DatasetManager

logger = logging.getLogger(__name__)


def is_expected_absence(error: BaseException) -> bool:
    """
    A failure that looks like "this placeholder file was never provided"
    rather than a broken file: not found, or some non-CSV page served
    in its place.
    """
    return isinstance(error, (SourceNotFoundError, ContentTypeMismatchError))


class DashboardSession:
    """
    Orchestrates the dataset store and the filter store for one user
    session, and exposes the derived views the presentation layer reads.

    Every dataset switch gets a new request id; results reported for an
    older id are ignored, so a slow earlier load can never overwrite a
    newer one.
    """

    def __init__(self, datasets: Optional[DatasetManager] = None) -> None:
        self._datasets = datasets
        self.dataset_state: DatasetState = dataset_store.EMPTY_DATASET_STATE
        self.filters: ActiveFilters = filter_store.EMPTY_FILTERS
        self.dataset_name: Optional[str] = None
        self._request_id = 0

        self._select_visible_rows = memoize_last(filter_rows)
        self._select_all_options = memoize_last(all_unique_options)
        self._column_selectors = ColumnOptionsSelectors()

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------
    @property
    def current_request_id(self) -> int:
        return self._request_id

    def begin_load(self, dataset_name: Optional[str] = None) -> int:
        """Start a new load: wipe data and filters, mark loading."""
        self._request_id += 1
        self.dataset_name = dataset_name
        self.dataset_state = dataset_store.load_start(dataset_store.clear(self.dataset_state))
        self.filters = filter_store.clear_all_filters(self.filters)
        logger.info(
            "Dataset load started",
            extra={"dataset": dataset_name, "request_id": self._request_id},
        )
        return self._request_id

    def _is_stale(self, request_id: int) -> bool:
        if request_id != self._request_id:
            logger.info(
                "Ignoring stale dataset load result",
                extra={"request_id": request_id, "current_request_id": self._request_id},
            )
            return True
        return False

    def complete_load(self, request_id: int, dataset: Dataset) -> bool:
        """Apply a successful load. Returns False if the result was stale."""
        if self._is_stale(request_id):
            return False

        if not dataset.column_names:
            logger.warning(
                "Dataset has no columns; showing it as empty",
                extra={"dataset": self.dataset_name, "locator": dataset.locator},
            )
            self._apply_empty_success()
            return True

        self.dataset_state = dataset_store.load_success(
            self.dataset_state, dataset.rows, dataset.column_names
        )
        self.filters = filter_store.prune_filters(self.filters, dataset.column_names)
        logger.info(
            "Dataset ready",
            extra={
                "dataset": self.dataset_name,
                "n_rows": len(dataset.rows),
                "n_columns": len(dataset.column_names),
            },
        )
        return True

    def fail_load(self, request_id: int, error: BaseException, optional: bool = False) -> bool:
        """
        Apply a failed load. Optional datasets that are simply missing are
        shown as ready-but-empty instead of as an error.
        """
        if self._is_stale(request_id):
            return False

        if optional and is_expected_absence(error):
            logger.warning(
                "Optional dataset is not available; displaying empty state",
                extra={"dataset": self.dataset_name, "error": str(error)},
            )
            self._apply_empty_success()
            return True

        message = str(error) or "An unknown error occurred"
        self.dataset_state = dataset_store.load_failure(self.dataset_state, message)
        logger.error(
            "Dataset load failed",
            extra={"dataset": self.dataset_name, "error": message},
        )
        return True

    def _apply_empty_success(self) -> None:
        self.dataset_state = dataset_store.load_success(self.dataset_state, [], [])
        self.filters = filter_store.prune_filters(self.filters, [])

    def switch_dataset(self, dataset_name: str) -> DatasetState:
        """Synchronously load `dataset_name` through the DatasetManager."""
        if self._datasets is None:
            raise RuntimeError("DashboardSession has no DatasetManager attached")

        optional = self._datasets.is_optional(dataset_name)
        request_id = self.begin_load(dataset_name)
        try:
            dataset = self._datasets[dataset_name]
        except IngestionError as e:
            self.fail_load(request_id, e, optional=optional)
        else:
            self.complete_load(request_id, dataset)
        return self.dataset_state

    # ------------------------------------------------------------------
    # Filter commands
    # ------------------------------------------------------------------
    def set_filter(self, column: str, values: Iterable[CellValue]) -> ActiveFilters:
        self.filters = filter_store.set_filter(self.filters, column, values)
        return self.filters

    def clear_filter(self, column: str) -> ActiveFilters:
        self.filters = filter_store.clear_filter(self.filters, column)
        return self.filters

    def clear_all_filters(self) -> ActiveFilters:
        self.filters = filter_store.clear_all_filters(self.filters)
        return self.filters

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------
    @property
    def column_names(self) -> Sequence[str]:
        return self.dataset_state.column_names

    def visible_rows(self) -> Sequence[Row]:
        return self._select_visible_rows(self.dataset_state.rows, self.filters)

    def available_options(self, column: str) -> List[CellValue]:
        return self._column_selectors.options(self.dataset_state.rows, self.filters, column)

    def all_unique_options(self) -> OptionsByColumn:
        return self._select_all_options(self.dataset_state.rows, self.dataset_state.column_names)

    def selection(self, column: str) -> List[CellValue]:
        return self.filters.selection(column)
