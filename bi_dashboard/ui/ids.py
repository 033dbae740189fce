from __future__ import annotations

__all__ = ["IDs", "column_filter_id", "column_filter_container_id"]


class IDs:
    class Store:
        FILTER_STATE = "filter-state"
        DATASET_STATE = "dataset-state"

    class Control:
        DATASET_SELECT = "dataset-select"

        # Filter panel
        FILTER_PANEL_BODY = "filter-panel-body"
        CLEAR_ALL_FILTERS_BTN = "clear-all-filters-btn"

        # Table panel
        DATA_TABLE = "data-table"
        ROW_COUNT_TEXT = "row-count-text"
        DOWNLOAD_DATA = "download-data"
        DOWNLOAD_DATA_BTN = "download-data-btn"

        # Status banners
        STATUS_AREA = "status-area"

    class Pattern:
        # pattern-matching "type" strings
        COLUMN_FILTER = "column-filter"
        COLUMN_FILTER_CONTAINER = "column-filter-container"


def column_filter_id(column: str) -> dict:
    return {"type": IDs.Pattern.COLUMN_FILTER, "index": column}


def column_filter_container_id(column: str) -> dict:
    return {"type": IDs.Pattern.COLUMN_FILTER_CONTAINER, "index": column}
