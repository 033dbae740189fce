from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

import dash_bootstrap_components as dbc
from dash import html

from bi_dashboard.core.dataset import CellValue, LoadStatus, Row
from bi_dashboard.core.exceptions import IngestionError
from bi_dashboard.ui.config import AppConfig

logger = logging.getLogger(__name__)

HIDDEN = {"display": "none"}
VISIBLE: Dict[str, str] = {}


def column_label(column: str) -> str:
    return column.replace("_", " ")


def is_filterable_column(column: str) -> bool:
    """Identifier columns get no dropdown."""
    return column.lower() != "id"


def filterable_columns(column_names: Sequence[str]) -> List[str]:
    return [c for c in column_names if is_filterable_column(c)]


def dropdown_options(
    available: Sequence[CellValue],
    selected: Sequence[CellValue] = (),
) -> List[dict]:
    """
    Dropdown options from the available values, followed by any current
    selections that other filters have since ruled out, so they can
    still be seen and removed.
    """
    values = list(available)
    present = set(values)
    values.extend(v for v in selected if v not in present)
    return [{"label": str(v), "value": v} for v in values]


def filter_container_style(available: Sequence[CellValue], selected: Sequence[CellValue]) -> dict:
    # Nothing to pick and nothing to deselect: hide the control
    if not available and not selected:
        return HIDDEN
    return VISIBLE


def row_count_text(n_visible: int, n_total: int) -> str:
    if n_visible == n_total:
        return f"{n_total} rows"
    return f"{n_visible} of {n_total} rows"


def table_columns(column_names: Sequence[str]) -> List[dict]:
    return [{"name": column_label(c), "id": c} for c in column_names]


def table_records(rows: Sequence[Row]) -> List[Dict[str, Any]]:
    return [dict(r) for r in rows]


def parse_dataset_state(data: Optional[Mapping[str, Any]]) -> Tuple[Optional[str], LoadStatus, List[str]]:
    """(dataset name, status, column names) from the dataset-state store."""
    if not isinstance(data, Mapping) or not data:
        return None, LoadStatus.IDLE, []
    try:
        status = LoadStatus(data.get("status", LoadStatus.IDLE.value))
    except ValueError:
        logger.warning("Unknown dataset status in store: %r", data.get("status"))
        status = LoadStatus.IDLE
    return data.get("dataset"), status, list(data.get("column_names") or [])


def rows_for_state(ctx: AppConfig, data: Optional[Mapping[str, Any]]) -> Sequence[Row]:
    """
    Rows of the dataset described by the dataset-state store.

    Datasets stay server-side in the DatasetManager; the store only names
    the one that is ready.
    """
    name, status, column_names = parse_dataset_state(data)
    if status is not LoadStatus.READY or not name or not column_names or ctx.datasets is None:
        return ()
    try:
        return ctx.datasets[name].rows
    except (KeyError, IngestionError):
        logger.exception("Dataset %r is marked ready but could not be read", name)
        return ()


def status_banner(data: Optional[Mapping[str, Any]]):
    name, status, column_names = parse_dataset_state(data)

    if status is LoadStatus.LOADING:
        return html.P("Loading data...", className="text-muted")

    if status is LoadStatus.FAILED:
        error = (data or {}).get("error") or "An unknown error occurred"
        return dbc.Alert(f"Error loading data: {error}", color="danger", className="mb-2")

    if status is LoadStatus.READY and not column_names:
        return dbc.Alert(
            f"Dataset '{name}' has no data to display.",
            color="info",
            className="mb-2",
        )

    return None
