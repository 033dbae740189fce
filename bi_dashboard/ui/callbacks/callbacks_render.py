from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import dash
import dash_bootstrap_components as dbc
import pandas as pd
from dash import Input, Output, State, dcc
from dash.exceptions import PreventUpdate

from bi_dashboard.core.filter_state import ActiveFilters
from bi_dashboard.core.selectors import select_visible_rows
from bi_dashboard.ui.helpers import (
    parse_dataset_state,
    row_count_text,
    rows_for_state,
    status_banner,
    table_columns,
    table_records,
)
from bi_dashboard.ui.ids import IDs

if TYPE_CHECKING:
    from bi_dashboard.ui.config import AppConfig

logger = logging.getLogger(__name__)


def register_render_callbacks(app: dash.Dash, ctx: AppConfig) -> None:
    # ---------------------------------------------------------
    # Loading / error banner
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Control.STATUS_AREA, "children"),
        Input(IDs.Store.DATASET_STATE, "data"),
    )
    def update_status_area(ds_data: dict[str, Any] | None):
        try:
            return status_banner(ds_data)
        except Exception:
            logger.exception("Error rendering status banner", extra={"dataset_state": ds_data})
            return dbc.Alert("Status unavailable.", color="warning")

    # ---------------------------------------------------------
    # Visible rows -> table
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Control.DATA_TABLE, "data"),
        Output(IDs.Control.DATA_TABLE, "columns"),
        Output(IDs.Control.ROW_COUNT_TEXT, "children"),
        Input(IDs.Store.FILTER_STATE, "data"),
        Input(IDs.Store.DATASET_STATE, "data"),
    )
    def update_table(fs_data: dict[str, Any] | None, ds_data: dict[str, Any] | None):
        _, _, column_names = parse_dataset_state(ds_data)
        try:
            rows = rows_for_state(ctx, ds_data)
            visible = select_visible_rows(rows, ActiveFilters.from_dict(fs_data))
            return (
                table_records(visible),
                table_columns(column_names),
                row_count_text(len(visible), len(rows)),
            )
        except Exception:
            logger.exception(
                "Error in update_table",
                extra={"filter_state": fs_data, "dataset_state": ds_data},
            )
            return [], [], "Data table encountered an error."

    # ---------------------------------------------------------
    # CSV download of the visible rows
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Control.DOWNLOAD_DATA, "data"),
        Input(IDs.Control.DOWNLOAD_DATA_BTN, "n_clicks"),
        State(IDs.Store.FILTER_STATE, "data"),
        State(IDs.Store.DATASET_STATE, "data"),
        prevent_initial_call=True,
    )
    def download_visible_rows(n_clicks, fs_data, ds_data):
        if not n_clicks:
            raise PreventUpdate

        name, _, column_names = parse_dataset_state(ds_data)
        rows = rows_for_state(ctx, ds_data)
        if not column_names:
            raise PreventUpdate

        visible = select_visible_rows(rows, ActiveFilters.from_dict(fs_data))
        df = pd.DataFrame.from_records(table_records(visible), columns=column_names)
        logger.info(
            "Downloading visible rows",
            extra={"dataset": name, "n_rows": len(df)},
        )
        return dcc.send_data_frame(df.to_csv, f"{name or 'dataset'}_filtered.csv", index=False)
