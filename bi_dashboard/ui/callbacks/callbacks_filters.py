from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, List, Optional, Sequence

import dash
from dash import ALL, Input, Output, State, callback_context, html
from dash.exceptions import PreventUpdate

from bi_dashboard.core.filter_state import (
    ActiveFilters,
    clear_all_filters,
    prune_filters,
    set_filter,
)
from bi_dashboard.core.selectors import select_all_unique_options
from bi_dashboard.ui.helpers import (
    HIDDEN,
    VISIBLE,
    dropdown_options,
    filter_container_style,
    parse_dataset_state,
    rows_for_state,
)
from bi_dashboard.ui.ids import IDs
from bi_dashboard.ui.layout.build_filter_panel import build_column_filters

if TYPE_CHECKING:
    from bi_dashboard.ui.config import AppConfig

logger = logging.getLogger(__name__)

COLUMN_FILTER_ALL = {"type": IDs.Pattern.COLUMN_FILTER, "index": ALL}
COLUMN_FILTER_CONTAINER_ALL = {"type": IDs.Pattern.COLUMN_FILTER_CONTAINER, "index": ALL}


def filters_from_dropdowns(
    current: ActiveFilters,
    ids: Sequence[dict],
    values: Sequence[Optional[List[Any]]],
    valid_columns: Sequence[str],
) -> ActiveFilters:
    """Apply every dropdown's value as a full-replace selection."""
    filters = current
    for component_id, value in zip(ids, values):
        filters = set_filter(filters, component_id["index"], value or [])
    return prune_filters(filters, valid_columns)


def register_filter_callbacks(app: dash.Dash, ctx: AppConfig) -> None:
    # ---------------------------------------------------------
    # One dropdown per column, seeded with unfiltered options
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Control.FILTER_PANEL_BODY, "children"),
        Input(IDs.Store.DATASET_STATE, "data"),
    )
    def rebuild_filter_panel(ds_data: dict | None):
        _, _, column_names = parse_dataset_state(ds_data)
        try:
            rows = rows_for_state(ctx, ds_data)
            options_by_column = select_all_unique_options(rows, column_names)
            return build_column_filters(column_names, options_by_column, ActiveFilters())
        except Exception:
            logger.exception("Error building filter panel", extra={"dataset_state": ds_data})
            return html.P("Filters encountered an error.", className="text-danger mb-0")

    # ---------------------------------------------------------
    # Dropdown values / dataset switch -> filter-state store
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Store.FILTER_STATE, "data"),
        Input(COLUMN_FILTER_ALL, "value"),
        Input(IDs.Store.DATASET_STATE, "data"),
        State(COLUMN_FILTER_ALL, "id"),
        State(IDs.Store.FILTER_STATE, "data"),
    )
    def update_filter_state(values, ds_data, ids, fs_data):
        _, _, column_names = parse_dataset_state(ds_data)
        current = ActiveFilters.from_dict(fs_data)

        if callback_context.triggered_id == IDs.Store.DATASET_STATE:
            # A new dataset never inherits selections from the previous one
            filters = prune_filters(clear_all_filters(current), column_names)
        else:
            filters = filters_from_dropdowns(current, ids or [], values or [], column_names)

        return filters.to_dict()

    # ---------------------------------------------------------
    # Cross-filtered options for every dropdown
    # ---------------------------------------------------------
    @app.callback(
        Output(COLUMN_FILTER_ALL, "options"),
        Output(COLUMN_FILTER_CONTAINER_ALL, "style"),
        Output(IDs.Control.CLEAR_ALL_FILTERS_BTN, "style"),
        Input(IDs.Store.FILTER_STATE, "data"),
        State(IDs.Store.DATASET_STATE, "data"),
        State(COLUMN_FILTER_ALL, "id"),
    )
    def refresh_filter_options(fs_data, ds_data, ids):
        ids = ids or []
        filters = ActiveFilters.from_dict(fs_data)
        clear_style = VISIBLE if len(filters) > 0 else HIDDEN
        name, _, _ = parse_dataset_state(ds_data)

        try:
            rows = rows_for_state(ctx, ds_data)
            options, styles = [], []
            for component_id in ids:
                column = component_id["index"]
                available = ctx.column_selectors.options(rows, filters, column, scope=name)
                selected = filters.selection(column)
                options.append(dropdown_options(available, selected))
                styles.append(filter_container_style(available, selected))
            return options, styles, clear_style
        except Exception:
            logger.exception("Error computing filter options", extra={"filter_state": fs_data})
            return [dash.no_update] * len(ids), [dash.no_update] * len(ids), clear_style

    # ---------------------------------------------------------
    # Clear all -> reset every dropdown (filter state follows)
    # ---------------------------------------------------------
    @app.callback(
        Output(COLUMN_FILTER_ALL, "value"),
        Input(IDs.Control.CLEAR_ALL_FILTERS_BTN, "n_clicks"),
        State(COLUMN_FILTER_ALL, "id"),
        State(IDs.Store.FILTER_STATE, "data"),
        prevent_initial_call=True,
    )
    def clear_all_dropdowns(n_clicks, ids, fs_data):
        if not n_clicks:
            raise PreventUpdate
        filters = clear_all_filters(ActiveFilters.from_dict(fs_data))
        logger.info("Clearing all filters")
        return [filters.selection(component_id["index"]) for component_id in (ids or [])]
