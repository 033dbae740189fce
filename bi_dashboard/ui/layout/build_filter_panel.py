from __future__ import annotations

from typing import List, Mapping, Sequence

import dash_bootstrap_components as dbc
from dash import dcc, html

from bi_dashboard.core.dataset import CellValue
from bi_dashboard.core.filter_state import ActiveFilters
from bi_dashboard.ui.helpers import (
    HIDDEN,
    column_label,
    dropdown_options,
    filter_container_style,
    filterable_columns,
)
from bi_dashboard.ui.ids import IDs, column_filter_container_id, column_filter_id


def build_column_filter(
    column: str,
    available: Sequence[CellValue],
    selected: Sequence[CellValue],
) -> html.Div:
    label = column_label(column)
    return html.Div(
        id=column_filter_container_id(column),
        style=filter_container_style(available, selected),
        children=[
            html.Label(label, className="form-label fw-semibold text-capitalize"),
            dcc.Dropdown(
                id=column_filter_id(column),
                options=dropdown_options(available, selected),
                value=list(selected),
                multi=True,
                placeholder=f"Select {label}...",
                className="mb-3",
            ),
        ],
    )


def build_column_filters(
    column_names: Sequence[str],
    options_by_column: Mapping[str, Sequence[CellValue]],
    filters: ActiveFilters,
) -> List[html.Div]:
    columns = filterable_columns(column_names)
    if not columns:
        return [html.P("No columns available to filter.", className="text-muted mb-0")]

    return [
        build_column_filter(
            column,
            options_by_column.get(column, []),
            filters.selection(column),
        )
        for column in columns
    ]


def build_filter_panel() -> dbc.Card:
    return dbc.Card(
        [
            dbc.CardHeader("Filters", className="fw-semibold"),
            dbc.CardBody(
                [
                    html.Div(
                        id=IDs.Control.FILTER_PANEL_BODY,
                        children=[
                            html.P(
                                "Loading filter definitions or no columns available.",
                                className="text-muted mb-0",
                            ),
                        ],
                    ),
                    dbc.Button(
                        "Clear All Filters",
                        id=IDs.Control.CLEAR_ALL_FILTERS_BTN,
                        color="danger",
                        size="sm",
                        className="mt-2",
                        style=HIDDEN,
                    ),
                ],
                className="bi-filter-body",
            ),
        ],
        className="bi-sidebar",
    )
