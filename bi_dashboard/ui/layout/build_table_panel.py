from __future__ import annotations

import dash_bootstrap_components as dbc
from dash import dash_table, dcc, html

from bi_dashboard.ui.ids import IDs

_FONT = 'system-ui, -apple-system, BlinkMacSystemFont, "SF Pro Text", "Segoe UI", sans-serif'


def build_table_panel(page_size: int) -> dbc.Card:
    return dbc.Card(
        [
            dbc.CardHeader(
                html.Div(
                    [
                        html.Strong("Data"),
                        html.Small(id=IDs.Control.ROW_COUNT_TEXT, className="text-muted ms-2"),
                    ],
                    className="d-flex align-items-center",
                ),
                className="p-2",
            ),
            dbc.CardBody(
                [
                    dcc.Loading(
                        id="data-table-loading",
                        type="default",
                        children=dash_table.DataTable(
                            id=IDs.Control.DATA_TABLE,
                            data=[],
                            columns=[],
                            page_action="native",
                            page_size=page_size,
                            sort_action="native",
                            filter_action="none",
                            style_table={"overflowX": "auto"},
                            style_as_list_view=True,
                            style_cell={
                                "fontFamily": _FONT,
                                "fontSize": "12px",
                                "padding": "6px 8px",
                                "border": "none",
                                "textAlign": "left",
                                "minWidth": "80px",
                                "maxWidth": "260px",
                                "whiteSpace": "nowrap",
                                "textOverflow": "ellipsis",
                            },
                            style_header={
                                "fontFamily": _FONT,
                                "fontSize": "12px",
                                "fontWeight": "600",
                                "backgroundColor": "#f3f4f6",
                                "borderBottom": "1px solid #e5e7eb",
                            },
                            style_data={"borderBottom": "1px solid #e5e7eb"},
                        ),
                    ),
                    html.Div(
                        [
                            dbc.Button(
                                "Download data (CSV)",
                                id=IDs.Control.DOWNLOAD_DATA_BTN,
                                color="secondary",
                                size="sm",
                                className="mt-2 ms-auto me-2",
                            ),
                            dcc.Download(id=IDs.Control.DOWNLOAD_DATA),
                        ],
                        className="d-flex justify-content-end align-items-center",
                    ),
                ],
                className="bi-main-body",
            ),
        ],
        className="bi-maincard",
    )
