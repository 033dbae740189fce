from __future__ import annotations

from typing import TYPE_CHECKING

import dash_bootstrap_components as dbc
from dash import dcc, html

from bi_dashboard.ui.ids import IDs
from bi_dashboard.ui.layout.build_filter_panel import build_filter_panel
from bi_dashboard.ui.layout.build_navbar import build_navbar
from bi_dashboard.ui.layout.build_table_panel import build_table_panel

if TYPE_CHECKING:
    from bi_dashboard.ui.config import AppConfig


def build_layout(ctx: AppConfig) -> dbc.Container:
    dataset_configs = []
    if ctx.datasets is not None:
        dataset_configs = [ctx.datasets.config(name) for name in ctx.dataset_names]
    navbar = build_navbar(dataset_configs, ctx.global_config, ctx.default_dataset_name)

    if not ctx.dataset_names:
        body = dbc.Alert(
            "No datasets configured. Add a dataset config under datasets/.",
            color="warning",
            className="mt-3",
        )
    else:
        body = dbc.Row(
            [
                dbc.Col(build_filter_panel(), md=3, className="mt-3"),
                dbc.Col(build_table_panel(ctx.global_config.page_size), md=9, className="mt-3"),
            ],
            className="gx-3",
        )

    return dbc.Container(
        fluid=True,
        className="bi-root",
        children=[
            navbar,

            # In-memory only: nothing survives a page reload
            dcc.Store(id=IDs.Store.DATASET_STATE, storage_type="memory"),
            dcc.Store(id=IDs.Store.FILTER_STATE, storage_type="memory", data={}),

            html.Div(id=IDs.Control.STATUS_AREA, className="mt-3"),
            body,
        ],
    )
