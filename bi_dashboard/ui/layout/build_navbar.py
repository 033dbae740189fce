from __future__ import annotations

from typing import List, Optional, Sequence

import dash_bootstrap_components as dbc
from dash import dcc, html

from bi_dashboard.config.model import DatasetConfig, GlobalConfig
from bi_dashboard.ui.ids import IDs


def dataset_select_options(datasets: Sequence[DatasetConfig]) -> List[dict]:
    """Dataset picker entries; the config description shows on hover."""
    options = []
    for cfg in datasets:
        option = {"label": cfg.name, "value": cfg.name}
        if cfg.description:
            option["title"] = cfg.description
        options.append(option)
    return options


def build_navbar(
    datasets: Sequence[DatasetConfig],
    global_config: GlobalConfig,
    default_name: Optional[str],
) -> dbc.Navbar:
    brand = html.Div(
        [
            html.H2(global_config.ui_title, className="mb-0"),
            html.Small(global_config.subtitle, className="text-muted"),
        ],
        className="bi-brand",
    )

    picker = html.Div(
        [
            html.Label("Dataset", htmlFor=IDs.Control.DATASET_SELECT, className="bi-picker-label"),
            dcc.Dropdown(
                id=IDs.Control.DATASET_SELECT,
                options=dataset_select_options(datasets),
                value=default_name,
                clearable=False,
                searchable=False,
                placeholder="Choose a dataset",
            ),
        ],
        className="bi-picker ms-auto",
    )

    return dbc.Navbar(
        dbc.Container([brand, picker], fluid=True),
        color="light",
        className="bi-navbar shadow-sm",
    )
