from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import dash_bootstrap_components as dbc
from dash import Dash

from bi_dashboard.config.loader import load_dataset_registry
from bi_dashboard.services.dataset_service import DatasetLoader, DatasetManager
from bi_dashboard.ui.callbacks.callbacks_datasets import register_dataset_callbacks
from bi_dashboard.ui.callbacks.callbacks_filters import register_filter_callbacks
from bi_dashboard.ui.callbacks.callbacks_render import register_render_callbacks
from bi_dashboard.ui.config import AppConfig
from bi_dashboard.ui.layout.build_layout import build_layout

logger = logging.getLogger(__name__)


def build_app_config(
    config_root: Path | str = Path("config"),
    loader: Optional[DatasetLoader] = None,
) -> AppConfig:
    config_root = Path(config_root)

    # 1) Load Config
    global_config, cfg_by_name = load_dataset_registry(config_root)

    # 2) Initialize Service Layer
    dataset_manager = DatasetManager(cfg_by_name, loader=loader)
    dataset_names = list(cfg_by_name.keys())

    # 3) Choose Default Dataset
    default_name = global_config.default_dataset
    if default_name is None and dataset_names:
        default_name = dataset_names[0]

    ctx = AppConfig(
        config_root=config_root,
        global_config=global_config,
        dataset_names=dataset_names,
        datasets=dataset_manager,
        default_dataset_name=default_name,
    )
    ctx.validate()
    return ctx


def create_dash_app(
    config_root: Path | str = Path("config"),
    loader: Optional[DatasetLoader] = None,
) -> Dash:
    ctx = build_app_config(config_root, loader=loader)

    assets_path = Path(__file__).parent / "assets"

    app = Dash(
        __name__,
        external_stylesheets=[dbc.themes.FLATLY],
        assets_folder=str(assets_path),
        # Filter dropdowns are created per dataset at runtime
        suppress_callback_exceptions=True,
    )
    app.title = ctx.global_config.ui_title

    app.layout = build_layout(ctx)

    # Register callbacks
    register_dataset_callbacks(app, ctx)
    register_filter_callbacks(app, ctx)
    register_render_callbacks(app, ctx)

    logger.info(
        "Dash app created",
        extra={
            "config_root": str(ctx.config_root),
            "datasets": ctx.dataset_names,
            "default_dataset": ctx.default_dataset_name,
        },
    )
    return app
