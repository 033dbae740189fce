from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Dict

import dash
from dash import Input, Output

from bi_dashboard.core import dataset as dataset_store
from bi_dashboard.core.dataset import DatasetState
from bi_dashboard.services.dashboard_session import DashboardSession
from bi_dashboard.ui.ids import IDs

if TYPE_CHECKING:
    from bi_dashboard.ui.config import AppConfig

logger = logging.getLogger(__name__)


def dataset_state_payload(dataset_name: str | None, state: DatasetState) -> Dict[str, Any]:
    data = state.to_dict()
    data["dataset"] = dataset_name
    return data


def load_dataset_state(ctx: AppConfig, dataset_name: str | None) -> Dict[str, Any]:
    """
    Run a dataset switch and return the dataset-state store payload.

    Each switch runs in a fresh DashboardSession that lives for this one
    request, so its request-id guard never sees an overlapping load here.
    Ordering between overlapping switches from one page is left to the Dash
    renderer, which applies only the response of the latest invocation of
    this callback. Filter commands and derived views are served by the
    filter and render callbacks from the stores plus the shared memoised
    selectors, not through the session.
    """
    if not dataset_name:
        return dataset_state_payload(None, dataset_store.EMPTY_DATASET_STATE)

    session = DashboardSession(ctx.datasets)
    try:
        state = session.switch_dataset(dataset_name)
    except KeyError:
        logger.warning("Unknown dataset selected: %r", dataset_name)
        state = dataset_store.load_failure(
            dataset_store.EMPTY_DATASET_STATE, f"Unknown dataset '{dataset_name}'"
        )
    return dataset_state_payload(dataset_name, state)


def register_dataset_callbacks(app: dash.Dash, ctx: AppConfig) -> None:
    @app.callback(
        Output(IDs.Store.DATASET_STATE, "data"),
        Input(IDs.Control.DATASET_SELECT, "value"),
    )
    def load_selected_dataset(dataset_name: str | None):
        return load_dataset_state(ctx, dataset_name)
