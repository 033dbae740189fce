"""
Service layer: lazy dataset registry and the per-session orchestration
that wires ingestion into the dataset and filter stores.
"""

from .dataset_service import DatasetManager
from .dashboard_session import DashboardSession

__all__ = ["DatasetManager", "DashboardSession"]
