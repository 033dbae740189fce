"""
Core domain layer: dataset store, filter store and the derivations
(visible rows, per-column available options) computed from both.
"""

from .dataset import Dataset, DatasetState, LoadStatus
from .filter_state import ActiveFilters
from .selectors import filter_rows, available_options, all_unique_options

__all__ = [
    "Dataset",
    "DatasetState",
    "LoadStatus",
    "ActiveFilters",
    "filter_rows",
    "available_options",
    "all_unique_options",
]
