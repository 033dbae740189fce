"""
Config package for bi_dashboard.

Responsible for:
- config models (GlobalConfig, DatasetConfig)
- config loading (load_global_config / load_dataset_registry)
"""

from .model import GlobalConfig, DatasetConfig
from .loader import load_global_config, load_dataset_registry
