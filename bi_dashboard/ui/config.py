from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from bi_dashboard.config.model import GlobalConfig
from bi_dashboard.core.selectors import ColumnOptionsSelectors
from bi_dashboard.services.dataset_service import DatasetManager


@dataclass
class AppConfig:
    config_root: Path
    global_config: GlobalConfig
    dataset_names: List[str] = field(default_factory=list)
    datasets: Optional[DatasetManager] = None
    default_dataset_name: Optional[str] = None

    # One memoised options selector per (dataset, column), shared by callbacks
    column_selectors: ColumnOptionsSelectors = field(default_factory=ColumnOptionsSelectors)

    def validate(self) -> None:
        """Ensure all required services are attached before the app starts."""
        if self.datasets is None:
            raise RuntimeError("AppConfig.datasets must be initialized.")
        if self.default_dataset_name is not None and self.default_dataset_name not in self.datasets:
            raise RuntimeError(
                f"AppConfig.default_dataset_name {self.default_dataset_name!r} is not configured."
            )
