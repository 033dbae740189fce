from __future__ import annotations

import logging
from typing import Callable, Dict, Iterator, Mapping, Optional

from bi_dashboard.config.model import DatasetConfig
from bi_dashboard.core.dataset import Dataset
from bi_dashboard.core.exceptions import IngestionError
from bi_dashboard.ingest.csv_loader import load_csv

logger = logging.getLogger(__name__)

DatasetLoader = Callable[[DatasetConfig], Dataset]


def load_from_config(cfg: DatasetConfig) -> Dataset:
    return load_csv(cfg.locator, delimiter=cfg.delimiter)


class DatasetManager(Mapping[str, Dataset]):
    """
    Central service for managing datasets.
    Implements the Mapping interface (dict-like) so the UI layer can look
    datasets up by name while loading stays lazy.

    Only successful loads are cached; a failed load raises every time so a
    fixed file is picked up on the next attempt.
    """

    def __init__(
        self,
        cfg_by_name: Dict[str, DatasetConfig],
        loader: Optional[DatasetLoader] = None,
    ):
        self._cfg_by_name = cfg_by_name
        self._loader = loader or load_from_config
        self._loaded: Dict[str, Dataset] = {}

    def __getitem__(self, name: str) -> Dataset:
        # 1. Fast path: already loaded
        if name in self._loaded:
            return self._loaded[name]

        # 2. Check config existence
        cfg = self._cfg_by_name.get(name)
        if cfg is None:
            raise KeyError(f"Unknown dataset '{name}'")

        # 3. Lazy load
        try:
            logger.info("Lazy-loading dataset", extra={"dataset": cfg.name, "locator": cfg.locator})
            ds = self._loader(cfg)
        except IngestionError as e:
            logger.error(
                "Dataset ingestion failed",
                extra={"dataset": cfg.name, "locator": cfg.locator, "error": str(e)},
            )
            raise
        except Exception:
            logger.exception(
                "Unexpected error while loading dataset",
                extra={"dataset": cfg.name},
            )
            raise

        self._loaded[name] = ds
        return ds

    def __iter__(self) -> Iterator[str]:
        return iter(self._cfg_by_name)

    def __len__(self) -> int:
        return len(self._cfg_by_name)

    def __contains__(self, name: object) -> bool:
        # Membership must not trigger a load
        return name in self._cfg_by_name

    def get(self, name: str, default=None) -> Dataset | None:
        try:
            return self[name]
        except (KeyError, IngestionError):
            return default

    def config(self, name: str) -> DatasetConfig:
        cfg = self._cfg_by_name.get(name)
        if cfg is None:
            raise KeyError(f"Unknown dataset '{name}'")
        return cfg

    def locator(self, name: str) -> str:
        return self.config(name).locator

    def is_optional(self, name: str) -> bool:
        return self.config(name).optional

    def is_loaded(self, name: str) -> bool:
        return name in self._loaded

    def invalidate(self, name: Optional[str] = None) -> None:
        """Forget a cached dataset (all of them when name is None)."""
        if name is None:
            self._loaded.clear()
        else:
            self._loaded.pop(name, None)
