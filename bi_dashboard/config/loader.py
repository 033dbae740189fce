from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from bi_dashboard.config.model import DEFAULT_PAGE_SIZE, DatasetConfig, GlobalConfig
from bi_dashboard.core.exceptions import ConfigError
from bi_dashboard.ingest.csv_loader import is_url

logger = logging.getLogger(__name__)

DATA_ROOT_ENV = "BI_DASHBOARD_DATA_ROOT"


def _resolve_data_root(root: Path, raw_global: dict) -> Optional[Path]:
    data_root_raw = raw_global.get("data_root")
    if data_root_raw is None:
        env_root = os.environ.get(DATA_ROOT_ENV)
        return Path(env_root) if env_root else None

    data_root_path = Path(data_root_raw)
    if data_root_path.is_absolute():
        return data_root_path
    return (root / data_root_path).resolve()


def resolve_locator(cfg: DatasetConfig, data_root: Optional[Path]) -> str:
    """
    URLs and absolute paths pass through; relative paths are joined onto
    data_root (if any).
    """
    if is_url(cfg.path):
        return cfg.path

    path = Path(cfg.path)
    if path.is_absolute() or data_root is None:
        return str(path)

    resolved = data_root / path
    # Fallback for a redundant 'data/' prefix when data_root already is data/
    if not resolved.is_file() and path.parts and path.parts[0] == "data":
        alt_path = data_root / Path(*path.parts[1:])
        if alt_path.is_file():
            resolved = alt_path
    return str(resolved)


def _parse_page_size(raw_global: dict) -> int:
    page_size = raw_global.get("page_size", DEFAULT_PAGE_SIZE)
    try:
        page_size = int(page_size)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"global.json: page_size must be an integer, got {page_size!r}") from e
    if page_size < 1:
        raise ConfigError(f"global.json: page_size must be >= 1, got {page_size}")
    return page_size


def load_global_config(root: Path) -> GlobalConfig:
    """
    Load configuration from a directory using the multi-file layout:

        root/global.json
        root/datasets/*.json
    """
    logger.info(
        "Loading global config",
        extra={"config_root": str(root)},
    )

    global_path = root / "global.json"
    if not global_path.is_file():
        raise FileNotFoundError(f"File not found at {global_path}")

    with global_path.open() as f:
        try:
            raw_global = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in {global_path}: {e}") from e

    data_root = _resolve_data_root(root, raw_global)

    datasets_dir = root / "datasets"
    datasets: List[DatasetConfig] = []

    if datasets_dir.is_dir():
        logger.info("Scanning for dataset configurations in: %s", datasets_dir)

        files = sorted(datasets_dir.glob("*.json"))
        if not files:
            logger.warning("No .json files found in %s", datasets_dir)

        for idx, config_file in enumerate(files):
            logger.info("Loading dataset config: %s", config_file.name)
            try:
                with config_file.open() as f:
                    raw = json.load(f)
                if "path" not in raw:
                    raise ConfigError(f"{config_file.name}: missing 'path'")
                cfg = DatasetConfig.from_raw(raw, source_path=config_file, index=idx)
                cfg.resolved_locator = resolve_locator(cfg, data_root)
                datasets.append(cfg)
            except (OSError, json.JSONDecodeError, ConfigError) as e:
                logger.error("Failed to load %s: %s", config_file.name, e)
    else:
        logger.warning("Datasets directory not found at: %s", datasets_dir)

    return GlobalConfig(
        ui_title=raw_global.get("ui_title", "Business Intelligence Dashboard"),
        subtitle=raw_global.get("subtitle", "Interactive Dataset Explorer"),
        default_dataset=raw_global.get("default_dataset"),
        page_size=_parse_page_size(raw_global),
        data_root=data_root,
        datasets=datasets,
    )


def load_dataset_registry(path: Path) -> Tuple[GlobalConfig, Dict[str, DatasetConfig]]:
    """
    Load global config + dataset config objects only (no data is read).
    Returns mapping of dataset name -> DatasetConfig, in file order.
    """
    global_config = load_global_config(path)

    cfg_by_name: Dict[str, DatasetConfig] = {}
    seen_keys: Dict[str, str] = {}
    duplicates: List[str] = []

    for ds_cfg in global_config.datasets:
        if ds_cfg.name in cfg_by_name:
            duplicates.append(ds_cfg.name)
            continue
        if ds_cfg.key in seen_keys:
            raise ConfigError(f"Duplicate dataset key '{ds_cfg.key}' in config")
        seen_keys[ds_cfg.key] = ds_cfg.name
        cfg_by_name[ds_cfg.name] = ds_cfg

    if duplicates:
        raise ConfigError(f"Duplicate dataset names in config: {sorted(set(duplicates))}")

    if not cfg_by_name:
        logger.warning("No datasets configured under: %s", path)

    default = global_config.default_dataset
    if default is not None and default not in cfg_by_name:
        logger.warning(
            "default_dataset %r is not configured; falling back to the first dataset",
            default,
        )
        global_config.default_dataset = None

    logger.info(
        "Dataset registry loaded (lazy mode; datasets not read)",
        extra={
            "config_root": str(path),
            "n_dataset_configs": len(cfg_by_name),
            "dataset_names": list(cfg_by_name.keys()),
        },
    )

    return global_config, cfg_by_name
