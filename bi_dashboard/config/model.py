from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

DEFAULT_PAGE_SIZE = 25


@dataclass
class DatasetConfig:
    """
    Parsed config entry for a single dataset.

    `raw` keeps the JSON as written; properties expose the fields the app
    uses. `path` is the locator as configured (relative paths are resolved
    by the loader).
    """
    raw: Dict[str, Any]
    source_path: Path
    index: int
    resolved_locator: Optional[str] = None

    @property
    def name(self) -> str:
        return self.raw.get("name", f"Dataset {self.index}")

    @property
    def key(self) -> str:
        return self.raw.get("key") or self.name

    @property
    def path(self) -> str:
        return str(self.raw["path"])

    @property
    def locator(self) -> str:
        return self.resolved_locator or self.path

    @property
    def optional(self) -> bool:
        """A placeholder dataset that may legitimately be missing."""
        return bool(self.raw.get("optional", False))

    @property
    def delimiter(self) -> str:
        return self.raw.get("delimiter", ",")

    @property
    def description(self) -> str:
        return self.raw.get("description", "")

    @classmethod
    def from_raw(cls, raw: Dict[str, Any], source_path: Path, index: int) -> DatasetConfig:
        return cls(raw=raw, source_path=source_path, index=index)


@dataclass
class GlobalConfig:
    ui_title: str = "Business Intelligence Dashboard"
    subtitle: str = "Interactive Dataset Explorer"
    default_dataset: Optional[str] = None
    page_size: int = DEFAULT_PAGE_SIZE
    data_root: Optional[Path] = None
    datasets: List[DatasetConfig] = field(default_factory=list)
