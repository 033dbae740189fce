from __future__ import annotations

import logging
import os
from typing import Optional, Union

from pythonjsonlogger import jsonlogger

LOG_FORMAT_ENV = "BI_DASHBOARD_LOG_FORMAT"
LOG_LEVEL_ENV = "BI_DASHBOARD_LOG_LEVEL"

_JSON_FIELDS = "%(asctime)s %(levelname)s %(name)s %(message)s"
_PLAIN_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

# Per-request access lines from the dev server
_NOISY_LOGGERS = ("werkzeug",)


def _resolve_level(level: Union[int, str, None]) -> int:
    if level is None:
        level = os.getenv(LOG_LEVEL_ENV, "INFO")
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def build_formatter(format_mode: str) -> logging.Formatter:
    if format_mode == "plain":
        return logging.Formatter(_PLAIN_FORMAT)
    return jsonlogger.JsonFormatter(
        _JSON_FIELDS,
        rename_fields={"asctime": "timestamp", "levelname": "level", "name": "logger"},
    )


def configure_logging(
        level: Union[int, str, None] = None,
        force_format: Optional[str] = None,
) -> None:
    """
    Configure the root logger for the dashboard.

    Modes:
    - JSON (default): one object per line, `extra={...}` fields included
    - plain text for local development

    Format selection order:
        1) force_format argument ("json" or "plain") if provided
        2) env var BI_DASHBOARD_LOG_FORMAT
        3) default = "json"

    Level comes from `level`, else BI_DASHBOARD_LOG_LEVEL, else INFO.
    """
    if force_format is not None:
        format_mode = force_format.lower()
    else:
        format_mode = os.getenv(LOG_FORMAT_ENV, "json").lower()

    root = logging.getLogger()
    root.setLevel(_resolve_level(level))

    handler = logging.StreamHandler()
    handler.setFormatter(build_formatter(format_mode))

    # Replace any existing handlers to avoid duplicate logs
    root.handlers.clear()
    root.addHandler(handler)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
