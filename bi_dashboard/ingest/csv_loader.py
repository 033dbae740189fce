from __future__ import annotations

import logging
import math
import urllib.error
import urllib.request
from pathlib import Path
from typing import Dict, List, Optional, Union

import numpy as np
import pandas as pd

from bi_dashboard.core.dataset import CellValue, Dataset
from bi_dashboard.core.exceptions import (
    ContentTypeMismatchError,
    IngestionError,
    MissingHeaderError,
    SourceNotFoundError,
)

logger = logging.getLogger(__name__)

Locator = Union[str, Path]

_URL_PREFIXES = ("http://", "https://")
_MARKUP_PREFIXES = ("<!doctype", "<html", "<?xml", "<head", "<body")


def is_url(locator: Locator) -> bool:
    return str(locator).lower().startswith(_URL_PREFIXES)


def _typed_value(text: str, number: float) -> Optional[CellValue]:
    """
    Typed cell value from its raw text and numeric parse.

    "" -> absent, numeric text -> int/float, anything else stays a string.
    """
    if text == "":
        return None
    if number is None or (isinstance(number, float) and math.isnan(number)):
        return text
    if isinstance(number, np.generic):
        number = number.item()
    if isinstance(number, float) and number.is_integer():
        return int(number)
    return number


def _typed_column(raw: pd.Series) -> List[Optional[CellValue]]:
    text = raw.fillna("").astype(str)
    numbers = pd.to_numeric(text.str.strip(), errors="coerce")
    return [_typed_value(t, n) for t, n in zip(text.tolist(), numbers.tolist())]


def _read_frame(locator: Locator, delimiter: str, encoding: str) -> pd.DataFrame:
    try:
        return pd.read_csv(
            locator,
            sep=delimiter,
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
            encoding=encoding,
        )
    except FileNotFoundError as e:
        raise SourceNotFoundError(f"Source not found: {locator}") from e
    except urllib.error.HTTPError as e:
        if e.code == 404:
            raise SourceNotFoundError(f"Error fetching {locator}: 404 Not Found") from e
        raise IngestionError(f"Error fetching {locator}: HTTP {e.code}") from e
    except urllib.error.URLError as e:
        raise IngestionError(f"Error fetching {locator}: {e.reason}") from e
    except pd.errors.EmptyDataError as e:
        raise MissingHeaderError(f"Could not determine column headers from {locator}.") from e
    except UnicodeDecodeError as e:
        raise ContentTypeMismatchError(f"{locator} is not {encoding} delimited text.") from e
    except pd.errors.ParserError as e:
        if looks_like_markup(_head_text(locator, encoding)):
            raise ContentTypeMismatchError(
                f"{locator} returned markup instead of delimited text (unexpected token '<')."
            ) from e
        raise IngestionError(f"Malformed delimited content in {locator}: {e}") from e


def looks_like_markup(text: str) -> bool:
    return text.lstrip().lower().startswith(_MARKUP_PREFIXES)


def _head_text(locator: Locator, encoding: str, size: int = 1024) -> str:
    """First `size` bytes of the source, decoded leniently ("" if unreadable)."""
    try:
        if is_url(locator):
            with urllib.request.urlopen(str(locator), timeout=10) as response:
                head = response.read(size)
        else:
            with open(locator, "rb") as f:
                head = f.read(size)
    except (OSError, ValueError):
        logger.warning("Could not re-read head of %s", locator, exc_info=True)
        return ""
    return head.decode(encoding, errors="replace")


def load_csv(
    locator: Locator,
    *,
    delimiter: str = ",",
    encoding: str = "utf-8",
) -> Dataset:
    """
    Fetch and parse a delimited file (local path or http(s) URL).

    The first row is the header. Cells are typed per value: numeric text
    becomes int/float, empty cells are absent, everything else is kept as
    a string. Rows with no values at all are dropped.

    Raises:
        SourceNotFoundError: the path/URL does not exist.
        MissingHeaderError: no header row could be read.
        ContentTypeMismatchError: the payload is markup or undecodable.
        IngestionError: any other fetch/parse failure.
    """
    if not is_url(locator) and not Path(locator).is_file():
        raise SourceNotFoundError(f"Source not found: {locator}")

    df = _read_frame(locator, delimiter, encoding)

    column_names = [str(c) for c in df.columns]
    if not column_names:
        raise MissingHeaderError(f"Could not determine column headers from {locator}.")
    if looks_like_markup(column_names[0]):
        raise ContentTypeMismatchError(
            f"{locator} returned markup instead of delimited text (unexpected token '<')."
        )

    typed = [_typed_column(df.iloc[:, i]) for i in range(len(column_names))]

    rows: List[Dict[str, CellValue]] = []
    for values in zip(*typed):
        row = {c: v for c, v in zip(column_names, values) if v is not None}
        if row:
            rows.append(row)

    logger.info(
        "Loaded delimited dataset",
        extra={
            "locator": str(locator),
            "n_rows": len(rows),
            "n_columns": len(column_names),
            "n_blank_rows_dropped": len(df) - len(rows),
        },
    )

    return Dataset.from_records(rows, column_names, locator=str(locator))
