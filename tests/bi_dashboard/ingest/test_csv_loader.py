from __future__ import annotations

from pathlib import Path

import pytest

from bi_dashboard.core.exceptions import (
    ContentTypeMismatchError,
    IngestionError,
    MissingHeaderError,
    SourceNotFoundError,
)
from bi_dashboard.ingest.csv_loader import is_url, load_csv


def _write(tmp_path: Path, text: str, name: str = "data.csv") -> Path:
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return path


def test_header_row_defines_column_order(tmp_path: Path):
    path = _write(tmp_path, "id,value,region\n1,10,North\n2,11,South\n")
    ds = load_csv(path)
    assert ds.column_names == ("id", "value", "region")
    assert ds.n_rows == 2
    assert ds.locator == str(path)


def test_cells_are_typed(tmp_path: Path):
    path = _write(tmp_path, "a,b,c\n1,2.5,x\n003,-4,7 apples\n")
    ds = load_csv(path)
    assert ds.rows[0] == {"a": 1, "b": 2.5, "c": "x"}
    assert ds.rows[1] == {"a": 3, "b": -4, "c": "7 apples"}
    assert isinstance(ds.rows[0]["a"], int)


def test_integral_floats_become_ints(tmp_path: Path):
    ds = load_csv(_write(tmp_path, "a\n2.0\n"))
    assert ds.rows[0]["a"] == 2
    assert isinstance(ds.rows[0]["a"], int)


def test_empty_cells_are_absent(tmp_path: Path):
    ds = load_csv(_write(tmp_path, "a,b\n1,\n,y\n"))
    assert ds.rows[0] == {"a": 1}
    assert ds.rows[1] == {"b": "y"}


def test_blank_rows_are_dropped(tmp_path: Path):
    ds = load_csv(_write(tmp_path, "a,b\n1,x\n\n,\n2,y\n"))
    assert [row["a"] for row in ds.rows] == [1, 2]


def test_header_only_file_has_columns_and_no_rows(tmp_path: Path):
    ds = load_csv(_write(tmp_path, "a,b\n"))
    assert ds.column_names == ("a", "b")
    assert ds.rows == ()


def test_custom_delimiter(tmp_path: Path):
    ds = load_csv(_write(tmp_path, "a;b\n1;x\n"), delimiter=";")
    assert ds.rows[0] == {"a": 1, "b": "x"}


def test_missing_file_raises_source_not_found(tmp_path: Path):
    with pytest.raises(SourceNotFoundError):
        load_csv(tmp_path / "nope.csv")


def test_empty_file_raises_missing_header(tmp_path: Path):
    with pytest.raises(MissingHeaderError):
        load_csv(_write(tmp_path, ""))


def test_markup_payload_raises_content_type_mismatch(tmp_path: Path):
    path = _write(tmp_path, "<!DOCTYPE html>\n")
    with pytest.raises(ContentTypeMismatchError):
        load_csv(path)


def test_undecodable_bytes_raise_content_type_mismatch(tmp_path: Path):
    path = tmp_path / "binary.csv"
    path.write_bytes(b"a,b\n\xff\xfe,\x80\n")
    with pytest.raises(ContentTypeMismatchError):
        load_csv(path)


def test_ingestion_errors_share_base_class():
    assert issubclass(SourceNotFoundError, IngestionError)
    assert issubclass(MissingHeaderError, IngestionError)
    assert issubclass(ContentTypeMismatchError, IngestionError)


def test_is_url():
    assert is_url("https://example.com/data.csv")
    assert is_url("HTTP://example.com/data.csv")
    assert not is_url("data/dataset_small.csv")


def test_repository_sample_dataset():
    path = Path(__file__).resolve().parents[3] / "data" / "dataset_small.csv"
    ds = load_csv(path)
    assert ds.column_names == ("id", "value", "mod3", "mod4", "mod5", "region")
    assert ds.n_rows == 60
    assert ds.rows[0]["id"] == 1


def test_html_page_with_commas_raises_content_type_mismatch(tmp_path: Path):
    page = (
        "<!DOCTYPE html>\n"
        '<html lang="en">\n'
        "<head>\n"
        '<meta name="viewport" content="width=device-width, initial-scale=1">\n'
        "<title>Dashboard</title>\n"
        "</head>\n"
        '<body><div id="root"></div></body>\n'
    )
    with pytest.raises(ContentTypeMismatchError):
        load_csv(_write(tmp_path, page, name="dataset_large.csv"))


def test_malformed_csv_is_still_a_plain_ingestion_error(tmp_path: Path):
    with pytest.raises(IngestionError) as excinfo:
        load_csv(_write(tmp_path, "a\n1\n2,3\n"))
    assert not isinstance(excinfo.value, ContentTypeMismatchError)
