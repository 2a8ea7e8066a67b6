from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import pytest

from bulkimport.adapters.sources import CsvEntrySource, MemoryEntrySource, RowEntry
from bulkimport.config import ConfigurationError

if TYPE_CHECKING:
    from pathlib import Path


def test_row_entry_trims_names_and_fills_missing_cells() -> None:
    entry = RowEntry({" Title ": "A", "Empty": None, None: ["extra"], "": "x"})

    assert dict(entry) == {"Title": "A", "Empty": ""}
    assert entry.get("Missing") is None
    assert entry.is_empty() is False
    assert RowEntry({"A": " ", "B": "\u200b"}).is_empty() is True


def test_csv_source_streams_rows(tmp_path: Path) -> None:
    path = tmp_path / "rows.csv"
    path.write_text("\ufeffTitle,Subject\nFirst,a;b\nSecond,\n", encoding="utf-8")

    source = CsvEntrySource.from_path(path, separator=";")

    assert source.fieldnames() == ["Title", "Subject"]
    assert [dict(entry) for entry in source] == [
        {"Title": "First", "Subject": "a;b"},
        {"Title": "Second", "Subject": ""},
    ]
    assert source.separator == ";"


@pytest.mark.parametrize(
    ("suffix", "delimiter", "expected"),
    [(".tsv", None, "\t"), (".csv", None, ","), (".txt", "tab", "\t"), (".csv", ";", ";")],
)
def test_field_delimiter(tmp_path: Path, suffix: str, delimiter: str | None, expected: str) -> None:
    source = CsvEntrySource(path=tmp_path / f"rows{suffix}", delimiter=delimiter)

    assert source.field_delimiter == expected


def test_tsv_rows(tmp_path: Path) -> None:
    path = tmp_path / "rows.tsv"
    path.write_text("Title\tCreator\nA, B\tC\n", encoding="utf-8")

    assert [dict(entry) for entry in CsvEntrySource.from_path(path)] == [
        {"Title": "A, B", "Creator": "C"}
    ]


def test_extra_cells_are_reported(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    path = tmp_path / "rows.csv"
    path.write_text("Title\nA,B\n", encoding="utf-8")

    with caplog.at_level(logging.WARNING):
        entries = [dict(entry) for entry in CsvEntrySource.from_path(path)]

    assert entries == [{"Title": "A"}]
    assert "more cells than the header" in caplog.text


def test_missing_file_is_a_configuration_error(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError):
        CsvEntrySource.from_path(tmp_path / "missing.csv")


def test_undecodable_bytes_are_a_configuration_error(tmp_path: Path) -> None:
    path = tmp_path / "rows.csv"
    path.write_bytes(b"Title\nok\n\xff\xfe broken\n")
    source = CsvEntrySource.from_path(path)

    with pytest.raises(ConfigurationError, match="cannot decode as utf-8-sig") as exc_info:
        list(source)

    assert isinstance(exc_info.value.__cause__, UnicodeDecodeError)
    with pytest.raises(ConfigurationError):
        source.fieldnames()


def test_memory_source_can_be_iterated_twice() -> None:
    source = MemoryEntrySource([{"Title": "A"}], separator="|")

    assert [dict(entry) for entry in source] == [{"Title": "A"}]
    assert [dict(entry) for entry in source] == [{"Title": "A"}]
