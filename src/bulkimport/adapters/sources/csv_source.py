"""Delimited text (CSV/TSV) entry source."""

from __future__ import annotations

import csv
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from bulkimport.config import ConfigurationError

from .entries import RowEntry

if TYPE_CHECKING:
    from collections.abc import Iterator

log = logging.getLogger(__name__)

DELIMITERS = {".csv": ",", ".tsv": "\t", ".tab": "\t"}


@dataclass(frozen=True, slots=True)
class CsvEntrySource:
    """Stream rows of a delimited file as entries.

    The first row is the header. Rows are read lazily, so a source can be
    iterated once per run without loading the file in memory.
    """

    path: Path
    separator: str = ""
    delimiter: str | None = None
    encoding: str = "utf-8-sig"

    @classmethod
    def from_path(
        cls,
        path: str | Path,
        *,
        separator: str = "",
        delimiter: str | None = None,
    ) -> CsvEntrySource:
        resolved = Path(path).expanduser()
        if not resolved.is_file():
            raise ConfigurationError(f"Source file not found: {resolved}")
        return cls(path=resolved, separator=separator, delimiter=delimiter)

    @property
    def field_delimiter(self) -> str:
        if self.delimiter:
            return "\t" if self.delimiter in {"\\t", "tab"} else self.delimiter
        return DELIMITERS.get(self.path.suffix.lower(), ",")

    def fieldnames(self) -> list[str]:
        with self.path.open(newline="", encoding=self.encoding) as handle:
            reader = csv.reader(handle, delimiter=self.field_delimiter)
            try:
                return next(reader, [])
            except UnicodeDecodeError as exc:
                raise self._decode_error(exc, line=1) from exc

    def __iter__(self) -> Iterator[RowEntry]:
        with self.path.open(newline="", encoding=self.encoding) as handle:
            reader = csv.DictReader(handle, delimiter=self.field_delimiter)
            rows = iter(reader)
            while True:
                try:
                    row = next(rows)
                except StopIteration:
                    return
                except UnicodeDecodeError as exc:
                    raise self._decode_error(exc, line=reader.line_num + 1) from exc
                if None in row:
                    log.warning(
                        "Line %d has more cells than the header; extra cells are ignored.",
                        reader.line_num,
                    )
                yield RowEntry(row)

    def _decode_error(self, exc: UnicodeDecodeError, *, line: int) -> ConfigurationError:
        return ConfigurationError(
            f"{self.path}: cannot decode as {self.encoding} near line {line} ({exc.reason})"
        )
