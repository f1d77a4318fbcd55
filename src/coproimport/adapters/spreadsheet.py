"""Decode uploaded ``.xlsx`` workbooks into header-keyed string tables."""

from __future__ import annotations

from datetime import date, datetime, time
from io import BytesIO
from logging import getLogger
from typing import TYPE_CHECKING
from zipfile import BadZipFile

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from coproimport.domain.errors import SpreadsheetDecodeError
from coproimport.domain.model import TabularDataset

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from coproimport.domain.ports.fetching import SpreadsheetDecoder

log = getLogger(__name__)


def cell_to_text(value: object) -> str:
    """Render a cell the way the row parsers expect to read it."""

    if value is None:
        return ""
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, datetime):
        return value.date().isoformat() if value.time() == time() else value.isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def _headers(row: Sequence[object]) -> list[tuple[int, str]]:
    columns: list[tuple[int, str]] = []
    seen: set[str] = set()
    for index, value in enumerate(row):
        header = cell_to_text(value)
        # blank headers carry no column name; the first of duplicated headers wins
        if not header.strip() or header in seen:
            continue
        seen.add(header)
        columns.append((index, header))
    return columns


def rows_to_dataset(rows: Iterable[Sequence[object]]) -> TabularDataset:
    iterator = iter(rows)
    header_row = next(iterator, None)
    if header_row is None:
        return TabularDataset(headers=())

    columns = _headers(header_row)
    records: list[dict[str, str]] = []
    for row in iterator:
        record = {
            header: cell_to_text(row[index]) if index < len(row) else ""
            for index, header in columns
        }
        if all(not value.strip() for value in record.values()):
            continue
        records.append(record)
    return TabularDataset.from_records(records, headers=tuple(header for _, header in columns))


class OpenpyxlDecoder:
    """Read the first worksheet of a workbook; the first row holds the headers."""

    def __call__(self, content: bytes, *, name: str) -> TabularDataset:
        try:
            workbook = load_workbook(BytesIO(content), data_only=True, read_only=True)
        except (BadZipFile, InvalidFileException, KeyError, OSError) as exc:
            raise SpreadsheetDecodeError(f"{name} is not a readable workbook: {exc}") from exc

        try:
            if not workbook.worksheets:
                raise SpreadsheetDecodeError(f"{name} contains no worksheet")
            sheet = workbook.worksheets[0]
            dataset = rows_to_dataset(sheet.iter_rows(values_only=True))
        finally:
            workbook.close()

        log.debug("Decoded %s: %s columns, %s rows", name, len(dataset.headers), len(dataset))
        return dataset


if TYPE_CHECKING:
    _decoder_check: SpreadsheetDecoder = OpenpyxlDecoder()
