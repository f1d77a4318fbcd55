"""Decoded tabular input handed to the import core."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

type Row = Mapping[str, str]


def _freeze_row(row: Mapping[str, object]) -> Row:
    return MappingProxyType(
        {str(key): "" if value is None else str(value) for key, value in row.items()}
    )


@dataclass(frozen=True, slots=True)
class TabularDataset:
    """Header row plus ordered data rows keyed by header.

    ``headers`` is kept separately from the rows so that a file holding only its
    header row is still recognised as structurally valid.
    """

    headers: tuple[str, ...]
    rows: tuple[Row, ...] = field(default_factory=tuple)

    @classmethod
    def from_records(
        cls,
        records: list[Mapping[str, object]] | tuple[Mapping[str, object], ...],
        *,
        headers: tuple[str, ...] | None = None,
    ) -> TabularDataset:
        """Build a dataset from dict rows; headers default to the first row's keys."""

        frozen = tuple(_freeze_row(record) for record in records)
        if headers is None:
            headers = tuple(frozen[0].keys()) if frozen else ()
        return cls(headers=headers, rows=frozen)

    def __len__(self) -> int:
        return len(self.rows)
