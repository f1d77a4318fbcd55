from __future__ import annotations

from datetime import date

import pytest

from coproimport.domain.issues import IssueLedger
from coproimport.domain.model import EMPTY_TANTIEME, Exterior, Tantieme
from coproimport.domain.parsing import (
    optional_str,
    parse_date,
    parse_exteriors,
    parse_numeric,
    parse_tantieme,
)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        (None, None),
        ("", None),
        ("   ", None),
        ("  Cave ", "Cave"),
        (12, "12"),
    ],
)
def test_optional_str_trims_and_blanks(raw: object, expected: str | None) -> None:
    assert optional_str(raw) == expected


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("45,5", 45.5),
        ("45.5", 45.5),
        (" 12 ", 12.0),
        ("-3", -3.0),
        ("1e2", 100.0),
        ("", None),
        (None, None),
        ("abc", None),
        ("12 m2", None),
        ("1,2,3", None),
        ("inf", None),
    ],
)
def test_parse_numeric(raw: object, expected: float | None) -> None:
    assert parse_numeric(raw) == expected


def test_parse_date_from_spreadsheet_serial() -> None:
    assert parse_date("25569") == date(1970, 1, 1)
    assert parse_date("45000") == date(2023, 3, 15)


def test_parse_date_from_iso_and_day_first() -> None:
    assert parse_date("2021-06-30") == date(2021, 6, 30)
    assert parse_date("2021-06-30T23:30:00Z") == date(2021, 6, 30)
    assert parse_date("2021-06-30T23:30:00-02:00") == date(2021, 7, 1)
    assert parse_date("05/04/2020") == date(2020, 4, 5)


@pytest.mark.parametrize("raw", ["", None, "hier", "31/02/2020", "2021-13-01", "99999999"])
def test_parse_date_rejects_invalid_values(raw: object) -> None:
    assert parse_date(raw) is None


def test_parse_tantieme_fraction() -> None:
    ledger = IssueLedger()

    assert parse_tantieme("411 / 10000", column="QP", sink=ledger, lot_number="1") == Tantieme(
        num=411, den=10000
    )
    assert parse_tantieme(None, column="QP", sink=ledger, lot_number="1") is EMPTY_TANTIEME
    assert len(ledger) == 0


def test_parse_tantieme_without_denominator_warns() -> None:
    ledger = IssueLedger()

    result = parse_tantieme("411", column="QP", sink=ledger, lot_number="7")

    assert result == Tantieme(num=411, den=None)
    (issue,) = ledger.issues
    assert issue.code == "tantieme_denominator_missing"
    assert issue.entity_key == "7"
    assert issue.payload == {"column": "QP", "value": "411"}


def test_parse_tantieme_invalid_format_warns_and_returns_empty() -> None:
    ledger = IssueLedger()

    result = parse_tantieme("4/x", column="QP", sink=ledger, lot_number="7")

    assert result.is_empty
    assert ledger.codes() == ("edd_tantieme_invalid_format",)


def test_parse_exteriors_pairs_types_with_surfaces() -> None:
    ledger = IssueLedger()

    result = parse_exteriors("Balcon, Terrasse", "4,5, 12", sink=ledger, lot_number="1")

    assert result == (Exterior(type="Balcon", surface_m2=4.5), Exterior("Terrasse", 12.0))
    assert len(ledger) == 0


def test_parse_exteriors_single_keeps_decimal_comma() -> None:
    ledger = IssueLedger()

    assert parse_exteriors("Jardin", "30,25", sink=ledger, lot_number="1") == (
        Exterior("Jardin", 30.25),
    )


def test_parse_exteriors_without_types_is_none() -> None:
    ledger = IssueLedger()

    assert parse_exteriors(None, "12", sink=ledger, lot_number="1") is None
    assert parse_exteriors(" , ", None, sink=ledger, lot_number="1") is None


def test_parse_exteriors_count_mismatch_warns() -> None:
    ledger = IssueLedger()

    result = parse_exteriors("Balcon, Terrasse, Jardin", "4, 12", sink=ledger, lot_number="3")

    assert result == (Exterior("Balcon", 4.0), Exterior("Terrasse", 12.0), Exterior("Jardin"))
    (issue,) = ledger.issues
    assert issue.code == "edd_exteriors_surface_count_mismatch"
    assert issue.payload == {"exteriors": ["Balcon", "Terrasse", "Jardin"], "surfaces": [4.0, 12.0]}
