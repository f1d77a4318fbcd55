"""Field normalizers, label classifiers and row parsers for the three input files."""

from __future__ import annotations

from .classification import (
    CivilityInfo,
    civility_info,
    classify_civility,
    classify_lot_type,
    display_name_for,
)
from .normalizers import (
    optional_str,
    parse_date,
    parse_exteriors,
    parse_numeric,
    parse_tantieme,
)
from .rows import (
    CONTACTS_SPEC,
    EDD_SPEC,
    LOT_REF_SPEC,
    ContactColumn,
    DatasetSpec,
    EddColumn,
    LotRefColumn,
    parse_contact_rows,
    parse_lot_rows,
    parse_owner_links,
    validate_required_headers,
)

__all__ = [
    "CONTACTS_SPEC",
    "EDD_SPEC",
    "LOT_REF_SPEC",
    "CivilityInfo",
    "ContactColumn",
    "DatasetSpec",
    "EddColumn",
    "LotRefColumn",
    "civility_info",
    "classify_civility",
    "classify_lot_type",
    "display_name_for",
    "optional_str",
    "parse_contact_rows",
    "parse_date",
    "parse_exteriors",
    "parse_lot_rows",
    "parse_numeric",
    "parse_owner_links",
    "parse_tantieme",
    "validate_required_headers",
]
