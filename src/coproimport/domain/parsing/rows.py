"""Turn decoded spreadsheet rows into typed lot, link and contact records.

Each parser walks its dataset once in file order, applies ``optional_str`` to
every cell it reads and records warnings for every fallback it takes. Required
headers are validated separately (``validate_required_headers``) so the
orchestrator can stop before any row is looked at.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING, Final

from coproimport.domain.issues import warn
from coproimport.domain.model import (
    BlockingError,
    DataIssue,
    OwnerLotLink,
    ParsedContact,
    ParsedLot,
    Severity,
)

from .classification import classify_civility, classify_lot_type, display_name_for
from .normalizers import optional_str, parse_date, parse_exteriors, parse_numeric, parse_tantieme

if TYPE_CHECKING:
    from coproimport.domain.issues import IssueSink
    from coproimport.domain.model import Row, TabularDataset

log = getLogger(__name__)


class EddColumn(StrEnum):
    LOT_NUMBER = "NumLot"
    FLOOR = "Etage"
    LOT_TYPE = "TypeLot"
    SURFACE = "SurfaceLot"
    EXTERIORS = "Exterieurs"
    EXTERIOR_SURFACES = "SurfaceExterieurs"
    TANTIEMES_GENERAL = "QuotesPartsGenerales"
    TANTIEMES_ELEVATORS = "Quotes-parts Ascenseurs"
    TANTIEMES_STAIRS = "Quotes-parts Escaliers"
    TANTIEMES_HEATING = "Quotes-parts Chauffage"
    OBSERVATIONS = "Observations"
    ARRIVAL_DATE = "DateArrivee"
    BUILDING = "Batiment"
    # the source files carry a trailing space on this header
    STAIRCASE = "Escalier "
    NB_ROOMS = "NbPieces"
    DOOR_NUMBER = "NumPorte"
    ANNEX_LOT = "AnnexeLot"
    WORKS_FUND_AMOUNT = "Montant Fond travaux"


class LotRefColumn(StrEnum):
    OWNER_REF = "Référence"
    LOT_NUMBER = "N° lot"


class ContactColumn(StrEnum):
    REFERENCE = "Référence"
    CIVILITY = "Civilité"
    NAME = "Nom"
    FIRST_NAME = "Prénom"
    ADDRESS_1 = "Adresse 1"
    ADDRESS_2 = "Adresse 2"
    POSTCODE = "Code postal"
    CITY = "Ville"
    COUNTRY = "Pays"
    EMAIL = "e-mail"
    PHONE_1 = "Téléphone 1"
    PHONE_2 = "Téléphone 2"


@dataclass(frozen=True, slots=True)
class DatasetSpec:
    """Name under which a dataset reports issues plus its mandatory headers."""

    entity: str
    required_headers: tuple[str, ...]

    @property
    def missing_column_code(self) -> str:
        return f"{self.entity}_missing_required_column"


EDD_SPEC: Final = DatasetSpec(
    entity="edd",
    required_headers=(EddColumn.LOT_NUMBER, EddColumn.FLOOR, EddColumn.LOT_TYPE),
)
LOT_REF_SPEC: Final = DatasetSpec(
    entity="lot_ref",
    required_headers=(LotRefColumn.OWNER_REF, LotRefColumn.LOT_NUMBER),
)
CONTACTS_SPEC: Final = DatasetSpec(
    entity="contacts",
    required_headers=(ContactColumn.REFERENCE, ContactColumn.CIVILITY, ContactColumn.NAME),
)

TANTIEME_COLUMNS: Final[tuple[EddColumn, ...]] = (
    EddColumn.TANTIEMES_GENERAL,
    EddColumn.TANTIEMES_ELEVATORS,
    EddColumn.TANTIEMES_STAIRS,
    EddColumn.TANTIEMES_HEATING,
)


def validate_required_headers(
    dataset: TabularDataset,
    spec: DatasetSpec,
    *,
    sink: IssueSink,
) -> list[BlockingError]:
    """Record one error per missing required header and return them as blocking errors."""

    present = set(dataset.headers)
    errors: list[BlockingError] = []
    for header in spec.required_headers:
        if header in present:
            continue
        message = f"Missing required column: {header}"
        sink.record(
            DataIssue(
                severity=Severity.ERROR,
                code=spec.missing_column_code,
                entity_type=spec.entity,
                entity_key=None,
                message=message,
                payload={"column": str(header)},
            )
        )
        errors.append(
            BlockingError(
                code=spec.missing_column_code,
                message=message,
                entity=spec.entity,
                column=str(header),
            )
        )
    return errors


def _cell(row: Row, column: str) -> str | None:
    return optional_str(row.get(column))


def _is_blank(row: Row) -> bool:
    return all(optional_str(value) is None for value in row.values())


def parse_lot_rows(dataset: TabularDataset, *, sink: IssueSink) -> dict[str, ParsedLot]:
    """Parse the EDD registry into lots keyed by lot number (file order)."""

    lots: dict[str, ParsedLot] = {}
    for index, row in enumerate(dataset.rows):
        lot_number = _cell(row, EddColumn.LOT_NUMBER)
        if lot_number is None:
            if not _is_blank(row):
                warn(
                    sink,
                    "edd_row_missing_lot_number",
                    entity_type="edd",
                    entity_key=None,
                    message=f"EDD row {index + 1} has no {EddColumn.LOT_NUMBER}, skipped",
                    payload={"row_index": index},
                )
            continue

        if lot_number in lots:
            warn(
                sink,
                "edd_duplicate_lot_number",
                entity_type="lot",
                entity_key=lot_number,
                message=f'Lot "{lot_number}" appears more than once in EDD, last row kept',
                payload={"row_index": index},
            )
        lots[lot_number] = parse_lot_row(row, lot_number=lot_number, sink=sink)

    log.debug("Parsed %s lots from %s EDD rows", len(lots), len(dataset.rows))
    return lots


def parse_lot_row(row: Row, *, lot_number: str, sink: IssueSink) -> ParsedLot:
    type_label = _cell(row, EddColumn.LOT_TYPE) or ""
    family = classify_lot_type(type_label, sink=sink, lot_number=lot_number)

    surface = _numeric_with_warning(
        row,
        EddColumn.SURFACE,
        code="edd_surface_lot_invalid",
        sink=sink,
        lot_number=lot_number,
    )
    exteriors = parse_exteriors(
        _cell(row, EddColumn.EXTERIORS),
        _cell(row, EddColumn.EXTERIOR_SURFACES),
        sink=sink,
        lot_number=lot_number,
    )
    general, elevators, stairs, heating = (
        parse_tantieme(_cell(row, column), column=str(column), sink=sink, lot_number=lot_number)
        for column in TANTIEME_COLUMNS
    )

    acquired_at = None
    raw_date = _cell(row, EddColumn.ARRIVAL_DATE)
    if raw_date is not None:
        acquired_at = parse_date(raw_date)
        if acquired_at is None:
            warn(
                sink,
                "edd_date_arrivee_invalid",
                entity_type="lot",
                entity_key=lot_number,
                message=f'Invalid {EddColumn.ARRIVAL_DATE} value: "{raw_date}"',
                payload={"value": raw_date},
            )

    works_fund = _numeric_with_warning(
        row,
        EddColumn.WORKS_FUND_AMOUNT,
        code="edd_works_fund_amount_invalid",
        sink=sink,
        lot_number=lot_number,
    )

    return ParsedLot(
        lot_number=lot_number,
        floor_label=_cell(row, EddColumn.FLOOR) or "",
        lot_type_label=type_label,
        lot_family=family,
        surface_m2=surface,
        exteriors=exteriors,
        tantiemes_general=general,
        tantiemes_elevators=elevators,
        tantiemes_stairs=stairs,
        tantiemes_heating=heating,
        observations=_cell(row, EddColumn.OBSERVATIONS),
        acquired_at=acquired_at,
        building=_cell(row, EddColumn.BUILDING),
        staircase=_cell(row, EddColumn.STAIRCASE),
        nb_rooms=_cell(row, EddColumn.NB_ROOMS),
        door_number=_cell(row, EddColumn.DOOR_NUMBER),
        annex_lot=_cell(row, EddColumn.ANNEX_LOT),
        works_fund_amount=works_fund,
    )


def _numeric_with_warning(
    row: Row,
    column: EddColumn,
    *,
    code: str,
    sink: IssueSink,
    lot_number: str,
) -> float | None:
    raw = _cell(row, column)
    if raw is None:
        return None
    value = parse_numeric(raw)
    if value is None:
        warn(
            sink,
            code,
            entity_type="lot",
            entity_key=lot_number,
            message=f'Invalid {column} value: "{raw}"',
            payload={"value": raw},
        )
    return value


def parse_owner_links(dataset: TabularDataset, *, sink: IssueSink) -> tuple[OwnerLotLink, ...]:
    """Read (owner_ref, lot_number) pairs in file order, duplicates included."""

    links: list[OwnerLotLink] = []
    for index, row in enumerate(dataset.rows):
        owner_ref = _cell(row, LotRefColumn.OWNER_REF)
        lot_number = _cell(row, LotRefColumn.LOT_NUMBER)
        if owner_ref is None or lot_number is None:
            if not _is_blank(row):
                warn(
                    sink,
                    "lot_ref_row_incomplete",
                    entity_type="lot_ref",
                    entity_key=lot_number or owner_ref,
                    message=f"lot_ref row {index + 1} lacks an owner reference or a lot number",
                    payload={"row_index": index, "owner_ref": owner_ref, "lot_number": lot_number},
                )
            continue
        links.append(OwnerLotLink(owner_ref=owner_ref, lot_number=lot_number))
    return tuple(links)


def parse_contact_rows(dataset: TabularDataset, *, sink: IssueSink) -> dict[str, ParsedContact]:
    """Parse the contact directory keyed by external reference (file order)."""

    contacts: dict[str, ParsedContact] = {}
    for index, row in enumerate(dataset.rows):
        external_ref = _cell(row, ContactColumn.REFERENCE)
        name = _cell(row, ContactColumn.NAME)
        if external_ref is None or name is None:
            if not _is_blank(row):
                warn(
                    sink,
                    "contacts_row_incomplete",
                    entity_type="contact",
                    entity_key=external_ref,
                    message=f"Contact row {index + 1} lacks a reference or a name, skipped",
                    payload={"row_index": index},
                )
            continue

        if external_ref in contacts:
            warn(
                sink,
                "contacts_duplicate_reference",
                entity_type="contact",
                entity_key=external_ref,
                message=f'Contact "{external_ref}" appears more than once, last row kept',
                payload={"row_index": index},
            )
        contacts[external_ref] = parse_contact_row(
            row, external_ref=external_ref, name=name, sink=sink
        )

    log.debug("Parsed %s contacts from %s rows", len(contacts), len(dataset.rows))
    return contacts


def parse_contact_row(
    row: Row,
    *,
    external_ref: str,
    name: str,
    sink: IssueSink,
) -> ParsedContact:
    civility_raw = _cell(row, ContactColumn.CIVILITY) or ""
    info = classify_civility(civility_raw, sink=sink, external_ref=external_ref)
    first_name = _cell(row, ContactColumn.FIRST_NAME)

    return ParsedContact(
        external_ref=external_ref,
        civility_raw=civility_raw,
        category=info.category,
        legal_form=info.legal_form,
        group_type=info.group_type,
        first_name=first_name,
        last_name_or_name=name,
        display_name=display_name_for(info.category, first_name, name),
        address_line1=_cell(row, ContactColumn.ADDRESS_1),
        address_line2=_cell(row, ContactColumn.ADDRESS_2),
        postcode=_cell(row, ContactColumn.POSTCODE),
        city=_cell(row, ContactColumn.CITY),
        country=_cell(row, ContactColumn.COUNTRY),
        email=_cell(row, ContactColumn.EMAIL),
        phone1=_cell(row, ContactColumn.PHONE_1),
        phone2=_cell(row, ContactColumn.PHONE_2),
    )
