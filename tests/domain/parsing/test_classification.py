from __future__ import annotations

import pytest

from coproimport.domain.issues import IssueLedger
from coproimport.domain.model import ContactCategory, GroupType, LegalForm, LotFamily
from coproimport.domain.parsing import (
    civility_info,
    classify_civility,
    classify_lot_type,
    display_name_for,
)


@pytest.mark.parametrize(
    ("label", "family"),
    [
        ("Appartement", LotFamily.MAIN_HABITATION),
        ("  chambre de service ", LotFamily.MAIN_HABITATION),
        ("Local commercial", LotFamily.MAIN_COMMERCE),
        ("BUREAUX", LotFamily.MAIN_COMMERCE),
        ("Cave", LotFamily.DEPENDANCE),
        ("Emplacement de stationnement double", LotFamily.DEPENDANCE),
    ],
)
def test_known_lot_types_are_classified_silently(label: str, family: LotFamily) -> None:
    ledger = IssueLedger()

    assert classify_lot_type(label, sink=ledger, lot_number="1") is family
    assert len(ledger) == 0


def test_unknown_lot_type_falls_back_to_dependance() -> None:
    ledger = IssueLedger()

    assert classify_lot_type("Grenier", sink=ledger, lot_number="9") is LotFamily.DEPENDANCE

    (issue,) = ledger.issues
    assert issue.code == "unknown_lot_type_mapping"
    assert issue.entity_type == "lot"
    assert issue.entity_key == "9"
    assert issue.payload == {"type_lot": "Grenier"}


def test_empty_lot_type_is_unknown() -> None:
    ledger = IssueLedger()

    assert classify_lot_type("", sink=ledger, lot_number="2") is LotFamily.DEPENDANCE
    assert ledger.codes() == ("unknown_lot_type_mapping",)


@pytest.mark.parametrize("civility", ["Monsieur", "Madame", " Monsieur ou Madame "])
def test_physical_civilities(civility: str) -> None:
    info = civility_info(civility)

    assert info.category is ContactCategory.PHYSICAL
    assert info.legal_form is None
    assert info.group_type is None
    assert not info.is_unknown


def test_legal_entity_and_group_civilities() -> None:
    sci = civility_info("SCI")
    consor = civility_info("CONSOR")

    assert sci.category is ContactCategory.LEGAL_ENTITY
    assert sci.legal_form is LegalForm.SCI
    assert consor.category is ContactCategory.GROUP
    assert consor.group_type is GroupType.CONSOR


def test_civility_codes_are_case_sensitive() -> None:
    assert civility_info("sci").is_unknown
    assert civility_info("monsieur").is_unknown


def test_unknown_civility_defaults_to_physical_and_warns() -> None:
    ledger = IssueLedger()

    info = classify_civility("Maître", sink=ledger, external_ref="C1")

    assert info.category is ContactCategory.PHYSICAL
    (issue,) = ledger.issues
    assert issue.code == "contacts_unknown_civility_value"
    assert issue.entity_key == "C1"
    assert issue.payload == {"civility": "Maître"}


def test_display_name() -> None:
    assert display_name_for(ContactCategory.PHYSICAL, " Jean ", "Dupont ") == "Jean Dupont"
    assert display_name_for(ContactCategory.PHYSICAL, None, "Dupont") == "Dupont"
    assert display_name_for(ContactCategory.PHYSICAL, "  ", "Dupont") == "Dupont"
    assert display_name_for(ContactCategory.LEGAL_ENTITY, "Jean", "SCI Lilas") == "SCI Lilas"
