from __future__ import annotations

from coproimport.domain.issues import IssueLedger
from coproimport.domain.model import LotFamily, OwnerLotLink, ParsedLot
from coproimport.domain.reconciliation import OwnershipLinker, OwnershipMap, OwnershipMapBuilder
from tests.helpers.property_files import make_contact, make_lot


def _lots(*numbers: str) -> dict[str, ParsedLot]:
    return {number: make_lot(number, LotFamily.DEPENDANCE) for number in numbers}


def test_builder_keeps_owner_order_and_duplicates() -> None:
    builder = OwnershipMapBuilder()
    builder.add("B", "2")
    builder.add("A", "1")
    builder.add("B", "2")

    ownership = builder.build()

    assert ownership.owner_refs == ("B", "A")
    assert ownership["B"] == ("2", "2")
    assert ownership.links_retained == 3
    assert ownership.linked_lot_numbers() == frozenset({"1", "2"})


def test_empty_map() -> None:
    ownership = OwnershipMap()

    assert len(ownership) == 0
    assert ownership.links_retained == 0
    assert "A" not in ownership


def test_link_drops_references_to_unknown_lots() -> None:
    ledger = IssueLedger()
    links = (OwnerLotLink("A", "1"), OwnerLotLink("A", "99"))

    ownership = OwnershipLinker(ledger).link(
        links, lots=_lots("1"), contacts={"A": make_contact("A")}
    )

    assert dict(ownership) == {"A": ("1",)}
    assert ownership.links_retained == 1
    (issue,) = ledger.issues
    assert issue.code == "owner_link_without_lot"
    assert issue.entity_type == "lot_ref"
    assert issue.entity_key == "99"
    assert issue.payload == {"owner_ref": "A", "lot_number": "99"}


def test_link_reports_unowned_lots_in_registry_order() -> None:
    ledger = IssueLedger()

    OwnershipLinker(ledger).link(
        (OwnerLotLink("A", "2"),),
        lots=_lots("3", "2", "1"),
        contacts={"A": make_contact("A")},
    )

    assert [(issue.code, issue.entity_key) for issue in ledger] == [
        ("missing_owner_link", "3"),
        ("missing_owner_link", "1"),
    ]
    assert [issue.payload for issue in ledger] == [{"lot_number": "3"}, {"lot_number": "1"}]


def test_link_reports_owners_without_contact_once() -> None:
    ledger = IssueLedger()
    links = (OwnerLotLink("X", "1"), OwnerLotLink("X", "2"), OwnerLotLink("Y", "3"))

    ownership = OwnershipLinker(ledger).link(
        links, lots=_lots("1", "2", "3"), contacts={"Y": make_contact("Y")}
    )

    assert ownership.owner_refs == ("X", "Y")
    (issue,) = ledger.issues
    assert issue.code == "missing_contact_for_owner_ref"
    assert issue.entity_type == "contact"
    assert issue.payload == {"owner_ref": "X"}


def test_owner_with_only_dangling_links_is_not_in_the_map() -> None:
    ledger = IssueLedger()

    ownership = OwnershipLinker(ledger).link(
        (OwnerLotLink("E", "99"),), lots=_lots("1"), contacts={}
    )

    assert "E" not in ownership
    assert ledger.codes() == ("owner_link_without_lot", "missing_owner_link")
