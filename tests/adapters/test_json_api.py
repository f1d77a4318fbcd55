from __future__ import annotations

import pytest

from coproimport.adapters.json_api import (
    InvalidImportRequestError,
    check_response_from_result,
    context_from_request,
    invalid_request_response,
    parse_import_request,
    response_from_result,
)
from coproimport.domain.data_integration import INTERNAL_ERROR
from coproimport.domain.import_pipeline import ReconciliationResult, reconcile_property
from coproimport.domain.model import AddressRole, PropertyAddress, RunStatus
from tests.helpers.property_files import (
    make_context,
    make_datasets,
    sample_property_datasets,
    sample_request_document,
)


def test_parse_request_builds_property_context() -> None:
    document = sample_request_document()
    document["copro_id"] = "  copro-1 "
    document["copro_cadastral_refs"] = ["AB-12", " ", " AB-13 "]

    request = parse_import_request(document)
    context = context_from_request(request)

    assert context.tenant_id == "tenant-1"
    assert context.property_id == "copro-1"
    assert context.addresses == (
        PropertyAddress("1 rue des Lilas", AddressRole.MAIN),
        PropertyAddress("2 rue des Roses", AddressRole.SECONDARY),
    )
    assert context.cadastral_refs == ("AB-12", "AB-13")
    assert request.files.edd_path == "tenant-1/edd.xlsx"


def test_optional_request_fields_default_to_empty() -> None:
    document = sample_request_document()
    document["copro_addresses"] = None
    del document["copro_cadastral_refs"]
    document["unexpected"] = True

    context = context_from_request(parse_import_request(document))

    assert context.addresses == ()
    assert context.cadastral_refs == ()


@pytest.mark.parametrize("missing", ["tenant_id", "copro_id", "files"])
def test_missing_required_field_is_rejected(missing: str) -> None:
    document = sample_request_document()
    del document[missing]

    with pytest.raises(InvalidImportRequestError, match="Missing required fields") as excinfo:
        parse_import_request(document)
    assert any(detail.startswith(missing) for detail in excinfo.value.details)


def test_blank_file_path_is_rejected() -> None:
    document = sample_request_document()
    document["files"] = {"edd_path": " ", "lot_ref_path": "b", "contacts_path": "c"}

    with pytest.raises(InvalidImportRequestError):
        parse_import_request(document)


def test_invalid_request_response_document() -> None:
    response = invalid_request_response(InvalidImportRequestError("Missing required fields"))

    assert response.to_document() == {
        "job_id": None,
        "status": "failed",
        "stats": None,
        "reviews": [],
        "errors": [
            {"code": "invalid_request", "message": "Missing required fields", "entity": "request"}
        ],
    }


def test_response_from_completed_result() -> None:
    result = reconcile_property(sample_property_datasets(), make_context())

    document = response_from_result(result, job_id=7, review_ids={"B": 3}).to_document()

    assert document["job_id"] == 7
    assert document["status"] == "completed_with_review_required"
    assert document["stats"]["units_created"] == 3
    assert document["errors"] == []
    assert document["reviews"] == [
        {
            "review_id": 3,
            "owner_ref": "B",
            "display_name": "SCI Les Tilleuls",
            "contact_category": "legal_entity",
            "legal_form": "SCI",
            "group_type": None,
            "main_hab_lots": ["4", "5"],
            "dep_lots": ["7"],
            "reason": "multiple_habitation_main_lots",
        }
    ]


def test_response_from_failed_result_keeps_columns() -> None:
    result = reconcile_property(make_datasets(edd_headers=("NumLot", "Etage")), make_context())

    document = response_from_result(result, job_id=1).to_document()

    assert document["status"] == "failed"
    assert document["stats"] is None
    assert document["errors"] == [
        {
            "code": "edd_missing_required_column",
            "message": "Missing required column: TypeLot",
            "entity": "edd",
            "column": "TypeLot",
        }
    ]


def test_internal_error_has_no_column() -> None:
    result = ReconciliationResult(status=RunStatus.FAILED, stats=None, errors=(INTERNAL_ERROR,))

    document = response_from_result(result, job_id=None).to_document()

    assert document["errors"] == [
        {
            "code": "internal_error",
            "message": "An internal error occurred during import",
            "entity": "system",
        }
    ]


def test_check_response_lists_issues() -> None:
    result = reconcile_property(sample_property_datasets(), make_context())

    document = check_response_from_result(result).to_document()

    assert document["job_id"] is None
    assert [issue["code"] for issue in document["issues"]] == [
        "unknown_lot_type_mapping",
        "owner_link_without_lot",
        "missing_owner_link",
        "missing_contact_for_owner_ref",
    ]
    assert document["issues"][1]["payload"] == {"owner_ref": "E", "lot_number": "99"}
