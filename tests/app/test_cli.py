from __future__ import annotations

import json
from typing import TYPE_CHECKING

import pytest

from coproimport.adapters.json_api import (
    CheckResponsePayload,
    ImportResponsePayload,
    InvalidImportRequestError,
)
from coproimport.domain.model import AddressRole, PropertyAddress, PropertyContext
from coproimport.ui import cli as cli_module
from tests.helpers.property_files import dataset_workbook, sample_property_datasets

if TYPE_CHECKING:
    from pathlib import Path


def _exit_code(argv: list[str]) -> int | str | None:
    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(argv)
    return excinfo.value.code


def test_import_command_forwards_request(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
    capsys: pytest.CaptureFixture[str],
) -> None:
    captured: dict[str, object] = {}

    def fake_import(document: object, **kwargs: object) -> ImportResponsePayload:
        captured["document"] = document
        captured.update(kwargs)
        return ImportResponsePayload(job_id=5, status="completed")

    monkeypatch.setattr(cli_module, "run_property_import", fake_import)
    request = tmp_path / "request.json"
    request.write_text(json.dumps({"tenant_id": "t"}), encoding="utf-8")

    code = _exit_code(["import", "--request", str(request), "--source-dir", str(tmp_path)])

    assert code == 0
    assert captured["document"] == {"tenant_id": "t"}
    assert captured["source_dir"] == tmp_path
    assert json.loads(capsys.readouterr().out)["job_id"] == 5


def test_import_command_failed_job_exits_one(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    def fake_import(document: object, **kwargs: object) -> ImportResponsePayload:
        _ = (document, kwargs)
        return ImportResponsePayload(job_id=5, status="failed")

    monkeypatch.setattr(cli_module, "run_property_import", fake_import)
    request = tmp_path / "request.json"
    request.write_text("{}", encoding="utf-8")

    assert _exit_code(["import", "--request", str(request)]) == 1


def test_import_command_invalid_request_exits_two(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
    capsys: pytest.CaptureFixture[str],
) -> None:
    def fake_import(document: object, **kwargs: object) -> ImportResponsePayload:
        _ = (document, kwargs)
        raise InvalidImportRequestError("Missing required fields")

    monkeypatch.setattr(cli_module, "run_property_import", fake_import)
    request = tmp_path / "request.json"
    request.write_text("{}", encoding="utf-8")

    assert _exit_code(["import", "--request", str(request)]) == 2
    document = json.loads(capsys.readouterr().out)
    assert document["status"] == "failed"
    assert document["errors"][0]["code"] == "invalid_request"


def test_import_command_unreadable_request_exits_two(tmp_path: Path) -> None:
    request = tmp_path / "request.json"
    request.write_text("not json", encoding="utf-8")

    assert _exit_code(["import", "--request", str(request)]) == 2


def test_import_command_requires_object_document(tmp_path: Path) -> None:
    request = tmp_path / "request.json"
    request.write_text("[1, 2]", encoding="utf-8")

    assert _exit_code(["import", "--request", str(request)]) == 2


def test_missing_subcommand_is_a_usage_error() -> None:
    assert _exit_code([]) == 2


def test_check_command_builds_context(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    captured: dict[str, object] = {}

    def fake_check(**kwargs: object) -> CheckResponsePayload:
        captured.update(kwargs)
        return CheckResponsePayload(status="completed_with_review_required")

    monkeypatch.setattr(cli_module, "check_property_files", fake_check)

    code = _exit_code(
        [
            "check",
            "--edd",
            str(tmp_path / "edd.xlsx"),
            "--lot-ref",
            str(tmp_path / "lot_ref.xlsx"),
            "--contacts",
            str(tmp_path / "contacts.xlsx"),
            "--property-id",
            "copro-9",
            "--address",
            "1 rue des Lilas:main",
            "--address",
            "Bât. B: cour",
            "--cadastral-ref",
            "AB-12",
        ]
    )

    assert code == 0
    context = captured["context"]
    assert isinstance(context, PropertyContext)
    assert context.property_id == "copro-9"
    assert context.tenant_id == "local"
    assert context.addresses == (
        PropertyAddress("1 rue des Lilas", AddressRole.MAIN),
        PropertyAddress("Bât. B: cour", AddressRole.SECONDARY),
    )
    assert context.cadastral_refs == ("AB-12",)


def test_check_command_on_real_files(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    datasets = sample_property_datasets()
    for name, data in (
        ("edd.xlsx", datasets.edd),
        ("lot_ref.xlsx", datasets.lot_ref),
        ("contacts.xlsx", datasets.contacts),
    ):
        (tmp_path / name).write_bytes(dataset_workbook(data))

    code = _exit_code(
        [
            "check",
            "--edd",
            str(tmp_path / "edd.xlsx"),
            "--lot-ref",
            str(tmp_path / "lot_ref.xlsx"),
            "--contacts",
            str(tmp_path / "contacts.xlsx"),
        ]
    )

    assert code == 0
    document = json.loads(capsys.readouterr().out)
    assert document["status"] == "completed_with_review_required"
    assert document["stats"]["units_created"] == 3
    assert len(document["issues"]) == 4
