from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING, Any

from dotenv import load_dotenv

from coproimport.adapters.json_api import InvalidImportRequestError, invalid_request_response
from coproimport.app import check_property_files, run_property_import
from coproimport.config import configure_logging
from coproimport.domain.model import AddressRole, PropertyAddress, PropertyContext

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_INVALID = 2


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Import co-ownership property files")
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log per-row details",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    run = subparsers.add_parser("import", help="Run a full import job from a JSON request")
    run.add_argument(
        "--request",
        type=Path,
        required=True,
        help="Path to the JSON request document",
    )
    run.add_argument(
        "--source-dir",
        type=Path,
        help="Read the files from this directory instead of the configured blob store",
    )

    check = subparsers.add_parser("check", help="Reconcile local files without persisting")
    check.add_argument("--edd", type=Path, required=True, help="EDD workbook")
    check.add_argument("--lot-ref", type=Path, required=True, help="Owner/lot reference workbook")
    check.add_argument("--contacts", type=Path, required=True, help="Contact directory workbook")
    check.add_argument("--tenant-id", type=str, default="local", help="Tenant identifier")
    check.add_argument("--property-id", type=str, default="local", help="Property identifier")
    check.add_argument(
        "--address",
        action="append",
        default=[],
        metavar="LABEL[:ROLE]",
        help="Property address, role 'main' or 'secondary' (repeatable)",
    )
    check.add_argument(
        "--cadastral-ref",
        action="append",
        default=[],
        help="Cadastral parcel reference (repeatable)",
    )

    return parser.parse_args(list(argv))


def _parse_address(value: str) -> PropertyAddress:
    label, separator, role = value.rpartition(":")
    if separator and label.strip() and role.strip() in {member.value for member in AddressRole}:
        return PropertyAddress(label=label.strip(), role=AddressRole(role.strip()))
    if not value.strip():
        raise ValueError("Address label must not be empty")
    return PropertyAddress(label=value.strip())


def _emit(document: dict[str, Any]) -> None:
    sys.stdout.write(json.dumps(document, ensure_ascii=False, indent=2) + "\n")


def _read_request(path: Path) -> object:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ValueError(f"Cannot read request document {path}: {exc}") from exc


def _run_import(args: argparse.Namespace) -> int:
    try:
        document = _read_request(args.request)
        if not isinstance(document, dict):
            raise InvalidImportRequestError("Request document must be a JSON object")  # noqa: TRY301
        response = run_property_import(document, source_dir=args.source_dir)
    except (InvalidImportRequestError, ValueError) as exc:
        log.error(f"Invalid import request: {exc}")
        error = exc if isinstance(exc, InvalidImportRequestError) else InvalidImportRequestError(
            str(exc)
        )
        _emit(invalid_request_response(error).to_document())
        return EXIT_INVALID

    _emit(response.to_document())
    return EXIT_FAILED if response.status == "failed" else EXIT_OK


def _run_check(args: argparse.Namespace) -> int:
    context = PropertyContext(
        tenant_id=args.tenant_id,
        property_id=args.property_id,
        addresses=tuple(_parse_address(value) for value in args.address),
        cadastral_refs=tuple(ref.strip() for ref in args.cadastral_ref if ref.strip()),
    )
    response = check_property_files(
        edd=args.edd,
        lot_ref=args.lot_ref,
        contacts=args.contacts,
        context=context,
    )
    _emit(response.to_document())
    return EXIT_FAILED if response.status == "failed" else EXIT_OK


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)

    try:
        if parsed_args.command == "import":
            exit_code = _run_import(parsed_args)
        elif parsed_args.command == "check":
            exit_code = _run_check(parsed_args)
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301
    except ValueError:
        log.exception("CLI validation error")
        sys.exit(EXIT_INVALID)
    except Exception:
        log.exception("Fatal error during import")
        sys.exit(EXIT_FAILED)

    sys.exit(exit_code)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    """Console script entry point."""
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
