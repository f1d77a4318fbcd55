"""Ports for persisting the reconciled property graph.

Every ``upsert`` looks the record up by its natural key and returns
``(id, created)``; every ``attach_*`` inserts a link row only when it is absent
and returns whether it did. Re-running the same import therefore creates no new
rows apart from the job and its issues.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from coproimport.domain.model import (
        AddressRole,
        DataIssue,
        LotRole,
        ParsedContact,
        ParsedLot,
        ReviewCase,
        RunStatus,
        Unit,
    )

type Upserted = tuple[int, bool]


@runtime_checkable
class ImportJobRepository(Protocol):
    """Records the lifecycle of each import job."""

    def start(self, *, tenant_id: str, property_id: str, request: Mapping[str, object]) -> int: ...

    def finish(self, job_id: int, *, status: RunStatus, stats: Mapping[str, int] | None) -> None: ...

    def status_of(self, job_id: int) -> RunStatus | None: ...


@runtime_checkable
class PropertyRepository(Protocol):
    """Addresses and cadastral parcels attached to the property."""

    def upsert_address(self, *, tenant_id: str, label: str) -> Upserted: ...

    def attach_address(
        self, *, tenant_id: str, property_id: str, address_id: int, role: AddressRole
    ) -> bool: ...

    def upsert_parcel(self, *, tenant_id: str, cadastral_ref: str) -> Upserted: ...

    def attach_parcel(self, *, tenant_id: str, property_id: str, parcel_id: int) -> bool: ...


@runtime_checkable
class LotRepository(Protocol):
    def upsert(self, lot: ParsedLot, *, tenant_id: str, property_id: str) -> Upserted: ...


@runtime_checkable
class ContactRepository(Protocol):
    def upsert(self, contact: ParsedContact, *, tenant_id: str) -> Upserted: ...


@runtime_checkable
class UnitRepository(Protocol):
    """Units keyed by (tenant, property, owner_ref, main lot) plus their link tables."""

    def upsert(self, unit: Unit, *, tenant_id: str, property_id: str, job_id: int) -> Upserted: ...

    def attach_lot(self, unit_id: int, lot_id: int, *, role: LotRole) -> bool: ...

    def attach_owner(self, unit_id: int, contact_id: int) -> bool: ...

    def attach_address(self, unit_id: int, address_id: int, *, role: AddressRole) -> bool: ...

    def attach_parcel(self, unit_id: int, parcel_id: int) -> bool: ...


@runtime_checkable
class ReviewRepository(Protocol):
    """Pending review cases keyed by (tenant, property, owner_ref, reason)."""

    def upsert(
        self, review: ReviewCase, *, tenant_id: str, property_id: str, job_id: int
    ) -> Upserted: ...


@runtime_checkable
class DataIssueRepository(Protocol):
    def add_all(self, issues: Iterable[DataIssue], *, tenant_id: str, job_id: int) -> int: ...

    def list_for_job(self, job_id: int) -> list[DataIssue]: ...
