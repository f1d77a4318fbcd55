"""Write a reconciliation result through the import unit of work.

Only rows that did not exist yet are counted, so a second run of the same
files reports zero everywhere except ``issues_recorded``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from coproimport.domain.model import PropertyContext
    from coproimport.domain.ports import ImportUnitOfWork

    from .result import ReconciliationResult

log = getLogger(__name__)


@dataclass(slots=True)
class PersistenceReport:
    """Rows created by one persistence pass."""

    addresses_created: int = 0
    parcels_created: int = 0
    lots_created: int = 0
    contacts_created: int = 0
    units_created: int = 0
    unit_lots_created: int = 0
    unit_owners_created: int = 0
    unit_addresses_created: int = 0
    unit_parcels_created: int = 0
    reviews_created: int = 0
    issues_recorded: int = 0
    review_ids: dict[str, int] = field(default_factory=dict[str, int])


def persist_reconciliation(
    uow: ImportUnitOfWork,
    result: ReconciliationResult,
    *,
    context: PropertyContext,
    job_id: int,
) -> PersistenceReport:
    """Persist ``result`` (issues only when it failed) and commit."""

    report = PersistenceReport()
    repositories = uow.repositories
    tenant_id = context.tenant_id
    property_id = context.property_id

    if not result.failed:
        address_ids: dict[str, int] = {}
        for address in context.addresses:
            address_id, created = repositories.properties.upsert_address(
                tenant_id=tenant_id, label=address.label
            )
            address_ids[address.label] = address_id
            report.addresses_created += created
            repositories.properties.attach_address(
                tenant_id=tenant_id,
                property_id=property_id,
                address_id=address_id,
                role=address.role,
            )

        parcel_ids: dict[str, int] = {}
        for cadastral_ref in context.cadastral_refs:
            parcel_id, created = repositories.properties.upsert_parcel(
                tenant_id=tenant_id, cadastral_ref=cadastral_ref
            )
            parcel_ids[cadastral_ref] = parcel_id
            report.parcels_created += created
            repositories.properties.attach_parcel(
                tenant_id=tenant_id, property_id=property_id, parcel_id=parcel_id
            )

        lot_ids: dict[str, int] = {}
        for lot in result.lots:
            lot_id, created = repositories.lots.upsert(
                lot, tenant_id=tenant_id, property_id=property_id
            )
            lot_ids[lot.lot_number] = lot_id
            report.lots_created += created

        contact_ids: dict[str, int] = {}
        for contact in result.contacts:
            contact_id, created = repositories.contacts.upsert(contact, tenant_id=tenant_id)
            contact_ids[contact.external_ref] = contact_id
            report.contacts_created += created

        for unit in result.units:
            unit_id, created = repositories.units.upsert(
                unit, tenant_id=tenant_id, property_id=property_id, job_id=job_id
            )
            report.units_created += created
            for unit_lot in unit.lots:
                report.unit_lots_created += repositories.units.attach_lot(
                    unit_id, lot_ids[unit_lot.lot_number], role=unit_lot.role
                )
            contact_id = contact_ids.get(unit.owner_ref)
            if contact_id is not None:
                report.unit_owners_created += repositories.units.attach_owner(unit_id, contact_id)
            for unit_address in unit.addresses:
                report.unit_addresses_created += repositories.units.attach_address(
                    unit_id, address_ids[unit_address.label], role=unit_address.role
                )
            for cadastral_ref in unit.cadastral_refs:
                report.unit_parcels_created += repositories.units.attach_parcel(
                    unit_id, parcel_ids[cadastral_ref]
                )

        for review in result.reviews:
            review_id, created = repositories.reviews.upsert(
                review, tenant_id=tenant_id, property_id=property_id, job_id=job_id
            )
            report.review_ids[review.owner_ref] = review_id
            report.reviews_created += created

    report.issues_recorded = repositories.issues.add_all(
        result.issues, tenant_id=tenant_id, job_id=job_id
    )
    uow.commit()
    log.info(
        "Job %s persisted: %s new lots, %s new contacts, %s new units, %s issues",
        job_id,
        report.lots_created,
        report.contacts_created,
        report.units_created,
        report.issues_recorded,
    )
    return report
