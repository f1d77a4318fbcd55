"""Repository implementations backed by SQLAlchemy sessions.

Natural-key upserts select first and then insert or update, which keeps them
portable across SQLite and PostgreSQL.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from sqlalchemy import and_, insert, select, update

from coproimport.adapters.sqlalchemy.mappings import (
    address_table,
    contact_table,
    data_issue_table,
    import_job_table,
    lot_table,
    parcel_table,
    property_address_table,
    property_parcel_table,
    unit_address_table,
    unit_build_review_table,
    unit_lot_table,
    unit_owner_table,
    unit_parcel_table,
    unit_table,
)
from coproimport.domain.model import DataIssue, RunStatus, UnitType

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from sqlalchemy import Table
    from sqlalchemy.orm import Session

    from coproimport.domain.model import (
        AddressRole,
        LotRole,
        ParsedContact,
        ParsedLot,
        ReviewCase,
        Tantieme,
        Unit,
    )
    from coproimport.domain.ports import Upserted


def _key_clause(table: Table, key: Mapping[str, object]) -> Any:
    return and_(*(table.c[name] == value for name, value in key.items()))


def _upsert(
    session: Session,
    table: Table,
    *,
    key: Mapping[str, object],
    values: Mapping[str, object],
) -> Upserted:
    clause = _key_clause(table, key)
    existing = session.execute(select(table.c.id).where(clause)).scalar_one_or_none()
    if existing is not None:
        if values:
            session.execute(update(table).where(clause).values(**values))
        return existing, False
    result = session.execute(insert(table).values(**key, **values))
    (new_id,) = result.inserted_primary_key or (None,)
    if new_id is None:
        raise RuntimeError(f"Insert into {table.name} returned no primary key")
    return int(new_id), True


def _insert_if_absent(
    session: Session,
    table: Table,
    *,
    key: Mapping[str, object],
    values: Mapping[str, object] | None = None,
) -> bool:
    first_column = next(iter(key))
    stmt = select(table.c[first_column]).where(_key_clause(table, key)).limit(1)
    if session.execute(stmt).first() is not None:
        return False
    session.execute(insert(table).values(**key, **(values or {})))
    return True


class SqlAlchemyImportJobRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def start(self, *, tenant_id: str, property_id: str, request: Mapping[str, object]) -> int:
        result = self.session.execute(
            insert(import_job_table).values(
                tenant_id=tenant_id,
                property_id=property_id,
                status=RunStatus.RUNNING,
                request=dict(request),
                started_at=datetime.now(UTC),
            )
        )
        (job_id,) = result.inserted_primary_key or (None,)
        if job_id is None:
            raise RuntimeError("Insert into import_job returned no primary key")
        return int(job_id)

    def finish(self, job_id: int, *, status: RunStatus, stats: Mapping[str, int] | None) -> None:
        self.session.execute(
            update(import_job_table)
            .where(import_job_table.c.id == job_id)
            .values(
                status=status,
                stats=dict(stats) if stats is not None else None,
                ended_at=datetime.now(UTC),
            )
        )

    def status_of(self, job_id: int) -> RunStatus | None:
        stmt = select(import_job_table.c.status).where(import_job_table.c.id == job_id)
        return self.session.execute(stmt).scalar_one_or_none()


class SqlAlchemyPropertyRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def upsert_address(self, *, tenant_id: str, label: str) -> Upserted:
        return _upsert(
            self.session, address_table, key={"tenant_id": tenant_id, "label": label}, values={}
        )

    def attach_address(
        self, *, tenant_id: str, property_id: str, address_id: int, role: AddressRole
    ) -> bool:
        return _insert_if_absent(
            self.session,
            property_address_table,
            key={"tenant_id": tenant_id, "property_id": property_id, "address_id": address_id},
            values={"role": role},
        )

    def upsert_parcel(self, *, tenant_id: str, cadastral_ref: str) -> Upserted:
        return _upsert(
            self.session,
            parcel_table,
            key={"tenant_id": tenant_id, "cadastral_ref": cadastral_ref},
            values={},
        )

    def attach_parcel(self, *, tenant_id: str, property_id: str, parcel_id: int) -> bool:
        return _insert_if_absent(
            self.session,
            property_parcel_table,
            key={"tenant_id": tenant_id, "property_id": property_id, "parcel_id": parcel_id},
        )


def _tantieme_columns(prefix: str, tantieme: Tantieme) -> dict[str, int | None]:
    return {f"{prefix}_num": tantieme.num, f"{prefix}_den": tantieme.den}


def lot_values(lot: ParsedLot) -> dict[str, object]:
    return {
        "floor_label": lot.floor_label,
        "lot_type_label": lot.lot_type_label,
        "lot_family": lot.lot_family,
        "surface_m2": lot.surface_m2,
        "exteriors": (
            [{"type": ext.type, "surface_m2": ext.surface_m2} for ext in lot.exteriors]
            if lot.exteriors is not None
            else None
        ),
        **_tantieme_columns("tantiemes_general", lot.tantiemes_general),
        **_tantieme_columns("tantiemes_elevators", lot.tantiemes_elevators),
        **_tantieme_columns("tantiemes_stairs", lot.tantiemes_stairs),
        **_tantieme_columns("tantiemes_heating", lot.tantiemes_heating),
        "observations": lot.observations,
        "acquired_at": lot.acquired_at,
        "building": lot.building,
        "staircase": lot.staircase,
        "nb_rooms": lot.nb_rooms,
        "door_number": lot.door_number,
        "annex_lot": lot.annex_lot,
        "works_fund_amount": lot.works_fund_amount,
    }


class SqlAlchemyLotRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def upsert(self, lot: ParsedLot, *, tenant_id: str, property_id: str) -> Upserted:
        return _upsert(
            self.session,
            lot_table,
            key={"tenant_id": tenant_id, "property_id": property_id, "lot_number": lot.lot_number},
            values=lot_values(lot),
        )


class SqlAlchemyContactRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def upsert(self, contact: ParsedContact, *, tenant_id: str) -> Upserted:
        return _upsert(
            self.session,
            contact_table,
            key={"tenant_id": tenant_id, "external_ref": contact.external_ref},
            values={
                "civility_raw": contact.civility_raw,
                "category": contact.category,
                "legal_form": contact.legal_form,
                "group_type": contact.group_type,
                "first_name": contact.first_name,
                "last_name_or_name": contact.last_name_or_name,
                "display_name": contact.display_name,
                "address_line1": contact.address_line1,
                "address_line2": contact.address_line2,
                "postcode": contact.postcode,
                "city": contact.city,
                "country": contact.country,
                "email": contact.email,
                "phone1": contact.phone1,
                "phone2": contact.phone2,
            },
        )


class SqlAlchemyUnitRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def upsert(self, unit: Unit, *, tenant_id: str, property_id: str, job_id: int) -> Upserted:
        unit_id, created = _upsert(
            self.session,
            unit_table,
            key={
                "tenant_id": tenant_id,
                "property_id": property_id,
                "owner_ref": unit.owner_ref,
                "main_lot_number": unit.main_lot_number,
            },
            values={"unit_type": unit.unit_type},
        )
        if created:
            self.session.execute(
                update(unit_table).where(unit_table.c.id == unit_id).values(source_job_id=job_id)
            )
        return unit_id, created

    def attach_lot(self, unit_id: int, lot_id: int, *, role: LotRole) -> bool:
        return _insert_if_absent(
            self.session,
            unit_lot_table,
            key={"unit_id": unit_id, "lot_id": lot_id},
            values={"role": role},
        )

    def attach_owner(self, unit_id: int, contact_id: int) -> bool:
        return _insert_if_absent(
            self.session, unit_owner_table, key={"unit_id": unit_id, "contact_id": contact_id}
        )

    def attach_address(self, unit_id: int, address_id: int, *, role: AddressRole) -> bool:
        return _insert_if_absent(
            self.session,
            unit_address_table,
            key={"unit_id": unit_id, "address_id": address_id},
            values={"role": role},
        )

    def attach_parcel(self, unit_id: int, parcel_id: int) -> bool:
        return _insert_if_absent(
            self.session, unit_parcel_table, key={"unit_id": unit_id, "parcel_id": parcel_id}
        )

    def count(self, *, tenant_id: str, property_id: str) -> int:
        stmt = select(unit_table.c.id).where(
            unit_table.c.tenant_id == tenant_id, unit_table.c.property_id == property_id
        )
        return len(self.session.execute(stmt).all())


def review_documents(review: ReviewCase) -> tuple[dict[str, Any], dict[str, Any]]:
    """Return the ``lots_in_scope`` and ``proposals`` JSON documents of a review."""

    def summaries(lots: Iterable[Any]) -> list[dict[str, str]]:
        return [
            {"lot_number": lot.lot_number, "lot_type_label": lot.lot_type_label} for lot in lots
        ]

    lots_in_scope = {
        "main_habitation": summaries(review.lots_in_scope.main_habitation),
        "main_commerce": summaries(review.lots_in_scope.main_commerce),
        "dependance": summaries(review.lots_in_scope.dependance),
    }
    proposals = {
        "P1_split": [
            {
                "main_lot": candidate.main_lot,
                "unit_type": UnitType(candidate.unit_type).value,
                "dep_lots": list(candidate.dep_lots),
            }
            for candidate in review.split
        ],
        "P2_merge": {
            "main_lot": review.merge.main_lot,
            "unit_type": UnitType(review.merge.unit_type).value,
            "all_lots": list(review.merge.all_lots),
        },
    }
    return lots_in_scope, proposals


class SqlAlchemyReviewRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def upsert(
        self, review: ReviewCase, *, tenant_id: str, property_id: str, job_id: int
    ) -> Upserted:
        lots_in_scope, proposals = review_documents(review)
        return _upsert(
            self.session,
            unit_build_review_table,
            key={
                "tenant_id": tenant_id,
                "property_id": property_id,
                "owner_ref": review.owner_ref,
                "reason": review.reason,
            },
            values={
                "job_id": job_id,
                "status": review.status,
                "lots_in_scope": lots_in_scope,
                "proposals": proposals,
            },
        )


class SqlAlchemyDataIssueRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add_all(self, issues: Iterable[DataIssue], *, tenant_id: str, job_id: int) -> int:
        rows = [
            {
                "job_id": job_id,
                "tenant_id": tenant_id,
                "severity": issue.severity,
                "code": issue.code,
                "entity_type": issue.entity_type,
                "entity_key": issue.entity_key,
                "message": issue.message,
                "payload": issue.payload,
            }
            for issue in issues
        ]
        if rows:
            self.session.execute(insert(data_issue_table), rows)
        return len(rows)

    def list_for_job(self, job_id: int) -> list[DataIssue]:
        stmt = (
            select(data_issue_table)
            .where(data_issue_table.c.job_id == job_id)
            .order_by(data_issue_table.c.id)
        )
        return [
            DataIssue(
                severity=row.severity,
                code=row.code,
                entity_type=row.entity_type,
                entity_key=row.entity_key,
                message=row.message,
                payload=row.payload,
            )
            for row in self.session.execute(stmt)
        ]

