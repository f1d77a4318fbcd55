"""SQLAlchemy Core tables for the imported property graph."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from enum import StrEnum
from typing import TYPE_CHECKING

from sqlalchemy import (
    JSON,
    Column,
    Date,
    DateTime,
    Dialect,
    Enum,
    Float,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    String,
    Table,
    TypeDecorator,
    UniqueConstraint,
)

from coproimport.domain.model import (
    AddressRole,
    ContactCategory,
    GroupType,
    LegalForm,
    LotFamily,
    LotRole,
    ReviewReason,
    ReviewStatus,
    RunStatus,
    Severity,
    UnitType,
)

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


def _enum(enum_cls: type[StrEnum]) -> Enum:
    return Enum(
        enum_cls,
        native_enum=False,
        values_callable=lambda members: [member.value for member in members],
    )


metadata = MetaData(
    naming_convention={
        "ix": "ix_%(column_0_label)s",
        "uq": "uq_%(table_name)s_%(column_0_label)s",
        "ck": "ck_%(table_name)s_%(constraint_name)s",
        "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
        "pk": "pk_%(table_name)s",
    }
)

# Jobs and issues --------------------------------------------------------------

import_job_table = Table(
    "import_job",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("tenant_id", String, nullable=False),
    Column("property_id", String, nullable=False),
    Column("status", _enum(RunStatus), nullable=False),
    Column("request", JSON, nullable=True),
    Column("stats", JSON, nullable=True),
    Column("started_at", UTCDateTime(), nullable=False),
    Column("ended_at", UTCDateTime(), nullable=True),
    Index("ix_import_job_tenant_property", "tenant_id", "property_id"),
)

data_issue_table = Table(
    "data_issue",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column(
        "job_id", Integer, ForeignKey("import_job.id", ondelete="CASCADE"), nullable=False
    ),
    Column("tenant_id", String, nullable=False),
    Column("severity", _enum(Severity), nullable=False),
    Column("code", String, nullable=False),
    Column("entity_type", String, nullable=False),
    Column("entity_key", String, nullable=True),
    Column("message", String, nullable=False),
    Column("payload", JSON, nullable=True),
    Index("ix_data_issue_job", "job_id"),
)

# Property attachments ---------------------------------------------------------

address_table = Table(
    "address",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("tenant_id", String, nullable=False),
    Column("label", String, nullable=False),
    UniqueConstraint("tenant_id", "label"),
)

property_address_table = Table(
    "property_address",
    metadata,
    Column("tenant_id", String, primary_key=True),
    Column("property_id", String, primary_key=True),
    Column(
        "address_id",
        Integer,
        ForeignKey("address.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column("role", _enum(AddressRole), nullable=False),
)

parcel_table = Table(
    "parcel",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("tenant_id", String, nullable=False),
    Column("cadastral_ref", String, nullable=False),
    UniqueConstraint("tenant_id", "cadastral_ref"),
)

property_parcel_table = Table(
    "property_parcel",
    metadata,
    Column("tenant_id", String, primary_key=True),
    Column("property_id", String, primary_key=True),
    Column(
        "parcel_id",
        Integer,
        ForeignKey("parcel.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)

# Lots and contacts ------------------------------------------------------------

lot_table = Table(
    "lot",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("tenant_id", String, nullable=False),
    Column("property_id", String, nullable=False),
    Column("lot_number", String, nullable=False),
    Column("floor_label", String, nullable=False),
    Column("lot_type_label", String, nullable=False),
    Column("lot_family", _enum(LotFamily), nullable=False),
    Column("surface_m2", Float, nullable=True),
    Column("exteriors", JSON, nullable=True),
    Column("tantiemes_general_num", Integer, nullable=True),
    Column("tantiemes_general_den", Integer, nullable=True),
    Column("tantiemes_elevators_num", Integer, nullable=True),
    Column("tantiemes_elevators_den", Integer, nullable=True),
    Column("tantiemes_stairs_num", Integer, nullable=True),
    Column("tantiemes_stairs_den", Integer, nullable=True),
    Column("tantiemes_heating_num", Integer, nullable=True),
    Column("tantiemes_heating_den", Integer, nullable=True),
    Column("observations", String, nullable=True),
    Column("acquired_at", Date, nullable=True),
    Column("building", String, nullable=True),
    Column("staircase", String, nullable=True),
    Column("nb_rooms", String, nullable=True),
    Column("door_number", String, nullable=True),
    Column("annex_lot", String, nullable=True),
    Column("works_fund_amount", Float, nullable=True),
    UniqueConstraint("tenant_id", "property_id", "lot_number"),
)

contact_table = Table(
    "contact",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("tenant_id", String, nullable=False),
    Column("external_ref", String, nullable=False),
    Column("civility_raw", String, nullable=False),
    Column("category", _enum(ContactCategory), nullable=False),
    Column("legal_form", _enum(LegalForm), nullable=True),
    Column("group_type", _enum(GroupType), nullable=True),
    Column("first_name", String, nullable=True),
    Column("last_name_or_name", String, nullable=False),
    Column("display_name", String, nullable=False),
    Column("address_line1", String, nullable=True),
    Column("address_line2", String, nullable=True),
    Column("postcode", String, nullable=True),
    Column("city", String, nullable=True),
    Column("country", String, nullable=True),
    Column("email", String, nullable=True),
    Column("phone1", String, nullable=True),
    Column("phone2", String, nullable=True),
    UniqueConstraint("tenant_id", "external_ref"),
)

# Units and their links --------------------------------------------------------

unit_table = Table(
    "unit",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("tenant_id", String, nullable=False),
    Column("property_id", String, nullable=False),
    Column("unit_type", _enum(UnitType), nullable=False),
    Column("status", String, nullable=False, default="active"),
    Column("main_lot_number", String, nullable=False),
    Column("owner_ref", String, nullable=False),
    Column(
        "source_job_id",
        Integer,
        ForeignKey("import_job.id", ondelete="SET NULL"),
        nullable=True,
    ),
    UniqueConstraint("tenant_id", "property_id", "owner_ref", "main_lot_number"),
)

unit_lot_table = Table(
    "unit_lot",
    metadata,
    Column("unit_id", Integer, ForeignKey("unit.id", ondelete="CASCADE"), primary_key=True),
    Column("lot_id", Integer, ForeignKey("lot.id", ondelete="CASCADE"), primary_key=True),
    Column("role", _enum(LotRole), nullable=False),
)

unit_owner_table = Table(
    "unit_owner",
    metadata,
    Column("unit_id", Integer, ForeignKey("unit.id", ondelete="CASCADE"), primary_key=True),
    Column(
        "contact_id", Integer, ForeignKey("contact.id", ondelete="CASCADE"), primary_key=True
    ),
)

unit_address_table = Table(
    "unit_address",
    metadata,
    Column("unit_id", Integer, ForeignKey("unit.id", ondelete="CASCADE"), primary_key=True),
    Column(
        "address_id", Integer, ForeignKey("address.id", ondelete="CASCADE"), primary_key=True
    ),
    Column("role", _enum(AddressRole), nullable=False),
)

unit_parcel_table = Table(
    "unit_parcel",
    metadata,
    Column("unit_id", Integer, ForeignKey("unit.id", ondelete="CASCADE"), primary_key=True),
    Column(
        "parcel_id", Integer, ForeignKey("parcel.id", ondelete="CASCADE"), primary_key=True
    ),
)

unit_build_review_table = Table(
    "unit_build_review",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("tenant_id", String, nullable=False),
    Column("property_id", String, nullable=False),
    Column(
        "job_id", Integer, ForeignKey("import_job.id", ondelete="SET NULL"), nullable=True
    ),
    Column("owner_ref", String, nullable=False),
    Column("reason", _enum(ReviewReason), nullable=False),
    Column("status", _enum(ReviewStatus), nullable=False),
    Column("lots_in_scope", JSON, nullable=False),
    Column("proposals", JSON, nullable=False),
    UniqueConstraint("tenant_id", "property_id", "owner_ref", "reason"),
)


def create_all_tables(engine: Engine) -> None:
    """Create every table that does not exist yet."""

    log.info("Creating all tables")
    metadata.create_all(engine)
