"""Pydantic models describing the import request and response documents."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

AddressRoleName = Literal["main", "secondary"]
ResponseStatus = Literal["completed", "completed_with_review_required", "failed"]


def _strip(value: object) -> object:
    if isinstance(value, str):
        return value.strip()
    return value


class JsonApiModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class CoproAddressPayload(JsonApiModel):
    label: str = Field(min_length=1)
    role: AddressRoleName = "secondary"

    _strip_label = field_validator("label", mode="before")(_strip)


class ImportFilesPayload(JsonApiModel):
    edd_path: str = Field(min_length=1)
    lot_ref_path: str = Field(min_length=1)
    contacts_path: str = Field(min_length=1)

    _strip_paths = field_validator("edd_path", "lot_ref_path", "contacts_path", mode="before")(
        _strip
    )


class ImportRequestPayload(JsonApiModel):
    tenant_id: str = Field(min_length=1)
    copro_id: str = Field(min_length=1)
    copro_addresses: list[CoproAddressPayload] = Field(default_factory=list[CoproAddressPayload])
    copro_cadastral_refs: list[str] = Field(default_factory=list[str])
    files: ImportFilesPayload

    _strip_ids = field_validator("tenant_id", "copro_id", mode="before")(_strip)

    @field_validator("copro_cadastral_refs", mode="after")
    @classmethod
    def _drop_blank_refs(cls, value: list[str]) -> list[str]:
        return [ref.strip() for ref in value if ref.strip()]

    @field_validator("copro_addresses", "copro_cadastral_refs", mode="before")
    @classmethod
    def _null_as_empty(cls, value: object) -> object:
        return [] if value is None else value


class StatsPayload(JsonApiModel):
    lots_processed: int
    contacts_processed: int
    links_processed: int
    units_created: int
    unit_lots_created: int
    unit_owners_created: int
    reviews_created: int
    issues_warning: int
    issues_error: int


class ReviewPayload(JsonApiModel):
    review_id: int | None = None
    owner_ref: str
    display_name: str
    contact_category: Literal["physical", "legal_entity", "group"]
    legal_form: Literal["STE", "SCI", "SDC"] | None = None
    group_type: Literal["INDIV", "CONSOR", "SUCESS"] | None = None
    main_hab_lots: list[str]
    dep_lots: list[str]
    reason: Literal["multiple_habitation_main_lots"]


class ErrorPayload(JsonApiModel):
    code: str
    message: str
    entity: str
    column: str | None = None


class IssuePayload(JsonApiModel):
    severity: Literal["warning", "error"]
    code: str
    entity_type: str
    entity_key: str | None = None
    message: str
    payload: dict[str, Any] | None = None


class ImportResponsePayload(JsonApiModel):
    job_id: int | None = None
    status: ResponseStatus
    stats: StatsPayload | None = None
    reviews: list[ReviewPayload] = Field(default_factory=list[ReviewPayload])
    errors: list[ErrorPayload] = Field(default_factory=list[ErrorPayload])

    def to_document(self) -> dict[str, Any]:
        document = self.model_dump(mode="json")
        for error in document["errors"]:
            if error.get("column") is None:
                error.pop("column", None)
        return document


class CheckResponsePayload(ImportResponsePayload):
    """Dry-run response: the import response plus every recorded issue."""

    issues: list[IssuePayload] = Field(default_factory=list[IssuePayload])
