"""Contact records parsed from the contact directory."""

from __future__ import annotations

from dataclasses import dataclass

from .enums import ContactCategory, GroupType, LegalForm


@dataclass(frozen=True, slots=True, kw_only=True)
class ParsedContact:
    """One contact, keyed by ``external_ref`` within a tenant."""

    external_ref: str
    civility_raw: str
    category: ContactCategory
    legal_form: LegalForm | None = None
    group_type: GroupType | None = None
    first_name: str | None = None
    last_name_or_name: str
    display_name: str
    address_line1: str | None = None
    address_line2: str | None = None
    postcode: str | None = None
    city: str | None = None
    country: str | None = None
    email: str | None = None
    phone1: str | None = None
    phone2: str | None = None

    def __post_init__(self) -> None:
        if self.legal_form is not None and self.category is not ContactCategory.LEGAL_ENTITY:
            raise ValueError("legal_form is only valid for legal entities")
        if self.group_type is not None and self.category is not ContactCategory.GROUP:
            raise ValueError("group_type is only valid for groups")
