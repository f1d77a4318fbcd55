"""Static vocabularies mapping free-text labels onto lot families and contact kinds."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING, Final

from coproimport.domain.issues import warn
from coproimport.domain.model import ContactCategory, GroupType, LegalForm, LotFamily

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from coproimport.domain.issues import IssueSink

MAIN_HABITATION_KEYWORDS: Final[frozenset[str]] = frozenset(
    {
        "appartement",
        "studio",
        "chambre",
        "chambre de service",
        "maison",
        "logement",
        "habitation",
    }
)

MAIN_COMMERCE_KEYWORDS: Final[frozenset[str]] = frozenset(
    {
        "commerce",
        "boutique",
        "local commercial",
        "local d'activité",
        "bureaux",
    }
)

DEPENDANCE_KEYWORDS: Final[frozenset[str]] = frozenset(
    {
        "cave",
        "parking",
        "box",
        "stationnement",
        "stationnement double",
        "emplacement de stationnement",
        "emplacement de stationnement double",
    }
)

UNKNOWN_LOT_FAMILY_FALLBACK: Final[LotFamily] = LotFamily.DEPENDANCE


def _build_family_mapping(
    tables: Iterable[tuple[frozenset[str], LotFamily]],
) -> Mapping[str, LotFamily]:
    mapping: dict[str, LotFamily] = {}
    for keywords, family in tables:
        for keyword in keywords:
            normalized = keyword.lower()
            if normalized in mapping:
                raise ValueError(f"Lot type keyword {keyword!r} mapped to several families")
            mapping[normalized] = family
    return MappingProxyType(mapping)


LOT_FAMILY_BY_KEYWORD: Final[Mapping[str, LotFamily]] = _build_family_mapping(
    (
        (MAIN_HABITATION_KEYWORDS, LotFamily.MAIN_HABITATION),
        (MAIN_COMMERCE_KEYWORDS, LotFamily.MAIN_COMMERCE),
        (DEPENDANCE_KEYWORDS, LotFamily.DEPENDANCE),
    )
)


def classify_lot_type(type_label: str, *, sink: IssueSink, lot_number: str) -> LotFamily:
    """Return the lot family for ``type_label``; unknown labels fall back to DEPENDANCE."""

    family = LOT_FAMILY_BY_KEYWORD.get(type_label.lower().strip())
    if family is not None:
        return family

    warn(
        sink,
        "unknown_lot_type_mapping",
        entity_type="lot",
        entity_key=lot_number,
        message=f'Unknown TypeLot mapping: "{type_label}", defaulting to DEPENDANCE',
        payload={"type_lot": type_label},
    )
    return UNKNOWN_LOT_FAMILY_FALLBACK


PHYSICAL_CIVILITIES: Final[frozenset[str]] = frozenset(
    {"Monsieur", "Madame", "Monsieur ou Madame"}
)
LEGAL_ENTITY_CIVILITIES: Final[Mapping[str, LegalForm]] = MappingProxyType(
    {form.value: form for form in LegalForm}
)
GROUP_CIVILITIES: Final[Mapping[str, GroupType]] = MappingProxyType(
    {group.value: group for group in GroupType}
)


@dataclass(frozen=True, slots=True)
class CivilityInfo:
    category: ContactCategory
    legal_form: LegalForm | None = None
    group_type: GroupType | None = None
    is_unknown: bool = False


def civility_info(civility_raw: str) -> CivilityInfo:
    """Map a civility code onto a contact category without recording anything."""

    normalized = civility_raw.strip()
    if normalized in PHYSICAL_CIVILITIES:
        return CivilityInfo(category=ContactCategory.PHYSICAL)
    legal_form = LEGAL_ENTITY_CIVILITIES.get(normalized)
    if legal_form is not None:
        return CivilityInfo(category=ContactCategory.LEGAL_ENTITY, legal_form=legal_form)
    group_type = GROUP_CIVILITIES.get(normalized)
    if group_type is not None:
        return CivilityInfo(category=ContactCategory.GROUP, group_type=group_type)
    return CivilityInfo(category=ContactCategory.PHYSICAL, is_unknown=True)


def classify_civility(civility_raw: str, *, sink: IssueSink, external_ref: str) -> CivilityInfo:
    """Return the civility classification, warning when the code is not recognised."""

    info = civility_info(civility_raw)
    if info.is_unknown:
        warn(
            sink,
            "contacts_unknown_civility_value",
            entity_type="contact",
            entity_key=external_ref,
            message=f'Unknown civility value: "{civility_raw}", defaulting to physical',
            payload={"civility": civility_raw},
        )
    return info


def display_name_for(
    category: ContactCategory,
    first_name: str | None,
    last_name_or_name: str,
) -> str:
    if category is ContactCategory.PHYSICAL and first_name and first_name.strip():
        return f"{first_name.strip()} {last_name_or_name.strip()}"
    return last_name_or_name.strip()
