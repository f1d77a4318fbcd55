"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class LotFamily(StrEnum):
    MAIN_HABITATION = "MAIN_HABITATION"
    MAIN_COMMERCE = "MAIN_COMMERCE"
    DEPENDANCE = "DEPENDANCE"


class ContactCategory(StrEnum):
    PHYSICAL = "physical"
    LEGAL_ENTITY = "legal_entity"
    GROUP = "group"


class LegalForm(StrEnum):
    STE = "STE"
    SCI = "SCI"
    SDC = "SDC"


class GroupType(StrEnum):
    INDIV = "INDIV"
    CONSOR = "CONSOR"
    SUCESS = "SUCESS"


class UnitType(StrEnum):
    HABITATION = "habitation"
    COMMERCIAL = "commercial"
    DEPENDANCE = "dependance"


class LotRole(StrEnum):
    MAIN = "main"
    ANNEX = "annex"


class AddressRole(StrEnum):
    MAIN = "main"
    SECONDARY = "secondary"


class Severity(StrEnum):
    WARNING = "warning"
    ERROR = "error"


class ReviewReason(StrEnum):
    MULTIPLE_HABITATION_MAIN_LOTS = "multiple_habitation_main_lots"


class ReviewStatus(StrEnum):
    PENDING_REVIEW = "pending_review"


class RunStatus(StrEnum):
    """Lifecycle of one import run; every state except RUNNING is terminal."""

    RUNNING = "running"
    COMPLETED = "completed"
    COMPLETED_WITH_REVIEW_REQUIRED = "completed_with_review_required"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self is not RunStatus.RUNNING
