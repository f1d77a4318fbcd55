"""Status machine of one import run."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger

from coproimport.domain.errors import InvalidTransitionError
from coproimport.domain.model import RunStatus

log = getLogger(__name__)


@dataclass(slots=True)
class ImportRun:
    """``running`` moves to exactly one terminal status and stays there."""

    status: RunStatus = RunStatus.RUNNING

    def transition(self, target: RunStatus) -> None:
        if self.status.is_terminal:
            raise InvalidTransitionError(
                f"Import run already {self.status}, cannot move to {target}"
            )
        if target is RunStatus.RUNNING:
            raise InvalidTransitionError("Import run is already running")
        log.debug("Import run %s -> %s", self.status, target)
        self.status = target

    def fail(self) -> None:
        self.transition(RunStatus.FAILED)

    def complete(self, *, reviews: int) -> None:
        self.transition(
            RunStatus.COMPLETED_WITH_REVIEW_REQUIRED if reviews else RunStatus.COMPLETED
        )

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal
