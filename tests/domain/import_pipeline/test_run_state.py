from __future__ import annotations

import pytest

from coproimport.domain.errors import InvalidTransitionError
from coproimport.domain.import_pipeline import ImportRun
from coproimport.domain.model import RunStatus


def test_new_run_is_running() -> None:
    run = ImportRun()

    assert run.status is RunStatus.RUNNING
    assert not run.is_terminal


@pytest.mark.parametrize(
    ("reviews", "expected"),
    [(0, RunStatus.COMPLETED), (2, RunStatus.COMPLETED_WITH_REVIEW_REQUIRED)],
)
def test_complete_depends_on_reviews(reviews: int, expected: RunStatus) -> None:
    run = ImportRun()

    run.complete(reviews=reviews)

    assert run.status is expected
    assert run.is_terminal


def test_terminal_run_cannot_move() -> None:
    run = ImportRun()
    run.fail()

    with pytest.raises(InvalidTransitionError):
        run.complete(reviews=0)
    assert run.status is RunStatus.FAILED


def test_cannot_transition_back_to_running() -> None:
    with pytest.raises(InvalidTransitionError):
        ImportRun().transition(RunStatus.RUNNING)
