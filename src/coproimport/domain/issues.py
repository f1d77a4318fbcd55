"""Append-only diagnostics sink shared by every import stage.

Stages only ever need the ``IssueSink`` capability (record an issue). The
orchestrator owns the concrete ``IssueLedger`` and reads it back once all stages
have run; entries are kept in the order they were recorded.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from coproimport.domain.model import DataIssue, Severity

if TYPE_CHECKING:
    from collections.abc import Iterator


@runtime_checkable
class IssueSink(Protocol):
    """Append-only capability handed to parsing and reconciliation stages."""

    def record(self, issue: DataIssue) -> None: ...


@dataclass(slots=True)
class IssueLedger(IssueSink):
    _issues: list[DataIssue] = field(default_factory=list[DataIssue], repr=False)

    def record(self, issue: DataIssue) -> None:
        self._issues.append(issue)

    def warning(
        self,
        code: str,
        *,
        entity_type: str,
        entity_key: str | None,
        message: str,
        payload: dict[str, Any] | None = None,
    ) -> DataIssue:
        issue = DataIssue(
            severity=Severity.WARNING,
            code=code,
            entity_type=entity_type,
            entity_key=entity_key,
            message=message,
            payload=payload,
        )
        self.record(issue)
        return issue

    def error(
        self,
        code: str,
        *,
        entity_type: str,
        entity_key: str | None,
        message: str,
        payload: dict[str, Any] | None = None,
    ) -> DataIssue:
        issue = DataIssue(
            severity=Severity.ERROR,
            code=code,
            entity_type=entity_type,
            entity_key=entity_key,
            message=message,
            payload=payload,
        )
        self.record(issue)
        return issue

    @property
    def issues(self) -> tuple[DataIssue, ...]:
        return tuple(self._issues)

    def count(self, severity: Severity) -> int:
        return sum(1 for issue in self._issues if issue.severity is severity)

    @property
    def has_errors(self) -> bool:
        return any(issue.severity is Severity.ERROR for issue in self._issues)

    def codes(self) -> tuple[str, ...]:
        return tuple(issue.code for issue in self._issues)

    def __len__(self) -> int:
        return len(self._issues)

    def __iter__(self) -> Iterator[DataIssue]:
        return iter(tuple(self._issues))


def warn(
    sink: IssueSink,
    code: str,
    *,
    entity_type: str,
    entity_key: str | None,
    message: str,
    payload: dict[str, Any] | None = None,
) -> None:
    """Record a warning on any sink (stages only depend on the protocol)."""

    sink.record(
        DataIssue(
            severity=Severity.WARNING,
            code=code,
            entity_type=entity_type,
            entity_key=entity_key,
            message=message,
            payload=payload,
        )
    )
