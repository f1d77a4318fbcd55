"""Structured diagnostics recorded while reading and reconciling input files."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .enums import Severity


@dataclass(frozen=True, slots=True, kw_only=True)
class DataIssue:
    severity: Severity
    code: str
    entity_type: str
    entity_key: str | None
    message: str
    payload: dict[str, Any] | None = field(default=None, compare=False)


@dataclass(frozen=True, slots=True, kw_only=True)
class BlockingError:
    """Error returned to the caller when a run cannot proceed."""

    code: str
    message: str
    entity: str
    column: str | None = None
